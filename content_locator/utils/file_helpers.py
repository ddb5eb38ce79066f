"""
File Helper Utilities
Config loading and the per-site data directory layout:

    data/<site>/raw/       extraction output
    data/<site>/analyzed/  reports
"""
from pathlib import Path
import json
import yaml
from typing import Dict, Any, Optional, List
import logging

logger = logging.getLogger(__name__)


def load_yaml(filepath: Path) -> Dict[str, Any]:
    """
    Load YAML configuration file

    Args:
        filepath: Path to YAML file

    Returns:
        Dictionary with configuration (empty for an empty file)
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_json(filepath: Path) -> Any:
    """
    Load JSON file

    Args:
        filepath: Path to JSON file

    Returns:
        Loaded data
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        return json.load(f)


def save_json(data: Any, filepath: Path, indent: int = 2) -> None:
    """
    Save data to JSON file, creating parent directories

    Args:
        data: Data to save
        filepath: Path to save to
        indent: JSON indentation
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)


def ensure_dir(directory: Path) -> Path:
    """
    Ensure directory exists, create if it doesn't

    Args:
        directory: Directory path

    Returns:
        The directory path
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def get_site_data_dir(site_name: str, base_dir: Optional[Path] = None) -> Path:
    """
    Get the data directory for a specific site

    Args:
        site_name: Name of the site
        base_dir: Base data directory (default: ./data)

    Returns:
        Path to site's data directory
    """
    if base_dir is None:
        base_dir = Path('data')

    return ensure_dir(Path(base_dir) / site_name)


def get_site_raw_dir(site_name: str, base_dir: Optional[Path] = None) -> Path:
    """Raw extraction directory for a site (created if missing)."""
    return ensure_dir(get_site_data_dir(site_name, base_dir) / 'raw')


def get_site_analyzed_dir(site_name: str, base_dir: Optional[Path] = None) -> Path:
    """Report directory for a site (created if missing)."""
    return ensure_dir(get_site_data_dir(site_name, base_dir) / 'analyzed')


def list_sites(base_dir: Optional[Path] = None) -> List[str]:
    """
    List all site directories

    Args:
        base_dir: Base data directory

    Returns:
        Sorted list of site names
    """
    if base_dir is None:
        base_dir = Path('data')

    base_dir = Path(base_dir)
    if not base_dir.exists():
        return []

    return sorted(d.name for d in base_dir.iterdir() if d.is_dir())
