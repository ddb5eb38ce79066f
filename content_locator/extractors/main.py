"""
Main Extraction Script
Orchestrates all data extraction from a WordPress site
"""
import argparse
import sys
from pathlib import Path
from typing import List, Dict, Any, Optional
import logging

from ..api.wordpress_client import WordPressClient, load_app_password
from ..utils.logging_config import setup_logging
from ..utils.file_helpers import (
    load_yaml,
    get_site_raw_dir,
    list_sites
)

from .posts import PostsExtractor
from .blocks import BlocksExtractor
from .field_groups import FieldGroupsExtractor

logger = logging.getLogger(__name__)


# Registry of available extractors
EXTRACTORS = {
    'posts': PostsExtractor,
    'blocks': BlocksExtractor,
    'field_groups': FieldGroupsExtractor,
}


class ConfigError(Exception):
    """Site configuration is missing or invalid."""


def load_site_config(site_name: str, config_dir: Path = None) -> Dict[str, Any]:
    """
    Load and validate site configuration from YAML file

    Args:
        site_name: Name of the site
        config_dir: Directory containing config files

    Returns:
        Configuration dictionary

    Raises:
        ConfigError: if the file is missing or required keys are absent
    """
    if config_dir is None:
        config_dir = Path('config')

    config_file = Path(config_dir) / f'{site_name}.yaml'

    if not config_file.exists():
        raise ConfigError(
            f"Configuration file not found: {config_file} "
            f"(copy config/site_template.yaml to get started)"
        )

    logger.info(f"Loading configuration: {config_file}")
    config = load_yaml(config_file)

    wordpress = config.get('wordpress')
    if not isinstance(wordpress, dict):
        raise ConfigError("Missing 'wordpress' section in config file")

    url = wordpress.get('url') or ''
    if not url.startswith(('http://', 'https://')):
        raise ConfigError(f"Invalid or missing 'wordpress.url': {url!r}")

    return config


def create_api_client(config: Dict[str, Any], env_file: Optional[str] = None) -> WordPressClient:
    """
    Create WordPress client from configuration

    The application password comes from WP_APP_PASSWORD (or a .env file),
    never from the YAML.

    Args:
        config: Configuration dictionary
        env_file: Optional .env path

    Returns:
        Initialized API client
    """
    wordpress = config['wordpress']
    return WordPressClient(
        base_url=wordpress['url'],
        username=wordpress.get('username'),
        app_password=load_app_password(env_file),
        timeout=wordpress.get('timeout', 30),
    )


def run_extraction(site_name: str, extractor_names: List[str],
                   config_dir: Path = None, base_data_dir: Path = None,
                   client: Optional[WordPressClient] = None) -> Dict[str, Any]:
    """
    Run data extraction for specified extractors

    Args:
        site_name: Name of the site
        extractor_names: List of extractor names to run
        config_dir: Configuration directory
        base_data_dir: Base data directory
        client: Pre-built client (otherwise created from config)

    Returns:
        Extraction results keyed by extractor name
    """
    config = load_site_config(site_name, config_dir)

    output_config = config.get('output') or {}
    log_dir = Path(output_config['log_dir']) if output_config.get('log_dir') else None
    setup_logging(log_dir=log_dir, log_level=output_config.get('log_level', 'INFO'),
                  log_prefix='extraction')

    logger.info("=" * 60)
    logger.info("CONTENT LOCATOR - DATA EXTRACTION")
    logger.info("=" * 60)
    logger.info(f"Site: {site_name}")
    logger.info(f"Extractors: {', '.join(extractor_names)}")

    if client is None:
        client = create_api_client(config)

    output_dir = get_site_raw_dir(site_name, base_data_dir)
    logger.info(f"Output directory: {output_dir}")

    results = {}

    for extractor_name in extractor_names:
        if extractor_name not in EXTRACTORS:
            logger.warning(f"Unknown extractor: {extractor_name}")
            continue

        logger.info(f"Running {extractor_name} extractor...")

        try:
            extractor_class = EXTRACTORS[extractor_name]

            # Field groups come from the theme, not the API
            if extractor_name == 'field_groups':
                extractor = extractor_class(
                    client,
                    output_dir,
                    site_name,
                    acf_json_dir=config.get('acf_json_dir'),
                )
            else:
                extractor = extractor_class(client, output_dir, site_name)

            results[extractor_name] = extractor.run()
            logger.info(f"Completed {extractor_name} extraction")

        except Exception as e:
            logger.error(f"Failed to run {extractor_name} extractor: {e}", exc_info=True)
            results[extractor_name] = {
                'status': 'error',
                'error': str(e)
            }

    logger.info("=" * 60)
    logger.info("EXTRACTION COMPLETE")
    logger.info("=" * 60)

    return results


def main(argv: Optional[List[str]] = None):
    """Command-line interface"""
    parser = argparse.ArgumentParser(
        description='Extract content data from a WordPress site',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Extract everything for a site
  content-extract --site acme --extract-all

  # Extract specific data types
  content-extract --site acme --extract posts blocks

  # List configured sites
  content-extract --list-sites
        """
    )

    parser.add_argument('--site', help='Site name (must have a config file in config/)')
    parser.add_argument('--extract', nargs='+', choices=list(EXTRACTORS.keys()),
                        help='Data types to extract')
    parser.add_argument('--extract-all', action='store_true',
                        help='Extract all available data types')
    parser.add_argument('--list-sites', action='store_true',
                        help='List available site configurations')
    parser.add_argument('--config-dir', type=Path, default=Path('config'),
                        help='Configuration directory (default: config/)')
    parser.add_argument('--data-dir', type=Path, default=Path('data'),
                        help='Data directory (default: data/)')

    args = parser.parse_args(argv)

    if args.list_sites:
        config_dir = args.config_dir
        configs = sorted(config_dir.glob('*.yaml')) if config_dir.exists() else []
        configs = [c for c in configs if c.stem != 'site_template']
        if configs:
            print("Available site configurations:")
            for config_file in configs:
                print(f"  - {config_file.stem}")
        else:
            print(f"No site configurations found in {config_dir}")

        sites = list_sites(args.data_dir)
        if sites:
            print("\nSites with data:")
            for site in sites:
                print(f"  - {site}")
        sys.exit(0)

    if not args.site:
        parser.error("--site is required (or use --list-sites)")

    if not args.extract and not args.extract_all:
        parser.error("Must specify --extract or --extract-all")

    extractors = list(EXTRACTORS.keys()) if args.extract_all else args.extract

    try:
        results = run_extraction(
            site_name=args.site,
            extractor_names=extractors,
            config_dir=args.config_dir,
            base_data_dir=args.data_dir,
        )
    except ConfigError as e:
        logger.error(str(e))
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n\nExtraction cancelled by user")
        sys.exit(1)

    print("\nExtraction Summary:")
    print("=" * 60)
    for name, result in results.items():
        stats = result.get('stats', {})
        print(f"\n{name.upper()}:")
        print(f"  Status: {result.get('status', 'unknown')}")
        if 'total' in stats:
            print(f"  Total: {stats['total']}")
            print(f"  Successful: {stats['successful']}")
            print(f"  Failed: {stats['failed']}")
    print("\n" + "=" * 60)


if __name__ == '__main__':
    main()
