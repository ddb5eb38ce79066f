"""
Base Extractor Class
All WordPress data extractors inherit from this base class
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Any, List, Optional
import logging
from datetime import datetime

from ..api.wordpress_client import WordPressClient
from ..utils.file_helpers import save_json

logger = logging.getLogger(__name__)


class BaseExtractor(ABC):
    """Base class for all WordPress data extractors"""

    def __init__(self, client: Optional[WordPressClient], output_dir: Path, site_name: str):
        """
        Initialize base extractor

        Args:
            client: Initialized WordPress client (None for offline extractors)
            output_dir: Raw data directory to save extracted data
            site_name: Name of the site (for logging/tracking)
        """
        self.client = client
        self.output_dir = Path(output_dir)
        self.site_name = site_name
        self.stats = {
            'total': 0,
            'successful': 0,
            'failed': 0,
            'start_time': None,
            'end_time': None
        }

        self.output_dir.mkdir(parents=True, exist_ok=True)

    @abstractmethod
    def extract(self) -> Dict[str, Any]:
        """
        Extract data from the site
        Must be implemented by subclasses

        Returns:
            Dictionary with extraction results and statistics
        """

    @abstractmethod
    def get_extractor_name(self) -> str:
        """
        Get the name of this extractor (e.g., 'posts', 'blocks')

        Returns:
            Name of extractor type
        """

    def save_json(self, data: Any, filename: str) -> Path:
        """
        Save data as JSON file in the output directory

        Args:
            data: Data to save
            filename: Name of file (may include a subdirectory)

        Returns:
            Path to saved file
        """
        filepath = self.output_dir / filename
        save_json(data, filepath)
        logger.info(f"Saved to: {filepath}")
        return filepath

    def log_stats(self) -> None:
        """Log extraction statistics"""
        extractor_name = self.get_extractor_name()

        logger.info('=' * 60)
        logger.info(f"{extractor_name.upper()} EXTRACTION COMPLETE")
        logger.info('=' * 60)
        logger.info(f"Site: {self.site_name}")
        logger.info(f"Total items: {self.stats['total']}")
        logger.info(f"Successful: {self.stats['successful']}")
        logger.info(f"Failed: {self.stats['failed']}")

        if self.stats['start_time'] and self.stats['end_time']:
            duration = (self.stats['end_time'] - self.stats['start_time']).total_seconds()
            logger.info(f"Duration: {duration:.2f} seconds")

        logger.info(f"Output directory: {self.output_dir.absolute()}")

    def save_failed_log(self, failed_items: List[Dict[str, Any]]) -> Optional[Path]:
        """
        Save log of failed extractions

        Args:
            failed_items: List of failed items with reasons

        Returns:
            Path to failed log file or None
        """
        if not failed_items:
            return None

        lines = [
            f"Failed Extractions ({self.get_extractor_name()}): {len(failed_items)}",
            "=" * 60,
            ""
        ]
        for item in failed_items:
            lines.append(f"Name: {item.get('name', 'Unknown')}")
            lines.append(f"Reason: {item.get('reason', 'Unknown error')}")
            lines.append("")

        filepath = self.output_dir / f"FAILED_{self.get_extractor_name().upper()}.txt"
        filepath.write_text("\n".join(lines), encoding='utf-8')
        logger.info(f"Saved failure log: {filepath}")
        return filepath

    def run(self) -> Dict[str, Any]:
        """
        Run the extraction with timing and statistics

        Returns:
            Extraction results and statistics
        """
        logger.info(f"Starting {self.get_extractor_name()} extraction for {self.site_name}...")

        self.stats['start_time'] = datetime.now()

        try:
            results = self.extract()
            self.stats['end_time'] = datetime.now()
            self.log_stats()
            return results

        except Exception as e:
            self.stats['end_time'] = datetime.now()
            logger.error(f"Extraction failed: {e}", exc_info=True)
            self.log_stats()
            raise
