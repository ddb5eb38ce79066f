"""
Logging Configuration
Centralized logging setup for the extraction and analysis commands
"""
import logging
import sys
from pathlib import Path
from datetime import datetime

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(log_dir: Path = None, log_level: str = 'INFO',
                  console_output: bool = True, log_prefix: str = 'content_locator') -> None:
    """
    Setup logging configuration

    Args:
        log_dir: Directory for log files (None = no file logging)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        console_output: Whether to output to console
        log_prefix: File name prefix for the timestamped log file
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers = []

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    if console_output:
        # Page titles are often non-ASCII; don't die on a cp1252 console
        if hasattr(sys.stdout, 'reconfigure'):
            sys.stdout.reconfigure(errors='replace')
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = log_dir / f'{log_prefix}_{timestamp}.log'

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")
