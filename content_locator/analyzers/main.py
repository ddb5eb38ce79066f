"""
Content Locator - Main Pipeline

Orchestrates the full analysis over a raw extraction directory:
  1. Load documents, reusable blocks and postmeta
  2. Load ACF field groups (optional)
  3. Build the report (blocks, shortcodes, patterns, ACF fields)
  4. Generate outputs (markdown, CSV, JSON, HTML)
"""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .store import AcfJsonRegistry, RawDataStore
from .report import ReportBuilder, Report
from . import output
from .html_builder import build_html_report
from ..utils.file_helpers import get_site_analyzed_dir, get_site_raw_dir
from ..utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def run_analysis(raw_dir: Path, output_dir: Path, site_name: str = "Site",
                 site_url: Optional[str] = None) -> Optional[Report]:
    """
    Run the complete content analysis pipeline.

    Args:
        raw_dir: Path to raw extraction data (e.g., data/acme/raw)
        output_dir: Path to write analysis results
        site_name: Display name for the site
        site_url: Base URL for View/Edit links in the HTML report

    Returns:
        The Report, or None if the raw directory is missing
    """
    start_time = datetime.now()
    raw_dir = Path(raw_dir)
    output_dir = Path(output_dir)
    logger.info(f"Starting content analysis on {raw_dir}")

    if not (raw_dir / 'posts.json').exists():
        logger.error(f"Missing posts.json in {raw_dir}")
        logger.error("Run content-extract first")
        return None

    output_dir.mkdir(parents=True, exist_ok=True)

    # =====================================================
    # Phase 1: Load raw data
    # =====================================================
    logger.info("Phase 1: Loading raw data...")
    store = RawDataStore.from_raw_dir(raw_dir)
    registry = AcfJsonRegistry.from_dir(raw_dir / 'field_groups')

    # =====================================================
    # Phase 2: Build report
    # =====================================================
    logger.info("Phase 2: Building content report...")
    builder = ReportBuilder(store, registry)
    report = builder.build()

    # =====================================================
    # Phase 3: Generate outputs
    # =====================================================
    logger.info("Phase 3: Generating outputs...")

    summary = {
        'analysis_date': datetime.now().isoformat(),
        'raw_data_dir': str(raw_dir),
        'output_dir': str(output_dir),
        'site_name': site_name,
        'site_url': site_url,
        'elapsed_seconds': round((datetime.now() - start_time).total_seconds(), 1),
        'report_stats': report.stats(),
        'builder_stats': dict(builder.stats),
    }

    output.generate_all(report, summary, output_dir)

    html_filename = f"{site_name.lower().replace(' ', '_')}_content_locator.html"
    html_path = build_html_report(report, output_dir / html_filename,
                                  site_name=site_name, site_url=site_url)

    stats = report.stats()
    logger.info("=" * 60)
    logger.info("ANALYSIS COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Site: {site_name}")
    logger.info(f"Documents scanned: {stats['documents_scanned']}")
    for name, bucket_stats in stats['buckets'].items():
        logger.info(f"{name}: {bucket_stats['keys']} keys, "
                    f"{bucket_stats['occurrences']} occurrences")
    logger.info(f"Used ACF blocks: {', '.join(stats['used_field_blocks']) or 'none'}")
    logger.info(f"Output: {output_dir}")
    logger.info(f"HTML report: {html_path}")

    return report


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description='Inventory blocks, patterns, shortcodes and ACF fields in extracted WordPress content',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  content-locate --site acme
  content-locate data/acme/raw data/acme/analyzed Acme
  content-locate data/acme/raw data/acme/analyzed Acme --site-url https://acme.example
        """
    )
    parser.add_argument('raw_dir', type=Path, nargs='?', help='Raw extraction directory')
    parser.add_argument('output_dir', type=Path, nargs='?', help='Directory for reports')
    parser.add_argument('site_name', nargs='?', help='Display name (default: raw dir parent name)')
    parser.add_argument('--site', help='Use data/<site>/raw and data/<site>/analyzed')
    parser.add_argument('--data-dir', type=Path, default=Path('data'),
                        help='Data directory for --site (default: data/)')
    parser.add_argument('--site-url', help='Site URL for View/Edit links')
    parser.add_argument('--log-dir', type=Path, help='Also log to a file in this directory')
    parser.add_argument('--log-level', default='INFO', help='DEBUG, INFO, WARNING, ERROR')

    args = parser.parse_args(argv)

    if args.site:
        raw_dir = get_site_raw_dir(args.site, args.data_dir)
        output_dir = get_site_analyzed_dir(args.site, args.data_dir)
        name = args.site_name or args.site
    elif args.raw_dir and args.output_dir:
        raw_dir, output_dir = args.raw_dir, args.output_dir
        name = args.site_name or args.raw_dir.resolve().parent.name
    else:
        parser.error("give raw_dir and output_dir, or --site")

    setup_logging(log_dir=args.log_dir, log_level=args.log_level, log_prefix='analysis')

    report = run_analysis(raw_dir, output_dir, site_name=name, site_url=args.site_url)
    if report is None:
        sys.exit(1)


if __name__ == '__main__':
    main()
