"""
Output generators for content inventory results.

Generates:
  1. Bucket synopsis - markdown table per report section
  2. Flat CSV of every (bucket, key, document) row
  3. JSON export (report + summary) for tooling
"""
import logging
from pathlib import Path
from typing import List

import pandas as pd

from .report import BUCKET_TITLES, Report
from .usage import Bucket
from ..utils.file_helpers import save_json

logger = logging.getLogger(__name__)

CSV_COLUMNS = ['bucket', 'key', 'title', 'id', 'type', 'status', 'count']


def _md_cell(value) -> str:
    # Shortcode keys routinely contain pipes and brackets
    return str(value).replace('|', '\\|').replace('\n', ' ')


def generate_bucket_synopsis(bucket_name: str, bucket: Bucket, output_dir: Path) -> Path:
    """
    Markdown synopsis for one bucket.

    One summary row per key (total count, document count) followed by a
    per-document breakdown.
    """
    title = BUCKET_TITLES.get(bucket_name, bucket_name)

    lines = []
    lines.append(f"# {title}")
    lines.append("")

    if not len(bucket):
        lines.append(f"No {title} found.")
        lines.append("")
    else:
        lines.append(f"**Keys:** {len(bucket)} | **Occurrences:** {bucket.total_count}")
        lines.append("")
        lines.append("| Name | Total | Documents |")
        lines.append("|---|---|---|")
        for usage in bucket:
            lines.append(f"| {_md_cell(usage.key)} | {usage.total_count} | {usage.document_count} |")
        lines.append("")

        lines.append("## Documents")
        lines.append("")
        for usage in bucket:
            lines.append(f"### {_md_cell(usage.key)}")
            lines.append("")
            lines.append("| Title | ID | Type | Status | Count |")
            lines.append("|---|---|---|---|---|")
            for e in usage.entries:
                lines.append(f"| {_md_cell(e.title)} | {e.id} | {e.doc_type} | {e.status} | {e.count} |")
            lines.append("")

    output_dir.mkdir(parents=True, exist_ok=True)
    filepath = output_dir / f"{bucket_name}.md"
    filepath.write_text('\n'.join(lines), encoding='utf-8')
    return filepath


def report_to_dataframe(report: Report) -> pd.DataFrame:
    """Flatten the report into one row per (bucket, key, document)."""
    rows = []
    for bucket_name, bucket in report.buckets.items():
        for usage in bucket:
            for e in usage.entries:
                rows.append({
                    'bucket': bucket_name,
                    'key': usage.key,
                    'title': e.title,
                    'id': e.id,
                    'type': e.doc_type,
                    'status': e.status,
                    'count': e.count,
                })
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def generate_csv_export(report: Report, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    filepath = output_dir / 'content_usage.csv'
    report_to_dataframe(report).to_csv(filepath, index=False, encoding='utf-8')
    return filepath


def generate_json_export(report: Report, summary: dict, output_dir: Path) -> Path:
    """
    Full report for other tools:

        {"summary": {...}, "buckets": {bucket: {key: {total_count, entries}}}}
    """
    filepath = output_dir / 'content_report.json'
    save_json({'summary': summary, 'buckets': report.to_dict()}, filepath)
    return filepath


def generate_all(report: Report, summary: dict, output_dir: Path) -> List[Path]:
    """Write every non-HTML output, return the paths."""
    paths = [generate_bucket_synopsis(name, bucket, output_dir)
             for name, bucket in report.buckets.items()]
    paths.append(generate_csv_export(report, output_dir))
    paths.append(generate_json_export(report, summary, output_dir))
    logger.info(f"Wrote {len(paths)} output files to {output_dir}")
    return paths
