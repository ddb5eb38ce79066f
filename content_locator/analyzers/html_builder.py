"""
HTML Report Builder

Renders a Report as one self-contained HTML file: a tab per bucket, one
clickable summary row per key that expands into the documents using it,
with View/Edit links back to the site.

The template lives in this module as a string constant so the package has
no external file dependencies.
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from jinja2 import Environment, select_autoescape

from .report import BUCKET_TITLES, Report

logger = logging.getLogger(__name__)

_env = Environment(autoescape=select_autoescape(default_for_string=True, default=True))


def view_url(site_url: Optional[str], doc_id: int) -> str:
    if not site_url:
        return ''
    return f"{site_url.rstrip('/')}/?p={doc_id}"


def edit_url(site_url: Optional[str], doc_id: int) -> str:
    if not site_url:
        return ''
    return f"{site_url.rstrip('/')}/wp-admin/post.php?post={doc_id}&action=edit"


def render_html_report(report: Report, site_name: str = "Site",
                       site_url: Optional[str] = None) -> str:
    """Render the report to an HTML string."""
    tabs = [
        {
            'id': f"{name.replace('_', '-')}-tab",
            'title': title,
            'bucket': report[name],
        }
        for name, title in BUCKET_TITLES.items()
    ]
    template = _env.from_string(HTML_TEMPLATE)
    return template.render(
        tabs=tabs,
        site_name=site_name,
        site_url=site_url,
        generated=datetime.now().strftime('%Y-%m-%d %H:%M'),
        documents_scanned=report.documents_scanned,
        view_url=view_url,
        edit_url=edit_url,
    )


def build_html_report(report: Report, output_path: Path, site_name: str = "Site",
                      site_url: Optional[str] = None) -> Path:
    """
    Write the HTML report.

    Args:
        report: Finished Report
        output_path: Where to write the HTML file
        site_name: Shown in the page heading
        site_url: Base URL for View/Edit links (links omitted when None)

    Returns:
        Path to the generated HTML file
    """
    html = render_html_report(report, site_name=site_name, site_url=site_url)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding='utf-8')

    size_kb = output_path.stat().st_size / 1024
    logger.info(f"HTML report: {output_path} ({size_kb:.0f} KB)")
    return output_path


HTML_TEMPLATE = r'''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>Content Locator - {{ site_name }}</title>
<style>
body { font-family: -apple-system, "Segoe UI", Roboto, sans-serif; margin: 20px; color: #1d2327; }
.nav-tab-wrapper { border-bottom: 1px solid #c3c4c7; margin-bottom: 0; }
.nav-tab { display: inline-block; padding: 6px 12px; margin-right: 4px; border: 1px solid #c3c4c7;
           border-bottom: none; background: #dcdcde; color: #50575e; text-decoration: none; cursor: pointer; }
.nav-tab-active { background: #fff; color: #000; }
.tab-content { display: none; }
table { border-collapse: collapse; width: 100%; }
th, td { text-align: left; padding: 6px 10px; border-bottom: 1px solid #e0e0e0; }
.expandable-row { cursor: pointer; background-color: #f1f1f1; font-weight: 500; }
.expandable-content { display: none; }
.meta { color: #646970; font-size: 13px; }
</style>
</head>
<body>
<h1>Content Locator</h1>
<p class="meta">{{ site_name }} &middot; {{ documents_scanned }} documents scanned &middot; generated {{ generated }}</p>

<h2 class="nav-tab-wrapper">
{% for tab in tabs %}<a class="nav-tab{% if loop.first %} nav-tab-active{% endif %}" data-tab="{{ tab.id }}">{{ tab.title }}</a>
{% endfor %}</h2>

{% for tab in tabs %}
<div id="{{ tab.id }}" class="tab-content"{% if loop.first %} style="display: block;"{% endif %}>
{% if not tab.bucket|length %}
<p>No {{ tab.title }} found.</p>
{% else %}
<table>
<thead><tr><th style="width: 480px;">Block Name / Page Title</th><th>Count</th><th>Post Type</th><th>Status</th><th>Actions</th></tr></thead>
<tbody>
{% for usage in tab.bucket %}
<tr class="expandable-row"><td>{{ usage.key }}</td><td colspan="4">{{ usage.total_count }}</td></tr>
{% for entry in usage.entries %}
<tr class="expandable-content">
<td>{{ entry.title }}</td><td>{{ entry.count }}</td><td>{{ entry.doc_type }}</td><td>{{ entry.status }}</td>
<td>{% if site_url %}<a href="{{ view_url(site_url, entry.id) }}" target="_blank">View</a> | <a href="{{ edit_url(site_url, entry.id) }}">Edit</a>{% else %}#{{ entry.id }}{% endif %}</td>
</tr>
{% endfor %}
{% endfor %}
</tbody>
</table>
{% endif %}
</div>
{% endfor %}

<script>
document.querySelectorAll('.nav-tab').forEach(function (tab) {
  tab.addEventListener('click', function () {
    document.querySelectorAll('.nav-tab').forEach(function (t) { t.classList.remove('nav-tab-active'); });
    document.querySelectorAll('.tab-content').forEach(function (c) { c.style.display = 'none'; });
    tab.classList.add('nav-tab-active');
    document.getElementById(tab.dataset.tab).style.display = 'block';
  });
});
document.querySelectorAll('.expandable-row').forEach(function (row) {
  row.addEventListener('click', function () {
    var next = row.nextElementSibling;
    while (next && next.classList.contains('expandable-content')) {
      next.style.display = next.style.display === 'table-row' ? 'none' : 'table-row';
      next = next.nextElementSibling;
    }
  });
});
</script>
</body>
</html>
'''
