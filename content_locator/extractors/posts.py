"""
Posts Extractor
Extracts posts and pages (raw block content + ACF values) from WordPress
"""
from pathlib import Path
from typing import Dict, Any, Iterator, List, Tuple
import logging

from .base import BaseExtractor
from ..api.wordpress_client import WordPressClient, WordPressAPIError

logger = logging.getLogger(__name__)

# REST collection endpoint -> post type
COLLECTIONS = {
    'posts': 'post',
    'pages': 'page',
}

# trash is kept for the ACF field scan; block/shortcode scans drop it later
EXTRACT_STATUSES = 'publish,future,draft,pending,private,trash'


def rendered_or_raw(value: Any) -> str:
    """REST returns title/content as {"raw": ..., "rendered": ...} with context=edit."""
    if isinstance(value, dict):
        raw = value.get('raw')
        return raw if raw is not None else value.get('rendered', '')
    return value or ''


def to_stored_value(value: Any) -> Any:
    """
    Convert an ACF REST value back to what postmeta would hold.

    true_false comes back as a JSON bool but is stored as "1"/"0";
    checkbox lists stay lists.
    """
    if isinstance(value, bool):
        return '1' if value else '0'
    if isinstance(value, (list, str)):
        return value
    return str(value)


class PostsExtractor(BaseExtractor):
    """Extract posts and pages from WordPress"""

    def __init__(self, client: WordPressClient, output_dir: Path, site_name: str):
        super().__init__(client, output_dir, site_name)

    def get_extractor_name(self) -> str:
        return "posts"

    def fetch_collection(self, endpoint: str) -> Iterator[Dict[str, Any]]:
        params = {'context': 'edit', 'status': EXTRACT_STATUSES}
        return self.client.iter_collection(endpoint, params=params)

    def convert_item(self, item: Dict[str, Any], post_type: str) -> Tuple[Dict[str, Any], List[Dict[str, Any]]]:
        """
        Split one REST item into a posts.json record and its postmeta rows.
        """
        post_id = item['id']
        record = {
            'id': post_id,
            'title': rendered_or_raw(item.get('title')),
            'type': item.get('type', post_type),
            'status': item.get('status', ''),
            'content': rendered_or_raw(item.get('content')),
        }

        meta_rows = []
        acf = item.get('acf')
        # ACF sends [] instead of {} when a post has no field values
        if isinstance(acf, dict):
            for name, value in acf.items():
                if value is None:
                    continue
                meta_rows.append({
                    'post_id': post_id,
                    'meta_key': name,
                    'meta_value': to_stored_value(value),
                })
        return record, meta_rows

    def extract(self) -> Dict[str, Any]:
        """
        Extract all posts and pages

        Returns:
            Extraction results
        """
        posts = []
        postmeta = []
        failed_items = []

        for endpoint, post_type in COLLECTIONS.items():
            logger.info(f"Fetching {endpoint}...")
            fetched = 0
            try:
                # Pages already received are kept if a later page fails
                for item in self.fetch_collection(endpoint):
                    fetched += 1
                    self.stats['total'] += 1
                    try:
                        record, meta_rows = self.convert_item(item, post_type)
                    except (KeyError, TypeError) as e:
                        failed_items.append({'name': f"{endpoint} item", 'reason': f"Malformed item: {e}"})
                        self.stats['failed'] += 1
                        continue
                    posts.append(record)
                    postmeta.extend(meta_rows)
                    self.stats['successful'] += 1
            except WordPressAPIError as e:
                logger.error(f"  [FAIL] {endpoint} after {fetched} items: {e}")
                failed_items.append({'name': endpoint, 'reason': str(e)})
                self.stats['failed'] += 1
                continue

            logger.info(f"  [OK] {fetched} {endpoint}")

        self.save_json(posts, 'posts.json')
        self.save_json(postmeta, 'postmeta.json')

        if failed_items:
            self.save_failed_log(failed_items)

        return {
            'status': 'success' if not failed_items else 'partial',
            'stats': self.stats,
            'posts': len(posts),
            'meta_rows': len(postmeta),
            'failed': failed_items
        }
