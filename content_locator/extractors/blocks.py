"""
Reusable Blocks Extractor
Extracts synced patterns (wp_block posts) so {"ref":N} can be resolved offline
"""
from typing import Dict, Any
import logging

from .base import BaseExtractor
from .posts import rendered_or_raw
from ..api.wordpress_client import WordPressAPIError

logger = logging.getLogger(__name__)


class BlocksExtractor(BaseExtractor):
    """Extract reusable block titles from WordPress"""

    def get_extractor_name(self) -> str:
        return "blocks"

    def extract(self) -> Dict[str, Any]:
        logger.info("Fetching reusable blocks...")

        items = []
        error = None
        try:
            for item in self.client.iter_collection('blocks', params={'context': 'edit'}):
                items.append(item)
        except WordPressAPIError as e:
            logger.error(f"  [FAIL] blocks after {len(items)} items: {e}")
            self.save_failed_log([{'name': 'blocks', 'reason': str(e)}])
            error = str(e)
            if not items:
                self.stats['failed'] += 1
                return {'status': 'error', 'error': error, 'stats': self.stats}

        blocks = [
            {'id': item['id'], 'title': rendered_or_raw(item.get('title'))}
            for item in items
            if 'id' in item
        ]
        self.stats['total'] = len(items)
        self.stats['successful'] = len(blocks)
        self.stats['failed'] = len(items) - len(blocks) + (1 if error else 0)

        self.save_json(blocks, 'blocks.json')
        logger.info(f"  [OK] {len(blocks)} reusable blocks")

        result = {
            'status': 'success' if error is None else 'partial',
            'stats': self.stats,
            'blocks': len(blocks),
        }
        if error is not None:
            result['error'] = error
        return result
