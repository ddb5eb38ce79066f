"""
Field Groups Extractor
Copies ACF local JSON field groups (theme acf-json/ folder) into the raw directory

ACF has no core REST endpoint for field group definitions, so the
theme's local JSON is the source of truth.
"""
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from .base import BaseExtractor
from ..utils.file_helpers import load_json

logger = logging.getLogger(__name__)


class FieldGroupsExtractor(BaseExtractor):
    """Copy ACF field group definitions into raw/field_groups/"""

    def __init__(self, client, output_dir: Path, site_name: str,
                 acf_json_dir: Optional[Path] = None):
        super().__init__(client, output_dir, site_name)
        self.acf_json_dir = Path(acf_json_dir) if acf_json_dir else None

    def get_extractor_name(self) -> str:
        return "field_groups"

    def extract(self) -> Dict[str, Any]:
        if self.acf_json_dir is None or not self.acf_json_dir.is_dir():
            logger.warning(f"ACF JSON directory not available: {self.acf_json_dir} "
                           f"- field values will not be analyzed")
            return {'status': 'no_data', 'stats': self.stats}

        group_files = sorted(self.acf_json_dir.glob('*.json'))
        self.stats['total'] = len(group_files)
        failed_items = []

        for group_file in group_files:
            try:
                data = load_json(group_file)
            except (OSError, ValueError) as e:
                logger.error(f"  [FAIL] {group_file.name}: {e}")
                failed_items.append({'name': group_file.name, 'reason': str(e)})
                self.stats['failed'] += 1
                continue

            self.save_json(data, f"field_groups/{group_file.name}")
            self.stats['successful'] += 1

        if failed_items:
            self.save_failed_log(failed_items)

        return {
            'status': 'success',
            'stats': self.stats,
            'field_groups': self.stats['successful'],
            'failed': failed_items,
        }
