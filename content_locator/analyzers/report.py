"""
Content Locator report builder.

Runs the whole inventory for one site:
  1. Query posts/pages that might contain markup (coarse pre-filter)
  2. Extract block comments and shortcodes from each body
  3. Classify blocks (native / custom / ACF / pattern)
  4. Aggregate per category key -> document -> count
  5. Scan ACF true/false + checkbox values
  6. Sort every bucket and compute totals

Nothing is cached between builds; each call starts from scratch.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .classifier import Category, classify
from .field_values import FieldValueScanner
from .markup import extract_occurrences, might_contain_markup
from .store import DocumentStore, FieldRegistry
from .usage import Bucket, UsageAggregator

logger = logging.getLogger(__name__)

CORPUS_TYPES = ('post', 'page')
EXCLUDED_STATUSES = ('inherit', 'auto-draft', 'trash')

NATIVE_BLOCKS = 'native_blocks'
CUSTOM_BLOCKS = 'custom_blocks'
FIELD_BLOCKS = 'field_blocks'
FIELD_VALUES = 'field_values'
PATTERNS = 'patterns'
SHORTCODES = 'shortcodes'

# Bucket name -> display title, in tab order
BUCKET_TITLES = {
    NATIVE_BLOCKS: 'Native Blocks',
    CUSTOM_BLOCKS: 'Custom Blocks',
    FIELD_BLOCKS: 'ACF Blocks',
    FIELD_VALUES: 'True/False ACF Fields',
    PATTERNS: 'Patterns',
    SHORTCODES: 'Shortcodes',
}

CATEGORY_BUCKETS = {
    Category.NATIVE_BLOCK: NATIVE_BLOCKS,
    Category.CUSTOM_NAMESPACED_BLOCK: CUSTOM_BLOCKS,
    Category.FIELD_BACKED_BLOCK: FIELD_BLOCKS,
    Category.REUSABLE_FRAGMENT: PATTERNS,
}


@dataclass
class Report:
    """Six finalized buckets plus a little bookkeeping."""
    buckets: Dict[str, Bucket]
    used_field_blocks: List[str] = field(default_factory=list)
    documents_scanned: int = 0

    def __getitem__(self, bucket_name: str) -> Bucket:
        return self.buckets[bucket_name]

    @property
    def native_blocks(self) -> Bucket:
        return self.buckets[NATIVE_BLOCKS]

    @property
    def custom_blocks(self) -> Bucket:
        return self.buckets[CUSTOM_BLOCKS]

    @property
    def field_blocks(self) -> Bucket:
        return self.buckets[FIELD_BLOCKS]

    @property
    def field_values(self) -> Bucket:
        return self.buckets[FIELD_VALUES]

    @property
    def patterns(self) -> Bucket:
        return self.buckets[PATTERNS]

    @property
    def shortcodes(self) -> Bucket:
        return self.buckets[SHORTCODES]

    def stats(self) -> dict:
        return {
            'documents_scanned': self.documents_scanned,
            'used_field_blocks': list(self.used_field_blocks),
            'buckets': {
                name: {
                    'keys': len(bucket),
                    'occurrences': bucket.total_count,
                }
                for name, bucket in self.buckets.items()
            },
        }

    def to_dict(self) -> dict:
        return {name: bucket.to_dict() for name, bucket in self.buckets.items()}


class ReportBuilder:
    """
    Build a Report from a document store and (optionally) a field registry.

    Usage:
        store = RawDataStore.from_raw_dir(raw_dir)
        registry = AcfJsonRegistry.from_dir(raw_dir / 'field_groups')
        report = ReportBuilder(store, registry).build()
    """

    def __init__(self, store: DocumentStore, registry: Optional[FieldRegistry] = None):
        self.store = store
        self.registry = registry
        self.stats = {
            'documents_scanned': 0,
            'blocks_found': 0,
            'shortcodes_found': 0,
            'unresolved_patterns': 0,
        }

    def build(self) -> Report:
        for key in self.stats:
            self.stats[key] = 0

        aggregators = {name: UsageAggregator() for name in BUCKET_TITLES}
        used_field_blocks = set()

        documents = self.store.query_documents(
            CORPUS_TYPES, EXCLUDED_STATUSES, might_contain_markup
        )
        logger.info(f"Scanning {len(documents)} documents for blocks and shortcodes")

        for document in documents:
            blocks, shortcodes = extract_occurrences(document.body)

            for occurrence in blocks:
                classified = classify(occurrence, self._resolve_title)
                aggregators[CATEGORY_BUCKETS[classified.category]].add(
                    classified.key, document
                )
                if classified.category is Category.FIELD_BACKED_BLOCK:
                    used_field_blocks.add(classified.key)

            for shortcode in shortcodes:
                aggregators[SHORTCODES].add(shortcode.tag, document)

            self.stats['documents_scanned'] += 1
            self.stats['blocks_found'] += len(blocks)
            self.stats['shortcodes_found'] += len(shortcodes)

        aggregators[FIELD_VALUES] = FieldValueScanner(self.registry, self.store).scan()

        report = Report(
            buckets={name: agg.finalize() for name, agg in aggregators.items()},
            used_field_blocks=sorted(used_field_blocks),
            documents_scanned=self.stats['documents_scanned'],
        )

        logger.info(f"Report built: "
                    f"{self.stats['blocks_found']} blocks, "
                    f"{self.stats['shortcodes_found']} shortcodes, "
                    f"{self.stats['unresolved_patterns']} unresolved patterns")
        return report

    def _resolve_title(self, ref_id: int) -> Optional[str]:
        title = self.store.resolve_title(ref_id)
        if not title:
            self.stats['unresolved_patterns'] += 1
            logger.debug(f"Reusable block {ref_id} has no title")
        return title


def build_report(store: DocumentStore, registry: Optional[FieldRegistry] = None) -> Report:
    """Shortcut for ReportBuilder(store, registry).build()."""
    return ReportBuilder(store, registry).build()
