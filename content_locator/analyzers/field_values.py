"""
ACF true/false and checkbox field scanner.

Finds every post/page where a boolean-like ACF field is switched on, grouped
by "<field label> (<group title>)".

Stored values come in a few shapes:
  - true_false:  "1" / "0"
  - checkbox:    PHP-serialized array, e.g. a:2:{i:0;s:3:"yes";i:1;s:2:"no";}
                 or an already-decoded list when exported through REST
A value counts as ON when it is "1" or "yes", or is a list containing one
of those.
"""
import logging
import re
from typing import Any, Dict, List, Optional, Set

import phpserialize

from .store import DocumentStore, ExternalUnavailable, FieldRegistry
from .usage import UsageAggregator, UsageEntry

logger = logging.getLogger(__name__)

BOOLEAN_FIELD_KINDS = ('true_false', 'checkbox')
TRUTHY_VALUES = ('1', 'yes')
CONTENT_TYPES = ('post', 'page')
# Revisions and attachment metadata carry this status
INHERIT_STATUS = 'inherit'

RE_SERIALIZED = re.compile(
    r'^(?:N;|b:[01];|i:-?\d+;|d:[^;]+;|s:\d+:".*";|a:\d+:\{.*\}|O:\d+:".*\})$',
    re.DOTALL
)


def maybe_unserialize(raw_value: Any) -> Any:
    """
    Decode a PHP-serialized string, leave anything else alone.

    Malformed serialized text is returned unchanged rather than raising.
    """
    if not isinstance(raw_value, str):
        return raw_value
    text = raw_value.strip()
    if not RE_SERIALIZED.match(text):
        return raw_value
    try:
        value = phpserialize.loads(text.encode('utf-8'), decode_strings=True)
    except ValueError as e:
        logger.debug(f"Could not unserialize {text[:60]!r}: {e}")
        return raw_value
    # PHP arrays come back as dicts; only the values matter here
    if isinstance(value, dict):
        return list(value.values())
    return value


def is_truthy(raw_value: Any) -> bool:
    """
    Whether a stored boolean-like field value is switched on.

    Rules:
      - "1" or "yes" (after unserializing) -> True
      - a list/tuple containing "1" or "yes" -> True
      - anything else (including Python True and int 1) -> False
    """
    value = maybe_unserialize(raw_value)
    if isinstance(value, str):
        return value in TRUTHY_VALUES
    if isinstance(value, (list, tuple)):
        return any(isinstance(v, str) and v in TRUTHY_VALUES for v in value)
    return False


def field_key(label: str, group_title: str) -> str:
    """Grouping key, e.g. "Show Banner (Page Options)"."""
    return f"{label} ({group_title})"


class FieldValueScanner:
    """Scan boolean-like ACF fields for documents where they are ON."""

    def __init__(self, registry: Optional[FieldRegistry], store: DocumentStore):
        self.registry = registry
        self.store = store
        self.stats = {
            'fields_scanned': 0,
            'values_checked': 0,
            'matches': 0,
            'skipped_documents': 0,
        }

    def scan(self) -> UsageAggregator:
        """
        Returns:
            UsageAggregator keyed by field_key(); empty when the field
            system isn't available.
        """
        aggregator = UsageAggregator()

        if self.registry is None:
            logger.warning("No field registry configured, skipping ACF field scan")
            return aggregator

        try:
            groups = self.registry.list_field_groups()
        except ExternalUnavailable as e:
            logger.warning(f"Field system unavailable, skipping ACF field scan: {e}")
            return aggregator

        for group in groups:
            try:
                field_defs = self.registry.list_fields(group)
            except ExternalUnavailable as e:
                logger.warning(f"Skipping field group {group.title!r}: {e}")
                continue
            for field_def in field_defs:
                if field_def.kind not in BOOLEAN_FIELD_KINDS:
                    continue
                self.stats['fields_scanned'] += 1
                self._scan_field(field_def, aggregator)

        logger.info(f"Field scan complete: "
                    f"{self.stats['fields_scanned']} fields, "
                    f"{self.stats['matches']} matches")
        return aggregator

    def _scan_field(self, field_def, aggregator: UsageAggregator):
        key = field_key(field_def.label, field_def.group_title)
        seen: Set[int] = set()

        for doc_id, raw_value in self.store.fetch_stored_values(field_def.name):
            self.stats['values_checked'] += 1
            if not is_truthy(raw_value) or doc_id in seen:
                continue

            document = self.store.fetch_document(doc_id)
            if (document is None
                    or document.type not in CONTENT_TYPES
                    or document.status == INHERIT_STATUS):
                self.stats['skipped_documents'] += 1
                continue

            seen.add(doc_id)
            aggregator.add_entry(key, UsageEntry.from_document(document))
            self.stats['matches'] += 1


def scan_field_values(registry: Optional[FieldRegistry],
                      store: DocumentStore) -> Dict[str, List[UsageEntry]]:
    """Convenience wrapper: field key -> entries, keys sorted."""
    bucket = FieldValueScanner(registry, store).scan().finalize()
    return {usage.key: usage.entries for usage in bucket}
