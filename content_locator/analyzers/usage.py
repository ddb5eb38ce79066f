"""
Content usage aggregation - records which documents use each fragment.

Structure while accumulating:
    category key -> [UsageEntry, ...]

  - category key: block name, pattern title, shortcode text, or field label
  - first hit for a (key, document) pair snapshots the document metadata
    with count=1; later hits only bump count
  - prepared field-value entries are appended as separate rows

finalize() sorts keys once and freezes the result into a Bucket.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .store import Document


@dataclass
class UsageEntry:
    """One document's usage of one category key."""
    title: str
    id: int
    doc_type: str
    status: str
    count: int = 1

    @classmethod
    def from_document(cls, document: Document, count: int = 1) -> 'UsageEntry':
        return cls(
            title=document.title,
            id=document.id,
            doc_type=document.type,
            status=document.status,
            count=count,
        )

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'id': self.id,
            'type': self.doc_type,
            'status': self.status,
            'count': self.count,
        }


@dataclass
class CategoryUsage:
    """All documents using one category key."""
    key: str
    entries: List[UsageEntry] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return sum(e.count for e in self.entries)

    @property
    def document_count(self) -> int:
        return len(self.entries)

    def to_dict(self) -> dict:
        return {
            'total_count': self.total_count,
            'entries': [e.to_dict() for e in self.entries],
        }


class Bucket:
    """Finalized, key-sorted aggregate for one report section."""

    def __init__(self, usages: List[CategoryUsage]):
        self._usages = usages
        self._by_key = {u.key: u for u in usages}

    def __iter__(self) -> Iterator[CategoryUsage]:
        return iter(self._usages)

    def __len__(self) -> int:
        return len(self._usages)

    def __contains__(self, key: str) -> bool:
        return key in self._by_key

    def __getitem__(self, key: str) -> CategoryUsage:
        return self._by_key[key]

    def get(self, key: str) -> Optional[CategoryUsage]:
        return self._by_key.get(key)

    def keys(self) -> List[str]:
        return [u.key for u in self._usages]

    @property
    def total_count(self) -> int:
        return sum(u.total_count for u in self._usages)

    def to_dict(self) -> dict:
        return {u.key: u.to_dict() for u in self._usages}


class UsageAggregator:
    """
    Accumulates usage for one report section.

    Key is category key -> entries in first-seen order. add() keeps one
    entry per (key, document id); add_entry() always appends, so two
    fields sharing a label each get their own row for the same document.
    """

    def __init__(self):
        self._usages: Dict[str, List[UsageEntry]] = {}
        self._by_document: Dict[Tuple[str, int], UsageEntry] = {}

    def add(self, key: str, document: Document) -> UsageEntry:
        """Record one occurrence of key in document."""
        entry = self._by_document.get((key, document.id))
        if entry is None:
            entry = UsageEntry.from_document(document)
            self._usages.setdefault(key, []).append(entry)
            self._by_document[(key, document.id)] = entry
        else:
            entry.count += 1
        return entry

    def add_entry(self, key: str, entry: UsageEntry):
        """Append a prepared entry as its own row."""
        self._usages.setdefault(key, []).append(entry)

    def __len__(self) -> int:
        return len(self._usages)

    def finalize(self) -> Bucket:
        """Sort keys and freeze into a Bucket."""
        return Bucket([
            CategoryUsage(key=key, entries=list(self._usages[key]))
            for key in sorted(self._usages)
        ])
