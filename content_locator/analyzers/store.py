"""
Document store and field registry.

The analyzers never talk to WordPress directly. They read through two
interfaces:

  DocumentStore  - posts/pages, reusable block titles, stored field values
  FieldRegistry  - ACF field groups and their field definitions

RawDataStore and AcfJsonRegistry implement them over a raw extraction
directory (see extractors/), so an analysis can be re-run offline:

    raw/posts.json          [{id, title, type, status, content}, ...]
    raw/blocks.json         [{id, title}, ...]
    raw/postmeta.json       [{post_id, meta_key, meta_value}, ...]
    raw/field_groups/*.json ACF local JSON ({key, title, fields: [...]})
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..utils.file_helpers import load_json

logger = logging.getLogger(__name__)


class ExternalUnavailable(Exception):
    """The field-definition system is not present for this site."""


@dataclass(frozen=True)
class Document:
    """Read-only snapshot of a post or page."""
    id: int
    title: str
    type: str
    status: str
    body: str = ''


@dataclass(frozen=True)
class FieldDef:
    """Single ACF field definition."""
    name: str
    label: str
    kind: str           # ACF field type: true_false, checkbox, text, ...
    group_title: str
    key: str = ''


@dataclass
class FieldGroup:
    """ACF field group with its fields."""
    key: str
    title: str
    fields: List[FieldDef] = field(default_factory=list)


class DocumentStore(ABC):
    """Read-only access to the document corpus."""

    @abstractmethod
    def query_documents(self, types: Iterable[str], excluded_statuses: Iterable[str],
                        coarse_filter: Callable[[str], bool]) -> List[Document]:
        """All documents of the given types, minus excluded statuses, whose body passes the filter."""

    @abstractmethod
    def resolve_title(self, doc_id: int) -> Optional[str]:
        """Title of a reusable block, or None."""

    @abstractmethod
    def fetch_stored_values(self, field_name: str) -> List[Tuple[int, Any]]:
        """Every (document id, raw value) stored under a field name."""

    @abstractmethod
    def fetch_document(self, doc_id: int) -> Optional[Document]:
        """Look up a single document of any type."""


class FieldRegistry(ABC):
    """Read-only access to field definitions."""

    @abstractmethod
    def list_field_groups(self) -> List[FieldGroup]:
        pass

    @abstractmethod
    def list_fields(self, group: FieldGroup) -> List[FieldDef]:
        pass


class RawDataStore(DocumentStore):
    """
    DocumentStore over in-memory lists, usually loaded from a raw directory.

    Usage:
        store = RawDataStore.from_raw_dir(Path("data/acme/raw"))
        docs = store.query_documents({"post", "page"}, {"trash"}, lambda b: True)
    """

    def __init__(self, documents: Iterable[Document] = (),
                 block_titles: Optional[Dict[int, str]] = None,
                 meta_rows: Iterable[Tuple[int, str, Any]] = ()):
        self._documents: Dict[int, Document] = {}
        for doc in documents:
            self._documents[doc.id] = doc
        self._block_titles: Dict[int, str] = dict(block_titles or {})
        # meta_key -> [(post_id, raw_value), ...] in load order
        self._meta: Dict[str, List[Tuple[int, Any]]] = {}
        for post_id, meta_key, meta_value in meta_rows:
            self._meta.setdefault(meta_key, []).append((post_id, meta_value))

    @classmethod
    def from_raw_dir(cls, raw_dir: Path) -> 'RawDataStore':
        """Build from a raw extraction directory. Missing files count as empty."""
        raw_dir = Path(raw_dir)

        documents = [
            Document(
                id=int(item['id']),
                title=item.get('title') or '',
                type=item.get('type', ''),
                status=item.get('status', ''),
                body=item.get('content') or '',
            )
            for item in _load_list(raw_dir / 'posts.json')
        ]

        block_titles = {
            int(item['id']): item.get('title') or ''
            for item in _load_list(raw_dir / 'blocks.json')
        }

        meta_rows = [
            (int(row['post_id']), row['meta_key'], row.get('meta_value'))
            for row in _load_list(raw_dir / 'postmeta.json')
        ]

        store = cls(documents, block_titles, meta_rows)
        logger.info(f"Loaded raw data: {len(store._documents)} documents, "
                    f"{len(block_titles)} reusable blocks, "
                    f"{len(meta_rows)} meta rows")
        return store

    def query_documents(self, types, excluded_statuses, coarse_filter):
        types = set(types)
        excluded = set(excluded_statuses)
        return [
            doc for doc in self._documents.values()
            if doc.type in types
            and doc.status not in excluded
            and coarse_filter(doc.body)
        ]

    def resolve_title(self, doc_id):
        return self._block_titles.get(doc_id) or None

    def fetch_stored_values(self, field_name):
        return list(self._meta.get(field_name, []))

    def fetch_document(self, doc_id):
        return self._documents.get(doc_id)


class AcfJsonRegistry(FieldRegistry):
    """
    FieldRegistry backed by ACF local JSON files (group_*.json).

    A missing directory means ACF is not in use on the site; listing groups
    then raises ExternalUnavailable.
    """

    def __init__(self, groups: Optional[List[FieldGroup]] = None):
        self._groups = groups

    @classmethod
    def from_dir(cls, groups_dir: Path) -> 'AcfJsonRegistry':
        groups_dir = Path(groups_dir)
        if not groups_dir.is_dir():
            logger.warning(f"No ACF field groups directory: {groups_dir}")
            return cls(None)

        groups = []
        for group_file in sorted(groups_dir.glob('*.json')):
            try:
                data = load_json(group_file)
            except (OSError, ValueError) as e:
                logger.error(f"Skipping unreadable field group {group_file.name}: {e}")
                continue

            # Local JSON is one group per file; exports are a list of groups
            for raw_group in (data if isinstance(data, list) else [data]):
                groups.append(parse_field_group(raw_group))

        logger.info(f"Loaded {len(groups)} ACF field groups from {groups_dir}")
        return cls(groups)

    def list_field_groups(self):
        if self._groups is None:
            raise ExternalUnavailable("ACF field groups are not available")
        return list(self._groups)

    def list_fields(self, group):
        return list(group.fields)


def parse_field_group(raw_group: Dict[str, Any]) -> FieldGroup:
    """Convert an ACF JSON field group into a FieldGroup."""
    title = raw_group.get('title', '')
    fields = [
        FieldDef(
            name=raw_field.get('name', ''),
            label=raw_field.get('label', ''),
            kind=raw_field.get('type', ''),
            group_title=title,
            key=raw_field.get('key', ''),
        )
        for raw_field in raw_group.get('fields', [])
    ]
    return FieldGroup(key=raw_group.get('key', ''), title=title, fields=fields)


def _load_list(filepath: Path) -> list:
    if not filepath.exists():
        logger.debug(f"{filepath.name} not found, treating as empty")
        return []
    data = load_json(filepath)
    return data if isinstance(data, list) else []
