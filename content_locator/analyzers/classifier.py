"""
Block classification by naming convention.

Every block occurrence lands in exactly one category, first match wins:
  1. REUSABLE_FRAGMENT  - "block" with a {"ref":N} attribute (a pattern)
  2. FIELD_BACKED_BLOCK - namespaced under "acf/"
  3. CUSTOM_NAMESPACED_BLOCK - any other "namespace/name"
  4. NATIVE_BLOCK       - no namespace (core blocks serialize without "core/")
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .markup import BlockOccurrence

FIELD_BLOCK_PREFIX = 'acf/'
REUSABLE_BLOCK_NAME = 'block'
UNKNOWN_PATTERN = 'Unknown Pattern'

TitleResolver = Callable[[int], Optional[str]]


class Category(Enum):
    NATIVE_BLOCK = "native_block"
    CUSTOM_NAMESPACED_BLOCK = "custom_namespaced_block"
    FIELD_BACKED_BLOCK = "field_backed_block"
    REUSABLE_FRAGMENT = "reusable_fragment"


@dataclass(frozen=True)
class ClassifiedBlock:
    """A block occurrence with its category and grouping key."""
    category: Category
    key: str
    occurrence: BlockOccurrence


def categorize(occurrence: BlockOccurrence) -> Category:
    """Pick the category from the block name and reference id alone."""
    name = occurrence.name
    if name == REUSABLE_BLOCK_NAME and occurrence.reference_id is not None:
        return Category.REUSABLE_FRAGMENT
    if name.startswith(FIELD_BLOCK_PREFIX):
        return Category.FIELD_BACKED_BLOCK
    if '/' in name:
        return Category.CUSTOM_NAMESPACED_BLOCK
    return Category.NATIVE_BLOCK


def classify(occurrence: BlockOccurrence, resolve_title: TitleResolver) -> ClassifiedBlock:
    """
    Classify one block occurrence and work out its grouping key.

    Args:
        occurrence: Block found by the markup extractor
        resolve_title: Looks up a reusable block's title by id

    Returns:
        ClassifiedBlock. Patterns are keyed by resolved title
        (UNKNOWN_PATTERN when the lookup comes back empty), everything
        else by the raw block name.
    """
    category = categorize(occurrence)
    if category is Category.REUSABLE_FRAGMENT:
        key = resolve_title(occurrence.reference_id) or UNKNOWN_PATTERN
    else:
        key = occurrence.name
    return ClassifiedBlock(category=category, key=key, occurrence=occurrence)
