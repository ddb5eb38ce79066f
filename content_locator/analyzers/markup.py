"""
Embedded markup extraction.

Pulls two kinds of fragments out of a raw post body:
  - Block comments:  <!-- wp:name --> or <!-- wp:block {"ref":123} -->
  - Shortcodes:      [gallery ids="1,2"]

This is deliberately NOT a block grammar parser. Only the block name and an
optional reusable-block reference id are captured; everything else in the
comment is ignored. Anything that doesn't match is skipped.
"""
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

# Opening block comment. The name allows a single namespace separator
# (core blocks have none, "acf/hero" or "my-plugin/card" have one).
# The {"ref":N} attribute must follow immediately; any other attribute
# object just leaves reference_id empty.
RE_BLOCK = re.compile(
    r'<!-- wp:([a-zA-Z0-9-]+(?:/[a-zA-Z0-9-]+)?)(?: \{"ref":(\d+)\})? '
)

# [tag ...] - the whole match (brackets included) is the grouping key
RE_SHORTCODE = re.compile(r'\[(\w+)[^\]]*\]')

BLOCK_MARKER = '<!-- wp:'


@dataclass(frozen=True)
class BlockOccurrence:
    """One opening block comment found in a body."""
    name: str
    reference_id: Optional[int] = None


@dataclass(frozen=True)
class ShortcodeOccurrence:
    """One shortcode match, verbatim."""
    tag: str


def extract_blocks(body: str) -> List[BlockOccurrence]:
    """Block occurrences in document order."""
    if not body:
        return []
    blocks = []
    for match in RE_BLOCK.finditer(body):
        ref = match.group(2)
        blocks.append(BlockOccurrence(
            name=match.group(1),
            reference_id=int(ref) if ref else None,
        ))
    return blocks


def extract_shortcodes(body: str) -> List[ShortcodeOccurrence]:
    """Shortcode occurrences in document order."""
    if not body:
        return []
    return [ShortcodeOccurrence(tag=m.group(0)) for m in RE_SHORTCODE.finditer(body)]


def extract_occurrences(body: str) -> Tuple[List[BlockOccurrence], List[ShortcodeOccurrence]]:
    """
    Extract every block and shortcode occurrence from one body.

    Args:
        body: Raw post content

    Returns:
        (blocks, shortcodes), each in document order
    """
    return extract_blocks(body), extract_shortcodes(body)


def might_contain_markup(body: str) -> bool:
    """
    Cheap pre-filter used when querying the corpus.

    Over-matches on purpose (any '[' passes); the strict patterns above
    decide what actually counts.
    """
    return bool(body) and (BLOCK_MARKER in body or '[' in body)
