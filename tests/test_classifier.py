import pytest

from content_locator.analyzers.classifier import (
    UNKNOWN_PATTERN, Category, categorize, classify,
)
from content_locator.analyzers.markup import BlockOccurrence


def titles(mapping):
    return lambda ref_id: mapping.get(ref_id)


@pytest.mark.parametrize("occurrence, expected", [
    (BlockOccurrence("paragraph"), Category.NATIVE_BLOCK),
    (BlockOccurrence("block"), Category.NATIVE_BLOCK),
    (BlockOccurrence("block", 9), Category.REUSABLE_FRAGMENT),
    (BlockOccurrence("acf/hero"), Category.FIELD_BACKED_BLOCK),
    (BlockOccurrence("acf/hero", 3), Category.FIELD_BACKED_BLOCK),
    (BlockOccurrence("my-plugin/card"), Category.CUSTOM_NAMESPACED_BLOCK),
    (BlockOccurrence("core/paragraph"), Category.CUSTOM_NAMESPACED_BLOCK),
    (BlockOccurrence("acfx/thing"), Category.CUSTOM_NAMESPACED_BLOCK),
])
def test_categorize(occurrence, expected):
    assert categorize(occurrence) is expected


def test_pattern_keyed_by_resolved_title():
    result = classify(BlockOccurrence("block", 9), titles({9: "My Pattern"}))
    assert result.category is Category.REUSABLE_FRAGMENT
    assert result.key == "My Pattern"


@pytest.mark.parametrize("resolved", [None, ""])
def test_unresolved_pattern_uses_placeholder(resolved):
    result = classify(BlockOccurrence("block", 9), lambda ref_id: resolved)
    assert result.key == UNKNOWN_PATTERN == "Unknown Pattern"


def test_non_pattern_keyed_by_name_without_lookup():
    def fail(ref_id):
        raise AssertionError("should not resolve")

    for name in ("paragraph", "acf/hero", "my-plugin/card"):
        assert classify(BlockOccurrence(name), fail).key == name
