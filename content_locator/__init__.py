"""Content Locator - inventory of blocks, patterns, shortcodes and ACF fields in WordPress content."""

__version__ = '0.1.0'
