"""
tag-pages - tag index and paginated tag pages for content record stores.

Records are plain dicts keyed by a path-like identifier. A run normalizes
each record's tag field into ``{"name", "slug"}`` pairs, publishes a sorted
listing per tag into shared metadata and writes one page record per slice of
each tag's records back into the store.

Examples:
    >>> from tagpages import TagPages
    >>> files = {"post.md": {"title": "Hello", "tags": "news, python"}}
    >>> metadata = {}
    >>> TagPages({"perPage": 10}).run(files, metadata)
    TagPagesResult(...)
    >>> sorted(files)
    ['post.md', 'tags/news/index.html', 'tags/python/index.html']
"""

from tagpages.config import TagPagesOptions, load_options, normalize_options
from tagpages.core.errors import (
    ConfigError,
    InvalidConfigError,
    PathCollisionError,
    SortKeyError,
    TagPagesError,
)
from tagpages.core.slug import Slugifier, make_slugifier, slugify
from tagpages.indexer import TagGroup, index_tags, parse_tag_field
from tagpages.pagination import TagListing, build_pages, paginate, sort_records
from tagpages.plugin import TagPages, TagPagesResult, tag_pages

__version__ = "0.3.0"

__all__ = [
    "TagPages",
    "TagPagesResult",
    "TagPagesOptions",
    "tag_pages",
    "load_options",
    "normalize_options",
    "TagGroup",
    "index_tags",
    "parse_tag_field",
    "TagListing",
    "build_pages",
    "paginate",
    "sort_records",
    "Slugifier",
    "slugify",
    "make_slugifier",
    "TagPagesError",
    "ConfigError",
    "InvalidConfigError",
    "SortKeyError",
    "PathCollisionError",
]
