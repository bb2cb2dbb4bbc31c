"""
Tag indexer - first half of a tag-pages pass.

Scans every record in the store, rewrites its tag field into a list of
``{"name": ..., "slug": ...}`` pairs and builds the ``TagGroup``: display tag
name -> record identifiers carrying it, in scan order.

A tag field arrives either as a comma-separated string or as a sequence of
values. ``parse_tag_field`` turns both into one canonical list of raw strings
before anything else looks at it.

Edge cases:
    - Whitespace is trimmed; a value that trims to ``""`` is still a tag.
    - Tag identity is the exact trimmed string: ``"Food"`` and ``"food"`` are
      different tags even though they share a slug.
    - A record listing the same tag twice appears twice under that tag.
    - Already-normalized ``{"name", "slug"}`` entries contribute their name,
      so indexing an enriched store again gives the same result.

Example:
    >>> from tagpages.core.slug import slugify
    >>> files = {"a.md": {"tags": "x, y"}, "b.md": {"tags": ["x"]}}
    >>> index_tags(files, "tags", slugify)
    {'x': ['a.md', 'b.md'], 'y': ['a.md']}
    >>> files["a.md"]["tags"]
    [{'name': 'x', 'slug': 'x'}, {'name': 'y', 'slug': 'y'}]

Tags:
    tagging, indexing, normalization, tag-pages
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any

from tagpages.core.logging import get_logger
from tagpages.core.slug import Slugifier

logger = get_logger(__name__)

TagGroup = dict[str, list[str]]


def parse_tag_field(value: Any) -> list[str]:
    """Return the raw tag strings held by a record's tag field.

    Strings are split on commas; other iterables are taken element by element.
    A scalar that is neither is treated as a single tag.
    """
    if isinstance(value, str):
        return value.split(",")
    if isinstance(value, Mapping):
        return [_raw_tag(value)]
    if isinstance(value, Iterable):
        return [_raw_tag(item) for item in value]
    return [str(value)]


def _raw_tag(item: Any) -> str:
    if isinstance(item, Mapping) and "name" in item:
        return str(item["name"])
    return str(item)


def normalize_tags(raw_tags: Iterable[str], slugify: Slugifier) -> list[dict[str, str]]:
    """Trim each tag and pair it with its slug, keeping order and duplicates."""
    tags = []
    for raw in raw_tags:
        name = raw.strip()
        tags.append({"name": name, "slug": slugify(name)})
    return tags


def index_tags(
    files: MutableMapping[str, Any],
    handle: str,
    slugify: Slugifier,
) -> TagGroup:
    """Rewrite tag fields in place and build the tag -> record keys index."""
    tag_group: TagGroup = {}

    for key, data in files.items():
        if not data:
            continue

        value = data.get(handle)
        if not value:
            continue

        tags = normalize_tags(parse_tag_field(value), slugify)
        data[handle] = tags

        for tag in tags:
            tag_group.setdefault(tag["name"], []).append(key)

    logger.debug(
        "tag_index_built",
        handle=handle,
        tags=len(tag_group),
        memberships=sum(len(keys) for keys in tag_group.values()),
    )
    return tag_group


__all__ = ["TagGroup", "parse_tag_field", "normalize_tags", "index_tags"]
