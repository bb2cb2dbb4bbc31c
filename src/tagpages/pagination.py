"""
Pagination builder - second half of a tag-pages pass.

For every tag in the ``TagGroup`` (in first-seen order) the builder resolves
the tagged records, sorts them, publishes the sorted listing into metadata,
cuts the listing into pages and writes one page record per slice into the
store.

Manifesto:
    Pages are built completely before any of them reaches the store. Each
    page of a tag is linked to its neighbours and then handed the same
    immutable tuple of all the tag's pages, so nothing downstream can observe
    a half-built ``pagination.pages``.

Architecture:
    ::

        TagGroup {"news": ["a", "b", ...]}
              │
              ├──► sort_records()      missing values first, stable, then reverse
              │
              ├──► metadata[metadata_key]["news"] = TagListing(..., url_safe="news")
              │
              ├──► build_pages()       slice, render_path(), previous/next, pages tuple
              │
              └──► files[page["path"]] = page   (collision policy applies)

Page record::

    {
        "layout": "partials/tag.hbt",
        "contents": b"",
        "tag": "news",
        "path": "tags/news/2/index.html",
        "pagination": {
            "num": 2,
            "tag": "news",
            "files": [...],          # this page's slice of sorted records
            "pages": (p1, p2, p3),   # every page of the tag
            "previous": p1,
            "next": p3,
        },
    }

Tags:
    pagination, sorting, tag-pages, page-generation
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, MutableMapping
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any

from tagpages.config import TagPagesOptions
from tagpages.core.errors import PathCollisionError, SortKeyError
from tagpages.core.logging import get_logger
from tagpages.core.slug import Slugifier
from tagpages.indexer import TagGroup

logger = get_logger(__name__)


class TagListing(list):
    """Sorted records of one tag, as published into metadata.

    Behaves like the plain list of records; ``url_safe`` carries the tag's
    slug so templates can link to the tag page.
    """

    def __init__(self, records: Iterable[Any] = (), url_safe: str = ""):
        super().__init__(records)
        self.url_safe = url_safe

    @property
    def urlSafe(self) -> str:  # noqa: N802
        """Alias of ``url_safe`` under the name templates look up."""
        return self.url_safe

    def __repr__(self) -> str:
        return f"TagListing({list.__repr__(self)}, url_safe={self.url_safe!r})"


@dataclass
class PaginationStats:
    """What one pagination pass produced."""

    tags: int = 0
    pages: int = 0
    paths: list[str] = field(default_factory=list)
    collisions: list[str] = field(default_factory=list)
    built: list[dict[str, Any]] = field(default_factory=list, repr=False)


def compare_records(a: Mapping[str, Any], b: Mapping[str, Any], sort_by: str) -> int:
    """Three-way comparison of two records on ``sort_by``.

    Records without a (truthy) value come first; two such records compare
    equal so their order is kept.
    """
    a_value = a.get(sort_by)
    b_value = b.get(sort_by)
    if not a_value and not b_value:
        return 0
    if not a_value:
        return -1
    if not b_value:
        return 1
    if b_value > a_value:
        return -1
    if a_value > b_value:
        return 1
    return 0


def sort_records(
    records: Iterable[Mapping[str, Any]],
    sort_by: str,
    reverse: bool = False,
) -> list[Any]:
    """Sort records on ``sort_by``; ``reverse`` flips the sorted result.

    Raises:
        TypeError: If two values have no natural ordering
    """
    ordered = sorted(records, key=cmp_to_key(lambda a, b: compare_records(a, b, sort_by)))
    if reverse:
        ordered.reverse()
    return ordered


def page_count(total: int, per_page: int) -> int:
    """Number of pages for ``total`` records; ``per_page`` 0 means one page.

    A negative ``per_page`` yields no pages.
    """
    if total == 0 or per_page < 0:
        return 0
    size = per_page or total
    return math.ceil(total / size)


def render_path(template: str, num: int, slug: str) -> str:
    """Fill ``:num`` and ``:tag`` into an identifier template."""
    return template.replace(":num", str(num)).replace(":tag", slug)


def build_pages(
    tag: str,
    records: list[Any],
    options: TagPagesOptions,
    slugify: Slugifier,
) -> list[dict[str, Any]]:
    """Build the linked page records for one tag's sorted records."""
    slug = slugify(tag)
    size = options.per_page or len(records)
    pages: list[dict[str, Any]] = []

    for index in range(page_count(len(records), options.per_page)):
        num = index + 1
        page: dict[str, Any] = {"layout": options.layout}
        if options.template is not None:
            page["template"] = options.template
        page["contents"] = b""
        page["tag"] = tag
        page["pagination"] = {
            "num": num,
            "tag": tag,
            "files": records[index * size:num * size],
        }
        page["path"] = render_path(options.template_for(index), num, slug)

        if pages:
            previous = pages[-1]
            page["pagination"]["previous"] = previous
            previous["pagination"]["next"] = page

        pages.append(page)

    sequence = tuple(pages)
    for page in pages:
        page["pagination"]["pages"] = sequence

    return pages


def _listings(metadata: MutableMapping[str, Any], key: str) -> MutableMapping[str, Any]:
    listings = metadata.get(key)
    if not listings:
        listings = {}
        metadata[key] = listings
    return listings


def paginate(
    tag_group: TagGroup,
    files: MutableMapping[str, Any],
    metadata: MutableMapping[str, Any],
    options: TagPagesOptions,
    slugify: Slugifier,
) -> PaginationStats:
    """Sort, publish and paginate every tag in ``tag_group``.

    Raises:
        SortKeyError: If a tag's records cannot be ordered on ``sort_by``
        PathCollisionError: If ``on_collision`` is ``error`` and two pages
            resolve to the same identifier
    """
    stats = PaginationStats()
    listings = None if options.skip_metadata else _listings(metadata, options.metadata_key)
    written: dict[str, str] = {}

    for tag, keys in tag_group.items():
        records = [files[key] for key in keys]
        try:
            posts = sort_records(records, options.sort_by, options.reverse)
        except TypeError as e:
            raise SortKeyError(
                f"Cannot order records of tag {tag!r} by {options.sort_by!r}",
                cause=e,
            ).with_context(tag=tag, sort_by=options.sort_by) from e

        if listings is not None:
            listings[tag] = TagListing(posts, url_safe=slugify(tag))

        pages = build_pages(tag, posts, options, slugify)

        claimed: set[str] = set()
        for page in pages:
            path = page["path"]
            if path in written or path in claimed:
                _collision(path, tag, written.get(path, tag), options.on_collision)
                stats.collisions.append(path)
            claimed.add(path)

        for page in pages:
            files[page["path"]] = page
            written[page["path"]] = tag
            stats.paths.append(page["path"])
            stats.built.append(page)

        stats.tags += 1
        stats.pages += len(pages)
        logger.debug("tag_pages_built", tag=tag, records=len(posts), pages=len(pages))

    return stats


def _collision(path: str, tag: str, previous_tag: str, policy: str) -> None:
    if policy == "error":
        raise PathCollisionError(
            f"Page path {path!r} of tag {tag!r} was already written for tag {previous_tag!r}"
        ).with_context(tag=tag, path=path, previous_tag=previous_tag)
    if policy == "warn":
        logger.warning("page_path_collision", path=path, tag=tag, previous_tag=previous_tag)


__all__ = [
    "TagListing",
    "PaginationStats",
    "compare_records",
    "sort_records",
    "page_count",
    "render_path",
    "build_pages",
    "paginate",
]
