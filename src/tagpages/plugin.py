"""
tag-pages runner - index tags and build tag pages for every configuration entry.

Manifesto:
    One call runs every configured entry, strictly in order, against the same
    record store and metadata. Each entry gets a fresh ``TagGroup`` that is
    cleared when the entry finishes, so running again over a long-lived store
    (watch mode re-runs) never accumulates stale tag membership.

Architecture:
    ::

        TagPages([options, ...]).run(files, metadata, done)
              │
              ├──► for each entry (in order):
              │         │
              │         ├──► index_tags()   → TagGroup
              │         ├──► paginate()     → pages in files, listings in metadata
              │         └──► TagGroup.clear()
              │
              ├──► done()                   (once, after every entry)
              └──► TagPagesResult

Examples:
    >>> files = {"a.md": {"title": "B", "tags": "x, y"}, "b.md": {"title": "A", "tags": "x"}}
    >>> metadata = {}
    >>> result = TagPages({"perPage": 0}).run(files, metadata)
    >>> [p["title"] for p in files["tags/x/index.html"]["pagination"]["files"]]
    ['A', 'B']
    >>> result.pages
    2

Tags:
    runner, plugin, tag-pages, lifecycle
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, MutableMapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from tagpages.config import TagPagesOptions, normalize_options
from tagpages.core.errors import TagPagesError
from tagpages.core.logging import LogContext, get_logger
from tagpages.indexer import index_tags
from tagpages.pagination import paginate

logger = get_logger(__name__)


class RunStatus(str, Enum):
    """Run status."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class EntryResult:
    """What one configuration entry produced."""

    index: int
    metadata_key: str
    handle: str
    tags: int = 0
    pages: int = 0
    paths: list[str] = field(default_factory=list)
    collisions: list[str] = field(default_factory=list)
    built: list[dict[str, Any]] = field(default_factory=list, repr=False)


@dataclass
class TagPagesResult:
    """Result of running every configuration entry."""

    status: RunStatus
    started_at: datetime
    completed_at: datetime | None = None
    entries: list[EntryResult] = field(default_factory=list)
    metadata: MutableMapping[str, Any] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> float | None:
        """Duration in seconds if completed."""
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    @property
    def pages(self) -> int:
        """Pages written across all entries."""
        return sum(entry.pages for entry in self.entries)


class TagPages:
    """Tag index and tag page generation over an in-memory record store."""

    name: str = "tag-pages"
    description: str = "Normalize record tags and build paginated tag pages"

    def __init__(
        self,
        options: TagPagesOptions | Mapping[str, Any] | Iterable[Any] | None = None,
    ) -> None:
        self.options = normalize_options(options)

    def run(
        self,
        files: MutableMapping[str, Any],
        metadata: MutableMapping[str, Any] | None = None,
        done: Callable[[], None] | None = None,
    ) -> TagPagesResult:
        """Run every configuration entry against ``files``.

        Args:
            files: Record store, identifier -> record; updated in place
            metadata: Shared metadata; tag listings are merged into it
            done: Called once after every entry has finished

        Raises:
            TagPagesError: If an entry fails; ``done`` is not called
        """
        metadata = {} if metadata is None else metadata
        result = TagPagesResult(
            status=RunStatus.RUNNING,
            started_at=datetime.now(UTC),
            metadata=metadata,
        )

        for index, options in enumerate(self.options):
            result.entries.append(self.run_entry(index, options, files, metadata))

        result.status = RunStatus.COMPLETED
        result.completed_at = datetime.now(UTC)
        logger.info(
            "tag_pages_completed",
            entries=len(result.entries),
            pages=result.pages,
            duration_seconds=result.duration_seconds,
        )

        if done is not None:
            done()
        return result

    __call__ = run

    def run_entry(
        self,
        index: int,
        options: TagPagesOptions,
        files: MutableMapping[str, Any],
        metadata: MutableMapping[str, Any],
    ) -> EntryResult:
        """Index and paginate one configuration entry."""
        slugify = options.slugifier

        with LogContext(entry=index, metadata_key=options.metadata_key):
            tag_group = index_tags(files, options.handle, slugify)
            try:
                stats = paginate(tag_group, files, metadata, options, slugify)
            except TagPagesError as e:
                e.with_context(entry=index, metadata_key=options.metadata_key)
                raise
            finally:
                tag_group.clear()

            logger.info("tag_pass_completed", tags=stats.tags, pages=stats.pages)

        return EntryResult(
            index=index,
            metadata_key=options.metadata_key,
            handle=options.handle,
            tags=stats.tags,
            pages=stats.pages,
            paths=stats.paths,
            collisions=stats.collisions,
            built=stats.built,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(entries={len(self.options)})"


def tag_pages(
    options: TagPagesOptions | Mapping[str, Any] | Iterable[Any] | None = None,
) -> TagPages:
    """Create a runner for one options entry or a list of them."""
    return TagPages(options)


__all__ = ["RunStatus", "EntryResult", "TagPagesResult", "TagPages", "tag_pages"]
