"""
Structured error types for tag-pages.

A small typed hierarchy with metadata for reporting. Each error carries a
category, a structured context (configuration entry, tag, page path)
and an optional chained cause, so a failed pass can be logged with enough
detail to find the offending record.

Manifesto:
    - **Typed Error Hierarchy:** One family per failure domain
    - **Rich Context:** Errors carry entry/tag/path metadata for logging
    - **Error Chaining:** Preserve the original exception as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                    TagPagesError                          │
        │          (category, context, cause)                       │
        ├──────────────────────────────────────────────────────────┤
        │  ConfigError          ValidationError     StorageError   │
        │  (CONFIG)             (VALIDATION)        (STORAGE)      │
        │       │                    │                   │          │
        │  InvalidConfigError   SortKeyError     PathCollisionError│
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = SortKeyError("cannot order records")
    >>> error.with_context(tag="news", sort_by="date")
    SortKeyError('cannot order records', category=VALIDATION)
    >>> error.context.tag
    'news'

Tags:
    error-handling, exception-hierarchy, error-context, tag-pages

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    CONFIG = "CONFIG"             # Invalid options, unknown slug settings
    VALIDATION = "VALIDATION"     # Record data the engine cannot order
    STORAGE = "STORAGE"           # Record store conflicts
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only fields that are set end up in ``to_dict()``; anything else goes into
    ``metadata``.

    Attributes:
        entry: Index of the configuration entry being processed
        metadata_key: Metadata key of that entry
        tag: Display name of the tag being processed
        path: Page identifier involved
        metadata: Additional key-value pairs
    """

    entry: int | None = None
    metadata_key: str | None = None
    tag: str | None = None
    path: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["entry", "metadata_key", "tag", "path"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class TagPagesError(Exception):
    """
    Base exception for all tag-pages errors.

    Subclasses set ``default_category``; callers may override it per
    instance.

    Examples:
        >>> error = TagPagesError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> try:
        ...     raise TypeError("'<' not supported")
        ... except TypeError as e:
        ...     error = TagPagesError("Sort failed", cause=e)
        >>> error.cause
        TypeError("'<' not supported")
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        # Chain the cause if provided
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TagPagesError:
        """
        Add context to this error (fluent API).

        Usage:
            raise PathCollisionError("Path reused").with_context(
                tag="news",
                path="tags/news/index.html",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(TagPagesError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid (bad type, unknown slug setting)."""

    pass


# =============================================================================
# DATA ERRORS
# =============================================================================


class ValidationError(TagPagesError):
    """Record data the engine cannot process."""

    default_category = ErrorCategory.VALIDATION


class SortKeyError(ValidationError):
    """Two records carry sort values that have no natural ordering."""

    pass


# =============================================================================
# STORE ERRORS
# =============================================================================


class StorageError(TagPagesError):
    """Record store conflict."""

    default_category = ErrorCategory.STORAGE


class PathCollisionError(StorageError):
    """A generated page identifier was already written in the same pass."""

    pass


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TagPagesError",
    "ConfigError",
    "InvalidConfigError",
    "ValidationError",
    "SortKeyError",
    "StorageError",
    "PathCollisionError",
]
