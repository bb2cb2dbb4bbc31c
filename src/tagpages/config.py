"""
Options for one tag-pages configuration entry.

The engine may be configured with a single options mapping or a list of them;
each entry becomes an independent pass over the same record store. Option
names follow the camelCase spelling used in site configuration files
(``pathPage``, ``perPage``) and are also accepted in snake_case.

Falsy values for the required-looking options (``path``, ``layout``,
``handle``, ``metadataKey``, ``sortBy``, ``slug``) fall back to their
defaults. ``pathPage`` is the exception: leaving it out keeps the default,
while an explicit ``null``/empty string sends every page through ``path``.

Example YAML::

    - metadataKey: categories
      handle: category
      path: "categories/:tag/index.html"
      pathPage: "categories/:tag/page/:num/index.html"
      perPage: 10
      sortBy: date
      reverse: true

Tags:
    configuration, pydantic, options, tag-pages
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from tagpages.core.errors import InvalidConfigError
from tagpages.core.slug import Slugifier, make_slugifier

DEFAULT_PATH = "tags/:tag/index.html"
DEFAULT_PATH_PAGE = "tags/:tag/:num/index.html"
DEFAULT_LAYOUT = "partials/tag.hbt"
DEFAULT_HANDLE = "tags"
DEFAULT_METADATA_KEY = "tags"
DEFAULT_SORT_BY = "title"


def _default_slug() -> dict[str, Any]:
    return {"mode": "rfc3986"}


_FALSY_DEFAULTS: dict[str, Callable[[], Any]] = {
    "path": lambda: DEFAULT_PATH,
    "layout": lambda: DEFAULT_LAYOUT,
    "handle": lambda: DEFAULT_HANDLE,
    "metadata_key": lambda: DEFAULT_METADATA_KEY,
    "sort_by": lambda: DEFAULT_SORT_BY,
    "slug": _default_slug,
    "per_page": lambda: 0,
    "reverse": lambda: False,
    "skip_metadata": lambda: False,
}


class TagPagesOptions(BaseModel):
    """Validated options for one configuration entry."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    path: str = Field(default=DEFAULT_PATH, description="Identifier template for page 1")
    path_page: str | None = Field(
        default=DEFAULT_PATH_PAGE,
        alias="pathPage",
        description="Identifier template for pages after the first",
    )
    layout: Any = Field(default=DEFAULT_LAYOUT, description="Copied onto every page")
    template: Any = Field(default=None, description="Legacy template name copied onto every page")
    handle: str = Field(default=DEFAULT_HANDLE, description="Record field holding tags")
    metadata_key: str = Field(
        default=DEFAULT_METADATA_KEY,
        alias="metadataKey",
        description="Metadata key for the tag index",
    )
    sort_by: str = Field(default=DEFAULT_SORT_BY, alias="sortBy", description="Record field to sort on")
    reverse: bool = Field(default=False, description="Reverse the sorted records")
    per_page: int = Field(default=0, alias="perPage", description="Records per page, 0 for one page")
    skip_metadata: bool = Field(
        default=False,
        alias="skipMetadata",
        description="Do not publish the tag index into metadata",
    )
    slug: Callable[[str], str] | dict[str, Any] = Field(
        default_factory=_default_slug,
        description="Slug options or a replacement slug function",
    )
    on_collision: Literal["overwrite", "warn", "error"] = Field(
        default="overwrite",
        alias="onCollision",
        description="What to do when two pages resolve to the same identifier",
    )

    @field_validator(
        "path",
        "layout",
        "handle",
        "metadata_key",
        "sort_by",
        "slug",
        "per_page",
        "reverse",
        "skip_metadata",
        mode="before",
    )
    @classmethod
    def _falsy_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if not value:
            return _FALSY_DEFAULTS[info.field_name]()
        return value

    @field_validator("path_page", mode="before")
    @classmethod
    def _falsy_path_page(cls, value: Any) -> Any:
        return value or None

    @field_validator("slug")
    @classmethod
    def _check_slug(cls, value: Any) -> Any:
        make_slugifier(value)
        return value

    @property
    def slugifier(self) -> Slugifier:
        """Slug function configured for this entry."""
        return make_slugifier(self.slug)

    def template_for(self, index: int) -> str:
        """Identifier template for the page at zero-based ``index``."""
        if index > 0 and self.path_page:
            return self.path_page
        return self.path


def parse_options(options: TagPagesOptions | Mapping[str, Any] | None) -> TagPagesOptions:
    """Validate one options entry.

    Raises:
        InvalidConfigError: If pydantic rejects the entry
    """
    if isinstance(options, TagPagesOptions):
        return options
    try:
        return TagPagesOptions.model_validate(dict(options or {}))
    except ValidationError as e:
        raise InvalidConfigError(f"Invalid tag-pages options: {e}", cause=e) from e


def normalize_options(
    options: TagPagesOptions | Mapping[str, Any] | Iterable[Any] | None,
) -> list[TagPagesOptions]:
    """Turn a single entry or a list of entries into validated options."""
    if options is None or isinstance(options, (TagPagesOptions, Mapping)):
        return [parse_options(options)]
    if isinstance(options, (str, bytes)):
        raise InvalidConfigError(f"Expected options mapping or list, got {type(options).__name__}")
    entries = []
    for index, entry in enumerate(options):
        try:
            entries.append(parse_options(entry))
        except InvalidConfigError as e:
            raise e.with_context(entry=index)
    return entries


def load_options(path: Path | str) -> list[TagPagesOptions]:
    """Load options from a YAML or JSON file.

    The file may hold one mapping or a list of mappings.
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise InvalidConfigError(f"Invalid YAML in {path}: {e}", cause=e) from e
    return normalize_options(data)


__all__ = [
    "TagPagesOptions",
    "parse_options",
    "normalize_options",
    "load_options",
    "DEFAULT_PATH",
    "DEFAULT_PATH_PAGE",
]
