"""
Tag slugs - turn a tag display name into a URL-safe token.

The engine only needs a ``Slugifier``: any callable mapping one string to
another, deterministically. ``make_slugifier`` builds one from the ``slug``
option, which is either such a callable or a mapping of options for the
built-in ``slugify``.

Built-in modes:

========  =====  ========================================  ============
mode      lower  kept characters                           removed
========  =====  ========================================  ============
rfc3986   yes    ``A-Z a-z 0-9 _ . ~ -``                   none
pretty    yes    the above plus ``$ * + ( ) ' " ! : @``    ``.``
========  =====  ========================================  ============

Accented letters are folded to ASCII, a handful of symbols become words
(``&`` -> ``and``), anything else outside the kept set is dropped, and runs of
whitespace or dashes collapse into ``replacement``.

Examples:
    >>> slugify("Rock & Roll")
    'rock-and-roll'
    >>> slugify("Café  Society")
    'cafe-society'
    >>> slugify("C++")
    'c'
    >>> make_slugifier({"mode": "pretty"})("Hello World!")
    'hello-world!'

Tags:
    slug, normalization, url-safe, tag-pages
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable, Mapping
from functools import partial
from typing import Any, Protocol

from tagpages.core.errors import InvalidConfigError


class Slugifier(Protocol):
    """Deterministic ``display name -> token`` mapping."""

    def __call__(self, value: str) -> str: ...


SYMBOLS = {
    "&": "and",
    "|": "or",
    "<": "less",
    ">": "greater",
    "%": "percent",
    "$": "dollar",
    "♥": "love",
    "∞": "infinity",
}

MODES: dict[str, dict[str, Any]] = {
    "rfc3986": {
        "replacement": "-",
        "lower": True,
        "symbols": True,
        "remove": None,
    },
    "pretty": {
        "replacement": "-",
        "lower": True,
        "symbols": True,
        "remove": r"[.]",
    },
}

_DISALLOWED = {
    "rfc3986": re.compile(r"[^\w\s\-.~]", re.ASCII),
    "pretty": re.compile(r"[^\w\s$*+~.()'\"!\-:@]", re.ASCII),
}

_SEPARATORS = re.compile(r"[-\s]+")

OPTION_NAMES = frozenset({"mode", "replacement", "lower", "symbols", "remove"})


def _fold(char: str) -> str:
    decomposed = unicodedata.normalize("NFKD", char)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def slugify(
    value: str,
    *,
    mode: str = "rfc3986",
    replacement: str | None = None,
    lower: bool | None = None,
    symbols: bool | None = None,
    remove: str | re.Pattern[str] | None = None,
) -> str:
    """Return the URL-safe token for ``value``.

    Args:
        value: Display string to normalize
        mode: ``rfc3986`` or ``pretty``
        replacement: Separator that replaces whitespace runs
        lower: Lowercase the result
        symbols: Spell out symbols such as ``&``
        remove: Extra pattern of characters to drop

    Raises:
        InvalidConfigError: If ``mode`` is unknown
    """
    if mode not in MODES:
        raise InvalidConfigError(
            f"Unknown slug mode {mode!r}; expected one of {sorted(MODES)}"
        )
    defaults = MODES[mode]
    replacement = defaults["replacement"] if replacement is None else replacement
    lower = defaults["lower"] if lower is None else lower
    symbols = defaults["symbols"] if symbols is None else symbols
    remove = defaults["remove"] if remove is None else remove

    chars = []
    for char in str(value):
        if symbols and char in SYMBOLS:
            chars.append(f" {SYMBOLS[char]} ")
        else:
            chars.append(_fold(char))
    result = _DISALLOWED[mode].sub("", "".join(chars))

    if remove:
        result = re.sub(remove, "", result)

    result = _SEPARATORS.sub(replacement, result.strip())
    if replacement:
        result = result.strip(replacement)

    return result.lower() if lower else result


def make_slugifier(option: Callable[[str], str] | Mapping[str, Any] | None) -> Slugifier:
    """Build the engine's slugifier from the ``slug`` option.

    A callable is used as-is. A mapping is checked up front and bound to
    ``slugify``. ``None`` means the ``rfc3986`` defaults.

    Raises:
        InvalidConfigError: For unknown option names or an unusable value
    """
    if option is None:
        return partial(slugify, mode="rfc3986")
    if callable(option):
        return option
    if isinstance(option, Mapping):
        unknown = set(option) - OPTION_NAMES
        if unknown:
            raise InvalidConfigError(
                f"Unknown slug options: {', '.join(sorted(unknown))}"
            ).with_context(allowed=sorted(OPTION_NAMES))
        mode = option.get("mode", "rfc3986")
        if mode not in MODES:
            raise InvalidConfigError(
                f"Unknown slug mode {mode!r}; expected one of {sorted(MODES)}"
            )
        return partial(slugify, **dict(option))
    raise InvalidConfigError(
        f"slug must be a mapping of options or a callable, got {type(option).__name__}"
    )


__all__ = ["Slugifier", "slugify", "make_slugifier", "MODES", "SYMBOLS"]
