"""
Shared pytest fixtures for tag-pages tests.

This module provides:
- Small record stores used across indexer, pagination and runner tests
- A logging context reset so bound context never leaks between tests

Usage:
    def test_something(two_posts):
        TagPages({"perPage": 0}).run(two_posts)
"""

import sys
from pathlib import Path
from typing import Any, Callable, Generator

import pytest
import structlog

# Ensure tagpages package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tagpages.core.logging import clear_context


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def clean_log_context() -> Generator[None, None, None]:
    """Clear structlog context and configuration around each test."""
    clear_context()
    yield
    clear_context()
    structlog.reset_defaults()


# =============================================================================
# Record Store Fixtures
# =============================================================================


@pytest.fixture
def two_posts() -> dict[str, Any]:
    """Two records sharing tag ``x``; ``a`` also carries ``y``."""
    return {
        "a": {"title": "B", "tags": "x, y"},
        "b": {"title": "A", "tags": "x"},
    }


def _make_news_store(count: int, tag: str = "news") -> dict[str, Any]:
    return {
        f"posts/{i:02d}.md": {"title": f"post-{i:02d}", "tags": [tag]}
        for i in range(1, count + 1)
    }


@pytest.fixture
def make_news_store() -> Callable[..., dict[str, Any]]:
    """Factory: ``count`` records titled ``post-01``..., all tagged ``tag``."""
    return _make_news_store


@pytest.fixture
def news_store() -> dict[str, Any]:
    """Five records tagged ``news``."""
    return _make_news_store(5)
