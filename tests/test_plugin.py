"""Tests for tagpages.plugin: running configuration entries end to end."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from structlog.testing import capture_logs

from tagpages import TagPages, tag_pages
from tagpages.core.errors import InvalidConfigError, PathCollisionError
from tagpages.plugin import RunStatus

pytestmark = pytest.mark.integration


class TestTagPagesInit:
    def test_single_mapping_becomes_one_entry(self):
        runner = TagPages({"perPage": 3})
        assert len(runner.options) == 1
        assert runner.options[0].per_page == 3

    def test_none_uses_defaults(self):
        runner = tag_pages()
        assert runner.options[0].path == "tags/:tag/index.html"

    def test_list_of_entries(self):
        runner = TagPages([{"handle": "tags"}, {"handle": "category", "metadataKey": "categories"}])
        assert [o.handle for o in runner.options] == ["tags", "category"]

    def test_invalid_entry_reports_index(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            TagPages([{}, {"onCollision": "merge"}])
        assert exc_info.value.context.entry == 1

    def test_site_config_keys_ignored(self, two_posts):
        result = TagPages({"perPage": 2, "pattern": "posts/*.md"}).run(two_posts)
        assert result.status == RunStatus.COMPLETED
        assert "tags/x/index.html" in two_posts

    def test_repr(self):
        assert repr(TagPages([{}, {}])) == "TagPages(entries=2)"


class TestTagPagesRun:
    def test_result(self, two_posts):
        metadata: dict = {}
        result = TagPages().run(two_posts, metadata)
        assert result.status == RunStatus.COMPLETED
        assert result.completed_at is not None
        assert result.duration_seconds >= 0
        assert result.metadata is metadata
        assert result.pages == 2
        (entry,) = result.entries
        assert entry.tags == 2
        assert entry.paths == ["tags/x/index.html", "tags/y/index.html"]

    def test_metadata_defaults_to_new_dict(self, two_posts):
        result = TagPages().run(two_posts)
        assert set(result.metadata["tags"]) == {"x", "y"}

    def test_callable(self, two_posts):
        runner = TagPages()
        runner(two_posts)
        assert "tags/x/index.html" in two_posts

    def test_done_called_once_after_all_entries(self, two_posts):
        done = MagicMock()
        runner = TagPages([{}, {"metadataKey": "again", "path": "again/:tag.html"}])
        runner.run(two_posts, {}, done)
        done.assert_called_once_with()
        assert "again/x.html" in two_posts

    def test_done_not_called_on_failure(self):
        done = MagicMock()
        files = {"a": {"tags": "Food"}, "b": {"tags": "food"}}
        with pytest.raises(PathCollisionError) as exc_info:
            TagPages({"onCollision": "error", "metadataKey": "topics"}).run(files, {}, done)
        done.assert_not_called()
        assert exc_info.value.context.entry == 0
        assert exc_info.value.context.metadata_key == "topics"

    def test_entries_run_in_order_sharing_store(self):
        files = {
            "a": {"title": "A", "tags": "x", "category": "Guides"},
            "b": {"title": "B", "category": "Guides"},
        }
        metadata: dict = {}
        TagPages(
            [
                {},
                {
                    "handle": "category",
                    "metadataKey": "categories",
                    "path": "categories/:tag/index.html",
                },
            ]
        ).run(files, metadata)
        assert files["a"]["tags"] == [{"name": "x", "slug": "x"}]
        assert files["a"]["category"] == [{"name": "Guides", "slug": "guides"}]
        assert list(metadata) == ["tags", "categories"]
        page = files["categories/guides/index.html"]
        assert page["pagination"]["files"] == [files["a"], files["b"]]

    def test_rerun_does_not_accumulate_membership(self, news_store):
        runner = TagPages({"perPage": 2})
        metadata: dict = {}
        first = runner.run(news_store, metadata)
        second = runner.run(news_store, metadata)
        assert first.entries[0].paths == second.entries[0].paths
        assert len(metadata["tags"]["news"]) == 5
        assert len(news_store["tags/news/3/index.html"]["pagination"]["files"]) == 1

    def test_logs_completion(self, two_posts):
        with capture_logs() as logs:
            TagPages().run(two_posts)
        events = [log["event"] for log in logs]
        assert "tag_pass_completed" in events
        assert events[-1] == "tag_pages_completed"

    def test_food_scenario(self):
        files = {"a": {"tags": "  Food  "}, "b": {"tags": "food"}}
        metadata: dict = {}
        TagPages().run(files, metadata)
        assert files["a"]["tags"] == [{"name": "Food", "slug": "food"}]
        assert list(metadata["tags"]) == ["Food", "food"]
