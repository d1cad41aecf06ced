"""Tests for TagCatalog."""

import logging

import pytest

from buildtag.errors import RepositoryReadError
from buildtag.infra import InMemoryHistory
from buildtag.services import TagCatalog


class BrokenHistory(InMemoryHistory):
    def tags(self):
        raise OSError("object database corrupt")


class TestTagCatalog:

    def test_tags_sorted_by_name(self):
        history = InMemoryHistory()
        history.commit("c1", authored_at=100)
        history.tag("v1.0.2-debug", "c1")
        history.tag("v1.0.1-debug", "c1")

        catalog = TagCatalog.read(history)
        assert [t.name for t in catalog] == ["v1.0.1-debug", "v1.0.2-debug"]
        assert len(catalog) == 2

    def test_lightweight_tag_takes_commit_time(self):
        history = InMemoryHistory()
        history.commit("c1", authored_at=1234)
        history.tag("v1.0.1-debug", "c1")

        tag = TagCatalog.read(history).tags[0]
        assert tag.created_at == 1234
        assert not tag.annotated
        assert tag.message is None

    def test_annotated_tag_keeps_tag_time_and_message(self):
        history = InMemoryHistory()
        history.commit("c1", authored_at=100)
        history.tag("v1.0.1-debug", "c1", message="First build", created_at=500)

        tag = TagCatalog.read(history).tags[0]
        assert tag.annotated
        assert tag.created_at == 500
        assert tag.message == "First build"

    def test_annotated_tag_without_time_falls_back_to_commit(self):
        history = InMemoryHistory()
        history.commit("c1", authored_at=100)
        history.tag("v1.0.1-debug", "c1", message="First build")

        assert TagCatalog.read(history).tags[0].created_at == 100

    def test_unretrievable_commit_dropped_with_warning(self, caplog):
        history = InMemoryHistory()
        history.commit("c1", authored_at=100)
        history.commit("gone", parents=["c1"], authored_at=200)
        history.commit("c2", parents=["c1"], authored_at=300)
        history.tag("v1.0.1-debug", "c1")
        history.tag("v1.0.2-debug", "gone")
        history.prune("gone")

        with caplog.at_level(logging.WARNING):
            catalog = TagCatalog.read(history)

        assert [t.name for t in catalog] == ["v1.0.1-debug"]
        assert "v1.0.2-debug" in caplog.text

    def test_unreachable_but_retrievable_commit_kept(self):
        history = InMemoryHistory()
        history.commit("c1", authored_at=100)
        history.commit("amended", parents=["c1"], authored_at=200)
        history.commit("c2", parents=["c1"], authored_at=300)
        history.tag("v1.0.2-debug", "amended")

        catalog = TagCatalog.read(history)
        assert [t.commit_id for t in catalog] == ["amended"]
        assert catalog.commit_ids == ("amended",)

    def test_commit_ids_are_distinct(self):
        history = InMemoryHistory()
        history.commit("c1")
        history.tag("a", "c1")
        history.tag("b", "c1")
        assert TagCatalog.read(history).commit_ids == ("c1",)

    def test_read_failure_wrapped(self):
        history = BrokenHistory()
        with pytest.raises(RepositoryReadError, match="object database corrupt") as exc_info:
            TagCatalog.read(history)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_empty_repository(self):
        assert len(TagCatalog.read(InMemoryHistory())) == 0
