"""Shared fixtures for buildtag tests."""

import pytest

from buildtag.infra import InMemoryHistory
from buildtag.services import CandidateSelector, RepositoryView, TagParser, compile_pattern


@pytest.fixture
def linear_history():
    """
    Factory for a linear history: one commit per entry, each entry a list
    of tag names on that commit. Commits are c1, c2, ... authored 100s apart.
    """
    def _build(*tags_per_commit):
        history = InMemoryHistory()
        parent = None
        for index, tags in enumerate(tags_per_commit, 1):
            sha = f"c{index}"
            history.commit(sha, parents=[parent] if parent else [], authored_at=index * 100)
            for name in tags:
                history.tag(name, sha)
            parent = sha
        return history
    return _build


@pytest.fixture
def select():
    """Run catalog, chronology, parser and selector for one variant."""
    def _select(history, variant, tokens=None, ref="HEAD"):
        view = RepositoryView.read(history, ref)
        tags = TagParser(compile_pattern(tokens)).parse_variant(view.catalog.tags, variant)
        return CandidateSelector(view.chronology).select(tags, variant)
    return _select
