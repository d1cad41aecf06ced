"""Tests for ChronologyIndex."""

import pytest

from buildtag.domain import Commit
from buildtag.errors import RepositoryReadError
from buildtag.infra import InMemoryHistory
from buildtag.services import ChronologyIndex


class TestChronologyIndex:

    def test_linear_history(self, linear_history):
        index = ChronologyIndex.build(linear_history([], [], []))
        assert index.position("c1") < index.position("c2") < index.position("c3")
        assert index.tip == "c3"
        assert len(index) == 3

    def test_ancestry_beats_clock_skew(self):
        history = InMemoryHistory()
        history.commit("c1", authored_at=1000)
        history.commit("c2", parents=["c1"], authored_at=10)

        index = ChronologyIndex.build(history)
        assert index.is_later("c2", "c1")

    def test_merge_after_both_parents(self):
        history = InMemoryHistory()
        history.commit("base", authored_at=100)
        history.commit("feature", parents=["base"], authored_at=300)
        history.commit("main", parents=["base"], authored_at=200)
        history.commit("merge", parents=["main", "feature"], authored_at=250)

        index = ChronologyIndex.build(history)
        assert index.position("merge") > index.position("feature")
        assert index.position("merge") > index.position("main")

    def test_siblings_ordered_by_author_time(self):
        history = InMemoryHistory()
        history.commit("base", authored_at=100)
        history.commit("late", parents=["base"], authored_at=500)
        history.commit("early", parents=["base"], authored_at=200)
        history.commit("merge", parents=["late", "early"], authored_at=600)

        index = ChronologyIndex.build(history)
        assert index.is_later("late", "early")

    def test_equal_time_ordered_by_id(self):
        index = ChronologyIndex.from_commits([
            Commit("b", authored_at=5),
            Commit("a", authored_at=5),
        ])
        assert index.is_later("b", "a")

    def test_equal_author_time_ordered_by_commit_time(self):
        index = ChronologyIndex.from_commits([
            Commit("aa-amended", authored_at=5, committed_at=9),
            Commit("zz-original", authored_at=5, committed_at=6),
        ])
        assert index.is_later("aa-amended", "zz-original")

    def test_author_time_before_commit_time(self):
        index = ChronologyIndex.from_commits([
            Commit("rebased", authored_at=3, committed_at=50),
            Commit("later", authored_at=4, committed_at=4),
        ])
        assert index.is_later("later", "rebased")

    def test_rewritten_commit_indexed_with_extra_commits(self):
        history = InMemoryHistory()
        history.commit("c1", authored_at=100)
        history.commit("old", parents=["c1"], authored_at=200)
        history.commit("new", parents=["c1"], authored_at=300)

        index = ChronologyIndex.build(history, extra_commits=["old"])
        assert "old" in index
        assert index.is_later("old", "c1")
        assert index.is_later("new", "old")

    def test_unreachable_commit_not_indexed_without_extra(self):
        history = InMemoryHistory()
        history.commit("c1", authored_at=100)
        history.commit("old", parents=["c1"], authored_at=200)
        history.commit("new", parents=["c1"], authored_at=300)

        index = ChronologyIndex.build(history)
        assert "old" not in index
        with pytest.raises(RepositoryReadError, match="old"):
            index.position("old")

    def test_build_from_ref(self):
        history = InMemoryHistory()
        history.commit("c1", authored_at=100)
        history.commit("c2", parents=["c1"], authored_at=200)
        history.set_ref("release", "c1")

        index = ChronologyIndex.build(history, "release")
        assert index.tip == "c1"
        assert "c2" not in index

    def test_commit_carries_position(self, linear_history):
        index = ChronologyIndex.build(linear_history([], []))
        commit = index.commit("c2")
        assert commit.position == index.position("c2")
        assert commit.parents == ("c1",)

    def test_deterministic(self):
        def build():
            history = InMemoryHistory()
            history.commit("r", authored_at=1)
            for name, t in [("x", 5), ("y", 5), ("z", 3)]:
                history.commit(name, parents=["r"], authored_at=t, move_head=False)
            history.commit("m", parents=["x", "y", "z"], authored_at=9)
            index = ChronologyIndex.build(history)
            return [index.position(s) for s in "rxyzm"]

        assert build() == build()
        assert build() == [0, 2, 3, 1, 4]

    def test_unknown_ref(self):
        history = InMemoryHistory()
        history.commit("c1")
        with pytest.raises(RepositoryReadError):
            ChronologyIndex.build(history, "nope")

    def test_parents_outside_set_ignored(self):
        # Shallow clone: the parent object is missing
        index = ChronologyIndex.from_commits([Commit("c2", parents=("c1",), authored_at=1)])
        assert index.position("c2") == 0
