"""Tests for CandidateSelector: picking and validating the build tag."""

import pytest

from buildtag.domain import Commit, ParsedTag, RawTag
from buildtag.errors import AmbiguousBuildNumberError, ChronologyViolationError
from buildtag.infra import InMemoryHistory
from buildtag.services import CandidateSelector, ChronologyIndex


class TestScenarios:
    """End-to-end selection over in-memory histories."""

    def test_single_tag(self, linear_history, select):
        candidate = select(linear_history(["v1.0.1-debug"]), "debug")

        assert candidate.to_tag_build().to_dict() == {
            'name': "v1.0.1-debug",
            'commitSha': "c1",
            'message': None,
            'buildVersion': "1.0",
            'buildVariant': "debug",
            'buildNumber': 1,
        }

    def test_zero_build_number_is_no_candidate(self, linear_history, select):
        assert select(linear_history(["v1.0.0-debug"]), "debug") is None

    def test_two_commits(self, linear_history, select):
        candidate = select(linear_history(["v1.0.1-debug"], ["v1.0.2-debug"]), "debug")
        assert candidate.commit_id == "c2"
        assert candidate.build_number == 2

    def test_increasing_with_commit_order(self, linear_history, select):
        history = linear_history(["v1.0.206-debug"], ["v1.0.207-debug"], ["v1.0.208-debug"])
        assert select(history, "debug").build_number == 208

    def test_lower_number_after_maximum(self, linear_history, select):
        history = linear_history(
            ["v1.0.206-debug"], ["v1.0.207-debug"], ["v1.0.209-debug"], ["v1.0.208-debug"]
        )
        with pytest.raises(ChronologyViolationError) as exc_info:
            select(history, "debug")

        error = exc_info.value
        assert error.candidate_tag == "v1.0.209-debug"
        assert error.candidate_commit == "c3"
        assert error.later_tag == "v1.0.208-debug"
        assert error.later_commit == "c4"
        assert error.later_position > error.candidate_position
        assert "v1.0.209-debug" in str(error)
        assert "c4" in str(error)

    def test_no_tags(self, linear_history, select):
        assert select(linear_history([], []), "debug") is None


class TestTies:

    def test_same_number_on_different_commits(self, linear_history, select):
        history = linear_history(["v1.0.5-debug"], ["v2.0.5-debug"])
        with pytest.raises(AmbiguousBuildNumberError) as exc_info:
            select(history, "debug")

        error = exc_info.value
        assert error.build_number == 5
        assert {error.first_tag, error.second_tag} == {"v1.0.5-debug", "v2.0.5-debug"}
        assert {error.first_commit, error.second_commit} == {"c1", "c2"}

    def test_several_tags_on_one_commit(self, linear_history, select):
        history = linear_history(["v3.0.207-debug", "v2.0.209-debug", "v0.0.208-debug"])
        candidate = select(history, "debug")
        assert candidate.name == "v2.0.209-debug"

    def test_same_number_same_commit_prefers_higher_version(self, linear_history, select):
        history = linear_history(["v1.0.9-debug", "v1.10.9-debug", "v1.2.9-debug"])
        assert select(history, "debug").name == "v1.10.9-debug"

    def test_same_commit_lower_number_is_not_a_violation(self, linear_history, select):
        history = linear_history(["v1.0.1-debug"], ["v1.0.3-debug", "v1.0.2-debug"])
        assert select(history, "debug").build_number == 3


class TestFiltering:

    def test_zero_ignored_for_chronology(self, linear_history, select):
        history = linear_history(["v1.0.5-debug"], ["v1.0.0-debug"])
        assert select(history, "debug").build_number == 5

    def test_foreign_tags_ignored(self, linear_history, select):
        history = linear_history(["v1.0.1-debug", "latest"], ["lib-0.1", "v1.0.2-debug"], ["nightly"])
        assert select(history, "debug").build_number == 2

    def test_variant_isolation_across_commits(self, linear_history, select):
        history = linear_history(["v1.0.10-release"], ["v1.0.3-debug"])
        assert select(history, "debug").build_number == 3
        assert select(history, "release").build_number == 10

    def test_variant_isolation_on_shared_commit(self, linear_history, select):
        history = linear_history(["v1.0.5-debug", "v1.0.5-release"], ["v1.0.6-debug"])
        assert select(history, "release").commit_id == "c1"
        assert select(history, "debug").commit_id == "c2"

    def test_other_variant_out_of_order_does_not_fail(self, linear_history, select):
        history = linear_history(["v1.0.9-release"], ["v1.0.2-release"], ["v1.0.1-debug"])
        assert select(history, "debug").build_number == 1
        with pytest.raises(ChronologyViolationError):
            select(history, "release")

    def test_selector_ignores_tags_of_other_variants(self):
        index = ChronologyIndex.from_commits([Commit("c1", authored_at=1)])
        foreign = ParsedTag(RawTag("v1.0.50-release", "c1"), "1.0", 50, "release")
        own = ParsedTag(RawTag("v1.0.5-debug", "c1"), "1.0", 5, "debug")
        assert CandidateSelector(index).select([foreign, own], "debug") == own


class TestHistoryShapes:

    def test_merged_branch(self, select):
        history = InMemoryHistory()
        history.commit("base", authored_at=100)
        history.tag("v1.0.1-debug", "base")
        history.commit("feature", parents=["base"], authored_at=200, move_head=False)
        history.tag("v1.0.2-debug", "feature")
        history.commit("main", parents=["base"], authored_at=300)
        history.commit("merge", parents=["main", "feature"], authored_at=400)
        history.tag("v1.0.3-debug", "merge")

        assert select(history, "debug").build_number == 3

    def test_tag_on_amended_commit_still_ordered(self, select):
        history = InMemoryHistory()
        history.commit("c1", authored_at=100)
        history.tag("v1.0.5-debug", "c1")
        history.commit("before-amend", parents=["c1"], authored_at=200)
        history.tag("v1.0.4-debug", "before-amend")
        history.commit("after-amend", parents=["c1"], authored_at=300)

        with pytest.raises(ChronologyViolationError) as exc_info:
            select(history, "debug")
        assert exc_info.value.later_commit == "before-amend"

    def test_amended_commit_retagged(self, select):
        history = InMemoryHistory()
        history.commit("c1", authored_at=100)
        history.tag("v1.0.1-debug", "c1")
        history.commit("before-amend", parents=["c1"], authored_at=200)
        history.tag("v1.0.2-debug", "before-amend")
        history.commit("after-amend", parents=["c1"], authored_at=300)
        history.tag("v1.0.3-debug", "after-amend")

        assert select(history, "debug").commit_id == "after-amend"

    def test_amend_keeping_author_time(self, select):
        # The replaced commit sorts after its amended copy by sha
        history = InMemoryHistory()
        history.commit("c1", authored_at=100)
        history.tag("v1.0.1-debug", "c1")
        history.commit("ff-wip", parents=["c1"], authored_at=200, committed_at=200)
        history.tag("v1.0.2-debug", "ff-wip")
        history.commit("aa-final", parents=["c1"], authored_at=200, committed_at=260)
        history.tag("v1.0.3-debug", "aa-final")

        assert select(history, "debug").commit_id == "aa-final"

    def test_tag_on_pruned_commit_dropped(self, select):
        history = InMemoryHistory()
        history.commit("c1", authored_at=100)
        history.tag("v1.0.1-debug", "c1")
        history.commit("gone", parents=["c1"], authored_at=200)
        history.tag("v1.0.9-debug", "gone")
        history.commit("c2", parents=["c1"], authored_at=300)
        history.prune("gone")

        assert select(history, "debug").build_number == 1

    def test_reports_latest_violation(self, linear_history, select):
        history = linear_history(["v1.0.9-debug"], ["v1.0.3-debug"], ["v1.0.4-debug"])
        with pytest.raises(ChronologyViolationError) as exc_info:
            select(history, "debug")
        assert exc_info.value.later_tag == "v1.0.4-debug"
