"""
Chronology index: a deterministic total order over commits.

Positions are assigned by a topological sort in which every commit comes
after all of its parents. When several commits are ready at once, the
one authored earliest goes first, then the one committed earliest, then
the smaller commit id. An amended commit keeps its author time, so the
committer time puts it after the commit it replaced. The same
repository state therefore always produces the same positions.

Commits that are no longer reachable from the build tip (amended or
rebased away) but still carry tags are indexed together with their own
ancestry, so they get a position comparable with the live history.
"""

import heapq
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple
import logging

from ..domain import Commit
from ..errors import BuildTagError, RepositoryReadError
from ..infra.history import RepositoryHistory

logger = logging.getLogger(__name__)


class ChronologyIndex:
    """
    Commit positions consistent with ancestry.

    Example:
        index = ChronologyIndex.build(history, "HEAD", catalog.commit_ids)
        if index.is_later(tag_commit, candidate_commit):
            ...
    """

    def __init__(self, commits: Dict[str, Commit], positions: Dict[str, int], tip: Optional[str] = None):
        self._commits = commits
        self._positions = positions
        self.tip = tip

    @classmethod
    def build(
        cls,
        history: RepositoryHistory,
        ref: str = "HEAD",
        extra_commits: Iterable[str] = ()
    ) -> 'ChronologyIndex':
        """
        Index commits reachable from ``ref`` plus the ancestry of ``extra_commits``.

        Raises:
            RepositoryReadError: If the history cannot be read
        """
        try:
            tip = history.resolve(ref)
            commits: Dict[str, Commit] = {c.id: c for c in history.commits(tip)}
            reachable = len(commits)

            for sha in sorted(set(extra_commits)):
                if sha in commits:
                    continue
                for commit in history.commits(sha):
                    commits.setdefault(commit.id, commit)

        except BuildTagError:
            raise
        except Exception as e:
            raise RepositoryReadError(f"Failed to read commit history from '{ref}': {e}") from e

        if len(commits) > reachable:
            logger.debug(
                f"Indexed {len(commits) - reachable} commits not reachable from {ref}"
            )
        return cls.from_commits(commits.values(), tip=tip)

    @classmethod
    def from_commits(cls, commits: Iterable[Commit], tip: Optional[str] = None) -> 'ChronologyIndex':
        """Index an explicit set of commits. Parents outside the set are ignored."""
        by_id = {c.id: c for c in commits}

        pending: Dict[str, int] = {}
        children: Dict[str, List[str]] = {sha: [] for sha in by_id}
        for commit in by_id.values():
            parents = {p for p in commit.parents if p in by_id}
            pending[commit.id] = len(parents)
            for parent in parents:
                children[parent].append(commit.id)

        ready: List[Tuple[int, int, str]] = [
            _order_key(by_id[sha]) for sha, count in pending.items() if count == 0
        ]
        heapq.heapify(ready)

        positions: Dict[str, int] = {}
        while ready:
            *_, sha = heapq.heappop(ready)
            positions[sha] = len(positions)
            for child in children[sha]:
                pending[child] -= 1
                if pending[child] == 0:
                    heapq.heappush(ready, _order_key(by_id[child]))

        # Only a corrupt history has a parent cycle
        if len(positions) != len(by_id):
            stuck = sorted(set(by_id) - set(positions))
            raise RepositoryReadError(
                f"Commit graph contains a cycle through: {', '.join(stuck[:5])}"
            )

        return cls(by_id, positions, tip=tip)

    def position(self, sha: str) -> int:
        """
        Position of a commit; greater than the positions of all its ancestors.

        Raises:
            RepositoryReadError: If the commit was not indexed
        """
        try:
            return self._positions[sha]
        except KeyError:
            raise RepositoryReadError(
                f"Commit {sha} is not part of the indexed history"
            ) from None

    def is_later(self, sha: str, other: str) -> bool:
        """True if ``sha`` is strictly later than ``other``."""
        return self.position(sha) > self.position(other)

    def commit(self, sha: str) -> Commit:
        """The indexed commit with its position filled in."""
        self.position(sha)
        return replace(self._commits[sha], position=self._positions[sha])

    def __contains__(self, sha: object) -> bool:
        return sha in self._positions

    def __len__(self) -> int:
        return len(self._positions)


def _order_key(commit: Commit) -> Tuple[int, int, str]:
    return (commit.authored_at, commit.committed_at, commit.id)
