"""
In-memory repository history.

Used by tests and by callers that already hold history data (e.g. from a
hosting API). Commits are added oldest first; tags point at commit ids.

Example:
    history = InMemoryHistory()
    c1 = history.commit("c1", authored_at=100)
    c2 = history.commit("c2", parents=["c1"], authored_at=200)
    history.tag("v1.0.1-debug", "c1")
    history.tag("v1.0.2-debug", "c2", message="Release 2")
"""

from typing import Dict, Iterable, List, Optional, Sequence

from ..domain import Commit, RawTag
from ..errors import RepositoryReadError
from .history import RepositoryHistory


class InMemoryHistory(RepositoryHistory):
    """Mutable fake history. Resolution only ever reads it."""

    def __init__(self, head: Optional[str] = None):
        self._commits: Dict[str, Commit] = {}
        self._tags: Dict[str, RawTag] = {}
        self._refs: Dict[str, str] = {}
        self._head = head
        self._pruned: set = set()

    def commit(
        self,
        sha: str,
        parents: Sequence[str] = (),
        authored_at: Optional[int] = None,
        move_head: bool = True,
        committed_at: Optional[int] = None
    ) -> Commit:
        """
        Add a commit.

        Args:
            sha: Commit id
            parents: Parent ids (must already exist)
            authored_at: Author time; defaults to one tick after the newest parent
            move_head: Point HEAD at the new commit
            committed_at: Committer time; defaults to the author time
        """
        for parent in parents:
            if parent not in self._commits:
                raise ValueError(f"Unknown parent commit {parent!r}")
        if authored_at is None:
            authored_at = max(
                (self._commits[p].authored_at for p in parents), default=0
            ) + 1

        if committed_at is None:
            committed_at = authored_at

        commit = Commit(
            id=sha,
            parents=tuple(parents),
            authored_at=authored_at,
            committed_at=committed_at,
        )
        self._commits[sha] = commit
        if move_head:
            self._head = sha
        return commit

    def tag(
        self,
        name: str,
        sha: str,
        message: Optional[str] = None,
        created_at: Optional[int] = None
    ) -> RawTag:
        """
        Add a tag. A message makes it an annotated tag.

        Lightweight tags take the author time of their commit.
        """
        annotated = message is not None
        if created_at is None and not annotated and sha in self._commits:
            created_at = self._commits[sha].authored_at
        raw = RawTag(
            name=name,
            commit_id=sha,
            annotated=annotated,
            created_at=created_at,
            message=message,
        )
        self._tags[name] = raw
        return raw

    def delete_tag(self, name: str) -> None:
        self._tags.pop(name, None)

    def set_ref(self, ref: str, sha: str) -> None:
        """Create or move a branch-like reference."""
        self._refs[ref] = sha

    def set_head(self, sha: str) -> None:
        self._head = sha

    def prune(self, sha: str) -> None:
        """Make a commit object unretrievable, as after garbage collection."""
        self._pruned.add(sha)

    def tags(self) -> List[RawTag]:
        return list(self._tags.values())

    def resolve(self, ref: str) -> str:
        if ref == "HEAD":
            if self._head is None:
                raise RepositoryReadError("Repository has no commits (HEAD is unborn)")
            return self._head
        if ref in self._refs:
            return self._refs[ref]
        if ref in self._tags:
            return self._tags[ref].commit_id
        if ref in self._commits and ref not in self._pruned:
            return ref
        raise RepositoryReadError(f"Unknown reference: {ref}")

    def commits(self, ref: str) -> Iterable[Commit]:
        start = self.resolve(ref)
        seen = set()
        stack = [start]
        result = []
        while stack:
            sha = stack.pop()
            if sha in seen:
                continue
            seen.add(sha)
            commit = self.find_commit(sha)
            if commit is None:
                continue
            result.append(commit)
            stack.extend(commit.parents)
        return result

    def find_commit(self, sha: str) -> Optional[Commit]:
        if sha in self._pruned:
            return None
        return self._commits.get(sha)
