"""
Repository history capability.

The resolution engine never talks to git directly. It reads history
through this interface, which GitHistory implements over the git CLI and
InMemoryHistory implements for tests.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..domain import Commit, RawTag


class RepositoryHistory(ABC):
    """
    Read-only access to tags and commits.

    Implementations raise RepositoryReadError when the underlying VCS
    cannot be read.
    """

    @abstractmethod
    def tags(self) -> List[RawTag]:
        """
        List all tags.

        Annotated tags must be dereferenced to their target commit.
        """

    @abstractmethod
    def resolve(self, ref: str) -> str:
        """Resolve a reference (branch, tag, sha, "HEAD") to its tip commit id."""

    @abstractmethod
    def commits(self, ref: str) -> Iterable[Commit]:
        """All commits reachable from ``ref``, including ``ref`` itself."""

    @abstractmethod
    def find_commit(self, sha: str) -> Optional[Commit]:
        """
        Look up a single commit, reachable or not.

        Returns:
            The commit, or None if the object is no longer retrievable
        """
