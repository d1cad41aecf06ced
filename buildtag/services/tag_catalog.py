"""
Tag catalog: every tag in the repository with its target commit.

The catalog is read once per resolution and never changes afterwards.
Tags whose commit object can no longer be retrieved (history rewritten
and garbage collected) are dropped with a warning; tags on commits that
are merely unreachable from the build tip are kept.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, Tuple
import logging

from ..domain import Commit, RawTag
from ..errors import BuildTagError, RepositoryReadError
from ..infra.history import RepositoryHistory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagCatalog:
    """
    Snapshot of the repository's tags.

    Attributes:
        tags: Tags sorted by name, each with a creation time
        commits: Target commits by id
    """
    tags: Tuple[RawTag, ...] = ()
    commits: Dict[str, Commit] = field(default_factory=dict)

    @classmethod
    def read(cls, history: RepositoryHistory) -> 'TagCatalog':
        """
        Read all tags from the history.

        Raises:
            RepositoryReadError: If the history cannot be read
        """
        try:
            raw_tags = sorted(history.tags(), key=lambda t: t.name)
            logger.debug(f"Read {len(raw_tags)} tags: {[t.name for t in raw_tags]}")

            commits: Dict[str, Commit] = {}
            kept = []
            for raw in raw_tags:
                commit = commits.get(raw.commit_id)
                if commit is None:
                    commit = history.find_commit(raw.commit_id)
                if commit is None:
                    logger.warning(
                        f"Skipping tag {raw.name}: commit {raw.commit_id} is not "
                        f"retrievable (history rewritten?)"
                    )
                    continue

                commits[commit.id] = commit
                if raw.created_at is None:
                    raw = replace(raw, created_at=commit.authored_at)
                kept.append(raw)

        except BuildTagError:
            raise
        except Exception as e:
            raise RepositoryReadError(f"Failed to read repository tags: {e}") from e

        return cls(tags=tuple(kept), commits=commits)

    @property
    def commit_ids(self) -> Tuple[str, ...]:
        """Distinct tagged commit ids, sorted."""
        return tuple(sorted(self.commits))

    def __iter__(self) -> Iterator[RawTag]:
        return iter(self.tags)

    def __len__(self) -> int:
        return len(self.tags)
