"""
Repository history value objects.

Commits and raw tags are read-only snapshots of VCS state produced fresh
for every resolution.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Commit:
    """
    A commit with its parent links.

    Attributes:
        id: Full commit sha
        parents: Parent commit shas (empty for a root commit)
        authored_at: Author time, seconds since the epoch
        committed_at: Committer time. An amended commit keeps its author
            time but gets a new committer time.
        position: Chronology position, set by ChronologyIndex. Always
            greater than the position of every ancestor.
    """
    id: str
    parents: Tuple[str, ...] = ()
    authored_at: int = 0
    committed_at: int = 0
    position: Optional[int] = None


@dataclass(frozen=True)
class RawTag:
    """
    A tag as read from the repository.

    Attributes:
        name: Tag name (e.g. "v1.0.42-debug")
        commit_id: Target commit. Annotated tags are dereferenced, so this
            is never the id of a tag object.
        annotated: True for annotated tags
        created_at: Tagger time for annotated tags, author time of the
            target commit for lightweight tags. None when not yet known.
        message: Annotation message, None for lightweight tags
    """
    name: str
    commit_id: str
    annotated: bool = False
    created_at: Optional[int] = None
    message: Optional[str] = None
