"""
Domain layer for buildtag.

Contains pure domain objects with no I/O or side effects:
- Commit, RawTag: Read-only snapshots of repository history
- PatternToken: One element of a declarative tag pattern
- ParsedTag: A tag whose name matched the pattern
- TagBuild, BuildSnapshot: Resolution results and their persisted form

These objects are immutable and provide serialization methods for the
persisted JSON documents.
"""

from .history import Commit, RawTag
from .pattern import PatternToken, TokenKind, DEFAULT_PATTERN
from .tag import ParsedTag, TagBuild, BuildSnapshot, CommitRange

__all__ = [
    'Commit',
    'RawTag',
    'PatternToken',
    'TokenKind',
    'DEFAULT_PATTERN',
    'ParsedTag',
    'TagBuild',
    'BuildSnapshot',
    'CommitRange',
]
