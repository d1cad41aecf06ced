"""
Build tag domain objects.

- ParsedTag: a raw tag whose name matched the tag pattern
- TagBuild: the resolved build info handed to downstream collaborators
- BuildSnapshot: the resolved tag plus up to two preceding tags

TagBuild and BuildSnapshot serialize to the persisted document format.
Key order and null handling are fixed so the build pipeline can read
documents back field for field.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..errors import DocumentError
from .history import RawTag

# Persisted document keys, in output order
TAG_BUILD_FIELDS: Tuple[str, ...] = (
    'name', 'commitSha', 'message', 'buildVersion', 'buildVariant', 'buildNumber',
)
SNAPSHOT_FIELDS: Tuple[str, ...] = (
    'current', 'previousInOrder', 'previousOnDifferentCommit',
)


@dataclass(frozen=True)
class TagBuild:
    """
    Build information derived from a tag.

    Attributes:
        name: Full tag name (e.g. "v1.0.42-debug")
        commit_sha: Commit the tag points to
        message: Annotation message, None for lightweight tags
        build_version: Version without the build number (e.g. "1.0")
        build_variant: Variant the tag was resolved for (e.g. "debug")
        build_number: Trailing build number (e.g. 42)
    """
    name: str
    commit_sha: str
    message: Optional[str]
    build_version: str
    build_variant: str
    build_number: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted document shape."""
        return {
            'name': self.name,
            'commitSha': self.commit_sha,
            'message': self.message,
            'buildVersion': self.build_version,
            'buildVariant': self.build_variant,
            'buildNumber': self.build_number,
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'TagBuild':
        """
        Parse a persisted TagBuild document.

        Raises:
            DocumentError: If a required field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise DocumentError(f"Tag build must be an object, got {type(data).__name__}")

        for key in ('name', 'commitSha', 'buildVersion', 'buildVariant'):
            if not isinstance(data.get(key), str):
                raise DocumentError(f"Tag build field '{key}' not found or not a string")

        message = data.get('message')
        if message is not None and not isinstance(message, str):
            raise DocumentError("Tag build field 'message' must be a string or null")

        number = data.get('buildNumber')
        # bool is an int subclass
        if not isinstance(number, int) or isinstance(number, bool):
            raise DocumentError("Tag build field 'buildNumber' not found or not an integer")

        return cls(
            name=data['name'],
            commit_sha=data['commitSha'],
            message=message,
            build_version=data['buildVersion'],
            build_variant=data['buildVariant'],
            build_number=number,
        )


@dataclass(frozen=True)
class ParsedTag:
    """A raw tag with build metadata extracted from its name."""
    tag: RawTag
    build_version: str
    build_number: int
    build_variant: str

    @property
    def name(self) -> str:
        return self.tag.name

    @property
    def commit_id(self) -> str:
        return self.tag.commit_id

    def to_tag_build(self) -> TagBuild:
        return TagBuild(
            name=self.tag.name,
            commit_sha=self.tag.commit_id,
            message=self.tag.message,
            build_version=self.build_version,
            build_variant=self.build_variant,
            build_number=self.build_number,
        )

    def __str__(self) -> str:
        return f"{self.tag.name} ({self.tag.commit_id[:7]})"


@dataclass(frozen=True)
class CommitRange:
    """
    Commits reachable from ``to_sha`` but not from ``from_sha``.

    ``from_sha`` is None when there is no previous build, meaning all
    history up to ``to_sha``.
    """
    from_sha: Optional[str]
    to_sha: str

    def to_rev_range(self) -> str:
        """git revision range syntax."""
        if self.from_sha is None:
            return self.to_sha
        return f"{self.from_sha}..{self.to_sha}"


@dataclass(frozen=True)
class BuildSnapshot:
    """
    The current build tag and the tags preceding it, for changelog deltas.

    Attributes:
        current: The resolved tag
        previous_in_order: Next lower build number, regardless of commit
        previous_on_different_commit: Closest lower build number whose
            commit differs from the current one
    """
    current: TagBuild
    previous_in_order: Optional[TagBuild] = None
    previous_on_different_commit: Optional[TagBuild] = None

    @property
    def previous(self) -> Optional[TagBuild]:
        """The tag the changelog is computed against."""
        return self.previous_on_different_commit

    @property
    def point_same_commit(self) -> bool:
        """True when the previous build in order shares the current commit."""
        return (
            self.previous_in_order is not None
            and self.previous_in_order.commit_sha == self.current.commit_sha
        )

    def as_commit_range(self) -> CommitRange:
        """Commits that went into the current build since the previous one."""
        previous = self.previous_on_different_commit
        return CommitRange(
            from_sha=previous.commit_sha if previous else None,
            to_sha=self.current.commit_sha,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted document shape."""
        return {
            'current': self.current.to_dict(),
            'previousInOrder': _optional_dict(self.previous_in_order),
            'previousOnDifferentCommit': _optional_dict(self.previous_on_different_commit),
        }

    @classmethod
    def from_dict(cls, data: Any) -> 'BuildSnapshot':
        """
        Parse a persisted snapshot document.

        Raises:
            DocumentError: If the document is not a snapshot
        """
        if not isinstance(data, dict) or data.get('current') is None:
            raise DocumentError("Snapshot document must contain a 'current' tag build")
        return cls(
            current=TagBuild.from_dict(data['current']),
            previous_in_order=_optional_tag_build(data.get('previousInOrder')),
            previous_on_different_commit=_optional_tag_build(
                data.get('previousOnDifferentCommit')
            ),
        )


def _optional_dict(tag_build: Optional[TagBuild]) -> Optional[Dict[str, Any]]:
    return tag_build.to_dict() if tag_build is not None else None


def _optional_tag_build(data: Any) -> Optional[TagBuild]:
    return TagBuild.from_dict(data) if data is not None else None


def is_snapshot_document(data: Any) -> bool:
    """True if a parsed JSON document has the snapshot shape."""
    return isinstance(data, dict) and 'current' in data
