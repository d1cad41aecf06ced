"""
Persisted tag document store for buildtag.

Writes and reads the JSON documents consumed by the build pipeline:
- a flat TagBuild document ({"name", "commitSha", ...})
- a snapshot document ({"current", "previousInOrder", "previousOnDifferentCommit"})

Writes are atomic (write to temp, then rename), pretty-printed and end
with a newline. Key order follows the domain objects' to_dict().
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Union
import logging

from ..domain import BuildSnapshot, TagBuild
from ..domain.tag import is_snapshot_document
from ..errors import DocumentError

logger = logging.getLogger(__name__)

Document = Union[TagBuild, BuildSnapshot]


def dumps_document(document: Document) -> str:
    """Serialize a TagBuild or BuildSnapshot to document text."""
    return json.dumps(document.to_dict(), indent=2, ensure_ascii=False) + '\n'


def loads_document(text: str) -> Document:
    """
    Parse document text, detecting its shape.

    Raises:
        DocumentError: If the text is not valid JSON or not a tag document
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentError(f"Tag document is not valid JSON: {e}") from e

    if is_snapshot_document(data):
        return BuildSnapshot.from_dict(data)
    return TagBuild.from_dict(data)


class DocumentStore:
    """
    Tag document persistence with atomic writes.

    Example:
        store = DocumentStore(Path("build/tag-build-debug.json"))
        store.write(snapshot)
        snapshot = store.read()
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize DocumentStore.

        Args:
            path: Path to the JSON document
        """
        self.path = Path(path).expanduser().resolve()

    def _write_atomic(self, text: str) -> None:
        """Write text atomically using temp file and rename."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Write to temp file in same directory
        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp"
        )

        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(text)

            # Atomic rename
            os.replace(temp_path, self.path)

        except Exception:
            # Clean up temp file on error
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def write(self, document: Document) -> None:
        """Write a TagBuild or BuildSnapshot document."""
        self._write_atomic(dumps_document(document))
        logger.info(f"Tag document written to {self.path}")

    def read(self) -> Document:
        """
        Read the stored document.

        Raises:
            DocumentError: If the file is missing or malformed
        """
        try:
            text = self.path.read_text(encoding='utf-8')
        except OSError as e:
            raise DocumentError(f"Cannot read tag document {self.path}: {e}") from e
        return loads_document(text)

    def read_tag_build(self) -> TagBuild:
        """Read the document and return its current TagBuild, whatever its shape."""
        document = self.read()
        if isinstance(document, BuildSnapshot):
            return document.current
        return document

    def exists(self) -> bool:
        return self.path.exists()

    def raw(self) -> Dict[str, Any]:
        """The stored JSON without conversion."""
        try:
            return json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            raise DocumentError(f"Cannot read tag document {self.path}: {e}") from e
