"""
Git client infrastructure for buildtag.

Provides the RepositoryHistory capability over the git command line.
All git reads go through this client, making them:
- Easy to replace with InMemoryHistory in tests
- Consistent in error handling (RepositoryReadError wraps the cause)
- Isolated from the resolution engine
"""

import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Sequence
import logging

from ..domain import Commit, RawTag
from ..errors import RepositoryReadError
from .history import RepositoryHistory

logger = logging.getLogger(__name__)

# ASCII unit / record separators, emitted by git's %xx format escapes
FIELD_SEP = '\x1f'
RECORD_SEP = '\x1e'

TAG_FORMAT = '%1f'.join([
    '%(refname:strip=2)',
    '%(objecttype)',
    '%(objectname)',
    '%(*objecttype)',
    '%(*objectname)',
    '%(taggerdate:unix)',
    '%(authordate:unix)',
    '%(contents)',
]) + '%1e'

COMMIT_FORMAT = '%H%x1f%P%x1f%at%x1f%ct'


class GitHistory(RepositoryHistory):
    """
    Repository history read from a local git checkout.

    Example:
        history = GitHistory("/path/to/repo")
        tip = history.resolve("HEAD")
        for tag in history.tags():
            print(tag.name, tag.commit_id)
    """

    def __init__(self, path: str = ".", timeout: int = 30):
        """
        Initialize GitHistory.

        Args:
            path: Path to git repository (any directory inside the work tree)
            timeout: Command timeout in seconds (default: 30)
        """
        self.path = str(Path(path).expanduser())
        self.timeout = timeout

    def _run(self, args: Sequence[str], check: bool = True) -> subprocess.CompletedProcess:
        """
        Run a git command.

        Args:
            args: Arguments after "git"
            check: Raise RepositoryReadError on non-zero exit

        Returns:
            The completed process
        """
        cmd = ['git', *args]
        try:
            result = subprocess.run(
                cmd,
                cwd=self.path,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired as e:
            raise RepositoryReadError(
                f"Git command timed out after {self.timeout}s: {' '.join(cmd)}"
            ) from e
        except OSError as e:
            raise RepositoryReadError(
                f"Cannot run git in {self.path}: {e}"
            ) from e

        if check and result.returncode != 0:
            raise RepositoryReadError(
                f"Git command failed ({result.returncode}): {' '.join(cmd)}\n"
                f"{result.stderr.strip()}"
            ) from subprocess.CalledProcessError(
                result.returncode, cmd, output=result.stdout, stderr=result.stderr
            )
        return result

    def tags(self) -> List[RawTag]:
        """
        List all tags, dereferencing annotated tags to their commits.

        Tags pointing at trees or blobs are skipped.
        """
        output = self._run(['for-each-ref', f'--format={TAG_FORMAT}', 'refs/tags']).stdout

        tags = []
        for record in output.split(RECORD_SEP):
            record = record.lstrip('\n')
            if not record:
                continue

            parts = record.split(FIELD_SEP, 7)
            if len(parts) < 8:
                logger.debug(f"Skipping malformed tag record: {record!r}")
                continue

            name, obj_type, obj_name, peeled_type, peeled_name, tagger_date, author_date, contents = parts

            if obj_type == 'commit':
                tags.append(RawTag(
                    name=name,
                    commit_id=obj_name,
                    annotated=False,
                    created_at=_parse_unix(author_date),
                ))
                continue

            if obj_type != 'tag':
                logger.debug(f"Skipping tag {name}: points at a {obj_type}")
                continue

            commit_id = peeled_name if peeled_type == 'commit' else self._peel(name)
            if commit_id is None:
                logger.debug(f"Skipping tag {name}: does not point at a commit")
                continue

            tags.append(RawTag(
                name=name,
                commit_id=commit_id,
                annotated=True,
                created_at=_parse_unix(tagger_date),
                message=contents.rstrip('\n'),
            ))

        return tags

    def _peel(self, tag_name: str) -> Optional[str]:
        """Dereference a tag through any chain of tag objects to a commit."""
        result = self._run(
            ['rev-parse', '--verify', '--quiet', f'refs/tags/{tag_name}^{{commit}}'],
            check=False
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def resolve(self, ref: str) -> str:
        result = self._run(
            ['rev-parse', '--verify', '--quiet', '--end-of-options', f'{ref}^{{commit}}'],
            check=False
        )
        sha = result.stdout.strip()
        if result.returncode != 0 or not sha:
            raise RepositoryReadError(f"Cannot resolve reference '{ref}' to a commit in {self.path}")
        return sha

    def commits(self, ref: str) -> Iterable[Commit]:
        tip = self.resolve(ref)
        output = self._run(['log', f'--format={COMMIT_FORMAT}', tip]).stdout
        return [commit for commit in map(_parse_commit, output.splitlines()) if commit]

    def find_commit(self, sha: str) -> Optional[Commit]:
        result = self._run(
            ['show', '-s', f'--format={COMMIT_FORMAT}', f'{sha}^{{commit}}', '--'],
            check=False
        )
        if result.returncode != 0:
            logger.debug(f"Commit {sha} is not retrievable: {result.stderr.strip()}")
            return None
        return _parse_commit(result.stdout.strip())

    def is_repository(self) -> bool:
        """Check if path is inside a git work tree."""
        result = self._run(['rev-parse', '--is-inside-work-tree'], check=False)
        return result.returncode == 0 and result.stdout.strip() == 'true'


def _parse_unix(value: str) -> Optional[int]:
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _parse_commit(line: str) -> Optional[Commit]:
    parts = line.split(FIELD_SEP)
    if len(parts) != 4 or not parts[0]:
        return None
    sha, parents, authored_at, committed_at = parts
    return Commit(
        id=sha,
        parents=tuple(parents.split()),
        authored_at=_parse_unix(authored_at) or 0,
        committed_at=_parse_unix(committed_at) or 0,
    )

