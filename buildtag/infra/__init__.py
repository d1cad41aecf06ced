"""
Infrastructure layer for buildtag.

Contains abstractions for external systems:
- RepositoryHistory: Read-only tag/commit access used by the engine
- GitHistory: RepositoryHistory over the git command line
- InMemoryHistory: RepositoryHistory held in memory (tests, API data)
- DocumentStore: Persisted tag document files

These provide clean interfaces that can be replaced for testing.
"""

from .history import RepositoryHistory
from .git_client import GitHistory
from .memory_history import InMemoryHistory
from .file_store import DocumentStore, dumps_document, loads_document

__all__ = [
    'RepositoryHistory',
    'GitHistory',
    'InMemoryHistory',
    'DocumentStore',
    'dumps_document',
    'loads_document',
]
