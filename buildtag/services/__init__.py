"""
Service layer for buildtag: the resolution engine.

- compile_pattern: tag pattern tokens to a CompiledPattern
- TagCatalog / ChronologyIndex: one read of the repository
- TagParser: tag names to ParsedTags per variant
- CandidateSelector: the authoritative tag per variant
- FallbackResolver: stub, static and default versions
- build_snapshot: previous tags for the changelog
- ResolutionService: everything above in one call
"""

from .pattern_compiler import CompiledPattern, compile_pattern
from .tag_catalog import TagCatalog
from .chronology import ChronologyIndex
from .tag_parser import ParsedTagSet, TagParser
from .candidate_selector import CandidateSelector
from .fallback import (
    FallbackDefaults,
    FallbackResolver,
    FallbackSwitches,
    VariantRequest,
    VersionResolution,
    VersionSource,
)
from .snapshot_builder import build_snapshot
from .versioning import (
    VersionCodeStrategy,
    VersionNameStrategy,
    build_version_code,
    build_version_name,
    next_tag_name,
)
from .resolution_service import RepositoryView, ResolutionService

__all__ = [
    'CompiledPattern',
    'compile_pattern',
    'TagCatalog',
    'ChronologyIndex',
    'ParsedTagSet',
    'TagParser',
    'CandidateSelector',
    'FallbackDefaults',
    'FallbackResolver',
    'FallbackSwitches',
    'VariantRequest',
    'VersionResolution',
    'VersionSource',
    'build_snapshot',
    'VersionCodeStrategy',
    'VersionNameStrategy',
    'build_version_code',
    'build_version_name',
    'next_tag_name',
    'RepositoryView',
    'ResolutionService',
]
