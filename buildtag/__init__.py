"""
buildtag - Build versions from git tags.

buildtag derives the version name, build number and commit of a build
variant from repository tags named by a declarative pattern, with stub
and default fallbacks when no usable tag exists.

Quick Start:
    from buildtag import GitHistory, ResolutionService, VariantRequest

    service = ResolutionService(GitHistory("."))
    result = service.resolve(VariantRequest("debug"), snapshot=True)
    print(result.version_name, result.version_code)
    print(result.snapshot.as_commit_range().to_rev_range())

    # Custom pattern: "cabinet-1.2.34+release"
    service = ResolutionService(
        GitHistory("."),
        pattern=["literal:cabinet-", "buildVersion", "separator:+", "buildVariantName"],
    )

Domain Objects:
    RawTag, Commit - Read-only repository history
    ParsedTag - Tag matched by the pattern
    TagBuild - Resolved build info (persisted document)
    BuildSnapshot - Current tag plus the tags preceding it

Services:
    ResolutionService - The whole pipeline in one call
    CandidateSelector - Highest build number, validated against chronology
    FallbackResolver - Stub, static and default versions

Errors:
    ConfigurationError, NoCandidateError, AmbiguousBuildNumberError,
    ChronologyViolationError, RepositoryReadError, DocumentError
"""

__version__ = "0.1.0"

from .domain import (
    BuildSnapshot,
    Commit,
    CommitRange,
    ParsedTag,
    PatternToken,
    RawTag,
    TagBuild,
    TokenKind,
)
from .errors import (
    AmbiguousBuildNumberError,
    BuildTagError,
    ChronologyViolationError,
    ConfigurationError,
    DocumentError,
    NoCandidateError,
    RepositoryReadError,
)
from .infra import DocumentStore, GitHistory, InMemoryHistory, RepositoryHistory
from .services import (
    CandidateSelector,
    ChronologyIndex,
    CompiledPattern,
    FallbackDefaults,
    FallbackResolver,
    FallbackSwitches,
    ResolutionService,
    TagCatalog,
    TagParser,
    VariantRequest,
    VersionCodeStrategy,
    VersionNameStrategy,
    VersionResolution,
    VersionSource,
    build_snapshot,
    compile_pattern,
    next_tag_name,
)

__all__ = [
    '__version__',
    'BuildSnapshot',
    'Commit',
    'CommitRange',
    'ParsedTag',
    'PatternToken',
    'RawTag',
    'TagBuild',
    'TokenKind',
    'AmbiguousBuildNumberError',
    'BuildTagError',
    'ChronologyViolationError',
    'ConfigurationError',
    'DocumentError',
    'NoCandidateError',
    'RepositoryReadError',
    'DocumentStore',
    'GitHistory',
    'InMemoryHistory',
    'RepositoryHistory',
    'CandidateSelector',
    'ChronologyIndex',
    'CompiledPattern',
    'FallbackDefaults',
    'FallbackResolver',
    'FallbackSwitches',
    'ResolutionService',
    'TagCatalog',
    'TagParser',
    'VariantRequest',
    'VersionCodeStrategy',
    'VersionNameStrategy',
    'VersionResolution',
    'VersionSource',
    'build_snapshot',
    'compile_pattern',
    'next_tag_name',
]
