"""
Resolution service for buildtag.

One call resolves one or more variants against a single read of the
repository:

    pattern  -> compiled first, before any repository access
    catalog  -> every tag with its commit
    index    -> commit chronology (tip ancestry + tagged commits)
    parse    -> tags per variant
    select   -> candidate per variant
    fallback -> stub / static / default when there is no candidate
    snapshot -> previous tags for the changelog

Nothing is cached between calls.
"""

from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Optional, Sequence
import logging

from ..infra.history import RepositoryHistory
from .candidate_selector import CandidateSelector
from .chronology import ChronologyIndex
from .fallback import FallbackDefaults, FallbackResolver, VariantRequest, VersionResolution
from .pattern_compiler import CompiledPattern, compile_pattern
from .snapshot_builder import build_snapshot
from .tag_catalog import TagCatalog
from .tag_parser import TagParser
from .versioning import VersionCodeStrategy, VersionNameStrategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepositoryView:
    """Tags and chronology read once, shared by every variant of a call."""
    catalog: TagCatalog
    chronology: ChronologyIndex

    @classmethod
    def read(cls, history: RepositoryHistory, ref: str = "HEAD") -> 'RepositoryView':
        catalog = TagCatalog.read(history)
        chronology = ChronologyIndex.build(history, ref, extra_commits=catalog.commit_ids)
        logger.debug(f"Read {len(catalog)} tags over {len(chronology)} commits")
        return cls(catalog=catalog, chronology=chronology)


class ResolutionService:
    """
    Resolves build versions from repository tags.

    Example:
        service = ResolutionService(GitHistory("."))
        result = service.resolve(VariantRequest("debug"), snapshot=True)
        print(result.version_name, result.version_code)
    """

    def __init__(
        self,
        history: RepositoryHistory,
        pattern: Optional[Iterable[Any]] = None,
        defaults: Optional[FallbackDefaults] = None,
        name_strategy: VersionNameStrategy = VersionNameStrategy.BUILD_VERSION,
        code_strategy: VersionCodeStrategy = VersionCodeStrategy.BUILD_NUMBER
    ):
        """
        Initialize ResolutionService.

        Args:
            history: Repository history to read
            pattern: Tag pattern tokens or a CompiledPattern; None for the default
            defaults: Stub and default version values
            name_strategy: How version names are derived from tags
            code_strategy: How version codes are derived from tags
        """
        self.history = history
        self.pattern = pattern
        self.fallback = FallbackResolver(defaults, name_strategy, code_strategy)

    def compile(self) -> CompiledPattern:
        if isinstance(self.pattern, CompiledPattern):
            return self.pattern
        return compile_pattern(self.pattern)

    def resolve(
        self,
        request: VariantRequest,
        ref: str = "HEAD",
        snapshot: bool = False
    ) -> VersionResolution:
        """Resolve a single variant."""
        return self.resolve_many([request], ref=ref, snapshot=snapshot)[0]

    def resolve_many(
        self,
        requests: Sequence[VariantRequest],
        ref: str = "HEAD",
        snapshot: bool = False
    ) -> List[VersionResolution]:
        """
        Resolve several variants over one shared repository read.

        The repository is not read at all when every request has tag
        versions disabled.

        Raises:
            ConfigurationError: Invalid pattern (before any repository access)
            RepositoryReadError: Repository could not be read
            NoCandidateError, AmbiguousBuildNumberError,
            ChronologyViolationError: Per-variant resolution failures
        """
        pattern = self.compile()

        view = None
        if any(r.switches.versions_from_tag for r in requests):
            view = RepositoryView.read(self.history, ref)
        parser = TagParser(pattern)

        results = []
        for request in requests:
            if view is None or not request.switches.versions_from_tag:
                results.append(self.fallback.resolve(request, None, pattern.template))
                continue
            results.append(self._resolve_from_view(request, view, parser, pattern, snapshot))
        return results

    def _resolve_from_view(
        self,
        request: VariantRequest,
        view: RepositoryView,
        parser: TagParser,
        pattern: CompiledPattern,
        snapshot: bool
    ) -> VersionResolution:
        tags = parser.parse_variant(view.catalog.tags, request.variant)
        candidate = CandidateSelector(view.chronology).select(tags, request.variant)

        result = self.fallback.resolve(request, candidate, pattern.template)
        if snapshot and candidate is not None:
            result = replace(result, snapshot=build_snapshot(candidate, tags))
        return result
