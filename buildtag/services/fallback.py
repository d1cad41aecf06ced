"""
Fallback resolution: version info when tags are disabled or absent.

Three switches drive the decision, each overridable per variant:

    use_versions_from_tag   read versions from tags at all
    use_stubs               stand in a stub tag when no tag is found
    use_defaults            use default / static versions as a fallback

Decision chain:
1. Tags disabled: static version name/code if configured, otherwise
   defaults (if enabled) or nothing.
2. Tags enabled, candidate found: the candidate.
3. Tags enabled, no candidate, stubs enabled: the stub tag.
4. Tags enabled, no candidate, stubs disabled: static versions (or
   empty) if defaults are enabled, otherwise NoCandidateError.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Optional
import logging

from ..domain import BuildSnapshot, ParsedTag, TagBuild
from ..errors import NoCandidateError
from .versioning import (
    VersionCodeStrategy,
    VersionNameStrategy,
    build_version_code,
    build_version_name,
)

logger = logging.getLogger(__name__)

DEFAULT_VERSION_NAME = "0.0"
DEFAULT_VERSION_CODE = 1
STUB_TAG_NAME = "v0.0.1-%s"
STUB_COMMIT_SHA = "hardcoded_default_stub_commit_sha"
STUB_COMMIT_MESSAGE = "hardcoded_default_stub_commit_message"


@dataclass(frozen=True)
class FallbackSwitches:
    """
    The three fallback switches. None means "inherit"; an unset switch
    is treated as enabled.
    """
    use_versions_from_tag: Optional[bool] = None
    use_stubs: Optional[bool] = None
    use_defaults: Optional[bool] = None

    def merged(self, override: Optional['FallbackSwitches']) -> 'FallbackSwitches':
        """These switches with every set value of ``override`` on top."""
        if override is None:
            return self
        values = {}
        for f in fields(self):
            value = getattr(override, f.name)
            values[f.name] = value if value is not None else getattr(self, f.name)
        return FallbackSwitches(**values)

    @property
    def versions_from_tag(self) -> bool:
        return self.use_versions_from_tag is not False

    @property
    def stubs(self) -> bool:
        return self.use_stubs is not False

    @property
    def defaults(self) -> bool:
        return self.use_defaults is not False


@dataclass(frozen=True)
class VariantRequest:
    """
    What to resolve for one variant.

    Attributes:
        variant: Build variant name (e.g. "debug", "googleRelease")
        switches: Effective fallback switches for this variant
        version_name: Statically configured version name
        version_code: Statically configured version code
    """
    variant: str
    switches: FallbackSwitches = field(default_factory=FallbackSwitches)
    version_name: Optional[str] = None
    version_code: Optional[int] = None


@dataclass(frozen=True)
class FallbackDefaults:
    """Values used by the stub and default fallbacks."""
    version_name: str = DEFAULT_VERSION_NAME
    version_code: int = DEFAULT_VERSION_CODE
    stub_name: str = STUB_TAG_NAME
    stub_commit_sha: str = STUB_COMMIT_SHA
    stub_message: str = STUB_COMMIT_MESSAGE
    stub_build_version: str = DEFAULT_VERSION_NAME
    stub_build_number: int = DEFAULT_VERSION_CODE

    def stub_for(self, variant: str) -> TagBuild:
        """The stub tag for a variant. ``stub_name`` may contain %s for the variant."""
        name = self.stub_name % variant if '%s' in self.stub_name else self.stub_name
        return TagBuild(
            name=name,
            commit_sha=self.stub_commit_sha,
            message=self.stub_message,
            build_version=self.stub_build_version,
            build_variant=variant,
            build_number=self.stub_build_number,
        )


class VersionSource(Enum):
    """Where a resolved version came from."""
    TAG = "tag"
    STUB = "stub"
    STATIC = "static"
    DEFAULT = "default"
    EMPTY = "empty"


@dataclass(frozen=True)
class VersionResolution:
    """
    Result of resolving one variant.

    ``tag_build`` is set for TAG and STUB results; ``snapshot`` only for
    TAG results when a snapshot was requested.
    """
    variant: str
    source: VersionSource
    version_name: str
    version_code: Optional[int]
    tag_build: Optional[TagBuild] = None
    snapshot: Optional[BuildSnapshot] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'variant': self.variant,
            'source': self.source.value,
            'versionName': self.version_name,
            'versionCode': self.version_code,
            'tag': self.tag_build.to_dict() if self.tag_build else None,
        }


class FallbackResolver:
    """
    Applies the decision chain for one variant.

    Example:
        resolver = FallbackResolver(FallbackDefaults())
        result = resolver.resolve(request, candidate, pattern_template)
    """

    def __init__(
        self,
        defaults: Optional[FallbackDefaults] = None,
        name_strategy: VersionNameStrategy = VersionNameStrategy.BUILD_VERSION,
        code_strategy: VersionCodeStrategy = VersionCodeStrategy.BUILD_NUMBER
    ):
        self.defaults = defaults or FallbackDefaults()
        self.name_strategy = name_strategy
        self.code_strategy = code_strategy

    def resolve(
        self,
        request: VariantRequest,
        candidate: Optional[ParsedTag],
        pattern: str = ""
    ) -> VersionResolution:
        """
        Resolve version info for a request.

        Args:
            request: The variant request
            candidate: Selected tag, None if there is none or tags are disabled
            pattern: Pattern description for the NoCandidateError message

        Raises:
            NoCandidateError: No candidate and every fallback is disabled
        """
        variant = request.variant
        switches = request.switches

        if not switches.versions_from_tag:
            return self._static(request, switches.defaults)

        if candidate is not None:
            return self._from_tag(variant, VersionSource.TAG, candidate.to_tag_build())

        if switches.stubs:
            logger.info(f"No build tag for '{variant}', using stub tag")
            return self._from_tag(variant, VersionSource.STUB, self.defaults.stub_for(variant))

        if switches.defaults:
            has_static = request.version_name is not None or request.version_code is not None
            logger.info(
                f"No build tag for '{variant}', using "
                f"{'static' if has_static else 'empty'} versions"
            )
            return VersionResolution(
                variant=variant,
                source=VersionSource.STATIC if has_static else VersionSource.EMPTY,
                version_name=request.version_name if request.version_name is not None else "",
                version_code=request.version_code,
            )

        raise NoCandidateError(variant, pattern)

    def _from_tag(self, variant: str, source: VersionSource, tag_build: TagBuild) -> VersionResolution:
        return VersionResolution(
            variant=variant,
            source=source,
            version_name=build_version_name(tag_build, self.name_strategy),
            version_code=build_version_code(tag_build, self.code_strategy),
            tag_build=tag_build,
        )

    def _static(self, request: VariantRequest, use_defaults: bool) -> VersionResolution:
        name = request.version_name
        code = request.version_code
        if name is not None or code is not None:
            source = VersionSource.STATIC
        elif use_defaults:
            source = VersionSource.DEFAULT
        else:
            source = VersionSource.EMPTY

        if name is None:
            name = self.defaults.version_name if use_defaults else ""
        if code is None and use_defaults:
            code = self.defaults.version_code

        logger.info(f"Tag versions disabled for '{request.variant}', using {source.value} versions")
        return VersionResolution(
            variant=request.variant,
            source=source,
            version_name=name,
            version_code=code,
        )
