"""
Version name and version code strategies.

A resolved TagBuild (real or stub) is turned into the version name and
version code a build ships with. Strategies are selected by name in
configuration.
"""

from enum import Enum
from typing import Optional
import logging

from packaging.version import Version, InvalidVersion

from ..domain import TagBuild
from ..errors import ConfigurationError, DocumentError
from .pattern_compiler import CompiledPattern, VERSION_GROUP

logger = logging.getLogger(__name__)


class VersionNameStrategy(Enum):
    """How a version name is derived from a tag."""
    BUILD_VERSION = "build_version"                              # 1.0
    BUILD_VERSION_NUMBER = "build_version_number"                # 1.0.42
    BUILD_VERSION_NUMBER_VARIANT = "build_version_number_variant"  # 1.0.42-debug
    BUILD_VERSION_VARIANT = "build_version_variant"              # 1.0-debug
    TAG_RAW_NAME = "tag_raw_name"                                # v1.0.42-debug

    @classmethod
    def parse(cls, value: str) -> 'VersionNameStrategy':
        return _parse_enum(cls, value, "version name strategy")


class VersionCodeStrategy(Enum):
    """How a version code is derived from a tag."""
    BUILD_NUMBER = "build_number"
    SEMANTIC_FLATTENED = "semantic_flattened"

    @classmethod
    def parse(cls, value: str) -> 'VersionCodeStrategy':
        return _parse_enum(cls, value, "version code strategy")


def _parse_enum(enum_cls, value, label):
    if isinstance(value, enum_cls):
        return value
    normalized = str(value).strip().lower().replace('-', '_')
    for member in enum_cls:
        if member.value == normalized:
            return member
    choices = ', '.join(m.value for m in enum_cls)
    raise ConfigurationError(f"Unknown {label} '{value}' (choose from: {choices})")


def build_version_name(tag: TagBuild, strategy: VersionNameStrategy = VersionNameStrategy.BUILD_VERSION) -> str:
    """Version name for a tag build."""
    if strategy == VersionNameStrategy.BUILD_VERSION:
        return tag.build_version
    if strategy == VersionNameStrategy.BUILD_VERSION_NUMBER:
        return f"{tag.build_version}.{tag.build_number}"
    if strategy == VersionNameStrategy.BUILD_VERSION_NUMBER_VARIANT:
        return f"{tag.build_version}.{tag.build_number}-{tag.build_variant}"
    if strategy == VersionNameStrategy.BUILD_VERSION_VARIANT:
        return f"{tag.build_version}-{tag.build_variant}"
    return tag.name


def build_version_code(tag: TagBuild, strategy: VersionCodeStrategy = VersionCodeStrategy.BUILD_NUMBER) -> int:
    """
    Version code for a tag build.

    SEMANTIC_FLATTENED packs major, minor and build number into one
    integer: (major * 1000 + minor) * 1000 + build_number.
    """
    if strategy == VersionCodeStrategy.SEMANTIC_FLATTENED:
        try:
            v = Version(tag.build_version)
        except InvalidVersion as e:
            raise ConfigurationError(
                f"Cannot flatten build version '{tag.build_version}' of {tag.name}"
            ) from e
        return (v.major * 1000 + v.minor) * 1000 + tag.build_number
    return tag.build_number


def next_tag_name(tag: TagBuild, pattern: Optional[CompiledPattern] = None) -> str:
    """
    Name of the tag for the next build: the build number plus one.

    The number is located through the pattern's version capture. Without
    a pattern, or if the name no longer matches it, the last occurrence of
    "<build_version>.<build_number>" is replaced.

    Raises:
        DocumentError: If the tag name does not contain its build number
    """
    current = f"{tag.build_version}.{tag.build_number}"
    bumped = f"{tag.build_version}.{tag.build_number + 1}"

    if pattern is not None:
        match = pattern.regex_for(tag.build_variant).fullmatch(tag.name)
        if match is not None and match.group(VERSION_GROUP) == current:
            start, end = match.span(VERSION_GROUP)
            return f"{tag.name[:start]}{bumped}{tag.name[end:]}"
        logger.debug(f"{tag.name} does not match {pattern.template}, replacing by text")

    head, found, tail = tag.name.rpartition(current)
    if not found:
        raise DocumentError(
            f"Tag name '{tag.name}' does not contain its build version and number '{current}'"
        )
    return f"{head}{bumped}{tail}"
