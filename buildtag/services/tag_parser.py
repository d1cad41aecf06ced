"""
Tag parser: applies a compiled pattern to tag names.

Tags that do not match are discarded silently. Most repositories carry
unrelated tags (library releases, other conventions) and that is normal.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence, Tuple
import logging

from ..domain import ParsedTag, RawTag
from .pattern_compiler import CompiledPattern, VERSION_GROUP

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedTagSet:
    """Parsed tags grouped by the variant they matched."""
    by_variant: Dict[str, Tuple[ParsedTag, ...]] = field(default_factory=dict)

    def for_variant(self, variant: str) -> Tuple[ParsedTag, ...]:
        return self.by_variant.get(variant, ())

    @property
    def variants(self) -> Tuple[str, ...]:
        return tuple(self.by_variant)


def split_version(captured: str) -> Optional[Tuple[str, int]]:
    """
    Split "1.0.42" into ("1.0", 42).

    Returns None when there are fewer than two components.
    """
    parts = captured.split('.')
    if len(parts) < 2 or not all(part.isascii() and part.isdigit() for part in parts):
        return None
    return '.'.join(parts[:-1]), int(parts[-1])


class TagParser:
    """
    Extracts build version, number and variant from tag names.

    Example:
        parser = TagParser(compile_pattern())
        parsed = parser.parse(catalog.tags, ["debug", "release"])
        parsed.for_variant("debug")
    """

    def __init__(self, pattern: CompiledPattern):
        self.pattern = pattern

    def parse_tag(self, raw: RawTag, variant: str) -> Optional[ParsedTag]:
        """Parse one tag for one variant, or None if it does not match."""
        return self._match(raw, variant, self.pattern.regex_for(variant))

    def _match(self, raw: RawTag, variant: str, regex) -> Optional[ParsedTag]:
        match = regex.fullmatch(raw.name)
        if match is None:
            return None

        split = split_version(match.group(VERSION_GROUP))
        if split is None:
            return None

        build_version, build_number = split
        return ParsedTag(
            tag=raw,
            build_version=build_version,
            build_number=build_number,
            build_variant=variant,
        )

    def parse_variant(self, tags: Iterable[RawTag], variant: str) -> Tuple[ParsedTag, ...]:
        """All tags matching one variant, in input order."""
        regex = self.pattern.regex_for(variant)
        parsed = []
        for raw in tags:
            tag = self._match(raw, variant, regex)
            if tag is not None:
                parsed.append(tag)

        logger.debug(f"Tags matching '{variant}': {[t.name for t in parsed]}")
        return tuple(parsed)

    def parse(self, tags: Sequence[RawTag], variants: Iterable[str]) -> ParsedTagSet:
        """Parse tags for each variant independently."""
        return ParsedTagSet(by_variant={
            variant: self.parse_variant(tags, variant) for variant in variants
        })
