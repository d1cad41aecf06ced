"""
Tag pattern compiler.

Turns a token list into a CompiledPattern: a regular expression template
with one capture for the dot-separated version and a slot for the variant
name. The variant slot is filled per requested variant, so one compiled
pattern serves every variant of a build.

Compilation never touches the repository. Invalid patterns fail here
with ConfigurationError, before any tag is read.
"""

import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Pattern, Tuple
import logging

from ..domain.pattern import DEFAULT_PATTERN, PatternToken, TokenKind
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

VERSION_GROUP = 'build_version'
VARIANT_GROUP = 'build_variant'

_FRAGMENTS = {
    TokenKind.ANY_BEFORE_DOT: r'.*?',
    TokenKind.BUILD_VERSION: rf'(?P<{VERSION_GROUP}>[0-9]+(?:\.[0-9]+)*)',
    TokenKind.ANY_OPTIONAL_SYMBOLS: r'[A-Za-z0-9]*',
}

# Keeps "release" from matching "releaseCandidate" through a trailing
# optional postfix
_VARIANT_BOUNDARY = r'(?![A-Za-z0-9])'


@dataclass(frozen=True)
class CompiledPattern:
    """
    A validated tag pattern.

    Attributes:
        tokens: The source tokens
        head: Regex source before the variant slot
        tail: Regex source after the variant slot
    """
    tokens: Tuple[PatternToken, ...]
    head: str
    tail: str

    @property
    def template(self) -> str:
        """Regex template with %s in place of the variant, for diagnostics."""
        return f"{self.head}%s{self.tail}"

    def regex_for(self, variant: str) -> Pattern:
        """
        Bind the pattern to one variant.

        Raises:
            ConfigurationError: If the variant name is empty
        """
        if not variant:
            raise ConfigurationError("Build variant name must not be empty")
        return re.compile(
            f"{self.head}(?P<{VARIANT_GROUP}>{re.escape(variant)}){self.tail}"
        )

    def describe(self) -> str:
        """Token list as written in configuration."""
        return ', '.join(token.to_config() for token in self.tokens)


def _fragment(token: PatternToken) -> str:
    if token.kind in (TokenKind.LITERAL, TokenKind.SEPARATOR):
        return re.escape(token.text)
    if token.kind == TokenKind.OPTIONAL_SEPARATOR:
        return f"(?:{re.escape(token.text)})?"
    return _FRAGMENTS[token.kind]


def _needs_boundary(rest: Tuple[PatternToken, ...]) -> bool:
    """True when alphanumerics could follow the variant with no separator."""
    for token in rest:
        if token.kind == TokenKind.OPTIONAL_SEPARATOR:
            continue
        return token.kind == TokenKind.ANY_OPTIONAL_SYMBOLS
    return False


def parse_tokens(config_tokens: Optional[Iterable[Any]]) -> Tuple[PatternToken, ...]:
    """
    Parse configuration token forms.

    Raises:
        ConfigurationError: On any malformed token
    """
    if config_tokens is None:
        return DEFAULT_PATTERN
    if isinstance(config_tokens, (str, dict)):
        raise ConfigurationError(
            f"Tag pattern must be a list of tokens, got {type(config_tokens).__name__}"
        )

    tokens = []
    for index, item in enumerate(config_tokens):
        try:
            tokens.append(PatternToken.parse(item))
        except ValueError as e:
            raise ConfigurationError(f"Invalid tag pattern token #{index + 1}: {e}") from e
    return tuple(tokens)


def compile_pattern(tokens: Optional[Iterable[Any]] = None) -> CompiledPattern:
    """
    Compile a tag pattern.

    Args:
        tokens: PatternTokens or their configuration forms; None for the
            built-in default pattern

    Returns:
        The compiled pattern

    Raises:
        ConfigurationError: If the pattern does not contain exactly one
            buildVersion and exactly one buildVariantName token
    """
    parsed = parse_tokens(tokens)

    counts = {
        kind: sum(1 for token in parsed if token.kind == kind)
        for kind in (TokenKind.BUILD_VERSION, TokenKind.BUILD_VARIANT)
    }
    for kind, count in counts.items():
        if count != 1:
            raise ConfigurationError(
                f"Tag pattern must contain exactly one '{kind.value}' token, "
                f"found {count}: [{', '.join(t.to_config() for t in parsed)}]"
            )

    split = next(i for i, token in enumerate(parsed) if token.kind == TokenKind.BUILD_VARIANT)
    head: List[str] = [_fragment(token) for token in parsed[:split]]
    tail: List[str] = [_fragment(token) for token in parsed[split + 1:]]
    if _needs_boundary(parsed[split + 1:]):
        tail.insert(0, _VARIANT_BOUNDARY)

    compiled = CompiledPattern(tokens=parsed, head=''.join(head), tail=''.join(tail))

    try:
        compiled.regex_for('variant')
    except re.error as e:
        raise ConfigurationError(
            f"Tag pattern does not compile to a valid expression: {compiled.template}"
        ) from e

    logger.debug(f"Compiled tag pattern: {compiled.template}")
    return compiled
