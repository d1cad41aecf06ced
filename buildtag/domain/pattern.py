"""
Tag pattern tokens.

A tag pattern is an ordered sequence of tokens describing how build tags
are named, e.g. the default pattern matches "v1.0.42-debug":

    anyBeforeDot, buildVersion, separator("-"), buildVariantName,
    optionalSeparator("-"), anyOptionalSymbols

Tokens can be written in configuration as strings ("literal:cabinet",
"separator:+", "buildVersion") or one-key mappings ({"literal": "cabinet"}).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple, Union


class TokenKind(Enum):
    """Kinds of pattern tokens."""
    LITERAL = "literal"
    SEPARATOR = "separator"
    OPTIONAL_SEPARATOR = "optionalSeparator"
    ANY_BEFORE_DOT = "anyBeforeDot"
    BUILD_VERSION = "buildVersion"
    BUILD_VARIANT = "buildVariantName"
    ANY_OPTIONAL_SYMBOLS = "anyOptionalSymbols"


# Kinds that carry text
TEXT_KINDS = frozenset({
    TokenKind.LITERAL,
    TokenKind.SEPARATOR,
    TokenKind.OPTIONAL_SEPARATOR,
})

_ALIASES = {
    'literal': TokenKind.LITERAL,
    'separator': TokenKind.SEPARATOR,
    'optionalseparator': TokenKind.OPTIONAL_SEPARATOR,
    'optional_separator': TokenKind.OPTIONAL_SEPARATOR,
    'anybeforedot': TokenKind.ANY_BEFORE_DOT,
    'any_before_dot': TokenKind.ANY_BEFORE_DOT,
    'buildversion': TokenKind.BUILD_VERSION,
    'build_version': TokenKind.BUILD_VERSION,
    'buildvariant': TokenKind.BUILD_VARIANT,
    'build_variant': TokenKind.BUILD_VARIANT,
    'buildvariantname': TokenKind.BUILD_VARIANT,
    'build_variant_name': TokenKind.BUILD_VARIANT,
    'anyoptionalsymbols': TokenKind.ANY_OPTIONAL_SYMBOLS,
    'any_optional_symbols': TokenKind.ANY_OPTIONAL_SYMBOLS,
}


def token_kind(name: str) -> TokenKind:
    """
    Look up a token kind by name (camelCase or snake_case).

    Raises:
        ValueError: If the name is not a known token kind
    """
    kind = _ALIASES.get(name.strip().lower())
    if kind is None:
        raise ValueError(f"Unknown tag pattern token: {name!r}")
    return kind


@dataclass(frozen=True)
class PatternToken:
    """
    One element of a tag pattern.

    Examples:
        PatternToken.parse("literal:cabinet") -> PatternToken(LITERAL, "cabinet")
        PatternToken.parse("buildVersion")    -> PatternToken(BUILD_VERSION)
        PatternToken.parse({"separator": "+"}) -> PatternToken(SEPARATOR, "+")
    """

    kind: TokenKind
    text: str = ""

    @classmethod
    def parse(cls, form: Union['PatternToken', str, Dict[str, Any]]) -> 'PatternToken':
        """
        Parse a token from its configuration form.

        Raises:
            ValueError: On an unknown kind, a text token without text,
                or text given to a token that takes none
        """
        if isinstance(form, PatternToken):
            return form

        if isinstance(form, dict):
            if len(form) != 1:
                raise ValueError(f"Token mapping must have exactly one key: {form!r}")
            name, value = next(iter(form.items()))
            text = "" if value is None else str(value)
        elif isinstance(form, str):
            name, _, text = form.partition(':')
        else:
            raise ValueError(f"Cannot parse tag pattern token from {form!r}")

        kind = token_kind(name)
        if kind in TEXT_KINDS and not text:
            raise ValueError(f"Token {kind.value!r} requires text")
        if kind not in TEXT_KINDS and text:
            raise ValueError(f"Token {kind.value!r} does not take text")
        return cls(kind=kind, text=text)

    def to_config(self) -> str:
        """String form used in configuration files."""
        if self.kind in TEXT_KINDS:
            return f"{self.kind.value}:{self.text}"
        return self.kind.value

    def __str__(self) -> str:
        return self.to_config()


def literal(text: str) -> PatternToken:
    """Exact text."""
    return PatternToken(TokenKind.LITERAL, text)


def separator(text: str) -> PatternToken:
    """Exact separator text, e.g. "-", "_", "+"."""
    return PatternToken(TokenKind.SEPARATOR, text)


def optional_separator(text: str) -> PatternToken:
    """Separator text or nothing."""
    return PatternToken(TokenKind.OPTIONAL_SEPARATOR, text)


def any_before_dot() -> PatternToken:
    """Arbitrary leading filler such as a "v" prefix or a namespace."""
    return PatternToken(TokenKind.ANY_BEFORE_DOT)


def build_version() -> PatternToken:
    """Dot-separated version; the last component is the build number."""
    return PatternToken(TokenKind.BUILD_VERSION)


def build_variant() -> PatternToken:
    """The build variant name."""
    return PatternToken(TokenKind.BUILD_VARIANT)


def any_optional_symbols() -> PatternToken:
    """Optional alphanumeric postfix, e.g. "androidAuto"."""
    return PatternToken(TokenKind.ANY_OPTIONAL_SYMBOLS)


DEFAULT_PATTERN: Tuple[PatternToken, ...] = (
    any_before_dot(),
    build_version(),
    separator("-"),
    build_variant(),
    optional_separator("-"),
    any_optional_symbols(),
)
