"""
Resolved configuration for a single expansion.

A ``Config`` is built fresh for every request from the defaults below plus
whatever overrides the caller passes, and is never mutated afterwards.
Override names follow the dotted option names editors already use for
Emmet settings (``output.indent``, ``stylesheet.intUnit``...).

Malformed overrides do not fail the request: the affected option keeps its
default and its name is recorded in ``Config.rejected`` so the caller can
report it.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from emmetls.engine.errors import ConfigurationError
from emmetls.snippets import load_snippets

FieldFormatter = Callable[[int, str], str]
TextFormatter = Callable[[str], str]

MARKUP = "markup"
STYLESHEET = "stylesheet"
SYNTAX_TYPES = (MARKUP, STYLESHEET)

SELF_CLOSING_STYLES = ("html", "xhtml", "xml")

# HTML void elements
VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "command", "embed", "hr", "img", "input",
    "keygen", "link", "meta", "param", "source", "track", "wbr",
})

UNIT_ALIASES = MappingProxyType({
    "e": "em",
    "p": "%",
    "x": "ex",
    "r": "rem",
})

UNITLESS_PROPERTIES = frozenset({
    "z-index", "line-height", "opacity", "font-weight", "zoom", "order",
    "flex", "flex-grow", "flex-shrink", "orphans", "widows",
})

KEYWORDS = ("auto", "inherit", "unset", "none")

# Upper bound on the copies one node may get from its multipliers combined
MAX_REPEAT = 1000


def default_field(index: int, placeholder: str) -> str:
    """Render a tab stop as its placeholder text only."""
    return placeholder


def default_text(text: str) -> str:
    return text


@dataclass(frozen=True)
class Config:
    """Immutable output options for one parse/stringify run."""

    type: str = MARKUP

    # Output
    format_field: FieldFormatter = default_field
    format_text: TextFormatter = default_text
    indent: str = "\t"
    newline: str = "\n"
    self_closing_style: str = "html"
    self_closing_tags: frozenset[str] = VOID_ELEMENTS
    inline_break: int = 3
    attribute_quotes: str = "double"

    # Markup
    max_repeat: int = MAX_REPEAT

    # Snippets
    markup_snippets: Mapping[str, str] = field(
        default_factory=lambda: load_snippets(MARKUP)
    )
    stylesheet_snippets: Mapping[str, str] = field(
        default_factory=lambda: load_snippets(STYLESHEET)
    )

    # Stylesheet values
    int_unit: str = "px"
    float_unit: str = "em"
    # mappingproxy is unhashable before Python 3.12 and dataclasses reject it
    # as a plain default
    unit_aliases: Mapping[str, str] = field(default_factory=lambda: UNIT_ALIASES)
    unitless: frozenset[str] = UNITLESS_PROPERTIES
    keywords: tuple[str, ...] = KEYWORDS
    between: str = ": "
    after: str = ";"

    # Override names that were ignored because their value was malformed
    rejected: tuple[str, ...] = ()

    @property
    def quote(self) -> str:
        return "'" if self.attribute_quotes == "single" else '"'

    @property
    def snippets(self) -> Mapping[str, str]:
        """Snippet table of this config's syntax type."""
        if self.type == STYLESHEET:
            return self.stylesheet_snippets
        return self.markup_snippets


# ===== Option validators =====

def _callable(option: str, value: Any) -> Callable:
    if not callable(value):
        raise ConfigurationError(option, "expected a callable")
    return value


def _string(option: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(option, "expected a string")
    return value


def _word(option: str, value: Any) -> str:
    value = _string(option, value)
    if any(ch.isspace() for ch in value):
        raise ConfigurationError(option, "must not contain whitespace")
    return value


def _choice(*choices: str) -> Callable[[str, Any], str]:
    def validate(option: str, value: Any) -> str:
        if value not in choices:
            raise ConfigurationError(option, f"expected one of {', '.join(choices)}")
        return value

    return validate


def _non_negative_int(option: str, value: Any) -> int:
    # bool is an int subclass, but "true" is not a count
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigurationError(option, "expected a non-negative integer")
    return value


def _positive_int(option: str, value: Any) -> int:
    value = _non_negative_int(option, value)
    if value == 0:
        raise ConfigurationError(option, "expected a positive integer")
    return value


def _names(option: str, value: Any) -> frozenset[str]:
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigurationError(option, "expected a list of names")
    if not all(isinstance(item, str) for item in value):
        raise ConfigurationError(option, "expected a list of names")
    return frozenset(value)


def _ordered_names(option: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise ConfigurationError(option, "expected an ordered list of names")
    _names(option, value)
    seen: list[str] = []
    for item in value:
        if item not in seen:
            seen.append(item)
    return tuple(seen)


def _string_mapping(option: str, value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(option, "expected a mapping")
    for key, item in value.items():
        if not isinstance(key, str) or not isinstance(item, str):
            raise ConfigurationError(option, "expected a mapping of strings")
    return dict(value)


def _merged_with(defaults: Callable[[], Mapping[str, str]]):
    """Merge a mapping override over a default table."""

    def validate(option: str, value: Any) -> Mapping[str, str]:
        merged = dict(defaults())
        merged.update(_string_mapping(option, value))
        return MappingProxyType(merged)

    return validate


# option name -> (Config attribute, validator)
OPTIONS: dict[str, tuple[str, Callable[[str, Any], Any]]] = {
    "output.field": ("format_field", _callable),
    "output.text": ("format_text", _callable),
    "output.indent": ("indent", _string),
    "output.newline": ("newline", _string),
    "output.selfClosingStyle": ("self_closing_style", _choice(*SELF_CLOSING_STYLES)),
    "output.selfClosingTags": ("self_closing_tags", _names),
    "output.inlineBreak": ("inline_break", _non_negative_int),
    "output.attributeQuotes": ("attribute_quotes", _choice("double", "single")),
    "markup.maxRepeat": ("max_repeat", _positive_int),
    "markup.snippets": ("markup_snippets", _merged_with(lambda: load_snippets(MARKUP))),
    "stylesheet.snippets": (
        "stylesheet_snippets",
        _merged_with(lambda: load_snippets(STYLESHEET)),
    ),
    "stylesheet.intUnit": ("int_unit", _word),
    "stylesheet.floatUnit": ("float_unit", _word),
    "stylesheet.unitAliases": ("unit_aliases", _merged_with(lambda: UNIT_ALIASES)),
    "stylesheet.unitless": ("unitless", _names),
    "stylesheet.keywords": ("keywords", _ordered_names),
    "stylesheet.between": ("between", _string),
    "stylesheet.after": ("after", _string),
}


def resolve_config(
    type: str = MARKUP, options: Mapping[str, Any] | None = None
) -> Config:
    """
    Build the configuration for one expansion.

    Args:
        type: Syntax type, "markup" or "stylesheet"
        options: Overrides keyed by dotted option name

    Raises:
        ConfigurationError: If ``type`` is not a known syntax type. Bad
            override values never raise; see ``Config.rejected``.
    """
    if type not in SYNTAX_TYPES:
        raise ConfigurationError("type", f"unknown syntax type {type!r}")

    values: dict[str, Any] = {}
    rejected: list[str] = []

    for name, raw in (options or {}).items():
        spec = OPTIONS.get(name)
        if spec is None:
            rejected.append(name)
            continue

        attr, validate = spec
        try:
            values[attr] = validate(name, raw)
        except ConfigurationError:
            rejected.append(name)

    return Config(type=type, rejected=tuple(rejected), **values)
