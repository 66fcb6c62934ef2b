"""
Stylesheet abbreviation parser.

``m10+p5-10!`` becomes ``margin: 10px;`` and ``padding: 5px 10px !important;``.

Each ``+``-separated declaration is ``shorthand[:value][!]``. The shorthand
is looked up in the snippet table; unknown shorthands are kept as literal
property names rather than rejected.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from emmetls.engine.config import Config
from emmetls.engine.errors import ParseError
from emmetls.engine.fields import Field, Value, parse_fields
from emmetls.engine.stylesheet.nodes import Declaration, StylesheetAbbreviation

_NUMBER = re.compile(r"(-?(?:\d+(?:\.\d*)?|\.\d+))([a-zA-Z%]*)")
_COLOR = re.compile(r"#[0-9a-fA-F]+")
_KEYWORD = re.compile(r"[a-zA-Z][\w]*(?:-[a-zA-Z][\w]*)*")
_LITERAL = re.compile(r"[^-]+")


@dataclass(frozen=True)
class PropertySnippet:
    """A parsed ``property:template`` snippet entry."""

    property: str
    template: Value | None
    keywords: tuple[str, ...] = ()


def parse_snippet(text: str) -> PropertySnippet:
    """
    Parse a snippet table entry.

    ``display:block|none`` lists keyword alternatives, the first one being
    the default. ``border:${1:1px} ${2:solid}`` is a template with fields.
    """
    property, _, template = text.partition(":")
    property = property.strip()
    template = template.strip()

    if not template:
        return PropertySnippet(property=property, template=None)

    if "|" in template and "${" not in template:
        keywords = tuple(item.strip() for item in template.split("|") if item.strip())
        if not keywords:
            return PropertySnippet(property=property, template=None)
        return PropertySnippet(
            property=property,
            template=(Field(1, keywords[0]),),
            keywords=keywords,
        )

    value = parse_fields(template)
    return PropertySnippet(
        property=property, template=value, keywords=_template_keywords(value)
    )


def _template_keywords(value: Value) -> tuple[str, ...]:
    """Words of a template (``solid`` in ``${1:1px} ${2:solid}``) usable as keywords."""
    keywords: list[str] = []
    for part in value:
        text = part.placeholder if isinstance(part, Field) else part
        for word in text.split():
            if _KEYWORD.fullmatch(word) and word not in keywords:
                keywords.append(word)
    return tuple(keywords)


def parse_stylesheet(abbreviation: str, config: Config) -> StylesheetAbbreviation:
    """
    Parse a stylesheet abbreviation into declarations.

    Raises:
        ParseError: On an empty abbreviation or an empty declaration
            (``m10+``). Unknown shorthands never raise.
    """
    if not abbreviation:
        raise ParseError("Empty abbreviation", 0, abbreviation)

    declarations: list[Declaration] = []
    offset = 0
    for chunk in abbreviation.split("+"):
        declarations.append(_declaration(chunk, offset, abbreviation, config))
        offset += len(chunk) + 1

    return StylesheetAbbreviation(declarations=declarations)


def _declaration(
    chunk: str, offset: int, abbreviation: str, config: Config
) -> Declaration:
    important = chunk.endswith("!")
    body = chunk[:-1] if important else chunk

    if not body:
        raise ParseError("Empty declaration", offset, abbreviation)

    snippets = config.stylesheet_snippets

    if body in snippets:
        snippet = parse_snippet(snippets[body])
        return Declaration(snippet.property, snippet.template, important, offset)

    if ":" in body:
        name, explicit = body.split(":", 1)
    else:
        name, explicit = split_value(body)

    if not name:
        raise ParseError("Missing property name", offset, abbreviation)

    snippet, keyword = lookup_property(name, snippets, config)

    if snippet is None:
        # Unknown shorthand: scaffold it as a literal property name
        value = parse_value(explicit, name, (), config) if explicit else None
        return Declaration(name, value, important, offset)

    if explicit:
        value = parse_value(explicit, snippet.property, snippet.keywords, config)
    elif keyword:
        value = (keyword,)
    else:
        value = snippet.template

    return Declaration(snippet.property, value, important, offset)


def split_value(body: str) -> tuple[str, str]:
    """Split ``bd1-s#000`` into the shorthand ``bd`` and the value ``1-s#000``."""
    pos = 0
    size = len(body)
    while pos < size:
        ch = body[pos]
        if ch.isdigit() or ch == "#":
            break
        if ch in ".-" and pos + 1 < size and (body[pos + 1].isdigit() or body[pos + 1] == "."):
            break
        pos += 1
    return body[:pos], body[pos:]


def lookup_property(
    name: str, snippets: Mapping[str, str], config: Config
) -> tuple[PropertySnippet | None, str]:
    """
    Find the snippet for a shorthand.

    Returns the snippet and, when the shorthand had a keyword glued to it
    (``dib``, ``posa``), the matched keyword.
    """
    if name in snippets:
        return parse_snippet(snippets[name]), ""

    # "posa" -> "pos:a", longest prefix first
    for i in range(len(name) - 1, 0, -1):
        key = f"{name[:i]}:{name[i:]}"
        if key in snippets:
            return parse_snippet(snippets[key]), ""

    # "dib" -> "d" + "inline-block"
    for i in range(len(name) - 1, 0, -1):
        prefix, rest = name[:i], name[i:]
        if prefix not in snippets:
            continue
        snippet = parse_snippet(snippets[prefix])
        keyword = match_keyword(rest, snippet.keywords) or match_keyword(
            rest, config.keywords
        )
        if keyword:
            return snippet, keyword

    return None, ""


def match_keyword(token: str, candidates: tuple[str, ...]) -> str | None:
    """
    Match an abbreviated keyword against candidates.

    Exact match wins, then dash initials (``ib`` -> ``inline-block``), then
    the first candidate starting with ``token``.
    """
    token = token.lower()
    for candidate in candidates:
        if candidate == token:
            return candidate
    for candidate in candidates:
        initials = "".join(part[0] for part in candidate.split("-") if part)
        if initials == token:
            return candidate
    for candidate in candidates:
        if candidate.startswith(token):
            return candidate
    return None


def parse_value(
    text: str, property: str, keywords: tuple[str, ...], config: Config
) -> Value:
    """
    Parse an explicit value such as ``10-20``, ``-5p``, ``1-s#0`` or ``a``.

    ``-`` separates values; ``--`` is a separator followed by a negative
    number.
    """
    values: list[str] = []
    pos = 0
    size = len(text)

    while pos < size:
        match = _NUMBER.match(text, pos)
        if match:
            values.append(_number(match.group(1), match.group(2), property, config))
        elif match := _COLOR.match(text, pos):
            values.append(_color(match.group()))
        elif match := _KEYWORD.match(text, pos):
            token = match.group()
            values.append(
                match_keyword(token, keywords)
                or match_keyword(token, config.keywords)
                or token
            )
        else:
            match = _LITERAL.match(text, pos)
            if match is None:
                # A lone "-" with nothing to separate
                pos += 1
                continue
            values.append(match.group())

        pos = match.end()
        if pos < size and text[pos] == "-":
            pos += 1

    return (" ".join(values),) if values else ()


def _number(number: str, unit: str, property: str, config: Config) -> str:
    if unit:
        return number + config.unit_aliases.get(unit, unit)
    if property in config.unitless or float(number) == 0:
        return number
    if "." in number:
        return number + config.float_unit
    return number + config.int_unit


def _color(color: str) -> str:
    """Expand short hex colors: ``#f`` -> ``#fff``, ``#fc`` -> ``#fcfcfc``."""
    digits = color[1:]
    if len(digits) == 1:
        return "#" + digits * 3
    if len(digits) == 2:
        return "#" + digits * 3
    return color
