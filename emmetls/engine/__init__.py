"""
Abbreviation engine.

Pure functions, one request at a time: nothing here keeps state between
calls.

Usage:
    found = extract("  ul>li*2", 9)
    config = resolve_config("markup")
    html = stringify_markup(parse_markup(found.abbreviation, config), config)
"""
from __future__ import annotations

from emmetls.engine.config import MARKUP, STYLESHEET, Config, resolve_config
from emmetls.engine.errors import ConfigurationError, EmmetError, ParseError
from emmetls.engine.extract import ExtractedAbbreviation, extract
from emmetls.engine.markup import parse_markup, stringify_markup
from emmetls.engine.stylesheet import parse_stylesheet, stringify_stylesheet


def expand(abbreviation: str, config: Config) -> str:
    """
    Parse and render an abbreviation with the grammar of ``config.type``.

    Raises:
        ParseError: If the abbreviation is malformed
    """
    if config.type == STYLESHEET:
        return stringify_stylesheet(parse_stylesheet(abbreviation, config), config)
    return stringify_markup(parse_markup(abbreviation, config), config)


__all__ = [
    "MARKUP",
    "STYLESHEET",
    "Config",
    "ConfigurationError",
    "EmmetError",
    "ExtractedAbbreviation",
    "ParseError",
    "expand",
    "extract",
    "parse_markup",
    "parse_stylesheet",
    "resolve_config",
    "stringify_markup",
    "stringify_stylesheet",
]
