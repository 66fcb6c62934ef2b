"""Stylesheet abbreviations: ``m10+p5``, ``d:f``, ``bd1-s#0!``."""
from __future__ import annotations

from emmetls.engine.stylesheet.nodes import Declaration, StylesheetAbbreviation
from emmetls.engine.stylesheet.parser import parse_stylesheet
from emmetls.engine.stylesheet.stringify import stringify_stylesheet

__all__ = [
    "Declaration",
    "StylesheetAbbreviation",
    "parse_stylesheet",
    "stringify_stylesheet",
]
