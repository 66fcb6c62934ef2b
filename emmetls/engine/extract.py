"""
Abbreviation extraction.

Finds the abbreviation that ends at the cursor by scanning the line
backward. Only one line is ever looked at; callers split documents.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from emmetls.engine.config import MARKUP, STYLESHEET

BRACE_PAIRS = {"(": ")", "[": "]", "{": "}"}
_OPENING = {close: open_ for open_, close in BRACE_PAIRS.items()}
QUOTES = ("'", '"')

# Non-alphanumeric characters that may appear in an abbreviation
SPECIAL_CHARS = frozenset("#.*:$-_!@%^+>/")

STOP_CHARS = {
    MARKUP: frozenset("<"),
    STYLESHEET: frozenset(";{}"),
}

# Operators that cannot start an abbreviation
LEADING_OPERATORS = "*+>^"

# An HTML tag that ends right before a ">" we are looking at
_TAG_BEFORE = re.compile(r"<\/?[A-Za-z][\w:\-]*(?:\s+[^<>]*)?\/?$")


@dataclass(frozen=True)
class ExtractedAbbreviation:
    """Location of an abbreviation within a line."""

    abbreviation: str
    start: int
    end: int


def _braces_for(type: str) -> tuple[str, str]:
    """Opening and closing brackets that group text in this syntax."""
    if type == STYLESHEET:
        return "([", ")]"
    return "([{", ")]}"


def _is_abbreviation_char(ch: str) -> bool:
    return ch.isalnum() or ch in SPECIAL_CHARS


def _closes_html_tag(line: str, pos: int) -> bool:
    """Check if the ">" at ``pos`` ends a tag like ``<div class="x">``."""
    return _TAG_BEFORE.search(line[:pos]) is not None


def extract(
    line: str, pos: int | None = None, type: str = MARKUP
) -> ExtractedAbbreviation | None:
    """
    Extract the abbreviation ending at ``pos`` in ``line``.

    Args:
        line: A single line of text
        pos: Cursor offset; defaults to the end of the line
        type: "markup" or "stylesheet"

    Returns:
        The abbreviation and its span, or None if there is no abbreviation
        at this position.
    """
    if pos is None:
        pos = len(line)
    pos = min(len(line), max(0, pos))

    opening, closing = _braces_for(type)
    stop_chars = STOP_CHARS.get(type, frozenset())

    pending: list[str] = []
    start = pos

    while start > 0:
        ch = line[start - 1]
        inner = pending[-1] if pending else None

        if inner in ("]", "}"):
            # Attribute sets and text keep everything up to their opening
            # bracket; quoted attribute values are taken whole
            if ch == inner:
                pending.append(ch)
            elif ch == _OPENING[inner]:
                pending.pop()
            elif inner == "]" and ch in QUOTES and not _is_escaped(line, start - 1):
                opening_quote = _find_opening_quote(line, start - 1)
                if opening_quote < 0:
                    break
                start = opening_quote
                continue
        elif ch in closing:
            pending.append(ch)
        elif ch in opening:
            if not pending:
                # Cursor sits inside an unterminated group; keep going and
                # let the parser reject it.
                pass
            elif pending[-1] != BRACE_PAIRS[ch]:
                break
            else:
                pending.pop()
        elif ch in stop_chars or not _is_abbreviation_char(ch):
            break
        elif type == MARKUP and ch == ">" and _closes_html_tag(line, start - 1):
            break

        start -= 1

    if pending:
        return None

    abbreviation = line[start:pos]
    stripped = abbreviation.lstrip(LEADING_OPERATORS)
    start += len(abbreviation) - len(stripped)

    if not stripped.strip():
        return None

    return ExtractedAbbreviation(abbreviation=stripped, start=start, end=pos)


def _is_escaped(line: str, pos: int) -> bool:
    """Check if the character at ``pos`` is preceded by an odd run of backslashes."""
    count = 0
    pos -= 1
    while pos >= 0 and line[pos] == "\\":
        count += 1
        pos -= 1
    return count % 2 == 1


def _find_opening_quote(line: str, pos: int) -> int:
    """Find the quote matching the closing one at ``pos``, or -1."""
    quote = line[pos]
    pos -= 1
    while pos >= 0:
        if line[pos] == quote and not _is_escaped(line, pos):
            return pos
        pos -= 1
    return -1
