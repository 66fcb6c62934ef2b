"""
Tab-stop fields embedded in abbreviation text.

Snippet definitions and user text may carry explicit fields written as
``${1}`` or ``${1:default}``. They are kept as ``Field`` parts next to plain
string parts so that numbering and escaping only ever touch literal text.
"""
from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Field:
    """
    An explicit tab stop: ``${index:placeholder}``.

    ``scope`` tells apart fields with the same index that come from
    different snippet instances or declarations.
    """

    index: int
    placeholder: str = ""
    scope: int = 0


# A value is a sequence of literal text and fields.
ValuePart = str | Field
Value = tuple[ValuePart, ...]

_FIELD_START = re.compile(r"\$\{(\d+)")


def parse_fields(text: str) -> Value:
    """
    Split text into literal and ``Field`` parts.

    Malformed field markers (no closing brace) are kept as literal text.
    """
    parts: list[ValuePart] = []
    buffer: list[str] = []
    pos = 0

    while pos < len(text):
        if text[pos] == "\\" and pos + 1 < len(text):
            # Escaped characters (``\$``) are left for the numbering pass
            buffer.append(text[pos:pos + 2])
            pos += 2
            continue

        match = _FIELD_START.match(text, pos)
        if match is None:
            buffer.append(text[pos])
            pos += 1
            continue

        end, placeholder = _scan_field_tail(text, match.end())
        if end < 0:
            buffer.append(text[pos])
            pos += 1
            continue

        if buffer:
            parts.append("".join(buffer))
            buffer = []
        parts.append(Field(int(match.group(1)), placeholder))
        pos = end

    if buffer:
        parts.append("".join(buffer))

    return tuple(parts)


def _scan_field_tail(text: str, pos: int) -> tuple[int, str]:
    """Return (offset after closing brace, placeholder) or (-1, "")."""
    if pos < len(text) and text[pos] == "}":
        return pos + 1, ""
    if pos >= len(text) or text[pos] != ":":
        return -1, ""

    depth = 1
    start = pos + 1
    pos = start
    while pos < len(text):
        ch = text[pos]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return pos + 1, text[start:pos]
        pos += 1

    return -1, ""


def value_text(value: Value) -> str:
    """Plain text of a value, using placeholders for fields."""
    return "".join(
        part.placeholder if isinstance(part, Field) else part for part in value
    )


def has_fields(value: Value) -> bool:
    return any(isinstance(part, Field) for part in value)


class FieldNumbering:
    """
    Assigns output tab-stop indices during a single serialization pass.

    Fields without an explicit index always get a fresh number. Explicit
    fields that share an index and a scope share the output index, so they
    become mirrored tab stops.
    """

    def __init__(self) -> None:
        self._next = 1
        self._explicit: dict[tuple[int, int], int] = {}

    def auto(self) -> int:
        index = self._next
        self._next += 1
        return index

    def explicit(self, index: int, scope: int = 0) -> int:
        # ${0} is the final cursor position in snippet syntax
        if index == 0:
            return 0
        key = (scope, index)
        if key not in self._explicit:
            self._explicit[key] = self.auto()
        return self._explicit[key]
