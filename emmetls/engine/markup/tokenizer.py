"""
Markup abbreviation tokenizer.

Splits an abbreviation like ``ul#nav>li.item$*3>a[href]{Link}`` into
literals, modifier markers, operators and bracketed chunks. Attribute sets
and text are kept as raw chunks; the parser takes them apart.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from emmetls.engine.errors import ParseError


class TokenKind(Enum):
    LITERAL = "literal"        # tag name, id or class name
    HASH = "hash"              # #
    DOT = "dot"                # .
    ATTRIBUTES = "attributes"  # [...], value is the inner text
    TEXT = "text"              # {...}, value is the inner text
    GROUP_OPEN = "group_open"  # (
    GROUP_CLOSE = "group_close"  # )
    CHILD = "child"            # >
    SIBLING = "sibling"        # +
    CLIMB = "climb"            # ^
    REPEAT = "repeat"          # *n, value is the digits (may be empty)
    CLOSE = "close"            # /


OPERATORS = frozenset({TokenKind.CHILD, TokenKind.SIBLING, TokenKind.CLIMB})

_SINGLE_CHAR = {
    "#": TokenKind.HASH,
    ".": TokenKind.DOT,
    "(": TokenKind.GROUP_OPEN,
    ")": TokenKind.GROUP_CLOSE,
    ">": TokenKind.CHILD,
    "+": TokenKind.SIBLING,
    "^": TokenKind.CLIMB,
    "/": TokenKind.CLOSE,
}

# Characters that end a literal
_DELIMITERS = frozenset("#.[]{}()*>+^/='\"")


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    offset: int


def is_literal_char(ch: str) -> bool:
    return ch not in _DELIMITERS and not ch.isspace()


def tokenize(abbreviation: str) -> list[Token]:
    """
    Tokenize a markup abbreviation.

    Raises:
        ParseError: On unclosed brackets/quotes or unexpected characters
    """
    tokens: list[Token] = []
    pos = 0
    size = len(abbreviation)

    while pos < size:
        ch = abbreviation[pos]

        if ch in _SINGLE_CHAR:
            tokens.append(Token(_SINGLE_CHAR[ch], ch, pos))
            pos += 1
        elif ch == "*":
            end = pos + 1
            while end < size and abbreviation[end].isdigit():
                end += 1
            tokens.append(Token(TokenKind.REPEAT, abbreviation[pos + 1:end], pos))
            pos = end
        elif ch == "[":
            end = _scan_attributes(abbreviation, pos)
            tokens.append(Token(TokenKind.ATTRIBUTES, abbreviation[pos + 1:end - 1], pos))
            pos = end
        elif ch == "{":
            end, text = _scan_text(abbreviation, pos)
            tokens.append(Token(TokenKind.TEXT, text, pos))
            pos = end
        elif is_literal_char(ch) or ch == "\\":
            end, literal = _scan_literal(abbreviation, pos)
            tokens.append(Token(TokenKind.LITERAL, literal, pos))
            pos = end
        else:
            raise ParseError(f"Unexpected character {ch!r}", pos, abbreviation)

    return tokens


def _scan_literal(abbreviation: str, pos: int) -> tuple[int, str]:
    chars: list[str] = []
    size = len(abbreviation)

    while pos < size:
        ch = abbreviation[pos]
        if ch == "\\" and pos + 1 < size:
            # Keep escaped dollars for the numbering pass
            nxt = abbreviation[pos + 1]
            chars.append("\\$" if nxt == "$" else nxt)
            pos += 2
        elif is_literal_char(ch):
            chars.append(ch)
            pos += 1
        else:
            break

    return pos, "".join(chars)


def _scan_attributes(abbreviation: str, start: int) -> int:
    """Return the offset right after the ``]`` closing the set at ``start``."""
    pos = start + 1
    quote: str | None = None
    size = len(abbreviation)

    while pos < size:
        ch = abbreviation[pos]
        if ch == "\\":
            pos += 2
            continue
        if quote is not None:
            if ch == quote:
                quote = None
        elif ch in "'\"":
            quote = ch
        elif ch == "]":
            return pos + 1
        pos += 1

    if quote is not None:
        raise ParseError("Unclosed quote in attributes", start, abbreviation)
    raise ParseError("Unclosed attribute set", start, abbreviation)


def _scan_text(abbreviation: str, start: int) -> tuple[int, str]:
    """Scan ``{...}`` honoring nested braces and backslash escapes."""
    pos = start + 1
    depth = 1
    chars: list[str] = []
    size = len(abbreviation)

    while pos < size:
        ch = abbreviation[pos]
        if ch == "\\" and pos + 1 < size:
            nxt = abbreviation[pos + 1]
            chars.append("\\$" if nxt == "$" else nxt)
            pos += 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return pos + 1, "".join(chars)
        chars.append(ch)
        pos += 1

    raise ParseError("Unclosed text", start, abbreviation)
