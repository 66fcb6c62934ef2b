"""
Repeat unrolling and ``$`` numbering.

Unrolling turns ``li*3`` into three ``li`` siblings and dissolves groups.
Every node remembers the multiplier that numbers it: its own, or the
nearest enclosing one. Numbering runs afterwards, over the final tree.

Numbering syntax:

    $        1, 2, 3
    $$$      001, 002, 003
    $@-      3, 2, 1
    $@5      5, 6, 7
    $@-5     7, 6, 5
    \\$       a literal dollar
"""
from __future__ import annotations

import copy
import itertools
import re
from collections.abc import Iterator
from dataclasses import replace

from emmetls.engine.errors import ParseError
from emmetls.engine.fields import Field, Value
from emmetls.engine.markup.nodes import (
    Abbreviation,
    Element,
    Group,
    Node,
    Repeater,
    Text,
    map_values,
)

_NUMBERING = re.compile(r"\\\$|(\$+)(?:@(-)?(\d*))?")

# Numbering outside any multiplier
_SINGLE = Repeater(count=1, index=1)


def unroll(abbreviation: Abbreviation, max_repeat: int, source: str = "") -> None:
    """
    Unroll repeats and dissolve groups.

    Every copy of a repeated node gets its own snippet field scopes, so
    ``link:css*2`` yields two independent tab stops.

    Raises:
        ParseError: If nested multipliers ask for more than ``max_repeat``
            copies of a node
    """
    unroller = _Unroller(
        max_repeat, source, itertools.count(_last_scope(abbreviation.children) + 1)
    )
    abbreviation.children = unroller.unroll(abbreviation.children, None, 1)


class _Unroller:
    def __init__(self, max_repeat: int, source: str, scopes: Iterator[int]) -> None:
        self.max_repeat = max_repeat
        self.source = source
        self.scopes = scopes

    def unroll(
        self, nodes: list[Node], inherited: Repeater | None, total: int
    ) -> list[Node]:
        result: list[Node] = []

        for node in nodes:
            count = node.repeat.count if node.repeat else 1
            if total * count > self.max_repeat:
                raise ParseError("Repeat count too large", node.offset, self.source)

            for index in range(1, count + 1):
                item = copy.deepcopy(node) if count > 1 else node
                if index > 1:
                    self._rescope(item)
                repeater = Repeater(count, index) if node.repeat else inherited

                if isinstance(item, Group):
                    result.extend(self.unroll(item.children, repeater, total * count))
                elif isinstance(item, Element):
                    item.repeat = repeater
                    item.children = self.unroll(item.children, repeater, total * count)
                    result.append(item)
                else:
                    item.repeat = repeater
                    result.append(item)

        return result

    def _rescope(self, node: Node) -> None:
        """Move the snippet fields of a copy to fresh scopes."""
        fresh: dict[int, int] = {}

        def rescoped(value: Value) -> Value:
            parts = []
            for part in value:
                # Scope 0 holds the fields typed by the user
                if isinstance(part, Field) and part.scope:
                    if part.scope not in fresh:
                        fresh[part.scope] = next(self.scopes)
                    part = replace(part, scope=fresh[part.scope])
                parts.append(part)
            return tuple(parts)

        map_values([node], rescoped)


def _last_scope(nodes: list[Node]) -> int:
    scopes = [0]

    def collect(value: Value) -> Value:
        scopes.extend(part.scope for part in value if isinstance(part, Field))
        return value

    map_values(nodes, collect)
    return max(scopes)


def apply_numbering(abbreviation: Abbreviation) -> None:
    for node in abbreviation.children:
        _number(node)


def _number(node: Node) -> None:
    repeater = node.repeat or _SINGLE

    if isinstance(node, Text):
        node.value = number_value(node.value, repeater)
        return

    if isinstance(node, Group):
        # Groups are gone after unrolling
        raise TypeError("numbering runs on unrolled trees only")

    if node.name:
        node.name = number_text(node.name, repeater)
    if node.id is not None:
        node.id = number_value(node.id, repeater)
    node.classes = [number_value(value, repeater) for value in node.classes]
    for attribute in node.attributes:
        attribute.name = number_text(attribute.name, repeater)
        attribute.value = number_value(attribute.value, repeater)
    if node.text is not None:
        node.text = number_value(node.text, repeater)

    for child in node.children:
        _number(child)


def number_value(value: Value, repeater: Repeater) -> Value:
    return tuple(
        number_text(part, repeater) if isinstance(part, str) else part
        for part in value
    )


def number_text(text: str, repeater: Repeater) -> str:
    """Replace ``$`` runs in ``text`` with the repeater's number."""
    if "$" not in text:
        return text

    def replace(match: re.Match) -> str:
        dollars = match.group(1)
        if dollars is None:
            return "$"

        reverse, base = match.group(2), match.group(3)
        start = int(base) if base else 1
        if reverse:
            value = repeater.count - repeater.index + start
        else:
            value = repeater.index + start - 1
        return str(value).zfill(len(dollars))

    return _NUMBERING.sub(replace, text)
