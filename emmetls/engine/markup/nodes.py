"""
Markup abbreviation tree.

The node set is closed: ``Element``, ``Text`` and ``Group``. ``Group`` only
exists while parsing (it carries operator precedence and repeats) and is
dissolved before the tree reaches the serializer.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from emmetls.engine.fields import Value


@dataclass(frozen=True)
class Repeater:
    """Multiplier info: ``count`` copies, this node is copy ``index`` (1-based)."""

    count: int
    index: int = 1


@dataclass
class Attribute:
    name: str
    value: Value = ()


@dataclass
class Element:
    """A tag with its shorthand modifiers and children."""

    name: str | None = None
    id: Value | None = None
    classes: list[Value] = field(default_factory=list)
    attributes: list[Attribute] = field(default_factory=list)
    text: Value | None = None
    children: list[Node] = field(default_factory=list)
    repeat: Repeater | None = None
    self_closing: bool = False

    # Offset of the element in the source abbreviation
    offset: int = 0

    def add_class(self, value: Value) -> None:
        if value and value not in self.classes:
            self.classes.append(value)


@dataclass
class Text:
    """Literal text at element position, e.g. ``{Click here}``."""

    value: Value
    repeat: Repeater | None = None
    offset: int = 0


@dataclass
class Group:
    """Parenthesized statements, e.g. ``(li>a)*2``."""

    children: list[Node] = field(default_factory=list)
    repeat: Repeater | None = None
    offset: int = 0


Node = Element | Text | Group


@dataclass
class Abbreviation:
    """Root of a parsed markup abbreviation."""

    children: list[Node] = field(default_factory=list)


def map_values(nodes: list[Node], func: Callable[[Value], Value]) -> None:
    """Rewrite every text-bearing value (ids, classes, attributes, text) in place."""
    for node in nodes:
        if isinstance(node, Text):
            node.value = func(node.value)
            continue

        if isinstance(node, Element):
            if node.id is not None:
                node.id = func(node.id)
            node.classes = [func(value) for value in node.classes]
            for attribute in node.attributes:
                attribute.value = func(attribute.value)
            if node.text is not None:
                node.text = func(node.text)

        map_values(node.children, func)
