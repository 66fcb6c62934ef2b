"""
HTML output for markup abbreviations.

Layout rules:

- Top-level nodes and the contents of block elements go on their own
  lines, indented one ``indent`` per depth.
- An element whose contents are all inline (text and inline tags) stays on
  one line, unless it holds ``inline_break`` or more inline elements.
- Empty elements and empty attribute values become tab stops.

Tab stops are numbered in one left-to-right, depth-first pass, so the tab
order follows the reading order of the output.
"""
from __future__ import annotations

from emmetls.engine.config import Config
from emmetls.engine.fields import Field, FieldNumbering, Value
from emmetls.engine.markup.implicit_tags import is_inline_element
from emmetls.engine.markup.nodes import Abbreviation, Element, Group, Node, Text

_SELF_CLOSING_SUFFIX = {
    "html": ">",
    "xhtml": " />",
    "xml": "/>",
}


def stringify_markup(abbreviation: Abbreviation, config: Config) -> str:
    """Render a parsed markup abbreviation as HTML."""
    return _HtmlWriter(config).render_root(abbreviation.children)


class _HtmlWriter:
    def __init__(self, config: Config) -> None:
        self.config = config
        self.fields = FieldNumbering()

    def render_root(self, nodes: list[Node]) -> str:
        if self._is_inline_run(nodes):
            return "".join(self._render(node, 0) for node in nodes)
        return self.config.newline.join(self._render(node, 0) for node in nodes)

    # ===== Nodes =====

    def _render(self, node: Node, depth: int) -> str:
        if isinstance(node, Text):
            return self._value(node.value)
        if isinstance(node, Element):
            return self._element(node, depth)
        if isinstance(node, Group):
            raise TypeError("groups must be unrolled before output")
        raise TypeError(f"unknown node {node!r}")

    def _element(self, element: Element, depth: int) -> str:
        name = self.config.format_text(element.name or "")
        opening = f"<{name}{self._attributes(element)}"
        contents = _contents(element)

        if not contents and self._is_self_closing(element):
            return opening + _SELF_CLOSING_SUFFIX[self.config.self_closing_style]

        closing = f"</{name}>"

        if not contents:
            return f"{opening}>{self._field()}{closing}"

        if self._is_inline_run(contents):
            body = "".join(self._render(node, depth + 1) for node in contents)
            return f"{opening}>{body}{closing}"

        newline = self.config.newline
        inner = self.config.indent * (depth + 1)
        lines = [f"{opening}>"]
        lines.extend(inner + self._render(node, depth + 1) for node in contents)
        lines.append(self.config.indent * depth + closing)
        return newline.join(lines)

    def _attributes(self, element: Element) -> str:
        quote = self.config.quote
        parts: list[str] = []

        if element.id is not None:
            parts.append(f" id={quote}{self._attribute_value(element.id)}{quote}")

        if element.classes:
            joined: Value = ()
            for value in element.classes:
                joined = joined + (" ",) + value if joined else value
            parts.append(f" class={quote}{self._attribute_value(joined)}{quote}")

        for attribute in element.attributes:
            value = self._attribute_value(attribute.value)
            name = self.config.format_text(attribute.name)
            parts.append(f" {name}={quote}{value}{quote}")

        return "".join(parts)

    def _attribute_value(self, value: Value) -> str:
        if not value:
            return self._field()
        return self._value(value)

    # ===== Values and fields =====

    def _value(self, value: Value) -> str:
        out: list[str] = []
        for part in value:
            if isinstance(part, Field):
                index = self.fields.explicit(part.index, part.scope)
                out.append(self.config.format_field(index, part.placeholder))
            else:
                out.append(self.config.format_text(part))
        return "".join(out)

    def _field(self) -> str:
        return self.config.format_field(self.fields.auto(), "")

    # ===== Layout =====

    def _is_self_closing(self, element: Element) -> bool:
        if element.self_closing:
            return True
        return (element.name or "").lower() in self.config.self_closing_tags

    def _is_inline_run(self, nodes: list[Node]) -> bool:
        """Check if ``nodes`` can be written on a single line."""
        if not all(_is_inline_level(node) for node in nodes):
            return False

        limit = self.config.inline_break
        elements = sum(1 for node in nodes if isinstance(node, Element))
        return limit == 0 or elements < limit


def _contents(element: Element) -> list[Node]:
    """Element text (as a leading text node) followed by its children."""
    if element.text:
        return [Text(value=element.text), *element.children]
    return list(element.children)


def _is_inline_level(node: Node) -> bool:
    if isinstance(node, Text):
        return True
    if isinstance(node, Element):
        return is_inline_element(node.name) and all(
            _is_inline_level(child) for child in _contents(node)
        )
    return False
