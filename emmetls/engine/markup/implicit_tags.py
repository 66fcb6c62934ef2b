"""Implicit tag names for elements written without one (``ul>.item``)."""
from __future__ import annotations

from emmetls.engine.markup.nodes import Abbreviation, Element, Node

DEFAULT_TAG = "div"

# parent tag -> tag of a nameless child
IMPLICIT_TAGS: dict[str, str] = {
    "p": "span",
    "ul": "li",
    "ol": "li",
    "table": "tr",
    "tr": "td",
    "tbody": "tr",
    "thead": "tr",
    "tfoot": "tr",
    "colgroup": "col",
    "select": "option",
    "optgroup": "option",
    "audio": "source",
    "video": "source",
    "object": "param",
    "map": "area",
}

INLINE_ELEMENTS = frozenset({
    "a", "abbr", "acronym", "applet", "b", "basefont", "bdo", "big", "br",
    "button", "cite", "code", "del", "dfn", "em", "font", "i", "iframe", "img",
    "input", "ins", "kbd", "label", "map", "object", "q", "s", "samp",
    "select", "small", "span", "strike", "strong", "sub", "sup", "textarea",
    "tt", "u", "var",
})


def is_inline_element(name: str | None) -> bool:
    return name is not None and name.lower() in INLINE_ELEMENTS


def implicit_tag(parent: str | None) -> str:
    """Tag name for a nameless element inside ``parent``."""
    if parent is None:
        return DEFAULT_TAG

    parent = parent.lower()
    if parent in IMPLICIT_TAGS:
        return IMPLICIT_TAGS[parent]
    if parent in INLINE_ELEMENTS:
        return "span"
    return DEFAULT_TAG


def resolve_implicit_tags(abbreviation: Abbreviation) -> None:
    _resolve(abbreviation.children, None)


def _resolve(nodes: list[Node], parent: str | None) -> None:
    for node in nodes:
        if isinstance(node, Element):
            if not node.name:
                node.name = implicit_tag(parent)
            _resolve(node.children, node.name)
