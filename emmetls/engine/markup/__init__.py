"""
Markup abbreviations: ``ul#nav>li.item$*3>a{Item $}`` and friends.

``parse_markup`` runs the whole front end:

1. tokenize and build the raw tree (``parser``)
2. expand snippet elements (``snippets``)
3. unroll ``*n`` repeats and dissolve groups (``repeat``)
4. name nameless elements from their parent (``implicit_tags``)
5. replace ``$`` numbering (``repeat``)

The result only contains ``Element`` and ``Text`` nodes and is ready for
``stringify_markup``.
"""
from __future__ import annotations

from emmetls.engine.config import Config
from emmetls.engine.markup.implicit_tags import resolve_implicit_tags
from emmetls.engine.markup.nodes import (
    Abbreviation,
    Attribute,
    Element,
    Group,
    Node,
    Repeater,
    Text,
)
from emmetls.engine.markup.parser import parse_tree
from emmetls.engine.markup.repeat import apply_numbering, unroll
from emmetls.engine.markup.snippets import resolve_snippets
from emmetls.engine.markup.stringify import stringify_markup


def parse_markup(abbreviation: str, config: Config) -> Abbreviation:
    """
    Parse a markup abbreviation into an output-ready tree.

    Raises:
        ParseError: If the abbreviation (or a snippet it uses) is malformed
    """
    tree = parse_tree(abbreviation)
    resolve_snippets(tree, config.markup_snippets)
    unroll(tree, config.max_repeat, abbreviation)
    resolve_implicit_tags(tree)
    apply_numbering(tree)
    return tree


__all__ = [
    "Abbreviation",
    "Attribute",
    "Element",
    "Group",
    "Node",
    "Repeater",
    "Text",
    "parse_markup",
    "stringify_markup",
]
