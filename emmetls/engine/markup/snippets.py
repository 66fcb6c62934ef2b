"""
Markup snippet resolution.

An element whose name is a snippet key is replaced by the parsed snippet.
Everything the user typed on that element (id, classes, attributes, text,
repeat, ``/``) is merged into the snippet's top-level nodes, and the user's
children are moved into the snippet's deepest element:

    a.btn>{Go}       ->  a[href].btn>{Go}
    !>div            ->  {<!DOCTYPE html>}+html>(head>...)+body>div
"""
from __future__ import annotations

import itertools
from collections.abc import Iterator, Mapping
from dataclasses import replace

from emmetls.engine.fields import Field, Value
from emmetls.engine.markup.nodes import (
    Abbreviation,
    Element,
    Group,
    Node,
    Text,
    map_values,
)
from emmetls.engine.markup.parser import parse_tree


def resolve_snippets(abbreviation: Abbreviation, snippets: Mapping[str, str]) -> None:
    """Expand snippet elements in place."""
    abbreviation.children = _resolve(
        abbreviation.children, snippets, (), itertools.count(1)
    )


def _resolve(
    nodes: list[Node],
    snippets: Mapping[str, str],
    stack: tuple[str, ...],
    scopes: Iterator[int],
) -> list[Node]:
    result: list[Node] = []

    for node in nodes:
        if isinstance(node, Text):
            result.append(node)
            continue

        if isinstance(node, Group):
            node.children = _resolve(node.children, snippets, stack, scopes)
            result.append(node)
            continue

        snippet = snippets.get(node.name) if node.name else None
        # A snippet that refers to its own name is expanded only once
        if snippet is None or node.name in stack:
            node.children = _resolve(node.children, snippets, stack, scopes)
            result.append(node)
            continue

        # Fields of every snippet instance are numbered apart from the rest
        parsed = parse_tree(snippet).children
        _scope_fields(parsed, next(scopes))
        expanded = _resolve(parsed, snippets, stack + (node.name,), scopes)
        for top in expanded:
            _merge(top, node)

        children = _resolve(node.children, snippets, stack, scopes)
        deepest = _find_deepest(expanded)
        if deepest is not None:
            deepest.children.extend(children)
            result.extend(expanded)
        else:
            result.extend(expanded)
            result.extend(children)

    return result


def _merge(target: Node, source: Element) -> None:
    """Merge what the user typed on ``source`` into a snippet node."""
    if source.repeat is not None:
        target.repeat = source.repeat

    if not isinstance(target, Element):
        return

    target.offset = source.offset
    if source.id is not None:
        target.id = source.id
    for value in source.classes:
        target.add_class(value)
    for attribute in source.attributes:
        for existing in target.attributes:
            if existing.name == attribute.name:
                existing.value = attribute.value
                break
        else:
            target.attributes.append(attribute)
    if source.text is not None:
        target.text = source.text
    if source.self_closing:
        target.self_closing = True


def _find_deepest(nodes: list[Node]) -> Element | Group | None:
    """Follow the last child down to the innermost node that takes children."""
    if not nodes:
        return None

    container: Element | Group | None = None
    node = nodes[-1]
    while not isinstance(node, Text):
        container = node
        if not node.children:
            break
        node = node.children[-1]

    return container


def _scope_fields(nodes: list[Node], scope: int) -> None:
    map_values(nodes, lambda value: _scoped(value, scope))


def _scoped(value: Value, scope: int) -> Value:
    return tuple(
        replace(part, scope=scope) if isinstance(part, Field) else part
        for part in value
    )
