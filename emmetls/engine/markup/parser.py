"""
Markup abbreviation parser.

Builds the raw tree from tokens. Operators are tree shape:

- ``>`` moves the insertion point into the last node
- ``+`` keeps the insertion point
- ``^`` moves the insertion point up one level per character

The insertion point is a path of child indices from the statement root,
so climbing up is a ``pop()`` and no node ever points at its parent.
"""
from __future__ import annotations

from emmetls.engine.errors import ParseError
from emmetls.engine.fields import parse_fields
from emmetls.engine.markup.nodes import (
    Abbreviation,
    Attribute,
    Element,
    Group,
    Node,
    Repeater,
    Text,
)
from emmetls.engine.markup.tokenizer import (
    OPERATORS,
    Token,
    TokenKind,
    tokenize,
)


def parse_tree(abbreviation: str) -> Abbreviation:
    """
    Parse an abbreviation into a raw tree (groups and repeats kept).

    Raises:
        ParseError: If the abbreviation is malformed
    """
    return _Parser(abbreviation, tokenize(abbreviation)).parse()


class _Parser:
    def __init__(self, abbreviation: str, tokens: list[Token]) -> None:
        self.abbreviation = abbreviation
        self.tokens = tokens
        self.pos = 0

    # ===== Token stream =====

    def _peek(self) -> Token | None:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _next(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def _accept(self, kind: TokenKind) -> Token | None:
        token = self._peek()
        if token is not None and token.kind == kind:
            self.pos += 1
            return token
        return None

    def _error(self, message: str, offset: int | None = None) -> ParseError:
        if offset is None:
            token = self._peek()
            offset = token.offset if token else len(self.abbreviation)
        return ParseError(message, offset, self.abbreviation)

    # ===== Grammar =====

    def parse(self) -> Abbreviation:
        if not self.tokens:
            raise self._error("Empty abbreviation", 0)

        children = self._statements()

        token = self._peek()
        if token is not None:
            raise self._error(f"Unexpected {self.abbreviation[token.offset]!r}")

        return Abbreviation(children=children)

    def _statements(self) -> list[Node]:
        root = Group()
        path: list[int] = []

        while True:
            token = self._peek()
            if token is None or token.kind == TokenKind.GROUP_CLOSE:
                break

            node = self._item()
            _container(root, path).children.append(node)

            operator = self._peek()
            if operator is None or operator.kind == TokenKind.GROUP_CLOSE:
                break

            if operator.kind == TokenKind.CHILD:
                self._next()
                if isinstance(node, Text):
                    raise self._error("Text cannot have children", operator.offset)
                path.append(len(_container(root, path).children) - 1)
            elif operator.kind == TokenKind.SIBLING:
                self._next()
            elif operator.kind == TokenKind.CLIMB:
                while self._accept(TokenKind.CLIMB):
                    if path:
                        path.pop()
            else:
                raise self._error(
                    f"Unexpected {self.abbreviation[operator.offset]!r}"
                )

            self._expect_operand(operator)

        return root.children

    def _expect_operand(self, operator: Token) -> None:
        token = self._peek()
        if (
            token is None
            or token.kind == TokenKind.GROUP_CLOSE
            or token.kind in OPERATORS
        ):
            raise self._error(
                f"Operator {operator.value!r} has no right-hand operand",
                operator.offset,
            )

    def _item(self) -> Node:
        token = self._peek()
        assert token is not None

        if token.kind in OPERATORS:
            raise self._error(
                f"Operator {token.value!r} has no left-hand operand", token.offset
            )

        if token.kind == TokenKind.GROUP_OPEN:
            return self._group()

        return self._element()

    def _group(self) -> Group:
        opening = self._next()
        children = self._statements()

        if not self._accept(TokenKind.GROUP_CLOSE):
            raise self._error("Unclosed group", opening.offset)
        if not children:
            raise self._error("Empty group", opening.offset)

        return Group(children=children, repeat=self._repeat(), offset=opening.offset)

    def _element(self) -> Element | Text:
        token = self._peek()
        assert token is not None
        element = Element(offset=token.offset)
        consumed = False

        literal = self._accept(TokenKind.LITERAL)
        if literal:
            element.name = literal.value
            consumed = True

        while True:
            token = self._peek()
            if token is None:
                break

            if token.kind == TokenKind.HASH:
                self._next()
                element.id = parse_fields(self._expect_literal("id").value)
            elif token.kind == TokenKind.DOT:
                self._next()
                element.add_class(parse_fields(self._expect_literal("class name").value))
            elif token.kind == TokenKind.ATTRIBUTES:
                self._next()
                for attribute in _parse_attributes(token, self.abbreviation):
                    _add_attribute(element, attribute)
            elif token.kind == TokenKind.TEXT:
                self._next()
                text = parse_fields(token.value)
                element.text = text if element.text is None else element.text + text
            else:
                break

            consumed = True

        if not consumed:
            raise self._error(
                f"Unexpected {self.abbreviation[token.offset]!r}"
                if token else "Unexpected end"
            )

        # Repeat and close markers may come in either order
        for _ in range(2):
            if element.repeat is None and self._peek_kind(TokenKind.REPEAT):
                element.repeat = self._repeat()
            elif self._accept(TokenKind.CLOSE):
                element.self_closing = True

        if (
            element.name is None
            and element.id is None
            and not element.classes
            and not element.attributes
            and not element.self_closing
            and element.text is not None
        ):
            return Text(value=element.text, repeat=element.repeat, offset=element.offset)

        return element

    def _peek_kind(self, kind: TokenKind) -> bool:
        token = self._peek()
        return token is not None and token.kind == kind

    def _expect_literal(self, what: str) -> Token:
        token = self._accept(TokenKind.LITERAL)
        if token is None:
            raise self._error(f"Expected {what}")
        return token

    def _repeat(self) -> Repeater | None:
        token = self._accept(TokenKind.REPEAT)
        if token is None:
            return None
        if not token.value:
            raise self._error("Missing repeat count", token.offset)

        count = int(token.value)
        if count < 1:
            raise self._error("Repeat count must be positive", token.offset)

        return Repeater(count=count)


def _container(root: Group, path: list[int]) -> Element | Group:
    """Resolve an insertion path to the node that receives new children."""
    node: Element | Group = root
    for index in path:
        child = node.children[index]
        assert not isinstance(child, Text)
        node = child
    return node


def _add_attribute(element: Element, attribute: Attribute) -> None:
    """Add an attribute, folding ``id`` and ``class`` into the element."""
    name = attribute.name.lower()
    if name == "id":
        element.id = attribute.value
        return
    if name == "class":
        for value in _split_classes(attribute.value):
            element.add_class(value)
        return

    for existing in element.attributes:
        if existing.name == attribute.name:
            existing.value = attribute.value
            return
    element.attributes.append(attribute)


def _split_classes(value):
    """Split a plain class attribute on whitespace; fielded values stay whole."""
    if len(value) == 1 and isinstance(value[0], str):
        return [(name,) for name in value[0].split()]
    return [value] if value else []


# ===== Attribute sets =====

def _parse_attributes(token: Token, abbreviation: str) -> list[Attribute]:
    """
    Parse the inside of ``[...]``.

    Supports ``name``, ``name=value``, ``name="value"`` and ``name='value'``,
    separated by whitespace.
    """
    source = token.value
    base = token.offset + 1
    attributes: list[Attribute] = []
    pos = 0
    size = len(source)

    while pos < size:
        if source[pos].isspace():
            pos += 1
            continue

        start = pos
        while pos < size and not source[pos].isspace() and source[pos] not in "='\"":
            pos += 1
        name = source[start:pos]
        if not name:
            raise ParseError("Expected attribute name", base + pos, abbreviation)

        if pos < size and source[pos] == "=":
            pos += 1
            pos, raw = _attribute_value(source, pos, base, abbreviation)
            attributes.append(Attribute(name=name, value=parse_fields(raw)))
        else:
            attributes.append(Attribute(name=name))

    return attributes


def _attribute_value(
    source: str, pos: int, base: int, abbreviation: str
) -> tuple[int, str]:
    size = len(source)
    if pos >= size or source[pos].isspace():
        return pos, ""

    ch = source[pos]
    if ch in "'\"":
        closing = ch
        chars: list[str] = []
        pos += 1
        while pos < size and source[pos] != closing:
            if source[pos] == "\\" and pos + 1 < size:
                nxt = source[pos + 1]
                chars.append("\\$" if nxt == "$" else nxt)
                pos += 2
                continue
            chars.append(source[pos])
            pos += 1
        if pos >= size:
            raise ParseError("Unclosed attribute value", base + pos, abbreviation)
        return pos + 1, "".join(chars)

    start = pos
    while pos < size and not source[pos].isspace():
        pos += 1
    return pos, source[start:pos]
