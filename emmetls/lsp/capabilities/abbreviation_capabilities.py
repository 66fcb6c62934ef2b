"""
Abbreviation-related LSP capabilities.

Offers the expansion of the abbreviation ending at the cursor as a single
snippet completion item.
"""
from __future__ import annotations

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionParams,
    InsertTextFormat,
    LogMessageParams,
    MessageType,
    Position,
    Range,
    TextEdit,
)

from emmetls.engine import MARKUP, STYLESHEET, ParseError, expand, extract, resolve_config
from emmetls.lsp.capabilities.capabilities import CompletionCapability

# Document languages expanded with the stylesheet grammar
STYLESHEET_LANGUAGES = frozenset({"css", "scss", "less"})


def syntax_type(language_id: str | None) -> str:
    """Pick the abbreviation grammar for a document language."""
    if language_id in STYLESHEET_LANGUAGES:
        return STYLESHEET
    return MARKUP


def escape_snippet_text(text: str) -> str:
    """Escape characters with a meaning in LSP snippet syntax."""
    return text.replace("\\", "\\\\").replace("$", "\\$").replace("}", "\\}")


def snippet_field(index: int, placeholder: str) -> str:
    """Render a tab stop in LSP snippet syntax."""
    if placeholder:
        return f"${{{index}:{placeholder}}}"
    return f"${{{index}}}"


class AbbreviationCompletionCapability(CompletionCapability):
    """Expand the abbreviation before the cursor into a snippet."""

    @property
    def name(self) -> str:
        return "abbreviation_completion"

    async def can_handle(self, params: CompletionParams) -> bool:
        doc = self.server.workspace.get_text_document(params.text_document.uri)
        return params.position.line < len(doc.lines)

    async def complete(self, params: CompletionParams) -> CompletionList:
        doc = self.server.workspace.get_text_document(params.text_document.uri)
        if params.position.line >= len(doc.lines):
            return CompletionList(is_incomplete=False, items=[])
        line = doc.lines[params.position.line].rstrip("\r\n")

        try:
            item = self.build_item(
                line,
                params.position.line,
                params.position.character,
                getattr(doc, "language_id", None),
            )
        except Exception as e:
            self.server.window_log_message(
                LogMessageParams(
                    type=MessageType.Error,
                    message=f"Abbreviation expansion failed: {type(e).__name__}: {e}",
                )
            )
            item = None

        return CompletionList(is_incomplete=True, items=[item] if item else [])

    def build_item(
        self,
        line: str,
        line_number: int,
        character: int,
        language_id: str | None,
    ) -> CompletionItem | None:
        """
        Build the completion item for the abbreviation ending at ``character``.

        Returns None when there is no abbreviation before the cursor or it
        does not parse.
        """
        syntax = syntax_type(language_id)
        found = extract(line, character, syntax)
        if found is None:
            return None

        options = dict(self.server.settings)
        options["output.field"] = snippet_field
        options["output.text"] = escape_snippet_text
        config = resolve_config(syntax, options)

        for option in config.rejected:
            self.server.window_log_message(
                LogMessageParams(
                    type=MessageType.Warning,
                    message=f"Ignoring invalid emmet option: {option}",
                )
            )

        try:
            expansion = expand(found.abbreviation, config)
        except ParseError as e:
            self.server.window_log_message(
                LogMessageParams(
                    type=MessageType.Warning,
                    message=f"Cannot expand {found.abbreviation!r} "
                    f"[{line_number}:{found.start}-{found.end}]: {e.message}",
                )
            )
            return None

        edit_range = Range(
            start=Position(line=line_number, character=found.start),
            end=Position(line=line_number, character=found.end),
        )

        return CompletionItem(
            label=found.abbreviation,
            detail=found.abbreviation,
            documentation=expansion,
            kind=CompletionItemKind.Snippet,
            text_edit=TextEdit(range=edit_range, new_text=expansion),
            insert_text_format=InsertTextFormat.Snippet,
            filter_text=found.abbreviation,
            data={
                "range": {
                    "start": {"line": line_number, "character": found.start},
                    "end": {"line": line_number, "character": found.end},
                },
                "expansion": expansion,
            },
        )

    async def resolve(self, item: CompletionItem) -> CompletionItem:
        if item.kind == CompletionItemKind.Snippet:
            item.insert_text_format = InsertTextFormat.Snippet
        return item
