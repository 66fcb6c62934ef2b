"""
Tests for emmetls/lsp/capabilities/capabilities.py

The manager is exercised with small stand-in capabilities so that the
aggregation and error isolation can be checked on their own.
"""
from __future__ import annotations

import pytest
from unittest.mock import MagicMock

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    CompletionList,
    CompletionParams,
    InsertTextFormat,
    MessageType,
    Position,
    TextDocumentIdentifier,
)

from emmetls.lsp.capabilities.abbreviation_capabilities import (
    AbbreviationCompletionCapability,
)
from emmetls.lsp.capabilities.capabilities import (
    CapabilityManager,
    CompletionCapability,
)
from emmetls.lsp.emmet_language_server import EmmetLanguageServer


class StaticCompletion(CompletionCapability):
    """Completion capability returning fixed items."""

    def __init__(self, server, items, handles=True, incomplete=False):
        super().__init__(server)
        self.items = items
        self.handles = handles
        self.incomplete = incomplete

    @property
    def name(self) -> str:
        return "static"

    async def can_handle(self, params: CompletionParams) -> bool:
        return self.handles

    async def complete(self, params: CompletionParams) -> CompletionList:
        return CompletionList(is_incomplete=self.incomplete, items=list(self.items))


class BrokenCompletion(StaticCompletion):
    @property
    def name(self) -> str:
        return "broken"

    async def complete(self, params: CompletionParams) -> CompletionList:
        raise ValueError("bad state")

    async def resolve(self, item: CompletionItem) -> CompletionItem:
        raise ValueError("cannot resolve")


@pytest.fixture
def mock_server() -> MagicMock:
    server = MagicMock(spec=EmmetLanguageServer)
    server.window_log_message = MagicMock()
    server.settings = {}
    return server


@pytest.fixture
def params() -> CompletionParams:
    return CompletionParams(
        text_document=TextDocumentIdentifier(uri="file:///test.html"),
        position=Position(line=0, character=0),
    )


class TestCapabilityManager:
    """Tests for CapabilityManager."""

    def test_default_capabilities(self, mock_server):
        manager = CapabilityManager(mock_server)

        capability = manager.capabilities["abbreviation_completion"]
        assert isinstance(capability, AbbreviationCompletionCapability)
        assert capability.server is mock_server

    def test_get_capabilities_by_type(self, mock_server):
        capability = StaticCompletion(mock_server, [])
        manager = CapabilityManager(mock_server, {"static": capability})

        assert manager.get_capabilities_by_type(CompletionCapability) == [capability]

    @pytest.mark.asyncio
    async def test_completion_aggregates(self, mock_server, params):
        manager = CapabilityManager(
            mock_server,
            {
                "one": StaticCompletion(mock_server, [CompletionItem(label="a")]),
                "two": StaticCompletion(
                    mock_server, [CompletionItem(label="b")], incomplete=True
                ),
                "off": StaticCompletion(
                    mock_server, [CompletionItem(label="c")], handles=False
                ),
            },
        )

        result = await manager.handle_completion(params)

        assert [item.label for item in result.items] == ["a", "b"]
        assert result.is_incomplete is True

    @pytest.mark.asyncio
    async def test_failing_capability_is_isolated(self, mock_server, params):
        manager = CapabilityManager(
            mock_server,
            {
                "broken": BrokenCompletion(mock_server, []),
                "one": StaticCompletion(mock_server, [CompletionItem(label="a")]),
            },
        )

        result = await manager.handle_completion(params)

        assert [item.label for item in result.items] == ["a"]
        logged = mock_server.window_log_message.call_args.args[0]
        assert logged.type == MessageType.Error
        assert logged.message == "Completion error in broken: bad state"

    @pytest.mark.asyncio
    async def test_no_capabilities(self, mock_server, params):
        manager = CapabilityManager(mock_server, {})

        result = await manager.handle_completion(params)

        assert result == CompletionList(is_incomplete=False, items=[])

    @pytest.mark.asyncio
    async def test_resolve(self, mock_server):
        manager = CapabilityManager(mock_server)
        item = CompletionItem(label="ul>li", kind=CompletionItemKind.Snippet)

        resolved = await manager.handle_completion_resolve(item)

        assert resolved.insert_text_format == InsertTextFormat.Snippet

    @pytest.mark.asyncio
    async def test_resolve_error_keeps_item(self, mock_server):
        manager = CapabilityManager(
            mock_server, {"broken": BrokenCompletion(mock_server, [])}
        )
        item = CompletionItem(label="x")

        resolved = await manager.handle_completion_resolve(item)

        assert resolved is item
        logged = mock_server.window_log_message.call_args.args[0]
        assert logged.message == "Completion resolve error in broken: cannot resolve"
