"""
Tests for EmmetLanguageServer settings handling.
"""
from __future__ import annotations

import pytest
from unittest.mock import AsyncMock, MagicMock

from lsprotocol.types import ConfigurationParams, MessageType

from emmetls.lsp.emmet_language_server import EmmetLanguageServer


@pytest.fixture
def server() -> EmmetLanguageServer:
    server = EmmetLanguageServer("emmetls", "0.1.0")
    server.window_log_message = MagicMock()
    return server


def last_log(server) -> tuple[MessageType, str]:
    params = server.window_log_message.call_args.args[0]
    return params.type, params.message


class TestUpdateSettings:
    """Tests for update_settings()."""

    def test_defaults(self, server):
        assert server.settings == {}
        assert server.capability_manager is None
        assert server.supports_configuration is False

    def test_whole_settings_object(self, server):
        server.update_settings({"emmet": {"output.indent": "  "}, "editor": {}})

        assert server.settings == {"output.indent": "  "}
        assert last_log(server) == (MessageType.Info, "Loaded 1 emmet options")

    def test_section_only(self, server):
        server.update_settings({"stylesheet.intUnit": "rem"})

        assert server.settings == {"stylesheet.intUnit": "rem"}

    def test_settings_are_replaced(self, server):
        server.update_settings({"output.indent": "  "})
        server.update_settings({"output.newline": "\r\n"})

        assert server.settings == {"output.newline": "\r\n"}

    def test_none_keeps_settings(self, server):
        server.update_settings({"output.indent": "  "})
        server.window_log_message.reset_mock()

        server.update_settings(None)

        assert server.settings == {"output.indent": "  "}
        server.window_log_message.assert_not_called()

    def test_malformed_settings_reset(self, server):
        server.update_settings({"output.indent": "  "})

        server.update_settings(["output.indent"])

        assert server.settings == {}
        level, message = last_log(server)
        assert level == MessageType.Warning
        assert message.startswith("Ignoring malformed emmet settings")


class TestLoadConfiguration:
    """Tests for load_configuration()."""

    @pytest.mark.asyncio
    async def test_pulls_emmet_section(self, server):
        server.workspace_configuration_async = AsyncMock(
            return_value=[{"output.indent": "    "}]
        )

        await server.load_configuration()

        params = server.workspace_configuration_async.call_args.args[0]
        assert isinstance(params, ConfigurationParams)
        assert [item.section for item in params.items] == ["emmet"]
        assert server.settings == {"output.indent": "    "}

    @pytest.mark.asyncio
    async def test_empty_answer(self, server):
        server.workspace_configuration_async = AsyncMock(return_value=[])

        await server.load_configuration()

        assert server.settings == {}

    @pytest.mark.asyncio
    async def test_client_error_is_logged(self, server):
        server.workspace_configuration_async = AsyncMock(
            side_effect=RuntimeError("unsupported")
        )

        await server.load_configuration()

        assert server.settings == {}
        assert last_log(server) == (
            MessageType.Error,
            "Failed to load configuration: RuntimeError: unsupported",
        )
