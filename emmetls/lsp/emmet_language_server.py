from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lsprotocol.types import (
    ConfigurationItem,
    ConfigurationParams,
    LogMessageParams,
    MessageType,
)
from pygls.lsp.server import LanguageServer

from emmetls.lsp.capabilities.capabilities import CapabilityManager

# Name of the client settings section holding emmet options
SETTINGS_SECTION = "emmet"


class EmmetLanguageServer(LanguageServer):
    """
    Custom Language Server with Emmet-specific attributes.

    Attributes:
        settings: Option overrides from the client (``output.indent``...),
            replaced wholesale on every configuration change
        capability_manager: Dispatches LSP requests to capabilities
        supports_configuration: Whether the client answers
            ``workspace/configuration`` requests
        supports_dynamic_configuration: Whether the client accepts a
            dynamic registration for configuration change notifications
    """

    def __init__(self, name: str, version: str):
        super().__init__(name, version)

        self.settings: dict[str, Any] = {}
        self.capability_manager: CapabilityManager | None = None
        self.supports_configuration: bool = False
        self.supports_dynamic_configuration: bool = False

    def update_settings(self, raw: Any) -> None:
        """
        Replace the current settings.

        Accepts either the whole settings object (``{"emmet": {...}}``) or
        the ``emmet`` section itself. Anything that is not a mapping resets
        to defaults.
        """
        if raw is None:
            return

        if isinstance(raw, Mapping) and isinstance(raw.get(SETTINGS_SECTION), Mapping):
            raw = raw[SETTINGS_SECTION]

        if not isinstance(raw, Mapping):
            self.settings = {}
            self.window_log_message(
                LogMessageParams(
                    type=MessageType.Warning,
                    message=f"Ignoring malformed {SETTINGS_SECTION} settings: {raw!r}",
                )
            )
            return

        self.settings = dict(raw)
        self.window_log_message(
            LogMessageParams(
                type=MessageType.Info,
                message=f"Loaded {len(self.settings)} {SETTINGS_SECTION} options",
            )
        )

    async def load_configuration(self) -> None:
        """Pull the settings section from the client."""
        try:
            result = await self.workspace_configuration_async(
                ConfigurationParams(items=[ConfigurationItem(section=SETTINGS_SECTION)])
            )
        except Exception as e:
            self.window_log_message(
                LogMessageParams(
                    type=MessageType.Error,
                    message=f"Failed to load configuration: {type(e).__name__}: {e}",
                )
            )
            return

        if result:
            self.update_settings(result[0])
