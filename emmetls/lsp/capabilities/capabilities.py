"""
Completion capabilities and the manager that runs them.

Each capability decides whether it can handle a completion request; the
manager asks every capability that can, merges their items and keeps one
failing capability from breaking the whole request.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from lsprotocol.types import (
    CompletionItem,
    CompletionList,
    CompletionParams,
    LogMessageParams,
    MessageType,
)


if TYPE_CHECKING:
    from emmetls.lsp.emmet_language_server import EmmetLanguageServer


class Capability(ABC):
    """Base class for LSP capability handlers."""

    def __init__(self, server: EmmetLanguageServer) -> None:
        self.server = server

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this capability, used in log messages."""
        pass

    @abstractmethod
    async def can_handle(self, params) -> bool:
        """Check if the capability can handle the request."""
        pass


class CompletionCapability(Capability):
    """Base class for completion capabilities."""

    @abstractmethod
    async def can_handle(self, params: CompletionParams) -> bool:
        """
        Check if this capability can handle the completion request.

        Returns True if this capability should provide completions
        for the current context.
        """
        pass

    @abstractmethod
    async def complete(self, params: CompletionParams) -> CompletionList:
        """
        Provide completion items.

        Only called if can_handle() returns True.
        """
        pass

    async def resolve(self, item: CompletionItem) -> CompletionItem:
        """
        Fill in the details of a completion item the client selected.

        By default, returns the item unchanged.
        """
        return item


class CapabilityManager:
    """
    Central manager for all LSP capabilities.

    Usage:
        manager = CapabilityManager(server)
        result = await manager.handle_completion(params)
    """

    def __init__(
        self,
        server: EmmetLanguageServer,
        capabilities: dict[str, Capability] | None = None,
    ):
        self.server = server

        # Default capabilities
        if capabilities is None:
            from emmetls.lsp.capabilities.abbreviation_capabilities import (
                AbbreviationCompletionCapability,
            )

            capabilities = {
                "abbreviation_completion": AbbreviationCompletionCapability(server),
            }

        self.capabilities = capabilities

    def get_capabilities_by_type(self, capability_type: type) -> list[Capability]:
        """Get all capabilities of a specific type (e.g., all CompletionCapability)."""
        return [
            cap
            for cap in self.capabilities.values()
            if isinstance(cap, capability_type)
        ]

    async def handle_completion(self, params: CompletionParams) -> CompletionList:
        """
        Handle completion requests by delegating to capable handlers.

        This aggregates results from all completion capabilities that
        can handle the request. A failing capability contributes nothing.
        """
        all_items: list[CompletionItem] = []
        is_incomplete = False

        for capability in self.get_capabilities_by_type(CompletionCapability):
            try:
                if await capability.can_handle(params):
                    result = await capability.complete(params)  # pyright: ignore
                    all_items.extend(result.items)
                    is_incomplete = is_incomplete or result.is_incomplete
            except Exception as e:
                self.server.window_log_message(
                    LogMessageParams(
                        type=MessageType.Error,
                        message=f"Completion error in {capability.name}: {e}"
                    )
                )

        return CompletionList(is_incomplete=is_incomplete, items=all_items)

    async def handle_completion_resolve(self, item: CompletionItem) -> CompletionItem:
        """Let every completion capability fill in the selected item."""
        for capability in self.get_capabilities_by_type(CompletionCapability):
            try:
                item = await capability.resolve(item)  # pyright: ignore
            except Exception as e:
                self.server.window_log_message(
                    LogMessageParams(
                        type=MessageType.Error,
                        message=f"Completion resolve error in {capability.name}: {e}"
                    )
                )

        return item
