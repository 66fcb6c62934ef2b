from lsprotocol.types import (
    COMPLETION_ITEM_RESOLVE,
    INITIALIZE,
    INITIALIZED,
    TEXT_DOCUMENT_COMPLETION,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    CompletionItem,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    DidChangeConfigurationParams,
    InitializedParams,
    InitializeParams,
    LogMessageParams,
    MessageType,
    Registration,
    RegistrationParams,
)

from emmetls.lsp.capabilities.capabilities import CapabilityManager
from emmetls.lsp.emmet_language_server import EmmetLanguageServer


def create_server() -> EmmetLanguageServer:
    """
    Creates and returns a configured Language Server instance.

    The LanguageServer class from pygls handles:
    - JSON-RPC communication with clients (editors)
    - Request/response lifecycle
    - Notifications and event handling
    """
    server = EmmetLanguageServer("emmetls", "0.1.0")

    @server.feature(INITIALIZE)
    async def initialize(ls: EmmetLanguageServer, params: InitializeParams):
        """
        Initialize the server and set up any necessary state.
        """
        workspace = params.capabilities.workspace
        ls.supports_configuration = bool(workspace and workspace.configuration)
        ls.supports_dynamic_configuration = bool(
            workspace
            and workspace.did_change_configuration
            and workspace.did_change_configuration.dynamic_registration
        )

        # Clients without workspace/configuration send settings up front
        ls.update_settings(params.initialization_options)

        ls.capability_manager = CapabilityManager(ls)

        ls.window_log_message(
            LogMessageParams(MessageType.Info, "Emmet language server initialized")
        )

    @server.feature(INITIALIZED)
    async def initialized(ls: EmmetLanguageServer, params: InitializedParams):
        if ls.supports_dynamic_configuration:
            try:
                await ls.client_register_capability_async(
                    RegistrationParams(
                        registrations=[
                            Registration(
                                id="emmetls-did-change-configuration",
                                method=WORKSPACE_DID_CHANGE_CONFIGURATION,
                            )
                        ]
                    )
                )
            except Exception as e:
                ls.window_log_message(
                    LogMessageParams(
                        MessageType.Warning,
                        f"Could not register for configuration changes: {e}",
                    )
                )

        if ls.supports_configuration:
            await ls.load_configuration()

    @server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
    async def did_change_configuration(
        ls: EmmetLanguageServer, params: DidChangeConfigurationParams
    ):
        # Pull clients send an empty notification and expect a re-query
        if ls.supports_configuration:
            await ls.load_configuration()
        else:
            ls.update_settings(params.settings)

    # Register aggregated handlers
    @server.feature(
        TEXT_DOCUMENT_COMPLETION, CompletionOptions(resolve_provider=True)
    )
    async def completion(ls: EmmetLanguageServer, params: CompletionParams):
        if ls.capability_manager:
            return await ls.capability_manager.handle_completion(params)
        return CompletionList(is_incomplete=False, items=[])

    @server.feature(COMPLETION_ITEM_RESOLVE)
    async def completion_resolve(ls: EmmetLanguageServer, item: CompletionItem):
        if ls.capability_manager:
            return await ls.capability_manager.handle_completion_resolve(item)
        return item

    return server
