"""
Basic tests for the Emmet Language Server.

These tests verify that the server can be created and has the expected features registered.
"""

from emmetls.lsp.server import create_server
from lsprotocol.types import (
    COMPLETION_ITEM_RESOLVE,
    TEXT_DOCUMENT_COMPLETION,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
)


def test_server_creation():
    """Test that the server can be created successfully."""
    server = create_server()
    assert server is not None
    assert server.name == "emmetls"
    assert server.version == "0.1.0"
    assert server.settings == {}


def test_server_has_completion_feature():
    """Test that completion feature is registered."""
    server = create_server()

    # Check that completion handler is registered
    assert TEXT_DOCUMENT_COMPLETION in server.protocol.fm._features


def test_completion_advertises_resolve():
    """Test that the completion options announce a resolve step."""
    server = create_server()

    options = server.protocol.fm.feature_options[TEXT_DOCUMENT_COMPLETION]
    assert options.resolve_provider is True


def test_server_has_completion_resolve_feature():
    """Test that completion resolve feature is registered."""
    server = create_server()

    assert COMPLETION_ITEM_RESOLVE in server.protocol.fm._features


def test_server_has_configuration_feature():
    """Test that configuration change handler is registered."""
    server = create_server()

    assert WORKSPACE_DID_CHANGE_CONFIGURATION in server.protocol.fm._features
