"""
Main entry point for the Emmet Language Server.

This file is executed when running: python -m emmetls

The server communicates with editors via stdin/stdout using JSON-RPC.
"""
import argparse
import os
import sys

from emmetls.lsp.server import create_server


def main(argv=None):
    """Start the language server on stdin/stdout, or TCP when asked to."""
    parser = argparse.ArgumentParser(description="Emmet abbreviation language server")
    parser.add_argument("--tcp", action="store_true", help="Listen on TCP instead of stdio")
    parser.add_argument("--host", default="127.0.0.1", help="TCP host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=2087, help="TCP port (default: 2087)")

    args = parser.parse_args(argv)

    # Check if we're in debug mode
    if os.getenv("DEBUG"):
        # stdout carries the protocol, so talk on stderr
        print("🔧 EMMET Server starting in DEBUG mode", file=sys.stderr)
        print("📡 Waiting for debugger to attach on port 5678...", file=sys.stderr)
        # Enable debugpy if in debug mode
        try:
            import debugpy  # type: ignore
            debugpy.listen(("127.0.0.1", 5678))
            debugpy.wait_for_client()
            print("🎯 Debugger attached! Continuing...", file=sys.stderr)
        except ImportError:
            print(
                "❌ debugpy not available - install with: pip install -e '.[dev]'",
                file=sys.stderr,
            )

    server = create_server()

    if args.tcp:
        server.start_tcp(args.host, args.port)
    else:
        # Start the server - it will listen on stdin/stdout for LSP messages
        # from the editor client
        server.start_io()


if __name__ == "__main__":
    main()
