"""blockpad - block editor kernel for the workspace UI.

The UI process spawns blockpad and talks JSON-RPC over its stdin/stdout.
Each editable rich-text field (task notes, project briefs) is one editor
session; the UI persists the blocks it receives in `editor/changed`.

Usage:
    blockpad                Start the stdio JSON-RPC server
    blockpad --help         Show this help message

Environment Variables:
    BLOCKPAD_DATA_DIR         Data directory for logs (default: ~/.blockpad)
    BLOCKPAD_OLLAMA_URL       Ollama API URL (default: http://127.0.0.1:11434)
    BLOCKPAD_OLLAMA_MODEL     Ollama model used for AI polish
    BLOCKPAD_POLISH_ENABLED   Enable AI polish (default: true)
    BLOCKPAD_LOG_LEVEL        Logging level (default: INFO)
"""

from __future__ import annotations

import argparse

from . import __version__
from .logging_setup import configure_logging
from .settings import settings
from .ui_rpc_server import run_stdio_server


def main() -> None:
    """Main entry point for the blockpad kernel."""
    parser = argparse.ArgumentParser(
        prog="blockpad",
        description="blockpad - block editor kernel (JSON-RPC over stdio)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.log_level.upper(),
        help=f"Logging level (default: {settings.log_level})",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Log to stderr only",
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    args = parser.parse_args()

    configure_logging(args.log_level, log_to_file=not args.no_log_file)
    run_stdio_server()


if __name__ == "__main__":
    main()
