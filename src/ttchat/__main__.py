"""Entry point for ``python -m ttchat``.

Provides a CLI that loads configuration, builds the Gemini and DynamoDB
clients, and serves the HTTP API with uvicorn.  Uses stdlib
:mod:`argparse` for argument parsing.

Subcommands:
    serve -- Default. Start the HTTP server.

Exit codes:
    0 -- Server shut down normally.
    1 -- Configuration error (e.g. missing GEMINI_API_KEY).
    2 -- Argument parsing error (handled by argparse).
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace

import uvicorn
from fastapi import FastAPI

from ttchat.annotation import SentenceAnnotator
from ttchat.config import ConfigError, Settings, load_settings
from ttchat.llm import GeminiClient
from ttchat.log import setup_logging
from ttchat.server import create_app
from ttchat.session import ConversationSession
from ttchat.store import TranscriptStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="ttchat",
        description="Japanese conversation-practice chat backend.",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP server.")
    serve_parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Interface to bind (default: 0.0.0.0).",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (defaults to PORT from config, else 1994).",
    )
    serve_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug-level logging.",
    )
    return parser


def _resolve_command(parser: argparse.ArgumentParser, argv: list[str]) -> argparse.Namespace:
    """Parse *argv*, prepending the implicit ``serve`` subcommand when absent."""
    if not argv or (argv[0] not in {"serve", "-h", "--help"}):
        argv = ["serve", *argv]
    return parser.parse_args(argv)


def build_app(settings: Settings) -> FastAPI:
    """Construct the collaborators from *settings* and wire the app."""
    llm = GeminiClient(api_key=settings.gemini_api_key, model=settings.model)
    store = TranscriptStore(table_name=settings.table_name, region_name=settings.aws_region)
    session = ConversationSession(store=store, llm=llm)
    annotator = SentenceAnnotator(llm=llm)
    return create_app(session, annotator, model_id=settings.model)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return a process exit code."""
    parser = build_parser()
    args = _resolve_command(parser, sys.argv[1:] if argv is None else argv)

    try:
        settings = load_settings()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.port is not None:
        settings = replace(settings, port=args.port)

    try:
        setup_logging("DEBUG" if args.verbose else settings.log_level)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.info("Loaded %r", settings)
    app = build_app(settings)

    logger.info("Server running on port %d", settings.port)
    uvicorn.run(app, host=args.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
