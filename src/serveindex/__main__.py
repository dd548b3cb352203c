"""serve-index entry point.

Command-line flags override the matching ``SERVE_INDEX_*`` environment
variables.
"""

from __future__ import annotations

import argparse
import logging
from importlib.metadata import version as get_version
from typing import Any

from serveindex.config import Settings
from serveindex.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="serve-index",
        description="Serve directory listings for a root directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  serve-index                        List the current directory on port 3001
  serve-index ~/Downloads --icons    Show file type icons
  serve-index . --view tiles -p 8080 Tiles view on port 8080
""",
    )
    parser.add_argument("root", nargs="?", default=None, help="Directory to serve (default: .)")
    parser.add_argument("--host", type=str, default=None, help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Port (default: 3001)")
    parser.add_argument(
        "--icons", action="store_true", default=None, help="Display file type icons"
    )
    parser.add_argument(
        "--hidden", action="store_true", default=None, help="List hidden (dot) files"
    )
    parser.add_argument(
        "--brief",
        action="store_true",
        default=None,
        help="Skip per-entry stat(); faster, but no sizes or dates",
    )
    parser.add_argument("--view", type=str, default=None, help="'details' or 'tiles'")
    parser.add_argument("--template", type=str, default=None, help="HTML template file")
    parser.add_argument("--stylesheet", type=str, default=None, help="CSS file")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level")
    parser.add_argument(
        "--version",
        "-v",
        action="version",
        version=f"%(prog)s {get_version('serve-index')}",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides: dict[str, Any] = {k: v for k, v in vars(args).items() if v is not None}
    return Settings(**overrides)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    setup_logging(level=settings.log_level)

    from serveindex.server import run_server

    try:
        run_server(settings)
    except KeyboardInterrupt:
        logger.info("Stopped")


if __name__ == "__main__":
    main()
