#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from textual.theme import BUILTIN_THEMES

from .app import HackerNewsApp
from .config import CONFIG_PATH, DEFAULT_THEME, load_config, setup_logging
from .errors import TerminalError

logger = logging.getLogger("hn")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hacker News TUI Client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--theme",
        type=str,
        help=f"Set theme for this run. Available: {', '.join(sorted(BUILTIN_THEMES))}",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=CONFIG_PATH,
        help=f"Path to the config file (default: {CONFIG_PATH})",
    )
    return parser


def resolve_theme(requested: Optional[str]) -> str:
    theme_name = requested or DEFAULT_THEME
    if theme_name not in BUILTIN_THEMES:
        print(
            f"Theme '{theme_name}' not found, falling back to {DEFAULT_THEME}.",
            file=sys.stderr,
        )
        theme_name = DEFAULT_THEME
    return theme_name


def run(app: HackerNewsApp) -> int:
    """Run the UI until it exits; any failure of the terminal layer is fatal."""
    try:
        app.run()
    except Exception as e:
        raise TerminalError(f"Terminal UI failed: {e}") from e
    return app.return_code or 0


# --- Entrypoint ---
def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config(args.config)
    theme_name = resolve_theme(args.theme or config.get("theme"))
    logger.info("Using theme: %s", theme_name)

    try:
        app = HackerNewsApp(config=config, theme=theme_name)
        code = run(app)
    except TerminalError as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
