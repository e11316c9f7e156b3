"""CLI entrypoint for lumo-chat."""

from __future__ import annotations

import argparse
from importlib import metadata
from typing import Sequence

from .app import LumoChatApp
from .config import ensure_config_dir, load_config


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lumo-chat", description="LumoAI terminal chat client")
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Backend base URL, overriding server.host from the config file",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Ensure configuration exists, handle CLI flags, and run the TUI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("lumo-chat")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"lumo-chat {version}")
        return

    ensure_config_dir()
    overrides = {"server": {"host": args.host}} if args.host else None
    app = LumoChatApp(config=load_config(overrides=overrides))
    app.run()


if __name__ == "__main__":
    main()
