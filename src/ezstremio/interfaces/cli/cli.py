from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog
import uvicorn

from ezstremio.infrastructure.config import load_config
from ezstremio.infrastructure.logging.setup import configure_logging
from ezstremio.interfaces.app import create_app

log = structlog.get_logger(__name__)

DEFAULT_PORT = 8080


def _parse_args(argv: Iterable[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="ezstremio")

    # Server options
    parser.add_argument(
        "--host",
        default=None,
        help="Bind host (overrides HOST env).",
    )
    parser.add_argument(
        "--port",
        default=None,
        type=int,
        help="Bind port (overrides PORT env).",
    )

    # Config wiring flags (no business logic)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file.",
    )
    parser.add_argument(
        "--dotenv",
        default=None,
        help="Path to .env file (default: ./.env when present).",
    )
    parser.add_argument(
        "--search-mode",
        default=None,
        choices=["playwright", "httpx"],
        help="Override the search fetcher.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override log level.",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log format.",
    )

    return parser.parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.search_mode:
        overrides["search_mode"] = args.search_mode
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.log_format:
        overrides["log_format"] = args.log_format
    return overrides


def start(argv: Iterable[str] | None = None) -> None:
    """
    Process entrypoint.

    Config is loaded exactly once here; the FastAPI app is built from it.
    """
    if argv is None:
        argv = sys.argv[1:]

    args = _parse_args(argv)

    config_path = Path(args.config) if args.config else None
    if args.dotenv:
        dotenv_path: Path | None = Path(args.dotenv)
    else:
        default_dotenv = Path(".env")
        dotenv_path = default_dotenv if default_dotenv.exists() else None

    config = load_config(
        config_path=config_path,
        dotenv_path=dotenv_path,
        cli_overrides=_cli_overrides(args),
    )

    # PORT/HOST are read after .env has been loaded into the environment.
    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = int(args.port or os.getenv("PORT", str(DEFAULT_PORT)))

    log_config = configure_logging(config)
    log.info("addon_starting", manifest=f"http://localhost:{port}/manifest.json")

    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        log_config=log_config,
    )


if __name__ == "__main__":
    raise SystemExit(start())
