"""CLI entry point for the Searchspot server."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from searchspot.config.settings import Settings


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point for the Searchspot server."""
    parser = argparse.ArgumentParser(
        prog="searchspot",
        description="Searchspot — Search-query gateway for OpenSearch",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a YAML or TOML configuration file",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Server bind address (overrides config)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=None,
        help="Server port (overrides config)",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=int,
        default=None,
        help="Number of worker processes",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Searchspot {_get_version()}",
    )

    args = parser.parse_args(argv)

    from searchspot.config.settings import Settings
    from searchspot.observability.logging import setup_logging

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_file(config_path)
    else:
        settings = Settings()

    settings = apply_overrides(settings, args)
    setup_logging(settings.observability)

    import uvicorn

    workers = settings.server.workers if not args.reload else 1
    if workers > 1 or args.reload:
        # Worker processes build their own app; hand them the config file
        if args.config:
            os.environ["SEARCHSPOT_CONFIG"] = str(Path(args.config).resolve())
        if args.log_level:
            os.environ["SEARCHSPOT_OBSERVABILITY__LOG_LEVEL"] = args.log_level
        app: object = "searchspot.api.app:create_app"
    else:
        from searchspot.api.app import create_app

        app = create_app(settings)

    uvicorn.run(
        app,
        factory=isinstance(app, str),
        host=settings.server.host,
        port=settings.server.port,
        workers=workers,
        reload=args.reload,
        log_level=settings.observability.log_level.lower(),
    )


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return a copy of ``settings`` with the command-line overrides applied."""
    server: dict[str, object] = {}
    if args.host:
        server["host"] = args.host
    if args.port:
        server["port"] = args.port
    if args.workers:
        server["workers"] = args.workers

    update: dict[str, object] = {}
    if server:
        update["server"] = settings.server.model_copy(update=server)
    if args.log_level:
        update["observability"] = settings.observability.model_copy(update={"log_level": args.log_level})
    return settings.model_copy(update=update) if update else settings


def _get_version() -> str:
    from searchspot import __version__

    return __version__


if __name__ == "__main__":
    main()
