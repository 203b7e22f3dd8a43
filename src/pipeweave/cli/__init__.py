"""Pipeweave CLI — serve an app or list its routes.

Entry point registered as ``pipeweave`` in ``pyproject.toml``::

    [project.scripts]
    pipeweave = "pipeweave.cli:main"
"""

import argparse
import sys


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pipeweave",
        description="Pipeweave — container, pipelines, and routing wired together.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- pipeweave run ------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Serve an app with uvicorn")
    run_parser.add_argument("app", help="Import string (e.g. hello_app.app:create_app)")
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument("--log-level", default=None, help="Log level (default: app config)")

    # -- pipeweave routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List an app's routes")
    routes_parser.add_argument("app", help="Import string (e.g. hello_app.app:create_app)")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``pipeweave`` command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from pipeweave.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from pipeweave.cli._routes import print_routes

        print_routes(args)
