"""``pipeweave routes`` — print the compiled route table."""

import argparse
import sys

from pipeweave.cli._resolve import resolve_app
from pipeweave.errors import PipeweaveError
from pipeweave.middleware.dispatch import describe_chain
from pipeweave.routing.route import Route


def format_routes(app_routes: list[Route]) -> list[str]:
    """One line per route: name, methods, path, defaults, dispatch chain."""
    lines: list[str] = []
    for route in app_routes:
        methods = ",".join(sorted(route.methods))
        defaults = ", ".join(f"{k}={v!r}" for k, v in sorted(route.defaults.items()))
        line = f"{route.name:<16} {methods:<8} {route.path:<24} {describe_chain(route.chain)}"
        if defaults:
            line = f"{line}  [{defaults}]"
        lines.append(line)
    return lines


def print_routes(args: argparse.Namespace) -> None:
    try:
        app = resolve_app(args.app)
        routes = app.routes
    except (ModuleNotFoundError, AttributeError, TypeError, PipeweaveError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    for line in format_routes(routes):
        print(line)
