"""``pipeweave run`` — resolve an app and serve it."""

import argparse
import sys

from pipeweave.cli._resolve import resolve_app
from pipeweave.errors import PipeweaveError
from pipeweave.log import configure_logging


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and start uvicorn. CLI flags override app config."""
    try:
        app = resolve_app(args.app)
        # Surface settings, binding and pipeline errors before serving
        app._ensure_frozen()
    except (ModuleNotFoundError, AttributeError, TypeError, PipeweaveError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    configure_logging(args.log_level or app.config.log_level)
    app.run(host=args.host, port=args.port)
