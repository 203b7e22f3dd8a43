"""Run the Hello app: ``python -m hello_app`` or ``hello-app``."""

import argparse

from pipeweave.config import ENV_DEVELOPMENT, ENV_PRODUCTION
from pipeweave.log import configure_logging

from hello_app.app import create_app


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="hello-app", description="Serve the Hello example app.")
    parser.add_argument(
        "--env",
        default=None,
        choices=(ENV_DEVELOPMENT, ENV_PRODUCTION),
        help="Runtime environment (default: $HELLO_APP_ENV or production)",
    )
    parser.add_argument("--config-dir", default=None, help="Directory holding the settings files")
    parser.add_argument("--host", default="127.0.0.1", help="Bind host address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port number")
    args = parser.parse_args(argv)

    app = create_app(args.env, config_dir=args.config_dir, host=args.host, port=args.port)
    configure_logging(app.config.log_level)
    app.run()


if __name__ == "__main__":
    main()
