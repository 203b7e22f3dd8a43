"""Hello app wiring: container bindings, pipelines, and routes.

Everything here is declarative. ``create_app()`` hands the three setup
functions to ``pipeweave.App``, which runs them once at startup.
"""

import os
from pathlib import Path

from pipeweave._internal.types import MiddlewareRef
from pipeweave.app import App
from pipeweave.config import ENV_DEVELOPMENT, ENV_PRODUCTION, AppConfig, Settings
from pipeweave.container import Container
from pipeweave.http.factories import (
    AsgiRequestFactory,
    RequestFactory,
    ResponseFactory,
    TextResponseFactory,
)
from pipeweave.middleware.adaptor import ChainAdaptor, MiddlewareAdaptor
from pipeweave.middleware.dispatch import Controller, Dispatch, Pipeline
from pipeweave.routing.adaptor import RouteMap, RouterAdaptor, TrieRouterAdaptor
from pipeweave.routing.step import RouterStep
from pipeweave.server.emitter import AsgiResponseEmitter, ResponseEmitter

from hello_app.controller import DEFAULT_OWNER, Hello
from hello_app.middleware import UppercaseOwner

__all__ = [
    "CONFIG_DIR",
    "ENV_DEVELOPMENT",
    "app",
    "configure_container",
    "create_app",
    "provide_middleware_pipeline",
    "provide_route_configuration",
]

CONFIG_DIR = Path(__file__).parent / "config"

# Environment variable consulted when create_app() gets no environment
ENVIRONMENT_VARIABLE = "HELLO_APP_ENV"


def configure_container(container: Container, settings: Settings, environment: str) -> None:  # noqa: ARG001
    """Bind the framework capabilities and register the app's services."""
    # Single-pass middleware chains
    container.add(MiddlewareAdaptor, ChainAdaptor)

    # ASGI in, ASGI out
    container.add(ResponseEmitter, AsgiResponseEmitter)
    container.add(RequestFactory, AsgiRequestFactory)
    container.add(ResponseFactory, TextResponseFactory)

    # Trie router
    container.add(RouterAdaptor, TrieRouterAdaptor)

    container.add(UppercaseOwner)

    # The Hello controller takes its message from settings
    container.add(Hello).with_argument(settings.require("HelloMessage"))


def provide_middleware_pipeline(name: str | None = None) -> tuple[MiddlewareRef, ...]:
    """Return the middleware pipeline called *name*.

    The default pipeline only routes. ``uppercaseOwner`` is started by the
    route below: it uppercases ``owner`` and then dispatches to the
    controller.
    """
    match name:
        case "uppercaseOwner":
            return (UppercaseOwner, Dispatch)
        case _:
            return (RouterStep,)


def provide_route_configuration(routes: RouteMap) -> None:
    """Declare the single ``root`` route.

    ``/{owner?}`` captures an optional ``owner`` attribute that defaults to
    ``World``: ``/wibble`` sets it to ``"wibble"``. A match runs the
    ``uppercaseOwner`` pipeline, whose ``Dispatch`` step then calls
    ``Hello.hello``.
    """
    routes.get(
        "root",
        "/{owner?}",
        (Pipeline("uppercaseOwner"), Controller(Hello, "hello")),
    ).defaults(owner=DEFAULT_OWNER)


def create_app(
    environment: str | None = None,
    *,
    settings: Settings | dict[str, object] | None = None,
    config_dir: str | Path | None = None,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> App:
    """Build the Hello app.

    Settings come from *settings* when given, otherwise from the TOML files
    in *config_dir* (the packaged ``config/`` directory by default).
    """
    environment = environment or os.environ.get(ENVIRONMENT_VARIABLE, ENV_PRODUCTION)
    config = AppConfig(
        host=host,
        port=port,
        environment=environment,
        config_dir=config_dir or CONFIG_DIR,
        log_level="debug" if environment == ENV_DEVELOPMENT else "info",
    )
    return App(
        config,
        container_setup=configure_container,
        pipelines=provide_middleware_pipeline,
        routes=provide_route_configuration,
        settings=settings,
    )


app = create_app()
