"""Pipeweave — a dependency-injection container, named middleware
pipelines, and a router wired together behind one ASGI app.

Basic usage::

    from pipeweave import App, AppConfig, Controller, Pipeline

    app = App(
        AppConfig(config_dir="config"),
        container_setup=configure_container,
        pipelines=provide_middleware_pipeline,
        routes=provide_route_configuration,
    )

    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ConfigurationError",
    "Container",
    "Controller",
    "Dispatch",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "Pipeline",
    "PipeweaveError",
    "Request",
    "Response",
    "RouteMap",
    "RouterStep",
    "Settings",
    "UnknownPipeline",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import pipeweave`` fast while providing a clean top-level API.
    """
    if name == "App":
        from pipeweave.app import App

        return App

    if name in ("AppConfig", "Settings"):
        from pipeweave import config as _config

        return getattr(_config, name)

    if name == "Container":
        from pipeweave.container import Container

        return Container

    if name == "Request":
        from pipeweave.http.request import Request

        return Request

    if name == "Response":
        from pipeweave.http.response import Response

        return Response

    if name in ("Controller", "Dispatch", "Pipeline"):
        from pipeweave.middleware import dispatch as _dispatch

        return getattr(_dispatch, name)

    if name in ("Middleware", "Next"):
        from pipeweave.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "RouteMap":
        from pipeweave.routing.adaptor import RouteMap

        return RouteMap

    if name == "RouterStep":
        from pipeweave.routing.step import RouterStep

        return RouterStep

    if name in (
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "PipeweaveError",
        "UnknownPipeline",
    ):
        from pipeweave import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
