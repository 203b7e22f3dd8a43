"""Pipeweave exception hierarchy.

Shared across the container, router, pipeline dispatch, and handler so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class PipeweaveError(Exception):
    """Base for all pipeweave-specific errors."""


class ConfigurationError(PipeweaveError):
    """Raised when app configuration is invalid.

    Typically raised during ``App._freeze()`` at startup.
    """


class UnknownPipeline(ConfigurationError):  # noqa: N818 — reads as a condition, like NotFound
    """A route references a pipeline name the provider does not define."""

    def __init__(self, name: str, route: str | None = None) -> None:
        self.name = name
        self.route = route
        where = f" (referenced by route {route!r})" if route else ""
        super().__init__(
            f"Unknown pipeline {name!r}{where}. The pipeline provider returned "
            "the default pipeline for this name."
        )


class ResolutionError(PipeweaveError):
    """The container could not build an instance for an interface."""

    def __init__(self, interface: object, detail: str = "") -> None:
        self.interface = interface
        name = getattr(interface, "__qualname__", repr(interface))
        msg = f"Cannot resolve {name}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class DispatchError(PipeweaveError):
    """A dispatch step was reached with nothing left to dispatch to."""


@dataclass(frozen=True, slots=True)
class HTTPError(PipeweaveError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, or controllers. The ASGI handler
    catches these and dispatches to the matching ``@app.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
