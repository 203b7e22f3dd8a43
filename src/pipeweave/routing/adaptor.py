"""Router adaptor — the seam between route configuration and matching.

Applications declare routes against a ``RouteMap``::

    def provide_route_configuration(routes: RouteMap) -> None:
        routes.get(
            "root",
            "/{owner?}",
            (Pipeline("uppercaseOwner"), Controller(Hello, "hello")),
        ).defaults(owner="World")

The adaptor owns the compiled ``Router``, and ``route()`` turns a match
into request attributes: every path parameter (defaults included), the
route name, and the dispatch chain.
"""

from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType
from typing import Any, Protocol, TypeAlias

from pipeweave.errors import ConfigurationError
from pipeweave.http.request import Request
from pipeweave.middleware.dispatch import (
    DISPATCH_ATTRIBUTE,
    Controller,
    DispatchStep,
    Pipeline,
)
from pipeweave.routing.route import Route
from pipeweave.routing.router import Router

ROUTE_ATTRIBUTE = "pipeweave.route"

Handler: TypeAlias = DispatchStep | Sequence[DispatchStep] | Callable[..., Any]


def as_chain(handler: Handler) -> tuple[DispatchStep, ...]:
    """Normalize a route handler into a dispatch chain.

    Accepts a single step, a sequence of steps, or a callable (class or
    function), which becomes a ``Controller`` step.
    """
    if isinstance(handler, (Pipeline, Controller)):
        return (handler,)
    if isinstance(handler, (list, tuple)):
        chain = tuple(handler)
        for step in chain:
            if not isinstance(step, (Pipeline, Controller)):
                msg = f"Invalid dispatch step {step!r}; expected Pipeline or Controller."
                raise ConfigurationError(msg)
        if not chain:
            msg = "A route handler chain cannot be empty."
            raise ConfigurationError(msg)
        return chain
    if callable(handler):
        return (Controller(handler),)
    msg = f"Invalid route handler {handler!r}."
    raise ConfigurationError(msg)


class RouteBuilder:
    """A route under construction. ``defaults()`` may be chained."""

    __slots__ = ("_defaults", "chain", "methods", "name", "path")

    def __init__(self, name: str, path: str, chain: tuple[DispatchStep, ...], methods: frozenset[str]) -> None:
        self.name = name
        self.path = path
        self.chain = chain
        self.methods = methods
        self._defaults: dict[str, str] = {}

    def defaults(self, values: Mapping[str, str] | None = None, **kwargs: str) -> "RouteBuilder":
        """Set default values for path parameters the request leaves out."""
        self._defaults.update(values or {})
        self._defaults.update(kwargs)
        return self

    def build(self) -> Route:
        return Route(
            name=self.name,
            path=self.path,
            chain=self.chain,
            methods=self.methods,
            defaults=MappingProxyType(dict(self._defaults)),
        )


class RouteMap:
    """Collects route declarations during setup."""

    __slots__ = ("_builders",)

    def __init__(self) -> None:
        self._builders: list[RouteBuilder] = []

    def route(
        self,
        name: str,
        path: str,
        handler: Handler,
        *,
        methods: Sequence[str] = ("GET",),
    ) -> RouteBuilder:
        """Declare a route answering *methods*."""
        builder = RouteBuilder(
            name,
            path,
            as_chain(handler),
            frozenset(m.upper() for m in methods),
        )
        self._builders.append(builder)
        return builder

    def get(self, name: str, path: str, handler: Handler) -> RouteBuilder:
        """Declare a GET route."""
        return self.route(name, path, handler, methods=("GET",))

    def post(self, name: str, path: str, handler: Handler) -> RouteBuilder:
        """Declare a POST route."""
        return self.route(name, path, handler, methods=("POST",))

    def build(self) -> list[Route]:
        return [builder.build() for builder in self._builders]


class RouterAdaptor(Protocol):
    """Configures routes once, then matches requests against them."""

    def configure(self, provider: Callable[[RouteMap], None]) -> None: ...

    def route(self, request: Request) -> Request: ...

    @property
    def routes(self) -> list[Route]: ...


class TrieRouterAdaptor:
    """Router adaptor backed by the compiled trie ``Router``."""

    __slots__ = ("_router",)

    def __init__(self) -> None:
        self._router = Router()

    def configure(self, provider: Callable[[RouteMap], None]) -> None:
        """Run the route provider and compile the result."""
        route_map = RouteMap()
        provider(route_map)
        for route in route_map.build():
            self._router.add(route)
        self._router.compile()

    def route(self, request: Request) -> Request:
        """Match *request* and return a copy carrying the routing attributes.

        Raises ``NotFound`` or ``MethodNotAllowed`` when nothing matches.
        """
        match = self._router.match(request.method, request.path)
        attributes: dict[str, Any] = dict(match.path_params)
        attributes[ROUTE_ATTRIBUTE] = match.route.name
        attributes[DISPATCH_ATTRIBUTE] = match.route.chain
        return request.with_path_params(match.path_params).with_attributes(attributes)

    def url_for(self, name: str, **params: object) -> str:
        return self._router.url_for(name, **params)

    @property
    def routes(self) -> list[Route]:
        return self._router.routes
