"""Compiled router with trie-based path matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes.

Optional segments (``{owner?}``) must come last. A route with optional
segments is registered at every node from the last required segment
onwards, so ``/{owner?}`` answers both ``/`` and ``/wibble``.
"""

import logging
import re
from dataclasses import dataclass

from pipeweave.errors import ConfigurationError, MethodNotAllowed, NotFound
from pipeweave.routing.params import CONVERTERS
from pipeweave.routing.route import PathSegment, Route, RouteMatch

logger = logging.getLogger("pipeweave.routing")

_ANGLE_PARAM = re.compile(r"<[^>]+>")


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"           -> [PathSegment("users")]
        "/users/{id:int}"  -> [PathSegment("users"), PathSegment("{id:int}", is_param=True, ...)]
        "/{owner?}"        -> [PathSegment("{owner?}", is_param=True, optional=True, ...)]

    Raises:
        ConfigurationError: On ``<param>`` syntax, unknown converters,
            required segments after an optional one, or a ``path``
            converter that is not last.
    """
    if _ANGLE_PARAM.search(path):
        msg = f"Route {path!r} uses <param> syntax; use {{param}} instead."
        raise ConfigurationError(msg)

    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            optional = inner.endswith("?")
            if optional:
                inner = inner[:-1]
            param_name, _, param_type = inner.partition(":")
            param_type = param_type or "str"
            if param_type not in CONVERTERS:
                msg = f"Unknown converter {param_type!r} in route {path!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                    optional=optional,
                )
            )
        else:
            if segments and segments[-1].optional:
                msg = f"Static segment {part!r} follows an optional segment in {path!r}."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part))

        last = segments[-1]
        if len(segments) > 1 and segments[-2].optional and not last.optional:
            msg = f"Required segment {last.value!r} follows an optional segment in {path!r}."
            raise ConfigurationError(msg)
        if len(segments) > 1 and segments[-2].param_type == "path":
            msg = f"A path converter must be the last segment in {path!r}."
            raise ConfigurationError(msg)

    return segments


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("catch_all", "children", "param_child", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "users" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child (only one param pattern per level)
        self.param_child: _ParamEdge | None = None
        # Catch-all edge (path converter)
        self.catch_all: _CatchAllEdge | None = None
        # Routes at this node, keyed by HTTP method
        self.routes_by_method: dict[str, Route] = {}


@dataclass(slots=True)
class _ParamEdge:
    """A parameter edge in the trie."""

    param_name: str
    regex: re.Pattern[str]
    node: _TrieNode


@dataclass(slots=True)
class _CatchAllEdge:
    """A catch-all (path) edge — consumes the remaining path."""

    param_name: str
    routes_by_method: dict[str, Route]


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("root", "/{owner?}", chain, defaults={"owner": "World"}))
        router.compile()
        match = router.match("GET", "/wibble")
    """

    __slots__ = ("_by_name", "_compiled", "_root", "_segments")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False
        self._by_name: dict[str, Route] = {}
        self._segments: dict[str, list[PathSegment]] = {}

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        if route.name in self._by_name:
            msg = f"Duplicate route name {route.name!r}."
            raise ConfigurationError(msg)

        segments = parse_path(route.path)
        self._by_name[route.name] = route
        self._segments[route.name] = segments

        node = self._root
        for seg in segments:
            if seg.optional:
                # Every prefix up to here is a valid endpoint for this route
                self._register(node, route)

            if seg.param_type == "path":
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(seg.param_name or "path", {})
                for method in route.methods:
                    node.catch_all.routes_by_method[method] = route
                logger.debug("Added route %s %s", route.name, route.path)
                return

            if seg.is_param:
                if node.param_child is None:
                    pattern = CONVERTERS[seg.param_type]
                    node.param_child = _ParamEdge(
                        param_name=seg.param_name or "",
                        regex=re.compile(f"^{pattern}$"),
                        node=_TrieNode(),
                    )
                elif node.param_child.param_name != seg.param_name:
                    msg = (
                        f"Route {route.path!r} names parameter {seg.param_name!r} where "
                        f"another route uses {node.param_child.param_name!r}."
                    )
                    raise ConfigurationError(msg)
                node = node.param_child.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        self._register(node, route)
        logger.debug("Added route %s %s", route.name, route.path)

    @staticmethod
    def _register(node: _TrieNode, route: Route) -> None:
        for method in route.methods:
            existing = node.routes_by_method.get(method)
            if existing is not None and existing is not route:
                msg = (
                    f"Route {route.name!r} ({route.path}) conflicts with "
                    f"{existing.name!r} ({existing.path}) for {method}."
                )
                raise ConfigurationError(msg)
            node.routes_by_method[method] = route

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return list(self._by_name.values())

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    # -- Matching --

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})

        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        routes_by_method, params = result
        route = routes_by_method.get(method)
        if route is None:
            raise MethodNotAllowed(frozenset(routes_by_method))

        return RouteMatch(route=route, path_params={**route.defaults, **params})

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[dict[str, Route], dict[str, str]] | None:
        """Recursively match path parts against the trie."""
        if index == len(parts):
            if node.routes_by_method:
                return node.routes_by_method, params
            return None

        part = parts[index]

        # 1. Static child first (exact match)
        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        # 2. Parameter child
        edge = node.param_child
        if edge is not None and edge.regex.match(part):
            new_params = {**params, edge.param_name: part}
            result = self._match_node(edge.node, parts, index + 1, new_params)
            if result is not None:
                return result

        # 3. Catch-all
        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            return node.catch_all.routes_by_method, {
                **params,
                node.catch_all.param_name: remaining,
            }

        return None

    # -- Reverse routing --

    def url_for(self, name: str, **params: object) -> str:
        """Build the path for route *name*.

        Optional segments are emitted only when a value is given and every
        optional segment before them was emitted too.

        Raises:
            KeyError: If no route is called *name*.
            ValueError: If a required parameter is missing.
        """
        route = self._by_name[name]
        parts: list[str] = []
        for seg in self._segments[name]:
            if not seg.is_param:
                parts.append(seg.value)
                continue
            value = params.get(seg.param_name or "")
            if value is None:
                if seg.optional:
                    break
                msg = f"Route {route.name!r} requires parameter {seg.param_name!r}."
                raise ValueError(msg)
            parts.append(str(value))
        return "/" + "/".join(parts)
