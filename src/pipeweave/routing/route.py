"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pipeweave.middleware.dispatch import DispatchStep


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:   ``/users``       (is_param=False)
    Param:    ``/{id}``        (is_param=True, param_name="id")
    Typed:    ``/{id:int}``    (is_param=True, param_name="id", param_type="int")
    Optional: ``/{owner?}``    (is_param=True, param_name="owner", optional=True)
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"
    optional: bool = False


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``chain`` is the dispatch chain started when the route matches.
    ``defaults`` supply values for optional path parameters (and any other
    attribute the route wants set) when the path does not carry them.
    """

    name: str
    path: str
    chain: tuple[DispatchStep, ...]
    methods: frozenset[str] = frozenset({"GET"})
    defaults: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match.

    ``path_params`` already includes the route defaults for any optional
    segment the path left out.
    """

    route: Route
    path_params: dict[str, str]
