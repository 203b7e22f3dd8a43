"""Routing — compiled route table with O(path-depth) matching.

Routes are declared through a ``RouteMap`` during setup and compiled into
an immutable lookup structure when the app freezes. ``RouterStep`` is the
middleware that matches a request and starts its dispatch chain.
"""

from pipeweave.routing.adaptor import RouteBuilder, RouteMap, RouterAdaptor, TrieRouterAdaptor
from pipeweave.routing.route import Route, RouteMatch
from pipeweave.routing.router import Router
from pipeweave.routing.step import ROUTE_ATTRIBUTE, RouterStep

__all__ = [
    "ROUTE_ATTRIBUTE",
    "Route",
    "RouteBuilder",
    "RouteMap",
    "RouteMatch",
    "Router",
    "RouterAdaptor",
    "RouterStep",
    "TrieRouterAdaptor",
]
