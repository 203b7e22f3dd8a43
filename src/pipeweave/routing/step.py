"""``RouterStep`` — the middleware that routes a request.

Placed in a pipeline (usually the default one), it matches the request,
attaches path parameters and the dispatch chain, and starts the chain.
Middleware listed after it never runs.
"""

from pipeweave.http.request import Request
from pipeweave.http.response import Response
from pipeweave.middleware.dispatch import dispatch_next
from pipeweave.middleware.pipeline import MiddlewareDispatcher
from pipeweave.middleware.protocol import Next
from pipeweave.routing.adaptor import ROUTE_ATTRIBUTE, RouterAdaptor

__all__ = ["ROUTE_ATTRIBUTE", "RouterStep"]


class RouterStep:
    """Route the request and dispatch the matched chain."""

    __slots__ = ("_dispatcher", "_router")

    def __init__(self, router: RouterAdaptor, dispatcher: MiddlewareDispatcher) -> None:
        self._router = router
        self._dispatcher = dispatcher

    async def __call__(self, request: Request, next: Next) -> Response:  # noqa: ARG002
        routed = self._router.route(request)
        return await dispatch_next(routed, self._dispatcher)
