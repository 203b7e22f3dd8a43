"""Middleware adaptor — turns a pipeline descriptor into a running chain.

The dispatcher decides *which* middleware run; the adaptor decides *how*
they are chained. ``ChainAdaptor`` is the stock single-pass
implementation: each middleware receives the request and a ``next``
continuation, and the last ``next`` is the fallback handler.
"""

from collections.abc import Callable, Sequence
from typing import Any, Protocol

from pipeweave._internal.types import MiddlewareRef
from pipeweave.http.request import Request
from pipeweave.http.response import Response
from pipeweave.middleware.protocol import Middleware, Next


class MiddlewareAdaptor(Protocol):
    """Runs an ordered pipeline of middleware against a request."""

    async def run(
        self,
        pipeline: Sequence[MiddlewareRef],
        request: Request,
        *,
        resolve: Callable[[MiddlewareRef], Middleware],
        fallback: Next,
    ) -> Response: ...


class ChainAdaptor:
    """Single-pass middleware chain.

    Entries are resolved lazily, just before each one runs, so a
    middleware that short-circuits never causes later entries to be
    built.
    """

    __slots__ = ()

    async def run(
        self,
        pipeline: Sequence[MiddlewareRef],
        request: Request,
        *,
        resolve: Callable[[MiddlewareRef], Middleware],
        fallback: Next,
    ) -> Response:
        handler: Next = fallback
        for ref in reversed(pipeline):
            outer = handler

            async def make_next(
                req: Request, _ref: Any = ref, _next: Next = outer
            ) -> Response:
                middleware = resolve(_ref)
                return await middleware(req, _next)

            handler = make_next

        return await handler(request)
