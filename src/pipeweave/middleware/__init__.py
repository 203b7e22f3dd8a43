"""Middleware — protocol, pipelines, and dispatch.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Pipelines are ordered lists of middleware, looked up by name. The
``Dispatch`` step hands the request on to the next step of the route's
dispatch chain (another pipeline, or the controller).
"""

from pipeweave.middleware.adaptor import ChainAdaptor, MiddlewareAdaptor
from pipeweave.middleware.dispatch import (
    DISPATCH_ATTRIBUTE,
    Controller,
    Dispatch,
    DispatchStep,
    Pipeline,
)
from pipeweave.middleware.pipeline import MiddlewareDispatcher, PipelineProvider
from pipeweave.middleware.protocol import Middleware, Next

__all__ = [
    "DISPATCH_ATTRIBUTE",
    "ChainAdaptor",
    "Controller",
    "Dispatch",
    "DispatchStep",
    "Middleware",
    "MiddlewareAdaptor",
    "MiddlewareDispatcher",
    "Next",
    "Pipeline",
    "PipelineProvider",
]
