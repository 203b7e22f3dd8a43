"""Middleware dispatcher — resolves named pipelines and runs them.

The application supplies a pipeline provider::

    def provide_middleware_pipeline(name: str | None = None) -> tuple[MiddlewareRef, ...]:
        if name == "uppercaseOwner":
            return (UppercaseOwner, Dispatch)
        return (RouterStep,)

``execute()`` runs the default pipeline (``name=None``) for an incoming
request; ``chain()`` runs a named pipeline on behalf of a dispatch step.
The provider is called on every lookup and may return a different list
each time.
"""

import logging
from collections.abc import Callable, Sequence
from typing import TypeAlias

from pipeweave._internal.invoke import invoke
from pipeweave._internal.types import MiddlewareRef
from pipeweave.container import Container
from pipeweave.errors import UnknownPipeline
from pipeweave.http.factories import ResponseFactory
from pipeweave.http.request import Request
from pipeweave.http.response import Response
from pipeweave.middleware.adaptor import MiddlewareAdaptor
from pipeweave.middleware.dispatch import Controller
from pipeweave.middleware.protocol import Middleware

logger = logging.getLogger("pipeweave.pipeline")

PipelineProvider: TypeAlias = Callable[[str | None], Sequence[MiddlewareRef]]


class MiddlewareDispatcher:
    """Runs pipelines through the configured adaptor.

    Middleware classes and controller classes are built through the
    container, so their constructor arguments come from the container
    setup step.
    """

    __slots__ = ("_adaptor", "_provider", "container", "response_factory")

    def __init__(
        self,
        provider: PipelineProvider,
        adaptor: MiddlewareAdaptor,
        container: Container,
        response_factory: ResponseFactory,
    ) -> None:
        self._provider = provider
        self._adaptor = adaptor
        self.container = container
        self.response_factory = response_factory

    # -- Pipeline lookup --

    def pipeline(self, name: str | None = None) -> tuple[MiddlewareRef, ...]:
        """Return the middleware list for *name* (``None`` = default)."""
        return tuple(self._provider(name))

    def check_pipeline(self, name: str, *, route: str | None = None) -> None:
        """Raise ``UnknownPipeline`` if *name* only resolves to the default.

        The provider falls back to the default pipeline for names it does
        not know. Dispatching a named pipeline that is really the default
        would re-enter the router, so such names are rejected.
        """
        if self.pipeline(name) == self.pipeline(None):
            raise UnknownPipeline(name, route)

    # -- Execution --

    async def execute(self, request: Request) -> Response:
        """Run the default pipeline."""
        return await self._run(self.pipeline(None), request)

    async def chain(self, name: str, request: Request) -> Response:
        """Run the pipeline called *name*."""
        self.check_pipeline(name)
        return await self._run(self.pipeline(name), request)

    async def _run(self, pipeline: Sequence[MiddlewareRef], request: Request) -> Response:
        return await self._adaptor.run(
            pipeline,
            request,
            resolve=self.resolve,
            fallback=self._end_of_pipeline,
        )

    async def _end_of_pipeline(self, request: Request) -> Response:
        logger.debug("Pipeline ended without a response for %s %s", request.method, request.path)
        return self.response_factory.create_response()

    # -- Resolution --

    def resolve(self, ref: MiddlewareRef) -> Middleware:
        """Turn a pipeline entry into a callable middleware."""
        if isinstance(ref, type):
            return self.container.get(ref)
        return ref

    async def call_controller(self, step: Controller, request: Request) -> Response:
        """Build the controller, call its method, and coerce the result."""
        target = step.target
        instance = self.container.get(target) if isinstance(target, type) else target
        method = getattr(instance, step.method)
        result = await invoke(method, request)
        return self.response_factory.coerce(result)
