"""Dispatch chains and the ``Dispatch`` middleware.

A route's handler is a chain of steps rather than a single callable::

    (Pipeline("uppercaseOwner"), Controller(Hello, "hello"))

The router stores the chain on the request under ``DISPATCH_ATTRIBUTE``
and consumes its first step. A ``Pipeline`` step runs the named pipeline;
a ``Dispatch`` middleware somewhere in that pipeline consumes the next
step, and so on. A ``Controller`` step ends the chain by calling the
controller and returning its response.

Middleware may rewrite or replace the chain attribute before it reaches
``Dispatch``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from pipeweave.errors import DispatchError
from pipeweave.http.request import Request
from pipeweave.http.response import Response
from pipeweave.middleware.protocol import Next

if TYPE_CHECKING:
    from pipeweave.middleware.pipeline import MiddlewareDispatcher

logger = logging.getLogger("pipeweave.pipeline")

DISPATCH_ATTRIBUTE = "pipeweave.dispatch"


@dataclass(frozen=True, slots=True)
class Pipeline:
    """Run the named middleware pipeline."""

    name: str


@dataclass(frozen=True, slots=True)
class Controller:
    """Call *method* on *target*.

    A class target is built through the container; any other target
    (a function, a bound method, an instance) is used as-is. The default
    method ``"__call__"`` makes invokable classes and plain functions work.
    """

    target: type | Callable[..., Any]
    method: str = "__call__"

    def describe(self) -> str:
        name = getattr(self.target, "__qualname__", repr(self.target))
        if self.method == "__call__":
            return name
        return f"{name}.{self.method}"


DispatchStep: TypeAlias = Pipeline | Controller


def describe_chain(chain: tuple[DispatchStep, ...]) -> str:
    """Human-readable form of a chain, e.g. ``uppercaseOwner | Hello.hello``."""
    parts = [step.name if isinstance(step, Pipeline) else step.describe() for step in chain]
    return " | ".join(parts)


async def dispatch_next(request: Request, dispatcher: MiddlewareDispatcher) -> Response:
    """Consume the first step of the request's dispatch chain.

    Raises:
        DispatchError: If the request carries no chain or it is exhausted.
    """
    chain: tuple[DispatchStep, ...] = tuple(request.get_attribute(DISPATCH_ATTRIBUTE, ()))
    if not chain:
        msg = f"Nothing left to dispatch for {request.method} {request.path}"
        raise DispatchError(msg)

    step, rest = chain[0], chain[1:]
    request = request.with_attribute(DISPATCH_ATTRIBUTE, rest)

    if isinstance(step, Pipeline):
        logger.debug("Dispatching pipeline %r", step.name)
        return await dispatcher.chain(step.name, request)
    if isinstance(step, Controller):
        logger.debug("Dispatching controller %s", step.describe())
        return await dispatcher.call_controller(step, request)

    msg = f"Invalid dispatch step {step!r}"
    raise DispatchError(msg)


class Dispatch:
    """Terminal middleware: hands the request to the next dispatch step.

    Whatever comes after ``Dispatch`` in a pipeline never runs; the
    dispatched step's response is returned up the chain.
    """

    __slots__ = ("_dispatcher",)

    def __init__(self, dispatcher: MiddlewareDispatcher) -> None:
        self._dispatcher = dispatcher

    async def __call__(self, request: Request, next: Next) -> Response:  # noqa: ARG002
        return await dispatch_next(request, self._dispatcher)
