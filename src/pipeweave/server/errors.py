"""Error handling pipeline for pipeweave requests.

Maps HTTPError exceptions and unexpected failures to appropriate
Response objects, using registered error handlers or sensible defaults.
In debug mode (the development environment) unexpected failures render
a plain-text traceback page instead of a bare 500.
"""

import inspect
import logging
import traceback
from collections.abc import Callable
from typing import Any

from pipeweave._internal.invoke import invoke
from pipeweave.errors import HTTPError
from pipeweave.http.factories import ResponseFactory
from pipeweave.http.request import Request
from pipeweave.http.response import Response

logger = logging.getLogger("pipeweave.server")


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    response_factory: ResponseFactory,
) -> Response:
    """Invoke a user-registered error handler with introspected arguments.

    Error handlers may accept zero, one (request), or two (request, exc) args.
    Supports both sync and async error handlers.
    """
    params = list(inspect.signature(handler).parameters.values())

    if len(params) >= 2:
        result = await invoke(handler, request, exc)
    elif len(params) == 1:
        result = await invoke(handler, request)
    else:
        result = await invoke(handler)

    return response_factory.coerce(result)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    response_factory: ResponseFactory,
    debug: bool,
) -> Response:
    """Map an HTTPError to a Response using registered error handlers."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    # Exact exception type first, then status code
    handler = error_handlers.get(type(exc)) or error_handlers.get(exc.status)
    if handler is not None:
        response = await call_error_handler(handler, request, exc, response_factory)
        # Keep the exception's status unless the handler chose its own
        if response.status == 200:
            response = response.with_status(exc.status)
        return response

    detail = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        detail = f"{exc.status}: {exc.detail}"

    response = response_factory.create_response(detail, exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def render_debug_page(exc: Exception, request: Request) -> str:
    """Plain-text error page with the request line and full traceback."""
    lines = [
        f"500 Internal Server Error — {type(exc).__name__}: {exc}",
        "",
        f"{request.method} {request.url}",
    ]
    if request.attributes:
        lines.append("")
        lines.append("Request attributes:")
        lines.extend(f"  {key} = {value!r}" for key, value in sorted(request.attributes.items()))
    lines.append("")
    lines.append("".join(traceback.format_exception(exc)).rstrip())
    return "\n".join(lines) + "\n"


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    response_factory: ResponseFactory,
    debug: bool,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = error_handlers.get(type(exc)) or error_handlers.get(500)
    if handler is not None:
        response = await call_error_handler(handler, request, exc, response_factory)
        if response.status == 200:
            response = response.with_status(500)
        return response

    if debug:
        return response_factory.create_response(render_debug_page(exc, request), 500)

    return response_factory.create_response("Internal Server Error", 500)
