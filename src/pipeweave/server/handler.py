"""ASGI handler — translates ASGI scope/messages to pipeweave types.

The only component that touches raw ASGI directly. Builds a Request
through the request factory, runs the default pipeline, maps failures to
error responses, and writes the result through the response emitter.
"""

from collections.abc import Callable
from typing import Any

from pipeweave._internal.asgi import Receive, Scope, Send
from pipeweave.errors import HTTPError
from pipeweave.http.factories import RequestFactory, ResponseFactory
from pipeweave.middleware.pipeline import MiddlewareDispatcher
from pipeweave.server.emitter import ResponseEmitter
from pipeweave.server.errors import handle_http_error, handle_internal_error


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    dispatcher: MiddlewareDispatcher,
    request_factory: RequestFactory,
    response_factory: ResponseFactory,
    emitter: ResponseEmitter,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = request_factory.create_request(scope, receive)

    try:
        response = await dispatcher.execute(request)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, response_factory, debug)
    except Exception as exc:
        response = await handle_internal_error(
            exc, request, error_handlers, response_factory, debug
        )

    await emitter.emit(response, send)
