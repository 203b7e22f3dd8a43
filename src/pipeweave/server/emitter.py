"""Response emitter — translates a ``Response`` into ASGI messages.

Bound in the container as ``ResponseEmitter``; the ASGI handler asks for
it once at freeze time and calls ``emit()`` for every request.
"""

import logging
from typing import Protocol

from pipeweave._internal.asgi import Send
from pipeweave.http.response import Response

logger = logging.getLogger("pipeweave.server")


class ResponseEmitter(Protocol):
    """Writes a finished response back to the server."""

    async def emit(self, response: Response, send: Send) -> None: ...


def body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


class AsgiResponseEmitter:
    """Sends a response as ``http.response.start`` + one body message."""

    __slots__ = ()

    async def emit(self, response: Response, send: Send) -> None:
        raw_headers: list[tuple[bytes, bytes]] = [
            (b"content-type", response.content_type.encode("latin-1")),
        ]
        for name, value in response.headers:
            raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

        body = response.body_bytes if body_allowed(response.status) else b""
        raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

        await send(
            {
                "type": "http.response.start",
                "status": response.status,
                "headers": raw_headers,
            }
        )
        await send(
            {
                "type": "http.response.body",
                "body": body,
            }
        )
