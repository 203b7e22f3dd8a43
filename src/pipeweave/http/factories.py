"""Request and response factories.

The app never constructs ``Request`` or ``Response`` directly at its
seams: it asks the container for a ``RequestFactory`` (to turn an ASGI
scope into a request) and a ``ResponseFactory`` (to start a response or
coerce a controller's return value). Swapping either binding changes the
object model without touching middleware or controllers.
"""

from typing import Any, Protocol

from pipeweave._internal.asgi import Receive, Scope
from pipeweave.http.request import Request
from pipeweave.http.response import Response


class RequestFactory(Protocol):
    """Builds a ``Request`` from the server's view of an incoming request."""

    def create_request(self, scope: Scope, receive: Receive) -> Request: ...


class ResponseFactory(Protocol):
    """Creates responses for controllers and the end of a pipeline."""

    def create_response(self, body: str | bytes = "", status: int = 200) -> Response: ...

    def coerce(self, value: Any) -> Response: ...


class AsgiRequestFactory:
    """Builds requests from ASGI HTTP scopes."""

    def create_request(self, scope: Scope, receive: Receive) -> Request:
        return Request.from_asgi(scope, receive)


class TextResponseFactory:
    """Creates plain-text responses.

    ``coerce`` accepts whatever a controller returned: a ``Response`` is
    passed through, ``str``/``bytes`` become a 200 body, ``None`` an empty
    body. Anything else is a programming error.
    """

    __slots__ = ("_content_type",)

    def __init__(self, content_type: str = "text/plain; charset=utf-8") -> None:
        self._content_type = content_type

    def create_response(self, body: str | bytes = "", status: int = 200) -> Response:
        return Response(body=body, status=status, content_type=self._content_type)

    def coerce(self, value: Any) -> Response:
        if isinstance(value, Response):
            return value
        if value is None:
            return self.create_response()
        if isinstance(value, (str, bytes)):
            return self.create_response(value)
        msg = (
            f"Controller returned {type(value).__name__}; expected Response, str, "
            "bytes, or None."
        )
        raise TypeError(msg)
