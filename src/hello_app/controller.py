"""The Hello controller."""

from pipeweave.http.request import Request
from pipeweave.http.response import Response

DEFAULT_OWNER = "World"


class Hello:
    """Greets the request's ``owner`` with the configured message."""

    __slots__ = ("message",)

    def __init__(self, message: str) -> None:
        self.message = message

    def hello(self, request: Request) -> Response:
        owner = request.get_attribute("owner") or DEFAULT_OWNER
        return Response(f"Hello, {self.message} {owner}!")
