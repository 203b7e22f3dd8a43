"""Application middleware."""

from pipeweave.http.request import Request
from pipeweave.http.response import Response
from pipeweave.middleware.protocol import Next


class UppercaseOwner:
    """Uppercases the ``owner`` request attribute before passing it on.

    Requests without an ``owner`` attribute go through untouched.
    """

    __slots__ = ()

    async def __call__(self, request: Request, next: Next) -> Response:
        owner = request.get_attribute("owner")
        if owner is not None:
            request = request.with_attribute("owner", str(owner).upper())
        return await next(request)
