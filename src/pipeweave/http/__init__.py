"""HTTP object model — immutable requests, chainable responses, factories."""

from pipeweave.http.factories import (
    AsgiRequestFactory,
    RequestFactory,
    ResponseFactory,
    TextResponseFactory,
)
from pipeweave.http.headers import Headers
from pipeweave.http.query import QueryParams
from pipeweave.http.request import Request
from pipeweave.http.response import Response

__all__ = [
    "AsgiRequestFactory",
    "Headers",
    "QueryParams",
    "Request",
    "RequestFactory",
    "Response",
    "ResponseFactory",
    "TextResponseFactory",
]
