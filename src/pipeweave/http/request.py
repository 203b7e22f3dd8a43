"""Immutable HTTP request.

Frozen metadata with async body access. Middleware never mutates a
request: ``with_attribute()`` returns a copy carrying the new value, and
the copy is what gets passed to ``next``.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from pipeweave._internal.asgi import Receive, Scope
from pipeweave.http.headers import Headers
from pipeweave.http.query import QueryParams

_EMPTY: Mapping[str, Any] = MappingProxyType({})


async def _no_body() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation. Request
    attributes are an immutable mapping: routing writes path parameters
    and dispatch data into it, middleware replaces values by building a
    new request.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    path_params: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    attributes: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(default=_no_body, repr=False, compare=False)

    # Private: body cache shared by every copy of this request
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Attributes --

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Return the attribute *name*, or *default* when it is not set."""
        return self.attributes.get(name, default)

    def with_attribute(self, name: str, value: Any) -> Request:
        """Return a copy of this request with attribute *name* set to *value*."""
        attributes = {**self.attributes, name: value}
        return replace(self, attributes=MappingProxyType(attributes))

    def with_attributes(self, values: Mapping[str, Any]) -> Request:
        """Return a copy of this request with several attributes set."""
        if not values:
            return self
        attributes = {**self.attributes, **values}
        return replace(self, attributes=MappingProxyType(attributes))

    def without_attribute(self, name: str) -> Request:
        """Return a copy of this request with attribute *name* removed."""
        if name not in self.attributes:
            return self
        attributes = {k: v for k, v in self.attributes.items() if k != name}
        return replace(self, attributes=MappingProxyType(attributes))

    def with_path_params(self, params: Mapping[str, str]) -> Request:
        """Return a copy carrying matched path parameters."""
        return replace(self, path_params=MappingProxyType(dict(params)))

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Full request URL (path + query string)."""
        qs = self.query.raw
        if qs:
            return f"{self.path}?{qs.decode('latin-1')}"
        return self.path

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the ASGI receive is consumed once, then the
        same bytes are returned on subsequent calls, including from copies
        made by ``with_attribute()``.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes, None]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
