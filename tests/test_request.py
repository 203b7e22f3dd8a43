"""Tests for pipeweave.http.request — frozen Request with attributes."""

import pytest

from pipeweave.http.request import Request


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "server": ("localhost", 8000),
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


def _make_receive(*bodies: bytes):
    """Create an ASGI receive callable that yields bodies."""
    messages = []
    for i, body in enumerate(bodies):
        is_last = i == len(bodies) - 1
        messages.append({"type": "http.request", "body": body, "more_body": not is_last})
    if not messages:
        messages.append({"type": "http.request", "body": b"", "more_body": False})
    it = iter(messages)

    async def receive():
        return next(it)

    return receive


class TestRequestFromASGI:
    def test_basic_fields(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST", path="/users"), _make_receive())

        assert req.method == "POST"
        assert req.path == "/users"
        assert req.http_version == "1.1"
        assert req.server == ("localhost", 8000)
        assert req.client == ("127.0.0.1", 54321)
        assert dict(req.attributes) == {}

    def test_headers_and_query(self) -> None:
        scope = _make_scope(
            headers=[(b"content-type", b"application/json")],
            query_string=b"page=2&tag=a&tag=b",
        )
        req = Request.from_asgi(scope, _make_receive())

        assert req.content_type == "application/json"
        assert req.query["page"] == "2"
        assert req.query.get_list("tag") == ["a", "b"]
        assert req.url == "/?page=2&tag=a&tag=b"

    def test_frozen(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive())
        with pytest.raises(AttributeError):
            req.path = "/other"  # type: ignore[misc]


class TestAttributes:
    def test_with_attribute_returns_copy(self) -> None:
        req = Request("GET", "/")
        updated = req.with_attribute("owner", "wibble")

        assert updated.get_attribute("owner") == "wibble"
        assert req.get_attribute("owner") is None
        assert updated is not req

    def test_get_attribute_default(self) -> None:
        assert Request("GET", "/").get_attribute("owner", "World") == "World"

    def test_with_attribute_replaces(self) -> None:
        req = Request("GET", "/").with_attribute("owner", "a").with_attribute("owner", "A")
        assert req.get_attribute("owner") == "A"

    def test_with_attributes(self) -> None:
        req = Request("GET", "/").with_attributes({"a": 1, "b": 2})
        assert dict(req.attributes) == {"a": 1, "b": 2}

    def test_with_attributes_empty_is_identity(self) -> None:
        req = Request("GET", "/")
        assert req.with_attributes({}) is req

    def test_without_attribute(self) -> None:
        req = Request("GET", "/").with_attribute("owner", "a")
        assert "owner" not in req.without_attribute("owner").attributes

    def test_attributes_are_read_only(self) -> None:
        req = Request("GET", "/").with_attribute("owner", "a")
        with pytest.raises(TypeError):
            req.attributes["owner"] = "b"  # type: ignore[index]

    def test_with_path_params(self) -> None:
        req = Request("GET", "/wibble").with_path_params({"owner": "wibble"})
        assert dict(req.path_params) == {"owner": "wibble"}


class TestBody:
    async def test_body_chunks_joined(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive(b"he", b"llo"))
        assert await req.body() == b"hello"

    async def test_body_cached_across_copies(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive(b"hello"))
        copy = req.with_attribute("owner", "x")

        assert await req.body() == b"hello"
        # receive is exhausted; the copy shares the cache
        assert await copy.body() == b"hello"

    async def test_json(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive(b'{"a": 1}'))
        assert await req.json() == {"a": 1}

    async def test_text(self) -> None:
        req = Request.from_asgi(_make_scope(method="POST"), _make_receive("héllo".encode()))
        assert await req.text() == "héllo"

    async def test_default_receive_is_empty(self) -> None:
        assert await Request("GET", "/").body() == b""
