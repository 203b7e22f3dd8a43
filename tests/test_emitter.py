"""Tests for pipeweave.server.emitter — Response to ASGI messages."""

from typing import Any

from pipeweave.http.response import Response
from pipeweave.server.emitter import AsgiResponseEmitter, body_allowed


class _Collector:
    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)


class TestBodyAllowed:
    def test_statuses(self) -> None:
        assert body_allowed(200)
        assert body_allowed(404)
        assert not body_allowed(101)
        assert not body_allowed(204)
        assert not body_allowed(304)


class TestAsgiResponseEmitter:
    async def test_start_and_body(self) -> None:
        send = _Collector()
        await AsgiResponseEmitter().emit(Response("Hello, wonderful WIBBLE!"), send)

        start, body = send.messages
        assert start["type"] == "http.response.start"
        assert start["status"] == 200
        assert (b"content-type", b"text/plain; charset=utf-8") in start["headers"]
        assert (b"content-length", b"23") in start["headers"]
        assert body == {"type": "http.response.body", "body": b"Hello, wonderful WIBBLE!"}

    async def test_custom_headers_lowercased(self) -> None:
        send = _Collector()
        await AsgiResponseEmitter().emit(Response().with_header("X-Owner", "WIBBLE"), send)
        assert (b"x-owner", b"WIBBLE") in send.messages[0]["headers"]

    async def test_no_body_for_204(self) -> None:
        send = _Collector()
        await AsgiResponseEmitter().emit(Response("ignored", status=204), send)

        assert send.messages[1]["body"] == b""
        assert (b"content-length", b"0") in send.messages[0]["headers"]
