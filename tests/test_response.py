"""Tests for pipeweave.http.response — chainable immutable Response."""

import pytest

from pipeweave.http.response import Response


class TestResponse:
    def test_defaults(self) -> None:
        r = Response()
        assert r.body == ""
        assert r.status == 200
        assert r.content_type == "text/plain; charset=utf-8"
        assert r.headers == ()

    def test_with_status(self) -> None:
        r = Response("x")
        r2 = r.with_status(201)
        assert r2.status == 201
        assert r.status == 200

    def test_with_header_appends(self) -> None:
        r = Response().with_header("X-A", "1").with_header("X-A", "2")
        assert r.headers == (("X-A", "1"), ("X-A", "2"))

    def test_with_headers(self) -> None:
        r = Response().with_headers({"X-A": "1", "X-B": "2"})
        assert ("X-B", "2") in r.headers

    def test_with_content_type(self) -> None:
        assert Response().with_content_type("text/html").content_type == "text/html"

    def test_with_body(self) -> None:
        assert Response("a").with_body("b").text == "b"

    def test_header_lookup_case_insensitive(self) -> None:
        r = Response().with_header("Allow", "GET")
        assert r.header("allow") == "GET"
        assert r.header("missing", "-") == "-"

    def test_body_bytes_and_text(self) -> None:
        assert Response("héllo").body_bytes == "héllo".encode()
        assert Response(b"abc").text == "abc"

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Response().status = 500  # type: ignore[misc]
