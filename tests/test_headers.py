"""Tests for pipeweave.http.headers and query — immutable multi-value mappings."""

from pipeweave.http.headers import Headers
from pipeweave.http.query import QueryParams


class TestHeaders:
    def test_case_insensitive(self) -> None:
        h = Headers(((b"Content-Type", b"text/plain"),))
        assert h["content-type"] == "text/plain"
        assert h["CONTENT-TYPE"] == "text/plain"
        assert "Content-Type" in h

    def test_first_value_and_list(self) -> None:
        h = Headers(((b"x-tag", b"a"), (b"X-Tag", b"b")))
        assert h["x-tag"] == "a"
        assert h.get_list("X-TAG") == ["a", "b"]
        assert len(h) == 1

    def test_get_default(self) -> None:
        assert Headers().get("missing", "d") == "d"

    def test_non_string_not_contained(self) -> None:
        assert 42 not in Headers(((b"a", b"b"),))

    def test_from_mapping(self) -> None:
        h = Headers.from_mapping({"Accept": "*/*"})
        assert h.raw == ((b"accept", b"*/*"),)
        assert list(h) == ["accept"]


class TestQueryParams:
    def test_first_value(self) -> None:
        q = QueryParams(b"a=1&a=2&b=")
        assert q["a"] == "1"
        assert q.get_list("a") == ["1", "2"]
        assert q["b"] == ""

    def test_missing(self) -> None:
        q = QueryParams()
        assert q.get("a") is None
        assert q.get_list("a") == []
        assert len(q) == 0

    def test_raw(self) -> None:
        assert QueryParams(b"x=1").raw == b"x=1"
