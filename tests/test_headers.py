"""Tests for jsonrest.http.headers and jsonrest.http.query."""

from jsonrest.http.headers import Headers
from jsonrest.http.query import QueryParams


class TestHeaders:
    def test_case_insensitive(self) -> None:
        headers = Headers(((b"Content-Type", b"application/json"),))
        assert headers["content-type"] == "application/json"
        assert headers.get("CONTENT-TYPE") == "application/json"
        assert "Content-Type" in headers

    def test_repeated_values(self) -> None:
        headers = Headers(((b"accept", b"a"), (b"Accept", b"b")))
        assert headers["accept"] == "a"
        assert headers.get_list("accept") == ["a", "b"]
        assert len(headers) == 1

    def test_from_pairs(self) -> None:
        headers = Headers.from_pairs({"X-Token": "abc"})
        assert headers.raw == ((b"x-token", b"abc"),)
        assert headers.get("missing", "d") == "d"


class TestQueryParams:
    def test_values(self) -> None:
        query = QueryParams(b"tag=a&tag=b&flag=&n=5")
        assert query["tag"] == "a"
        assert query.get_list("tag") == ["a", "b"]
        assert query["flag"] == ""
        assert query.get_int("n") == 5
        assert query.get_int("tag", 0) == 0
        assert query.raw == b"tag=a&tag=b&flag=&n=5"

    def test_str_input(self) -> None:
        assert QueryParams("q=hello%20world")["q"] == "hello world"
