"""Tests for jsonrest.http.request: accessors, body binding, and side channels."""

import base64
from dataclasses import dataclass

import pytest

from jsonrest.errors import HTTPError
from jsonrest.http.request import Request
from jsonrest.testing import make_request


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


@dataclass
class NewUser:
    name: str
    age: int
    admin: bool = False


@dataclass
class Page:
    page: int = 1
    q: str = ""


class TestFromASGI:
    def test_basic_fields(self) -> None:
        req = Request.from_asgi(_make_scope(method="post", path="/users"), _make_receive())
        assert req.method == "POST"
        assert req.path == "/users"
        assert req.server == ("localhost", 8000)
        assert req.client == ("127.0.0.1", 54321)
        assert req.route == ""

    def test_headers_case_insensitive(self) -> None:
        scope = _make_scope(headers=[(b"x-token", b"abc")])
        req = Request.from_asgi(scope, _make_receive())
        assert req.header("X-Token") == "abc"
        assert req.header("missing") == ""

    def test_query(self) -> None:
        req = Request.from_asgi(_make_scope(query_string=b"q=hi&page=2"), _make_receive())
        assert req.query_param("q") == "hi"
        assert req.query_param("missing") == ""
        assert req.url == "/?q=hi&page=2"

    def test_bind_route_shares_side_channels(self) -> None:
        req = Request.from_asgi(_make_scope(path="/users/7"), _make_receive())
        req.set("user", "ada")
        req.set_response_header("X-A", "1")
        bound = req.bind_route("/users/{id}", {"id": "7"})
        assert bound.param("id") == "7"
        assert bound.param("other") == ""
        assert bound.route == "/users/{id}"
        assert bound.get("user") == "ada"
        bound.set_response_header("X-B", "2")
        assert req.response_headers == (("X-A", "1"), ("X-B", "2"))


class TestBody:
    async def test_body_is_cached(self) -> None:
        req = Request.from_asgi(_make_scope(), _make_receive(b"part1", b"part2"))
        assert await req.body() == b"part1part2"
        assert await req.body() == b"part1part2"

    async def test_text(self) -> None:
        req = make_request(body="héllo".encode())
        assert await req.text() == "héllo"

    async def test_bind_body(self) -> None:
        req = make_request("POST", json={"name": "ada", "tags": ["x"]})
        assert await req.bind_body() == {"name": "ada", "tags": ["x"]}

    async def test_bind_body_into_dataclass(self) -> None:
        req = make_request("POST", json={"name": "ada", "age": "36", "extra": 1})
        assert await req.bind_body(NewUser) == NewUser(name="ada", age=36)

    async def test_malformed_json(self) -> None:
        req = make_request("POST", body=b'{"a": }')
        with pytest.raises(HTTPError) as exc_info:
            await req.bind_body()
        err = exc_info.value
        assert err.status == 400
        assert err.code == "bad_request"
        assert err.message == "malformed or unexpected json: offset 6: Expecting value"
        assert err.cause is not None

    async def test_dataclass_requires_object(self) -> None:
        req = make_request("POST", json=[1, 2])
        with pytest.raises(HTTPError, match="expected object"):
            await req.bind_body(NewUser)

    async def test_dataclass_missing_field(self) -> None:
        req = make_request("POST", json={"name": "ada"})
        with pytest.raises(HTTPError) as exc_info:
            await req.bind_body(NewUser)
        assert exc_info.value.status == 400

    def test_bind_query(self) -> None:
        req = make_request(query={"page": "3"})
        assert req.bind_query(Page) == Page(page=3)

    def test_bind_query_bad_value(self) -> None:
        req = make_request(query="page=three")
        with pytest.raises(HTTPError, match="invalid query parameters"):
            req.bind_query(Page)


class TestBasicAuth:
    def test_valid(self) -> None:
        token = base64.b64encode(b"ada:s3cret:x").decode()
        req = make_request(headers={"Authorization": f"Basic {token}"})
        assert req.basic_auth() == ("ada", "s3cret:x")

    @pytest.mark.parametrize(
        "header",
        ["", "Bearer abc", "Basic", "Basic !!!notbase64", "Basic " + base64.b64encode(b"nocolon").decode()],
    )
    def test_invalid(self, header: str) -> None:
        req = make_request(headers={"Authorization": header} if header else None)
        assert req.basic_auth() is None


class TestScratchSpace:
    def test_last_write_wins(self) -> None:
        req = make_request()
        key = object()
        assert req.get(key) is None
        assert req.get(key, "default") == "default"
        req.set(key, 1)
        req.set(key, 2)
        assert req.get(key) == 2


class TestResponseHeaders:
    def test_replace_semantics(self) -> None:
        req = make_request()
        req.set_response_header("X-Trace", "one")
        req.set_response_header("x-trace", "two")
        assert req.response_headers == (("x-trace", "two"),)
