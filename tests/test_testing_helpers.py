"""Tests for jsonrest.testing: TestClient, TestResponse, make_request."""

from jsonrest.router import Router
from jsonrest.testing import TestClient, TestResponse, make_request


class TestTestResponse:
    def test_accessors(self) -> None:
        response = TestResponse(
            status=200,
            headers=(("content-type", "application/json"), ("x-tag", "a"), ("x-tag", "b")),
            body=b'{"ok": true}',
        )
        assert response.text == '{"ok": true}'
        assert response.json() == {"ok": True}
        assert response.header("X-Tag") == "a"
        assert response.header_list("x-tag") == ["a", "b"]
        assert response.header("missing") is None


class TestTestClient:
    async def test_query_and_json(self) -> None:
        router = Router()

        @router.post("/echo")
        async def echo(request):
            return {"q": request.query_param("q"), "body": await request.bind_body()}

        async with TestClient(router) as client:
            response = await client.request(
                "POST", "/echo?q=1", query={"extra": "2"}, json={"a": 1}
            )

        assert response.json() == {"q": "1", "body": {"a": 1}}

    async def test_runs_lifecycle_hooks(self) -> None:
        calls: list[str] = []
        router = Router()
        router.on_startup(lambda: calls.append("up"))
        router.on_shutdown(lambda: calls.append("down"))

        async with TestClient(router):
            assert calls == ["up"]

        assert calls == ["up", "down"]


class TestMakeRequest:
    async def test_populated_fields(self) -> None:
        request = make_request(
            "post",
            "/users/7",
            path_params={"id": "7"},
            headers={"X-Token": "abc"},
            query={"verbose": "1"},
            json={"name": "ada"},
            route="/users/{id}",
        )
        assert request.method == "POST"
        assert request.param("id") == "7"
        assert request.header("x-token") == "abc"
        assert request.query_param("verbose") == "1"
        assert request.route == "/users/{id}"
        assert request.content_type == "application/json"
        assert await request.bind_body() == {"name": "ada"}

    async def test_endpoint_unit_test(self) -> None:
        async def get_user(request):
            return {"id": int(request.param("id"))}

        assert await get_user(make_request(path_params={"id": "3"})) == {"id": 3}
