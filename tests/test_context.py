"""Tests for jsonrest.context: request ContextVar and the Meta scratch store."""

import threading

import pytest

from jsonrest.context import Meta, get_request, request_var
from jsonrest.router import Router
from jsonrest.testing import TestClient, make_request


class TestRequestVar:
    def test_get_request_raises_outside_context(self) -> None:
        with pytest.raises(LookupError):
            get_request()

    def test_set_and_get_request(self) -> None:
        request = make_request("GET", "/test")
        token = request_var.set(request)
        try:
            assert get_request() is request
        finally:
            request_var.reset(token)

    async def test_reset_after_dispatch(self) -> None:
        router = Router()
        router.get("/", lambda request: get_request().path)

        async with TestClient(router) as client:
            response = await client.get("/")

        assert response.json() == "/"
        with pytest.raises(LookupError):
            get_request()


class TestMeta:
    def test_get_set_delete(self) -> None:
        meta = Meta()
        meta.set("user", "ada")
        assert "user" in meta
        assert meta.get("user") == "ada"
        meta.delete("user")
        assert meta.get("user", "gone") == "gone"
        meta.delete("user")

    def test_snapshot_is_a_copy(self) -> None:
        meta = Meta()
        meta.set("a", 1)
        snap = meta.snapshot()
        snap["a"] = 2
        assert meta.get("a") == 1

    def test_concurrent_writers(self) -> None:
        meta = Meta()

        def writer(n: int) -> None:
            for i in range(200):
                meta.set((n, i), i)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(meta.snapshot()) == 800

    async def test_visible_to_later_layers(self) -> None:
        def auth(next):
            async def endpoint(request):
                request.set("user", "ada")
                return await next(request)

            return endpoint

        router = Router()
        router.use(auth)
        router.get("/me", lambda request: {"user": request.get("user")})

        async with TestClient(router) as client:
            response = await client.get("/me")

        assert response.json() == {"user": "ada"}
