"""Tests for CORS middleware."""

from jsonrest.errors import forbidden
from jsonrest.middleware.cors import CORSConfig, CORSMiddleware
from jsonrest.router import Router
from jsonrest.testing import TestClient


def _make_cors_router(config: CORSConfig | None = None) -> Router:
    """Helper: create a router with CORS middleware and a few routes."""
    router = Router()
    router.use(CORSMiddleware(config))

    @router.get("/api/data")
    def data(request):
        return {"message": "hello"}

    @router.options("/api/data")
    def data_options(request):
        return None

    @router.delete("/api/data")
    def delete_data(request):
        raise forbidden("read only")

    return router


class TestCORSNonCorsRequests:
    async def test_no_origin_header(self) -> None:
        router = _make_cors_router(CORSConfig(allow_origins=("*",)))
        async with TestClient(router) as client:
            response = await client.get("/api/data")
            assert response.status == 200
            header_names = {name for name, _ in response.headers}
            assert "access-control-allow-origin" not in header_names

    async def test_disallowed_origin(self) -> None:
        router = _make_cors_router(CORSConfig(allow_origins=("https://example.com",)))
        async with TestClient(router) as client:
            response = await client.get("/api/data", headers={"Origin": "https://evil.test"})
            assert response.status == 200
            assert response.header("access-control-allow-origin") is None


class TestCORSSimpleRequests:
    async def test_allowed_origin_gets_cors_headers(self) -> None:
        router = _make_cors_router(CORSConfig(allow_origins=("https://example.com",)))
        async with TestClient(router) as client:
            response = await client.get("/api/data", headers={"Origin": "https://example.com"})
            assert response.status == 200
            assert ("access-control-allow-origin", "https://example.com") in response.headers
            assert ("vary", "Origin") in response.headers

    async def test_wildcard_without_credentials(self) -> None:
        router = _make_cors_router(CORSConfig(allow_origins=("*",)))
        async with TestClient(router) as client:
            response = await client.get("/api/data", headers={"Origin": "https://a.test"})
            assert response.header("access-control-allow-origin") == "*"
            assert response.header("vary") is None

    async def test_wildcard_with_credentials_echoes_origin(self) -> None:
        config = CORSConfig(allow_origins=("*",), allow_credentials=True)
        router = _make_cors_router(config)
        async with TestClient(router) as client:
            response = await client.get("/api/data", headers={"Origin": "https://a.test"})
            assert response.header("access-control-allow-origin") == "https://a.test"
            assert response.header("access-control-allow-credentials") == "true"

    async def test_expose_headers(self) -> None:
        config = CORSConfig(allow_origins=("*",), expose_headers=("X-Total", "X-Page"))
        router = _make_cors_router(config)
        async with TestClient(router) as client:
            response = await client.get("/api/data", headers={"Origin": "https://a.test"})
            assert response.header("access-control-expose-headers") == "X-Total, X-Page"

    async def test_error_responses_carry_cors_headers(self) -> None:
        router = _make_cors_router(CORSConfig(allow_origins=("*",)))
        async with TestClient(router) as client:
            response = await client.delete("/api/data", headers={"Origin": "https://a.test"})
            assert response.status == 403
            assert response.header("access-control-allow-origin") == "*"


class TestCORSPreflight:
    async def test_preflight_short_circuits(self) -> None:
        config = CORSConfig(
            allow_origins=("https://example.com",),
            allow_methods=("GET", "POST"),
            allow_headers=("Content-Type",),
            max_age=120,
        )
        router = _make_cors_router(config)
        async with TestClient(router) as client:
            response = await client.request(
                "OPTIONS",
                "/api/data",
                headers={
                    "Origin": "https://example.com",
                    "Access-Control-Request-Method": "POST",
                },
            )
            assert response.status == 204
            assert response.body == b""
            assert response.header("access-control-allow-methods") == "GET, POST"
            assert response.header("access-control-allow-headers") == "Content-Type"
            assert response.header("access-control-max-age") == "120"
