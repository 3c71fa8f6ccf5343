"""Cross-origin resource sharing.

Headers that do not depend on the request are computed once when the
middleware is built; per request only the origin is checked and echoed.
They are queued with ``set_response_header`` so error envelopes carry
them as well.
"""

from dataclasses import dataclass
from typing import Any

from jsonrest.http.request import Request
from jsonrest.http.response import Response
from jsonrest.middleware.protocol import Endpoint


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """Which origins may call the API, and with what.

    Nothing is allowed until origins are listed::

        CORSConfig(
            allow_origins=("https://app.example.com",),
            allow_methods=("GET", "POST", "DELETE"),
            allow_headers=("Authorization", "Content-Type"),
        )

    ``"*"`` in ``allow_origins`` admits every origin. With credentials the
    caller's origin is echoed instead of ``*``, as browsers require.
    """

    allow_origins: tuple[str, ...] = ()
    allow_methods: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
    allow_headers: tuple[str, ...] = ()
    expose_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = 600


class CORSMiddleware:
    """Endpoint wrapper that answers preflights and tags allowed origins.

    Requests without an ``Origin`` header, or from an origin that is not
    allowed, pass through untouched. A preflight (``OPTIONS`` from an
    allowed origin) is answered with 204 and never reaches the endpoint.
    The path still needs an ``OPTIONS`` route, because middleware only
    runs once a route has matched.

    Usage::

        router.use(CORSMiddleware(CORSConfig(allow_origins=("*",))))
    """

    __slots__ = ("_any_origin", "_common", "_origins", "_preflight", "config")

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = cfg = config or CORSConfig()
        self._origins = frozenset(cfg.allow_origins)
        self._any_origin = "*" in self._origins

        common: list[tuple[str, str]] = []
        if cfg.allow_credentials:
            common.append(("Access-Control-Allow-Credentials", "true"))
        if cfg.expose_headers:
            common.append(("Access-Control-Expose-Headers", ", ".join(cfg.expose_headers)))
        self._common = tuple(common)

        preflight = [("Access-Control-Max-Age", str(cfg.max_age))]
        if cfg.allow_headers:
            preflight.append(("Access-Control-Allow-Headers", ", ".join(cfg.allow_headers)))
        self._preflight = tuple(preflight)

    def allows(self, origin: str) -> bool:
        return self._any_origin or origin in self._origins

    def _tag(self, request: Request, origin: str) -> None:
        if self._any_origin and not self.config.allow_credentials:
            request.set_response_header("Access-Control-Allow-Origin", "*")
        else:
            # The value varies per caller, so caches must key on Origin
            request.set_response_header("Access-Control-Allow-Origin", origin)
            request.set_response_header("Vary", "Origin")
        for name, value in self._common:
            request.set_response_header(name, value)

    def __call__(self, next: Endpoint) -> Endpoint:
        async def endpoint(request: Request) -> Any:
            origin = request.headers.get("origin")
            if origin is None or not self.allows(origin):
                return await next(request)

            self._tag(request, origin)
            if request.method != "OPTIONS":
                return await next(request)

            if request.header("access-control-request-method"):
                request.set_response_header(
                    "Access-Control-Allow-Methods", ", ".join(self.config.allow_methods)
                )
            for name, value in self._preflight:
                request.set_response_header(name, value)
            return Response(status=204)

        return endpoint
