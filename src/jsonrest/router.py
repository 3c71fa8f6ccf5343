"""Router and route groups.

A ``Router`` is the root ``RouteGroup`` and the ASGI application. Groups
form a tree: each holds its own middleware list and config, and shares
the root's route table by reference::

    router = Router(disable_indent())
    router.use(access_log())

    api = router.group()
    api.use(require_token)

    @api.get("/users/{id:int}")
    async def get_user(request):
        return await store.user(int(request.param("id")))

Middleware is not snapshotted when a route is registered. Each request
walks the owning group up to the root, so a later ``use()`` applies to
routes registered before it, and root middleware is always outermost.
"""

from __future__ import annotations

import inspect
import threading
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from jsonrest._internal.asgi import Receive, Scope, Send
from jsonrest._internal.invoke import ensure_async
from jsonrest.config import Option, RouterConfig, apply_options
from jsonrest.errors import ConfigurationError
from jsonrest.http.headers import Headers
from jsonrest.middleware.protocol import Middleware
from jsonrest.routing.route import Route
from jsonrest.routing.table import RouteTable
from jsonrest.server.compression import GzipSender, accepts_gzip
from jsonrest.server.handler import handle_request


class RouteGroup:
    """A scope of routes sharing middleware and configuration.

    Created with ``Router.group()`` or ``RouteGroup.group()``; never
    directly.
    """

    __slots__ = ("_config", "_middleware", "_parent", "_root")

    def __init__(self, config: RouterConfig, parent: RouteGroup | None, root: Router) -> None:
        self._config = config
        self._middleware: list[Middleware] = []
        self._parent = parent
        self._root = root

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def parent(self) -> RouteGroup | None:
        return self._parent

    # -- Composition --

    def use(self, *middleware: Middleware) -> None:
        """Append *middleware* to this group.

        Applies to every route of this group and its descendants on the
        next request, including routes registered earlier.
        """
        self._middleware.extend(middleware)

    def group(self, *options: Option) -> RouteGroup:
        """Create a child group.

        The child's config is this group's config with *options* applied
        on top, so later options win.
        """
        return RouteGroup(apply_options(self._config, options), self, self._root)

    def middleware_chain(self) -> list[Middleware]:
        """Middleware for a route in this group, outermost (root) first."""
        chain: list[Middleware] = []
        group: RouteGroup | None = self
        while group is not None:
            chain[:0] = group._middleware
            group = group._parent
        return chain

    # -- Registration --

    def handle(self, method: str, path: str, endpoint: Callable[..., Any]) -> Route:
        """Register *endpoint* for ``(method, path)``.

        Raises ``ConfigurationError`` if the pair is already registered or
        the router is already serving.
        """
        route = Route(method=method.upper(), path=path, endpoint=ensure_async(endpoint), group=self)
        self._root.table.add(route)
        return route

    def route(
        self, path: str, *, methods: Iterable[str] = ("GET",)
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of ``handle`` for one or more methods::

            @router.route("/items", methods=["GET", "HEAD"])
            async def items(request): ...
        """

        def decorator(endpoint: Callable[..., Any]) -> Callable[..., Any]:
            for method in methods:
                self.handle(method, path, endpoint)
            return endpoint

        return decorator

    def _shortcut(self, method: str, path: str, endpoint: Callable[..., Any] | None) -> Any:
        if endpoint is not None:
            return self.handle(method, path, endpoint)
        return self.route(path, methods=(method,))

    def get(self, path: str, endpoint: Callable[..., Any] | None = None) -> Any:
        """Register a GET endpoint, directly or as a decorator."""
        return self._shortcut("GET", path, endpoint)

    def head(self, path: str, endpoint: Callable[..., Any] | None = None) -> Any:
        return self._shortcut("HEAD", path, endpoint)

    def post(self, path: str, endpoint: Callable[..., Any] | None = None) -> Any:
        return self._shortcut("POST", path, endpoint)

    def put(self, path: str, endpoint: Callable[..., Any] | None = None) -> Any:
        return self._shortcut("PUT", path, endpoint)

    def patch(self, path: str, endpoint: Callable[..., Any] | None = None) -> Any:
        return self._shortcut("PATCH", path, endpoint)

    def delete(self, path: str, endpoint: Callable[..., Any] | None = None) -> Any:
        return self._shortcut("DELETE", path, endpoint)

    def options(self, path: str, endpoint: Callable[..., Any] | None = None) -> Any:
        return self._shortcut("OPTIONS", path, endpoint)

    def routes(self, endpoints: Mapping[str, Callable[..., Any]]) -> None:
        """Register many endpoints keyed by ``"METHOD /path"``.

        Raises ``ConfigurationError`` for a key that is not exactly two
        whitespace-separated tokens.
        """
        for key, endpoint in endpoints.items():
            parts = key.split()
            if len(parts) != 2:
                msg = f"invalid route key {key!r}: expected 'METHOD /path'"
                raise ConfigurationError(msg)
            method, path = parts
            self.handle(method, path, endpoint)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} middleware={len(self._middleware)}>"


class Router(RouteGroup):
    """The root group and ASGI 3 application.

    Owns the route table. The table is frozen on the first ASGI call
    (lifespan or HTTP); registering afterwards raises
    ``ConfigurationError``, while ``use()`` stays legal.
    """

    __slots__ = ("_freeze_lock", "_shutdown_hooks", "_startup_hooks", "_table")

    def __init__(self, *options: Option, config: RouterConfig | None = None) -> None:
        super().__init__(apply_options(config or RouterConfig(), options), None, self)
        self._table = RouteTable()
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._freeze_lock = threading.Lock()

    @property
    def table(self) -> RouteTable:
        return self._table

    @property
    def registered_routes(self) -> list[Route]:
        """Registered routes, in registration order."""
        return self._table.routes

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a sync or async hook run at ASGI lifespan startup.

        Usage::

            @router.on_startup
            async def connect():
                await pool.open()
        """
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a sync or async hook run at ASGI lifespan shutdown."""
        self._shutdown_hooks.append(func)
        return func

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        self._ensure_frozen()

        config = self._config
        if config.compression:
            accept = Headers(tuple(scope.get("headers", ()))).get("accept-encoding")
            send = GzipSender(
                send,
                level=config.compression_level,
                min_size=config.compression_min_size,
                enabled=accepts_gzip(accept),
                head=scope.get("method", "").upper() == "HEAD",
            )
            await handle_request(scope, receive, send, router=self, strip_head=False)
            return
        await handle_request(scope, receive, send, router=self)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def startup(self) -> None:
        """Run startup hooks in registration order."""
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def shutdown(self) -> None:
        """Run shutdown hooks in registration order."""
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    def _ensure_frozen(self) -> None:
        """Freeze the route table exactly once, even under concurrent first calls."""
        if self._table.frozen:
            return
        with self._freeze_lock:
            if not self._table.frozen:
                self._table.freeze()

    # -- Serving --

    def run(self, host: str = "127.0.0.1", port: int = 8000, *, reload: bool = False) -> None:
        """Serve this router with pounce (requires ``jsonrest[server]``)."""
        from jsonrest.server.serve import run_server

        self._ensure_frozen()
        run_server(self, host, port, reload=reload)
