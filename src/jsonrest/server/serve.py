"""Serving a router with the pounce ASGI server.

pounce is an optional dependency (``pip install jsonrest[server]``); it is
imported only when a server is actually started.
"""

from __future__ import annotations


def run_server(
    app: object,
    host: str = "127.0.0.1",
    port: int = 8000,
    *,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Start a pounce server for a live ASGI router.

    Pounce's ``run()`` takes an import string, but here we have the router
    object itself, so ``pounce.Server`` is used directly.

    Args:
        app: ASGI callable (a jsonrest ``Router``).
        host: Bind host address.
        port: Bind port number.
        reload: Restart on file changes.
        app_path: Optional ``"module:attribute"`` import string. When
            given, pounce reimports the router on each reload cycle.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(host=host, port=port, workers=1, reload=reload)
    Server(config, app, app_path=app_path).run()
