"""Deadline middleware."""

from typing import Any

import anyio

from jsonrest.errors import ConfigurationError, error
from jsonrest.http.request import Request
from jsonrest.middleware.protocol import Endpoint, Middleware


def timeout(seconds: float) -> Middleware:
    """Cancel the wrapped endpoint after *seconds*.

    A request that runs out of time gets a 504 ``timeout`` error. The
    endpoint is cancelled at its next await point.
    """
    if seconds <= 0:
        msg = f"timeout must be positive, got {seconds}"
        raise ConfigurationError(msg)

    def middleware(next: Endpoint) -> Endpoint:
        async def endpoint(request: Request) -> Any:
            try:
                with anyio.fail_after(seconds):
                    return await next(request)
            except TimeoutError as exc:
                raise error(504, "timeout", "request timed out").wrap(exc) from exc

        return endpoint

    return middleware
