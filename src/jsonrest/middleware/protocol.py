"""Endpoint and Middleware types, and their composition.

An endpoint takes the request and returns the response value, or raises::

    async def get_user(request: Request) -> Any: ...

A middleware wraps an endpoint and returns a new one::

    def timing(next: Endpoint) -> Endpoint:
        async def endpoint(request: Request) -> Any:
            start = time.monotonic()
            try:
                return await next(request)
            finally:
                log.info("%s took %.3fs", request.path, time.monotonic() - start)
        return endpoint

Middleware earlier in a list wraps outer: ``[m1, m2, m3]`` around ``e``
is ``m1(m2(m3(e)))``. Raising from a middleware short-circuits every
layer inside it, while layers outside still see the exception.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsonrest.http.request import Request

# The innermost handler and every wrapped layer around it
type Endpoint = Callable[[Request], Awaitable[Any]]

# A function from endpoint to endpoint
type Middleware = Callable[[Endpoint], Endpoint]


def identity(endpoint: Endpoint) -> Endpoint:
    """The pass-through middleware."""
    return endpoint


def apply_middleware(endpoint: Endpoint, middleware: Iterable[Middleware]) -> Endpoint:
    """Wrap *endpoint* so the first middleware is outermost."""
    for mw in reversed(tuple(middleware)):
        endpoint = mw(endpoint)
    return endpoint


def compose(*middleware: Middleware) -> Middleware:
    """Collapse *middleware* into a single middleware.

    ``compose(a, b)(e)`` is ``a(b(e))``; ``compose()`` is ``identity``.
    """
    if not middleware:
        return identity

    def composed(endpoint: Endpoint) -> Endpoint:
        return apply_middleware(endpoint, middleware)

    return composed
