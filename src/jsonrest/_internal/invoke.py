"""Invoke helpers: call sync or async callables uniformly.

Endpoints can be ``def`` or ``async def``, and middleware may hand back
either kind. Any code that calls user-provided code goes through here so
the sync/async check lives in exactly one place.
"""

import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def ensure_async(func: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
    """Return *func* as a coroutine function.

    Coroutine functions are returned unchanged, so middleware always
    receives something it can ``await``::

        def ping(request):
            return {"pong": True}

        endpoint = ensure_async(ping)
        await endpoint(request)
    """
    if inspect.iscoroutinefunction(func):
        return func

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        return await invoke(func, *args, **kwargs)

    return wrapper
