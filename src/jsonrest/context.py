"""Request-scoped state.

Provides:
- ``request_var``: the ``Request`` being dispatched on this task.
- ``Meta``: the per-request key/value scratch space behind
  ``Request.get()`` / ``Request.set()``.

``request_var`` is set by the dispatch pipeline once the route is matched
and reset after the response is encoded. Accessing it outside a request
raises ``LookupError``.
"""

from __future__ import annotations

import threading
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsonrest.http.request import Request

request_var: ContextVar[Request] = ContextVar("jsonrest_request")
"""The current request. Set by the dispatch pipeline before the endpoint runs."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request.
    """
    return request_var.get()


class Meta:
    """Key/value scratch space scoped to one request.

    Keys may be any hashable value. Last write wins and is visible to every
    later middleware layer and the endpoint. A lock guards the store so a
    watchdog task can read it while the endpoint is still writing.

    Usage::

        def auth(next):
            async def endpoint(request):
                request.set(UserKey, await load_user(request))
                return await next(request)
            return endpoint
    """

    __slots__ = ("_data", "_lock")

    def __init__(self) -> None:
        self._data: dict[Any, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: Any, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: Any, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: Any) -> None:
        with self._lock:
            self._data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def snapshot(self) -> dict[Any, Any]:
        """Return a shallow copy of the current contents."""
        with self._lock:
            return dict(self._data)

    def __repr__(self) -> str:
        return f"<Meta {self.snapshot()!r}>"
