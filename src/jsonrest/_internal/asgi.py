"""ASGI type aliases.

The raw ASGI callables, as seen by the router and its collaborators.
Users interact with ``Request`` and never touch these directly.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

Scope: TypeAlias = MutableMapping[str, Any]
Message: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[Message]]
Send: TypeAlias = Callable[[Message], Awaitable[None]]

# A complete ASGI application (used for custom not-found handlers)
ASGIApp: TypeAlias = Callable[[Scope, Receive, Send], Awaitable[None]]


def encode_headers(headers: list[tuple[str, str]]) -> list[tuple[bytes, bytes]]:
    """Lower-case and latin-1 encode header pairs for an ASGI message."""
    return [
        (name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers
    ]
