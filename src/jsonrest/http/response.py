"""Response values.

``Response`` is what an endpoint returns when it needs a status other than
200. ``EncodedResponse`` is the wire-ready result of the pipeline: status,
headers, and the already-encoded body bytes.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, TypeAlias

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

M: TypeAlias = dict[str, Any]
"""Shorthand for a JSON object: ``return M(message="hello")``."""


@dataclass(frozen=True, slots=True)
class Response:
    """A success body sent with a custom status code.

    Usage::

        async def create_user(request):
            user = await store.create(await request.bind_body())
            return Response(user, status=201)

    A ``None`` body writes the status and headers with no content.
    """

    body: Any = None
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))


@dataclass(frozen=True, slots=True)
class EncodedResponse:
    """A fully encoded response, ready for the ASGI sender."""

    status: int
    body: bytes = b""
    headers: tuple[tuple[str, str], ...] = ()
    content_type: str = JSON_CONTENT_TYPE
