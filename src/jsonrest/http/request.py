"""The request handed to every endpoint and middleware.

Frozen metadata with async body access, plus two mutable side channels:
the ``Meta`` scratch store (``get`` / ``set``) and the response headers
queued with ``set_response_header``.
"""

from __future__ import annotations

import base64
import binascii
import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any

from jsonrest._internal.asgi import Receive, Scope
from jsonrest.context import Meta
from jsonrest.errors import bad_request, error
from jsonrest.extraction import ExtractionError, extract_dataclass
from jsonrest.http.forms import FormData, UploadFile, parse_form_data
from jsonrest.http.headers import Headers
from jsonrest.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An incoming HTTP request.

    Created once per request by the dispatch pipeline and never shared
    across requests. The body is read lazily and cached, so middleware
    and the endpoint can both call ``body()``.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str] = field(default_factory=dict)
    route: str = ""
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    _receive: Receive | None = field(default=None, repr=False, compare=False)
    _meta: Meta = field(default_factory=Meta, repr=False, compare=False)
    _response_headers: dict[str, tuple[str, str]] = field(
        default_factory=dict, repr=False, compare=False
    )
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Accessors --

    def param(self, name: str, default: str = "") -> str:
        """A path parameter by name."""
        return self.path_params.get(name, default)

    def header(self, name: str, default: str = "") -> str:
        """A request header by name (case-insensitive)."""
        value = self.headers.get(name)
        return default if value is None else value

    def query_param(self, name: str, default: str = "") -> str:
        """The first query string value for *name*."""
        value = self.query.get(name)
        return default if value is None else value

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path plus query string, as requested."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw.decode('latin-1')}"
        return self.path

    def basic_auth(self) -> tuple[str, str] | None:
        """The ``(username, password)`` pair from HTTP Basic auth, if any."""
        auth = self.headers.get("authorization", "")
        scheme, _, credentials = auth.partition(" ")
        if scheme.lower() != "basic" or not credentials:
            return None
        try:
            decoded = base64.b64decode(credentials, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return None
        username, sep, password = decoded.partition(":")
        if not sep:
            return None
        return username, password

    # -- Scratch space --

    def get(self, key: Any, default: Any = None) -> Any:
        """Return the value stored under *key* for this request."""
        return self._meta.get(key, default)

    def set(self, key: Any, value: Any) -> None:
        """Store *value* under *key* for the rest of this request."""
        self._meta.set(key, value)

    # -- Response headers --

    def set_response_header(self, name: str, value: str) -> None:
        """Set a header on the eventual response, replacing earlier values."""
        self._response_headers[name.lower()] = (name, value)

    @property
    def response_headers(self) -> tuple[tuple[str, str], ...]:
        return tuple(self._response_headers.values())

    # -- Body access --

    async def body(self) -> bytes:
        """Read the full request body (cached after the first call)."""
        if "body" in self._cache:
            return self._cache["body"]
        result = b"".join([chunk async for chunk in self.stream()])
        self._cache["body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks as the server delivers them."""
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """The body decoded as UTF-8."""
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        """The body parsed as JSON, without error translation."""
        return json_module.loads(await self.body())

    async def bind_body[T](self, into: type[T] | None = None) -> Any:
        """Decode the JSON body, optionally into a dataclass.

        Raises a 400 ``HTTPError`` (``malformed or unexpected json: ...``)
        wrapping the decode failure.
        """
        raw = await self.body()
        try:
            data = json_module.loads(raw)
        except json_module.JSONDecodeError as exc:
            msg = f"malformed or unexpected json: offset {exc.pos}: {exc.msg}"
            raise bad_request(msg).wrap(exc) from exc
        except UnicodeDecodeError as exc:
            raise bad_request("malformed or unexpected json: invalid utf-8").wrap(exc) from exc

        if into is None:
            return data
        if not isinstance(data, dict):
            msg = f"malformed or unexpected json: expected object, got {type(data).__name__}"
            raise bad_request(msg)
        try:
            return extract_dataclass(into, data)
        except ExtractionError as exc:
            raise bad_request(f"malformed or unexpected json: {exc}").wrap(exc) from exc

    def bind_query[T](self, into: type[T]) -> T:
        """Build *into* from query string parameters.

        Raises a 400 ``HTTPError`` when a value is missing or malformed.
        """
        try:
            return extract_dataclass(into, self.query)
        except ExtractionError as exc:
            raise bad_request(f"invalid query parameters: {exc}").wrap(exc) from exc

    async def form(self) -> FormData:
        """Parse the body as URL-encoded or multipart form data (cached).

        Raises ``ValueError`` for non-form content types or malformed bodies.
        """
        if "form" in self._cache:
            return self._cache["form"]
        content_type = self.content_type or "application/x-www-form-urlencoded"
        result = parse_form_data(await self.body(), content_type)
        self._cache["form"] = result
        return result

    async def form_file(self, name: str, max_size: int | None = None) -> UploadFile:
        """Return the first file uploaded under *name*.

        Raises a 400 ``HTTPError`` when the form cannot be parsed or holds no
        such file, and a 413 when the body is larger than *max_size* bytes.
        """
        body = await self.body()
        if max_size is not None and len(body) > max_size:
            raise error(413, "request_entity_too_large", "request body too large")
        try:
            form = await self.form()
        except ValueError as exc:
            raise bad_request("cannot parse multipart form").wrap(exc) from exc
        upload = form.files.get(name)
        if upload is None:
            raise bad_request(f"missing form file {name!r}")
        return upload

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive | None = None) -> Request:
        """Create a Request from an ASGI HTTP scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )

    def bind_route(self, route: str, path_params: dict[str, str]) -> Request:
        """Return a copy bound to a matched route.

        The copy shares the body cache, scratch store and queued response
        headers with the original.
        """
        return replace(self, route=route, path_params=dict(path_params))
