"""jsonrest exception hierarchy and error translation.

Shared across the router, the dispatch pipeline, and middleware so every
module raises and catches the same types.

Endpoints signal failure by raising. Anything implementing
``HTTPErrorResponse`` is rendered verbatim with its own status code;
everything else collapses to ``UNKNOWN_ERROR``.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


class JsonRestError(Exception):
    """Base for all jsonrest-specific errors."""


class ConfigurationError(JsonRestError):
    """Raised when router configuration is invalid.

    Always raised at registration time, never deferred to a request.
    """


@runtime_checkable
class HTTPErrorResponse(Protocol):
    """An error that knows which HTTP status it should be sent with.

    Any exception type providing ``status_code()`` is passed through to the
    client unmodified. Combine with ``to_json()`` to control the body shape.
    """

    def status_code(self) -> int: ...


@runtime_checkable
class JSONSerializable(Protocol):
    """A value that supplies its own JSON representation."""

    def to_json(self) -> Any: ...


@dataclass(frozen=True, slots=True)
class HTTPError(JsonRestError):
    """An error rendered directly to the client.

    Serializes to ``{"error": {"code", "message", "details"?}}``.
    ``details`` is omitted when empty; ``headers`` are added to the
    response but never serialized.
    """

    status: int
    code: str
    message: str
    details: tuple[str, ...] = ()
    headers: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        Exception.__init__(self, self.status, self.code, self.message)

    def __reduce__(self) -> tuple[Any, ...]:
        # Subclasses narrow __init__, so rebuild through the field values
        fields = (self.status, self.code, self.message, self.details, self.headers)
        return _restore_http_error, (type(self), *fields)

    def __str__(self) -> str:
        return f"jsonrest: {self.code}: {self.message}"

    def status_code(self) -> int:
        return self.status

    def to_json(self) -> dict[str, Any]:
        body: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            body["details"] = list(self.details)
        return {"error": body}

    def wrap(self, inner: BaseException) -> HTTPError:
        """Attach *inner* as the cause. Does not change the serialized output."""
        object.__setattr__(self, "__cause__", inner)
        return self

    @property
    def cause(self) -> BaseException | None:
        """The wrapped error, if any."""
        return self.__cause__

    def with_details(self, details: list[str] | tuple[str, ...]) -> HTTPError:
        """Return a copy carrying *details*."""
        return _restore_http_error(
            type(self), self.status, self.code, self.message, tuple(details), self.headers
        )


def _restore_http_error(cls: type[HTTPError], *fields: Any) -> HTTPError:
    err = cls.__new__(cls)
    HTTPError.__init__(err, *fields)
    return err


class NotFound(HTTPError):  # noqa: N818
    """404: no route matches the request path."""

    def __init__(self, message: str = "url not found") -> None:
        super().__init__(status=404, code="not_found", message=message)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: the path is registered, but not for this HTTP method."""

    def __init__(self, allowed: frozenset[str]) -> None:
        super().__init__(
            status=405,
            code="method_not_allowed",
            message="method not allowed",
            headers=(("Allow", ", ".join(sorted(allowed))),),
        )


def error(status: int, code: str, message: str) -> HTTPError:
    """Create an error that will be rendered directly to the client."""
    return HTTPError(status=status, code=code, message=message)


def bad_request(message: str) -> HTTPError:
    """400 Bad Request with a custom message."""
    return error(400, "bad_request", message)


def unauthorized(message: str) -> HTTPError:
    """401 Unauthorized with a custom message."""
    return error(401, "unauthorized", message)


def forbidden(message: str) -> HTTPError:
    """403 Forbidden with a custom message."""
    return error(403, "forbidden", message)


def not_found(message: str) -> HTTPError:
    """404 Not Found with a custom message."""
    return error(404, "not_found", message)


def unprocessable_entity(message: str) -> HTTPError:
    """422 Unprocessable Entity with a custom message."""
    return error(422, "unprocessable_entity", message)


UNKNOWN_ERROR = HTTPError(
    status=500,
    code="unknown_error",
    message="an unknown error occurred",
)
"""Returned for any error that does not carry its own status code."""


def translate_error(exc: BaseException, dump_internal: bool = False) -> HTTPErrorResponse:
    """Coerce *exc* into something that can be sent to the client.

    Errors exposing ``status_code()`` pass through untouched. Everything
    else becomes ``UNKNOWN_ERROR``; with *dump_internal* the copy carries
    the formatted traceback as ``details``. Never raises.
    """
    # Protocol checks only look for the attribute; frameworks that store
    # ``status_code`` as a plain int must not be mistaken for the capability.
    if isinstance(exc, HTTPErrorResponse) and callable(exc.status_code):
        return exc
    if dump_internal:
        return UNKNOWN_ERROR.with_details(dump_error(exc))
    return UNKNOWN_ERROR


def dump_error(exc: BaseException) -> list[str]:
    """Format *exc* for viewing in a JSON response while debugging."""
    text = "".join(traceback.format_exception(exc)).rstrip("\n")
    return text.replace("\t", "  ").split("\n")
