"""jsonrest: JSON request dispatch for ASGI.

Maps requests to endpoint functions, wraps them in middleware across
nested route groups, and renders results and errors as JSON.

Basic usage::

    from jsonrest import M, Router, not_found

    router = Router()

    @router.get("/hello/{name}")
    async def hello(request):
        if request.param("name") == "nobody":
            raise not_found("no such person")
        return M(message=f"Hello {request.param('name')}")

    router.run()
"""

__version__ = "0.1.0"
__all__ = [
    "BEST_COMPRESSION",
    "BEST_SPEED",
    "DEFAULT_COMPRESSION",
    "NO_COMPRESSION",
    "UNKNOWN_ERROR",
    "ConfigurationError",
    "Endpoint",
    "HTTPError",
    "HTTPErrorResponse",
    "JSONSerializable",
    "JsonRestError",
    "M",
    "MethodNotAllowed",
    "Middleware",
    "NotFound",
    "Request",
    "Response",
    "RouteGroup",
    "Router",
    "RouterConfig",
    "bad_request",
    "disable_indent",
    "dump_errors",
    "enable_compression",
    "error",
    "forbidden",
    "get_request",
    "not_found",
    "not_found_handler",
    "translate_error",
    "unauthorized",
    "unprocessable_entity",
]

_ERRORS = frozenset(
    {
        "UNKNOWN_ERROR",
        "ConfigurationError",
        "HTTPError",
        "HTTPErrorResponse",
        "JSONSerializable",
        "JsonRestError",
        "MethodNotAllowed",
        "NotFound",
        "bad_request",
        "error",
        "forbidden",
        "not_found",
        "translate_error",
        "unauthorized",
        "unprocessable_entity",
    }
)

_CONFIG = frozenset(
    {
        "BEST_COMPRESSION",
        "BEST_SPEED",
        "DEFAULT_COMPRESSION",
        "NO_COMPRESSION",
        "RouterConfig",
        "disable_indent",
        "dump_errors",
        "enable_compression",
        "not_found_handler",
    }
)


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import jsonrest`` fast while providing a flat top-level API.
    """
    if name in ("Router", "RouteGroup"):
        from jsonrest import router as _router

        return getattr(_router, name)

    if name == "Request":
        from jsonrest.http.request import Request

        return Request

    if name in ("Response", "M"):
        from jsonrest.http import response as _resp

        return getattr(_resp, name)

    if name in ("Endpoint", "Middleware"):
        from jsonrest.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "get_request":
        from jsonrest.context import get_request

        return get_request

    if name in _ERRORS:
        from jsonrest import errors as _errors

        return getattr(_errors, name)

    if name in _CONFIG:
        from jsonrest import config as _config

        return getattr(_config, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
