"""ASGI handler: the per-request dispatch pipeline.

The only component that turns raw ASGI into jsonrest types. For each
request it matches the route, binds the request, wraps the endpoint in
the middleware of every group from the root down, invokes it, and
encodes the result or the translated error into a buffer before sending.
"""

from __future__ import annotations

import logging
from contextvars import Token
from typing import TYPE_CHECKING, Any

from jsonrest._internal.asgi import Receive, Scope, Send
from jsonrest._internal.invoke import invoke
from jsonrest.config import RouterConfig
from jsonrest.context import request_var
from jsonrest.errors import MethodNotAllowed, NotFound
from jsonrest.http.request import Request
from jsonrest.http.response import EncodedResponse, Response
from jsonrest.middleware.protocol import apply_middleware
from jsonrest.routing.route import Route
from jsonrest.server.encoding import encode_json
from jsonrest.server.errors import merge_headers, render_error
from jsonrest.server.sender import send_response

if TYPE_CHECKING:
    from jsonrest.router import Router

logger = logging.getLogger("jsonrest.server")


async def handle_request(
    scope: Scope, receive: Receive, send: Send, *, router: Router, strip_head: bool = True
) -> None:
    """Process a single HTTP request through the full pipeline.

    With *strip_head* off, HEAD responses are sent with their body and
    the *send* wrapper is expected to drop it.
    """
    request = Request.from_asgi(scope, receive)
    head = strip_head and request.method == "HEAD"
    root_config = router.config

    try:
        match = router.table.match(request.method, request.path)
    except NotFound as exc:
        if root_config.not_found is not None:
            await root_config.not_found(scope, receive, send)
            return
        response = render_error(
            exc, request, dump=root_config.dump_errors, indent=root_config.indent
        )
        await send_response(response, send, head=head)
        return
    except MethodNotAllowed as exc:
        response = render_error(
            exc, request, dump=root_config.dump_errors, indent=root_config.indent
        )
        await send_response(response, send, head=head)
        return

    request = request.bind_route(match.route.path, match.path_params)
    token: Token[Request] = request_var.set(request)
    try:
        response = await dispatch(match.route, request)
    finally:
        request_var.reset(token)

    await send_response(response, send, head=head)


async def dispatch(route: Route, request: Request) -> EncodedResponse:
    """Run *route*'s endpoint inside its middleware chain and encode the outcome.

    Every ``Exception`` escaping the chain is caught here and nowhere else.
    """
    group = route.group
    config = group.config if group is not None else RouterConfig()
    middleware = group.middleware_chain() if group is not None else []
    endpoint = apply_middleware(route.endpoint, middleware)

    try:
        result = await invoke(endpoint, request)
    except Exception as exc:
        return render_error(exc, request, dump=config.dump_errors, indent=config.indent)

    return encode_result(result, request, config)


def encode_result(result: Any, request: Request, config: RouterConfig) -> EncodedResponse:
    """Encode a successful endpoint result.

    A ``Response`` sets the status, body and headers; any other value is
    the body of a 200. Values that cannot be encoded degrade to a 500.
    """
    if isinstance(result, Response):
        status, body, headers = result.status, result.body, result.headers
    else:
        status, body, headers = 200, result, ()

    try:
        encoded = encode_json(body, indent=config.indent)
    except Exception as exc:
        return render_error(exc, request, dump=config.dump_errors, indent=config.indent)

    return EncodedResponse(
        status=status,
        body=encoded,
        headers=merge_headers(request.response_headers, headers),
    )
