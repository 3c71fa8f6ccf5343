"""Access logging middleware."""

import logging
import time
from typing import Any

from jsonrest.errors import translate_error
from jsonrest.http.request import Request
from jsonrest.http.response import Response
from jsonrest.middleware.protocol import Endpoint, Middleware

access_logger = logging.getLogger("jsonrest.access")


def access_log(logger: logging.Logger | None = None) -> Middleware:
    """Log ``METHOD path status duration`` at INFO for each request.

    Exceptions are logged with the status they will be rendered with and
    re-raised unchanged. Register it first so it sees every other layer.
    """
    log = logger or access_logger

    def middleware(next: Endpoint) -> Endpoint:
        async def endpoint(request: Request) -> Any:
            start = time.perf_counter()
            try:
                result = await next(request)
            except Exception as exc:
                status = translate_error(exc).status_code()
                log.info(
                    "%s %s %d %.1fms",
                    request.method,
                    request.path,
                    status,
                    (time.perf_counter() - start) * 1000,
                )
                raise
            status = result.status if isinstance(result, Response) else 200
            log.info(
                "%s %s %d %.1fms",
                request.method,
                request.path,
                status,
                (time.perf_counter() - start) * 1000,
            )
            return result

        return endpoint

    return middleware
