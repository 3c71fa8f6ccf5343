"""Error rendering for the dispatch pipeline.

Maps raised exceptions to encoded JSON error envelopes. Declared HTTP
errors are logged at DEBUG and sent as-is; anything else is logged with
its traceback and collapses to the unknown-error envelope.
"""

import logging
from collections.abc import Iterable

from jsonrest.errors import UNKNOWN_ERROR, HTTPError, translate_error
from jsonrest.http.request import Request
from jsonrest.http.response import EncodedResponse
from jsonrest.server.encoding import encode_json

logger = logging.getLogger("jsonrest.server")


def merge_headers(*groups: Iterable[tuple[str, str]]) -> tuple[tuple[str, str], ...]:
    """Merge header groups; a later group replaces same-named earlier headers."""
    merged: dict[str, tuple[str, str]] = {}
    for group in groups:
        for name, value in group:
            merged[name.lower()] = (name, value)
    return tuple(merged.values())


def render_error(
    exc: Exception,
    request: Request,
    *,
    dump: bool = False,
    indent: bool = True,
) -> EncodedResponse:
    """Translate *exc* and encode it. Never raises."""
    translated = translate_error(exc, dump_internal=dump)
    if translated is exc:
        logger.debug("%s %s: %r", request.method, request.path, exc)
    else:
        logger.error("500 %s %s", request.method, request.path, exc_info=exc)

    try:
        status = translated.status_code()
        body = encode_json(translated, indent=indent)
    except Exception:
        # A custom error whose status or body cannot be produced
        logger.exception("cannot render error for %s %s", request.method, request.path)
        translated, status = UNKNOWN_ERROR, UNKNOWN_ERROR.status
        body = encode_json(UNKNOWN_ERROR, indent=indent)

    own_headers = translated.headers if isinstance(translated, HTTPError) else ()
    return EncodedResponse(
        status=status,
        body=body,
        headers=merge_headers(request.response_headers, own_headers),
    )
