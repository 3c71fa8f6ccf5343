"""ASGI response sending: translates an EncodedResponse into ASGI messages."""

from jsonrest._internal.asgi import Send, encode_headers
from jsonrest.http.response import EncodedResponse


def body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: EncodedResponse, send: Send, *, head: bool = False) -> None:
    """Send *response* as one start message and one body message.

    HEAD responses keep the ``content-length`` of the body they would have
    carried but send no bytes.
    """
    body = response.body if body_allowed(response.status) else b""

    headers = [("content-type", response.content_type), *response.headers]
    raw_headers = encode_headers(headers)
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )
