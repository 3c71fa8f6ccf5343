"""gzip negotiation for the transport-facing side of the router.

Wraps the ASGI ``send`` callable: the response start message is held back
until the full body is known, then the body is compressed when the
client accepts gzip and the body is large enough. Compression never
changes the JSON, only the bytes on the wire.
"""

from __future__ import annotations

import zlib

from jsonrest._internal.asgi import Message, Send


def parse_accept_encoding(value: str | None) -> dict[str, float]:
    """Parse an ``Accept-Encoding`` header into ``{coding: qvalue}``.

    Malformed quality values count as 0 (not acceptable).
    """
    codings: dict[str, float] = {}
    if not value:
        return codings
    for item in value.split(","):
        coding, *params = (p.strip() for p in item.split(";"))
        if not coding:
            continue
        q = 1.0
        for param in params:
            key, _, raw = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    q = float(raw)
                except ValueError:
                    q = 0.0
        codings[coding.lower()] = q
    return codings


def accepts_gzip(accept_encoding: str | None) -> bool:
    """Whether the client listed ``gzip`` with a non-zero quality."""
    return parse_accept_encoding(accept_encoding).get("gzip", 0.0) > 0


def gzip_compress(data: bytes, level: int) -> bytes:
    """Compress *data* into a gzip member."""
    compressor = zlib.compressobj(level, zlib.DEFLATED, 16 + zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


class GzipSender:
    """An ASGI ``send`` wrapper that gzips the response body.

    Usage::

        send = GzipSender(send, level=6, enabled=accepts_gzip(header))
        await app(scope, receive, send)

    With *head*, the headers describe the body a GET would receive
    (compressed length and encoding included) but no bytes are sent.
    """

    __slots__ = ("_body", "_enabled", "_head", "_level", "_min_size", "_send", "_start")

    def __init__(
        self,
        send: Send,
        *,
        level: int,
        min_size: int = 0,
        enabled: bool = True,
        head: bool = False,
    ) -> None:
        self._send = send
        self._head = head
        self._level = level
        self._min_size = min_size
        self._enabled = enabled
        self._start: Message | None = None
        self._body = bytearray()

    async def __call__(self, message: Message) -> None:
        if message["type"] == "http.response.start":
            self._start = message
            return

        if message["type"] != "http.response.body" or self._start is None:
            await self._send(message)
            return

        self._body.extend(message.get("body", b""))
        if message.get("more_body", False):
            return

        start, body = self._start, bytes(self._body)
        self._start = None
        self._body.clear()
        original = list(start.get("headers", []))
        headers = [(name, value) for name, value in original if name.lower() != b"vary"]
        vary = [value for name, value in original if name.lower() == b"vary"]
        if b"accept-encoding" not in b",".join(vary).lower():
            vary.append(b"Accept-Encoding")
        headers.append((b"vary", b", ".join(vary)))

        already_encoded = any(name.lower() == b"content-encoding" for name, _ in headers)
        if self._enabled and body and not already_encoded and len(body) >= self._min_size:
            body = gzip_compress(body, self._level)
            headers = [(name, value) for name, value in headers if name.lower() != b"content-length"]
            headers.append((b"content-encoding", b"gzip"))
            headers.append((b"content-length", str(len(body)).encode("latin-1")))

        await self._send({**start, "headers": headers})
        if self._head:
            body = b""
        await self._send({"type": "http.response.body", "body": body, "more_body": False})
