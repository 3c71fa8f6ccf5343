"""Tests for jsonrest.server.sender response emission rules."""

from jsonrest.http.response import JSON_CONTENT_TYPE, EncodedResponse
from jsonrest.server.sender import send_response


async def _send(response: EncodedResponse, *, head: bool = False) -> list[dict]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    await send_response(response, send, head=head)
    return messages


class TestSendResponse:
    async def test_200_preserves_body(self) -> None:
        messages = await _send(EncodedResponse(200, b"{}\n", (("X-Id", "7"),)))

        assert messages[0]["type"] == "http.response.start"
        assert messages[0]["status"] == 200
        headers = dict(messages[0]["headers"])
        assert headers[b"content-type"] == JSON_CONTENT_TYPE.encode()
        assert headers[b"content-length"] == b"3"
        assert headers[b"x-id"] == b"7"
        assert messages[1] == {"type": "http.response.body", "body": b"{}\n"}

    async def test_204_drops_body_and_sets_zero_content_length(self) -> None:
        messages = await _send(EncodedResponse(204, b"unexpected"))

        assert dict(messages[0]["headers"])[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_304_drops_body(self) -> None:
        messages = await _send(EncodedResponse(304, b"unexpected"))
        assert messages[1]["body"] == b""

    async def test_head_keeps_length_but_sends_no_body(self) -> None:
        messages = await _send(EncodedResponse(200, b"{}\n"), head=True)

        assert dict(messages[0]["headers"])[b"content-length"] == b"3"
        assert messages[1]["body"] == b""
