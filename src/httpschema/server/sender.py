"""Write a ``Response`` to an ASGI ``send`` callable."""

from httpschema._internal.types import Send
from httpschema.http.response import Response

# 1xx, 204 and 304 responses never carry a message body
_BODYLESS = frozenset({204, 304})


def _encode_headers(response: Response, body: bytes) -> list[tuple[bytes, bytes]]:
    pairs = [
        ("content-type", response.content_type),
        ("content-length", str(len(body))),
        *response.headers,
    ]
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send *response* as one ``http.response.start`` and one body message.

    For HEAD requests the headers describe the body but the body itself
    is dropped.
    """
    status = response.status
    body = b"" if status < 200 or status in _BODYLESS else response.body_bytes

    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": _encode_headers(response, body),
        }
    )
    await send({"type": "http.response.body", "body": b"" if head else body})
