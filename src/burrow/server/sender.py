"""ASGI response sending — translates gateway responses to ASGI messages.

Handles both buffered responses (error paths, always empty) and
streamed file bodies.
"""

from burrow._internal.asgi import Send
from burrow.http.response import FileResponse, Response


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode_headers(headers: tuple[tuple[str, str], ...]) -> list[tuple[bytes, bytes]]:
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers]


async def send_response(response: Response, send: Send) -> None:
    """Translate a buffered Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = []
    if response.content_type is not None:
        raw_headers.append((b"content-type", response.content_type.encode("latin-1")))
    raw_headers.extend(_encode_headers(response.headers))

    body = response.body if _body_allowed(response.status) else b""
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
            "body": body,
        }
    )


async def send_file_response(response: FileResponse, send: Send, *, head: bool = False) -> None:
    """Send a file body chunk by chunk.

    Headers go out first, then each chunk as an ASGI body message with
    ``more_body=True``, then an empty closing message. Without a known
    length the body uses chunked transfer encoding. For ``HEAD`` the
    file is never opened.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    if response.content_length is not None:
        raw_headers.append((b"content-length", str(response.content_length).encode("latin-1")))
    else:
        raw_headers.append((b"transfer-encoding", b"chunked"))
    raw_headers.extend(_encode_headers(response.headers))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )

    try:
        if not head:
            async for chunk in response.chunks:
                if chunk:
                    await send(
                        {
                            "type": "http.response.body",
                            "body": chunk,
                            "more_body": True,
                        }
                    )
    finally:
        # Close the file even when the client went away mid-body.
        await response.chunks.aclose()

    await send(
        {
            "type": "http.response.body",
            "body": b"",
            "more_body": False,
        }
    )
