"""Protocol-upgrade dispatch.

WebSocket handshakes arrive as ASGI ``websocket`` scopes. Exactly one
path suffix is forwarded to the tunnel handler; the gateway speaks no
tunnel protocol itself.

Two layers enforce that. Over a real socket, ``gated_websocket_protocol``
drops a refused upgrade before the server writes a single byte. Inside
the ASGI app, ``handle_upgrade`` closes any refused scope that still
reaches it (other servers, the in-process test client).
"""

import asyncio
import logging
from collections.abc import Callable

from burrow._internal.asgi import ASGIApp, ConnectionScope, Receive, Scope, Send
from burrow.errors import ConfigurationError

logger = logging.getLogger("burrow.server")


async def handle_upgrade(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    suffix: str,
    tunnel: ASGIApp | None,
) -> None:
    """Hand a matching upgrade to *tunnel*, or close the connection.

    The tunnel receives the untouched ``receive``/``send`` pair, so any
    frames the server already buffered reach it intact. Ownership moves
    with the call: once the tunnel is awaited the gateway does nothing
    more with the connection.

    A non-matching path gets a single ``websocket.close`` before accept.
    """
    target = ConnectionScope.from_scope(scope).target
    if target.endswith(suffix):
        if tunnel is not None:
            await tunnel(scope, receive, send)
            return
        logger.warning("Upgrade to %s refused: no tunnel handler configured", target)
    else:
        logger.debug("Upgrade to %s refused: not a tunnel endpoint", target)
    await send({"type": "websocket.close"})


def request_target(head: bytes) -> str:
    """Path of the request line in a raw HTTP request head, query dropped.

    ``b"GET /x/wisp/?v=1 HTTP/1.1\\r\\n..."`` gives ``"/x/wisp/"``. A
    malformed request line gives ``""``.
    """
    line = head.split(b"\r\n", 1)[0]
    parts = line.split(b" ")
    if len(parts) != 3:
        return ""
    return parts[1].decode("latin-1").partition("?")[0]


def gated_websocket_protocol(accepts: Callable[[str], bool]) -> type[asyncio.Protocol]:
    """uvicorn WebSocket protocol that only completes accepted handshakes.

    uvicorn replays the whole upgrade request into the protocol with one
    ``data_received`` call before anything is written back. When
    *accepts* rejects the request target the transport is closed right
    there, so the client reads EOF instead of an HTTP rejection.

    Builds on whichever implementation uvicorn's ``ws="auto"`` picks.

    Raises:
        ConfigurationError: No WebSocket implementation is installed.
    """
    from uvicorn.protocols.websockets.auto import AutoWebSocketsProtocol

    if AutoWebSocketsProtocol is None:
        msg = "No WebSocket implementation installed (install 'websockets')"
        raise ConfigurationError(msg)

    class GatedWebSocketProtocol(AutoWebSocketsProtocol):  # type: ignore[misc, valid-type]
        _gate_checked = False

        def data_received(self, data: bytes) -> None:
            if not self._gate_checked:
                self._gate_checked = True
                target = request_target(data)
                if not accepts(target):
                    logger.debug("Upgrade to %s dropped before handshake", target)
                    self.transport.close()
                    return
            super().data_received(data)

    return GatedWebSocketProtocol
