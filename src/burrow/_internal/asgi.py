"""Typed ASGI definitions.

Replaces the standard Scope = MutableMapping[str, Any] with a typed
dataclass for internal use. Users never see these.
"""

from collections.abc import Awaitable, Callable, MutableMapping
from dataclasses import dataclass
from typing import Any, TypeAlias

# Raw ASGI 3.0 types
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]

# Any ASGI application, e.g. the tunnel handler invoked on upgrade
ASGIApp: TypeAlias = Callable[[Scope, Receive, Send], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class ConnectionScope:
    """Typed view of an ``http`` or ``websocket`` scope.

    Internal only -- routing code interacts with Request, not this.
    """

    type: str
    method: str
    path: str
    raw_path: bytes
    headers: tuple[tuple[bytes, bytes], ...]
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    @classmethod
    def from_scope(cls, scope: Scope) -> "ConnectionScope":
        """Parse raw ASGI scope into typed object.

        WebSocket scopes carry no method; they are reported as ``GET``,
        which is what the upgrade handshake uses on the wire.
        """
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            type=scope["type"],
            method=scope.get("method", "GET"),
            path=scope.get("path", "/"),
            raw_path=scope.get("raw_path") or b"",
            headers=tuple(scope.get("headers", ())),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )

    @property
    def target(self) -> str:
        """The request target as sent by the client (undecoded, no query)."""
        if self.raw_path:
            return self.raw_path.decode("latin-1").partition("?")[0]
        return self.path
