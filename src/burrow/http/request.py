"""Immutable HTTP request.

Only what routing needs: method, path, and headers. The gateway never
reads request bodies.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from burrow._internal.asgi import ConnectionScope, Scope
from burrow.http.headers import Headers

# Stand-in origin used only to parse the request target when Host is
# missing or unusable. Never used for routing.
DEFAULT_ORIGIN = "http://localhost"


def extract_path(target: str, host: str | None) -> str:
    """Return the decoded path component of a request target.

    The target is parsed as a URL relative to ``http://<host>``. A
    missing or malformed ``Host`` falls back to :data:`DEFAULT_ORIGIN`;
    the origin only makes the target parseable and does not influence
    the result for origin-form targets. Absolute-form targets
    (``GET http://example.com/uv/x``) yield their own path.
    """
    if "://" in target and not target.startswith("/"):
        url = target
    else:
        # "//evil/x" would otherwise parse as a network location
        url = _origin(host) + "/" + target.lstrip("/")
    try:
        path = urlsplit(url).path
    except ValueError:
        path = urlsplit(DEFAULT_ORIGIN + "/" + target.lstrip("/")).path
    return unquote(path) or "/"


def _origin(host: str | None) -> str:
    """``http://<host>``, or :data:`DEFAULT_ORIGIN` if *host* is unusable."""
    if not host or any(ch in host for ch in "/?#\\ \t"):
        return DEFAULT_ORIGIN
    origin = f"http://{host}"
    try:
        # Accessing .port validates the authority (e.g. "[::1", "host:abc")
        urlsplit(origin).port  # noqa: B018
    except ValueError:
        return DEFAULT_ORIGIN
    return origin


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata is frozen at creation. The method is carried for logging;
    routing ignores it.
    """

    method: str
    path: str
    headers: Headers

    @property
    def host(self) -> str | None:
        """The Host header value, if present."""
        return self.headers.get("host")

    @classmethod
    def from_asgi(cls, scope: Scope) -> Request:
        """Build a Request from an ASGI ``http`` or ``websocket`` scope."""
        conn = ConnectionScope.from_scope(scope)
        headers = Headers(conn.headers)
        if conn.raw_path:
            path = extract_path(conn.target, headers.get("host"))
        else:
            # No raw target from the server: the scope path is already decoded.
            path = conn.path or "/"
        return cls(method=conn.method, path=path, headers=headers)
