"""Server lifecycle — bind, serve, shut down.

The listening socket is bound here rather than inside uvicorn so that
the resolved address can be logged and bind failures surface as
``ConfigurationError`` before anything is served. ``start()`` returns a
``Lifecycle`` that owns both the socket and the uvicorn server; signal
handling reaches it through the server subclass below, never through a
module-level global.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import socket
from collections.abc import Callable
from types import FrameType
from typing import TYPE_CHECKING

import uvicorn

from burrow.errors import ConfigurationError
from burrow.server.upgrade import gated_websocket_protocol

if TYPE_CHECKING:
    from burrow._internal.asgi import ASGIApp

logger = logging.getLogger("burrow.server")


def bind(host: str | None, port: int, *, backlog: int = 2048) -> socket.socket:
    """Create a listening TCP socket.

    ``host=None`` listens on every interface: dual-stack ``::`` where the
    platform supports it, ``0.0.0.0`` otherwise.

    Raises:
        ConfigurationError: The address cannot be bound (port in use,
            permission denied, port out of range, unknown host).
    """
    try:
        if host is None:
            if socket.has_dualstack_ipv6():
                sock = socket.create_server(
                    ("::", port),
                    family=socket.AF_INET6,
                    dualstack_ipv6=True,
                    backlog=backlog,
                )
                sock.setblocking(False)
                return sock
            host = "0.0.0.0"
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        sock = socket.create_server((host, port), family=family, backlog=backlog)
    except (OSError, OverflowError) as exc:
        msg = f"Cannot listen on {host or '*'} port {port}: {exc}"
        raise ConfigurationError(msg) from exc
    sock.setblocking(False)
    return sock


def format_address(sockname: tuple[object, ...], family: int | None = None) -> str:
    """URL-style address for a bound socket: ``http://host:port``.

    IPv6 hosts are bracketed (``http://[::]:8080``). *family* decides
    when given; otherwise a colon in the host marks it as IPv6.
    """
    host, port = str(sockname[0]), sockname[1]
    is_v6 = family == socket.AF_INET6 if family is not None else ":" in host
    if is_v6:
        host = f"[{host}]"
    return f"http://{host}:{port}"


class _GatewayServer(uvicorn.Server):
    """uvicorn server whose exit signals go through the owning Lifecycle."""

    def __init__(self, config: uvicorn.Config, lifecycle: Lifecycle) -> None:
        super().__init__(config)
        self._lifecycle = lifecycle

    def handle_exit(self, sig: int, frame: FrameType | None) -> None:
        self._lifecycle.shutdown(reason=signal.Signals(sig).name)


class Lifecycle:
    """Owns the listening socket and the server running on it.

    Usage::

        lifecycle = start(app, host=None, port=8080)
        try:
            asyncio.run(lifecycle.serve())
        finally:
            lifecycle.close()

    *upgrade_filter* receives the request target of every WebSocket
    upgrade; targets it rejects are dropped with nothing written back.
    *shutdown_timeout* bounds the drain of in-flight responses, in
    seconds (fractions allowed).
    """

    __slots__ = ("_closed", "_server", "_shutting_down", "socket", "url")

    def __init__(
        self,
        app: ASGIApp,
        sock: socket.socket,
        *,
        shutdown_timeout: float | None = None,
        upgrade_filter: Callable[[str], bool] | None = None,
    ) -> None:
        self.socket = sock
        self.url = format_address(sock.getsockname(), sock.family)
        self._closed = False
        self._shutting_down = False
        config = uvicorn.Config(
            app,
            lifespan="on",
            ws=gated_websocket_protocol(upgrade_filter) if upgrade_filter else "auto",
            log_config=None,
            server_header=False,
            timeout_graceful_shutdown=shutdown_timeout,  # type: ignore[arg-type]
        )
        self._server = _GatewayServer(config, self)

    @property
    def started(self) -> bool:
        """True once the server is accepting connections."""
        return bool(self._server.started)

    @property
    def shutting_down(self) -> bool:
        return self._shutting_down

    async def serve(self) -> None:
        """Serve until :meth:`shutdown` is called, then drain.

        Raises:
            ConfigurationError: The application refused to start (ASGI
                lifespan startup failed).
        """
        await self._server.serve(sockets=[self.socket])
        if not self._server.started and not self._shutting_down:
            msg = "Server failed to start; see the log for the lifespan error"
            raise ConfigurationError(msg)

    def shutdown(self, reason: str = "requested") -> None:
        """Stop accepting connections and let in-flight responses finish.

        Safe to call any number of times, from a signal handler or from
        code; only the first call has an effect.
        """
        if self._shutting_down:
            return
        self._shutting_down = True
        logger.info("Shutting down (%s)", reason)
        self._server.should_exit = True

    def close(self) -> None:
        """Close the listening socket. Only the first call closes it."""
        if self._closed:
            return
        self._closed = True
        self.socket.close()


def start(
    app: ASGIApp,
    *,
    host: str | None,
    port: int,
    shutdown_timeout: float | None = None,
    upgrade_filter: Callable[[str], bool] | None = None,
) -> Lifecycle:
    """Bind the listening socket and prepare the server.

    Logs the bound address (``Serving on http://[::]:8080``) before
    returning; nothing is served until :meth:`Lifecycle.serve` runs.
    """
    sock = bind(host, port)
    try:
        lifecycle = Lifecycle(
            app, sock, shutdown_timeout=shutdown_timeout, upgrade_filter=upgrade_filter
        )
    except BaseException:
        sock.close()
        raise
    logger.info("Serving on %s", lifecycle.url)
    return lifecycle


def run(
    app: ASGIApp,
    *,
    host: str | None,
    port: int,
    shutdown_timeout: float | None = None,
    upgrade_filter: Callable[[str], bool] | None = None,
) -> None:
    """Serve *app* until SIGINT or SIGTERM, then return normally.

    Raises:
        ConfigurationError: Bind or startup failed.
    """
    lifecycle = start(
        app,
        host=host,
        port=port,
        shutdown_timeout=shutdown_timeout,
        upgrade_filter=upgrade_filter,
    )
    try:
        asyncio.run(lifecycle.serve())
    finally:
        lifecycle.close()
    logger.info("Stopped")
