"""Burrow gateway application.

Mutable during setup (middleware registration). Frozen at runtime when
``gateway.run()`` or ``__call__()`` is first invoked: the route table is
compiled and validated exactly once.
"""

import logging
import threading

from burrow._internal.asgi import ASGIApp, Receive, Scope, Send
from burrow.config import GatewayConfig
from burrow.errors import ConfigurationError
from burrow.middleware.isolation import CrossOriginIsolation
from burrow.middleware.protocol import Middleware
from burrow.mime import ContentTypes
from burrow.routing.router import PrefixRouter
from burrow.server.handler import handle_request
from burrow.server.upgrade import handle_upgrade

logger = logging.getLogger("burrow.server")


class Gateway:
    """The burrow ASGI application.

    Routes HTTP requests to static mounts and WebSocket upgrades to the
    tunnel handler::

        from burrow import Gateway, GatewayConfig

        gateway = Gateway(GatewayConfig(), tunnel=wisp_app)
        gateway.run()

    Thread safety:
        The freeze transition uses a Lock + double-check so exactly one
        thread compiles the route table even if several workers call
        ``__call__()`` concurrently on first request.
    """

    __slots__ = (
        "_freeze_lock",
        "_frozen",
        "_isolation",
        "_middleware",
        "_router",
        "config",
        "tunnel",
    )

    def __init__(
        self,
        config: GatewayConfig | None = None,
        *,
        tunnel: ASGIApp | None = None,
        isolation: CrossOriginIsolation | None = None,
    ) -> None:
        self.config: GatewayConfig = config or GatewayConfig()
        self.tunnel = tunnel
        self._isolation = isolation or CrossOriginIsolation()
        self._middleware: list[Middleware] = []
        self._router: PrefixRouter | None = None
        self._frozen = False
        self._freeze_lock = threading.Lock()

    # -- Setup API --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware, run inside the isolation layer."""
        self._check_not_frozen()
        self._middleware.append(middleware)

    @property
    def router(self) -> PrefixRouter:
        """The compiled router (compiles on first access)."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Bind, serve until SIGINT/SIGTERM, then close the listening socket.

        Raises:
            ConfigurationError: The route table is invalid or the address
                cannot be bound.
        """
        from burrow.server.lifecycle import run

        self._ensure_frozen()
        run(
            self,
            host=host if host is not None else self.config.host,
            port=port if port is not None else self.config.port,
            shutdown_timeout=self.config.shutdown_timeout,
            upgrade_filter=self.accepts_upgrade,
        )

    def accepts_upgrade(self, target: str) -> bool:
        """Whether a WebSocket upgrade to *target* goes to the tunnel.

        Only targets ending in the upgrade suffix qualify, and only when a
        tunnel handler is configured.
        """
        if not target.endswith(self.config.upgrade_suffix):
            return False
        if self.tunnel is None:
            logger.warning("Upgrade to %s refused: no tunnel handler configured", target)
            return False
        return True

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan directly, hands ``websocket`` scopes to the
        upgrade dispatcher and ``http`` scopes to the request handler.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] == "websocket":
            await handle_upgrade(
                scope,
                receive,
                send,
                suffix=self.config.upgrade_suffix,
                tunnel=self.tunnel,
            )
            return

        if scope["type"] != "http":
            return

        self._ensure_frozen()
        assert self._router is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            isolation=self._isolation,
            middleware=tuple(self._middleware),
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the gateway at startup so a bad route table fails the
        server before it accepts connections.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the route table. Raises ConfigurationError on bad mounts."""
        self._router = PrefixRouter(
            self.config.mounts,
            content_types=ContentTypes(self.config.content_types),
            chunk_size=self.config.chunk_size,
        )
        self._frozen = True
        for mount in self._router.mounts:
            logger.info("Serving %s from %s", mount.prefix, mount.directory)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot modify the gateway after it has started serving."
            raise ConfigurationError(msg)
