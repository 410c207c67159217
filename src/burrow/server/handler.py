"""ASGI handler — translates ASGI scope/messages to gateway types.

Converts the scope to a typed Request, runs it through the middleware
chain and the prefix router, and sends the response back through ASGI
send(). Every request gets exactly one response.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from burrow._internal.asgi import Receive, Scope, Send
from burrow.errors import HTTPError
from burrow.http.request import Request
from burrow.http.response import FileResponse, Response
from burrow.middleware.isolation import CrossOriginIsolation
from burrow.middleware.protocol import AnyResponse, Next
from burrow.routing.router import PrefixRouter
from burrow.server.sender import send_file_response, send_response

logger = logging.getLogger("burrow.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: PrefixRouter,
    isolation: CrossOriginIsolation,
    middleware: Sequence[Callable[..., Any]] = (),
) -> None:
    """Process a single HTTP request through the full pipeline.

    *isolation* always runs outermost, before any routing decision, so
    its headers land on every response including the error ones.
    """
    request = Request.from_asgi(scope)

    async def dispatch(req: Request) -> AnyResponse:
        try:
            return await router.route(req.path)
        except HTTPError as exc:
            logger.debug("%s %s -> %s", req.method, req.path, exc)
            raise

    # Wrap middleware around the dispatch
    handler: Next = dispatch
    for mw in reversed((isolation, *middleware)):
        outer = handler

        async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> AnyResponse:
            return await _mw(req, _next)

        handler = make_next

    try:
        response = await handler(request)
    except HTTPError as exc:
        response = isolation.apply(Response(status=exc.status))
    except Exception:
        logger.exception("Unhandled error serving %s %s", request.method, request.path)
        response = isolation.apply(Response(status=500))

    if isinstance(response, FileResponse):
        await send_file_response(response, send, head=request.method == "HEAD")
    else:
        await send_response(response, send)
