"""Burrow exception hierarchy.

Shared across the router, static responder, handler, and lifecycle so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class BurrowError(Exception):
    """Base for all burrow-specific errors."""


class ConfigurationError(BurrowError):
    """Raised when startup configuration is invalid.

    Covers bad mounts, an unbindable listening address, and tunnel
    handlers that cannot be resolved. Always fatal: the process does
    not start.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(BurrowError):
    """An error that maps directly to an HTTP status code.

    Raised by the router or middleware. The ASGI handler catches these
    and answers with the status and an empty body; ``detail`` is for
    logs only and never reaches the client.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class Forbidden(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """403 — the request path resolves outside its mount directory."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status=403, detail=detail)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no mount prefix matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
