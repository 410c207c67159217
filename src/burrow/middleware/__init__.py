"""Gateway middleware.

A middleware is ``async (request, next) -> response``; the gateway always
installs :class:`CrossOriginIsolation` outermost.
"""

from burrow.middleware.isolation import CrossOriginIsolation, IsolationConfig
from burrow.middleware.protocol import AnyResponse, Middleware, Next

__all__ = [
    "AnyResponse",
    "CrossOriginIsolation",
    "IsolationConfig",
    "Middleware",
    "Next",
]
