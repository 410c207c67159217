"""Burrow — a static asset front end with a tunnel upgrade endpoint.

Serves asset bundles from fixed URL prefixes with cross-origin isolation
headers, and hands ``/wisp/`` WebSocket upgrades to a tunnel handler.

Basic usage::

    from burrow import Gateway, GatewayConfig, default_mounts

    gateway = Gateway(GatewayConfig(mounts=default_mounts("./dist")), tunnel=wisp_app)
    gateway.run()
"""

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "BurrowError",
    "ConfigurationError",
    "CrossOriginIsolation",
    "FileResponse",
    "Forbidden",
    "Gateway",
    "GatewayConfig",
    "HTTPError",
    "Middleware",
    "Mount",
    "Next",
    "NotFound",
    "Request",
    "Response",
    "default_mounts",
    "port_from_env",
    "safe_join",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import burrow`` fast while providing a clean top-level API.
    """
    if name == "Gateway":
        from burrow.app import Gateway

        return Gateway

    if name in ("GatewayConfig", "Mount", "default_mounts", "port_from_env"):
        from burrow import config as _config

        return getattr(_config, name)

    if name == "Request":
        from burrow.http.request import Request

        return Request

    if name in ("Response", "FileResponse"):
        from burrow.http import response as _resp

        return getattr(_resp, name)

    if name in ("AnyResponse", "Middleware", "Next"):
        from burrow.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "CrossOriginIsolation":
        from burrow.middleware.isolation import CrossOriginIsolation

        return CrossOriginIsolation

    if name == "safe_join":
        from burrow.routing.resolve import safe_join

        return safe_join

    if name in ("BurrowError", "ConfigurationError", "Forbidden", "HTTPError", "NotFound"):
        from burrow import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
