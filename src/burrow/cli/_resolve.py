"""Tunnel import resolution — resolves ``"module:attribute"`` strings to ASGI apps.

Used by ``burrow serve --tunnel`` to locate the handler that takes over
upgraded connections.
"""

import importlib
import inspect

from burrow._internal.asgi import ASGIApp


def resolve_tunnel(import_string: str) -> ASGIApp:
    """Resolve an import string to an ASGI tunnel handler.

    Accepts ``"module:attribute"`` format. When the attribute portion is
    omitted, defaults to ``"app"`` (e.g. ``"wisp_bridge"`` resolves to
    ``wisp_bridge.app``).

    Supports factories: a callable that does not look like an ASGI app
    (a coroutine function or an object with an async ``__call__``) is
    called once with no arguments and its result used instead.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not callable, or a factory
            raised.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "app"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if not callable(obj):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, which is not callable"
        raise TypeError(msg)

    if not _is_asgi_app(obj):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc
        if not callable(obj):
            msg = f"Factory {import_string!r} returned {type(obj).__name__}, not an ASGI app"
            raise TypeError(msg)

    return obj


def _is_asgi_app(obj: object) -> bool:
    if inspect.iscoroutinefunction(obj):
        return True
    call = getattr(type(obj), "__call__", None)
    return not inspect.isfunction(obj) and inspect.iscoroutinefunction(call)
