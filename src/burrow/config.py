"""Gateway configuration.

GatewayConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger("burrow.config")

DEFAULT_PORT = 8080

# Bundles served by default, each under /<name>/ from <assets>/<name>
DEFAULT_BUNDLES = ("uv", "epoxy", "baremux")


@dataclass(frozen=True, slots=True)
class Mount:
    """A URL prefix bound to one root directory.

    The prefix keeps both slashes (``/uv/``) so that matching is a plain
    ``str.startswith`` and the sub-path is an exact slice.
    """

    prefix: str
    directory: Path

    def __post_init__(self) -> None:
        # Canonicalize without touching the filesystem; existence is
        # checked when the route table is built.
        object.__setattr__(self, "directory", Path(os.path.abspath(self.directory)))


def default_mounts(assets_dir: str | Path = "assets") -> tuple[Mount, ...]:
    """The standard route table: one mount per bundle under *assets_dir*."""
    base = Path(assets_dir)
    return tuple(Mount(f"/{name}/", base / name) for name in DEFAULT_BUNDLES)


def port_from_env(environ: Mapping[str, str] | None = None, default: int = DEFAULT_PORT) -> int:
    """Read the listening port from ``PORT``.

    Missing, empty, or non-integer values fall back to *default*.
    Out-of-range integers are returned as-is and fail at bind time.
    """
    env = os.environ if environ is None else environ
    raw = env.get("PORT", "").strip()
    if not raw:
        return default
    try:
        return int(raw, 10)
    except ValueError:
        logger.debug("Ignoring unparseable PORT=%r, using %d", raw, default)
        return default


@dataclass(frozen=True, slots=True)
class GatewayConfig:
    """Gateway configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = GatewayConfig(port=3000, mounts=default_mounts("./dist"))
    """

    # Server
    host: str | None = None  # None = dual-stack "::" when available, else 0.0.0.0
    port: int = DEFAULT_PORT

    # Static files
    mounts: tuple[Mount, ...] = field(default_factory=default_mounts)
    chunk_size: int = 64 * 1024
    content_types: Mapping[str, str] = field(
        default_factory=lambda: {
            ".wasm": "application/wasm",
            ".mjs": "text/javascript",
        }
    )

    # Upgrade
    upgrade_suffix: str = "/wisp/"

    # Lifecycle
    shutdown_timeout: float | None = 10.0  # None = wait for in-flight responses indefinitely
    log_level: str = "info"
