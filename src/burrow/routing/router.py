"""Prefix router — maps a request path to a mount and a file.

The route table is compiled once at startup and never mutated, so it is
safe to share across every concurrent request without locking.
"""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from burrow.config import Mount
from burrow.errors import ConfigurationError, Forbidden, NotFound
from burrow.middleware.protocol import AnyResponse
from burrow.mime import ContentTypes
from burrow.routing.resolve import safe_join
from burrow.static import DEFAULT_CHUNK_SIZE, serve_file

logger = logging.getLogger("burrow.server")


class PrefixRouter:
    """First-match prefix routing over an immutable mount table.

    Mounts are checked in the order given; the first whose prefix starts
    the request path wins. The default table has disjoint prefixes, so
    order only matters once someone adds overlapping ones (``/a/`` and
    ``/a/b/``): list the longer prefix first.

    Construction validates the table and raises ``ConfigurationError``
    for malformed prefixes, duplicates, or directories that do not exist.
    """

    __slots__ = ("_chunk_size", "_content_types", "_mounts")

    def __init__(
        self,
        mounts: Iterable[Mount],
        *,
        content_types: Callable[[Path], str] | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._mounts: tuple[Mount, ...] = tuple(mounts)
        self._content_types = content_types or ContentTypes()
        self._chunk_size = chunk_size
        self._validate()

    @property
    def mounts(self) -> tuple[Mount, ...]:
        return self._mounts

    def match(self, path: str) -> tuple[Mount, str] | None:
        """Return the first matching mount and the sub-path after its prefix."""
        for mount in self._mounts:
            if path.startswith(mount.prefix):
                return mount, path[len(mount.prefix) :]
        return None

    async def route(self, path: str) -> AnyResponse:
        """Resolve *path* to a file under its mount and serve it.

        Raises:
            NotFound: No mount prefix matches.
            Forbidden: The sub-path resolves outside the mount directory.
        """
        matched = self.match(path)
        if matched is None:
            raise NotFound(f"no mount for {path!r}")

        mount, sub_path = matched
        file_path = safe_join(mount.directory, sub_path)
        if file_path is None:
            raise Forbidden(f"{sub_path!r} escapes {mount.prefix}")

        return await serve_file(file_path, self._content_types, chunk_size=self._chunk_size)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate(self) -> None:
        seen: set[str] = set()
        for mount in self._mounts:
            if not (mount.prefix.startswith("/") and mount.prefix.endswith("/")):
                msg = f"Mount prefix {mount.prefix!r} must start and end with '/'"
                raise ConfigurationError(msg)
            if mount.prefix in seen:
                msg = f"Duplicate mount prefix {mount.prefix!r}"
                raise ConfigurationError(msg)
            seen.add(mount.prefix)
            if not mount.directory.is_dir():
                msg = f"Mount {mount.prefix!r}: {mount.directory} is not a directory"
                raise ConfigurationError(msg)
            logger.debug("Mounted %s -> %s", mount.prefix, mount.directory)
