"""Static file responses.

Given an already-resolved absolute path, stat it and stream it back.
Nothing here decides *whether* a path is allowed; that is the router's
job (see :mod:`burrow.routing`).
"""

import logging
import stat
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import anyio

from burrow.http.response import FileResponse, Response
from burrow.middleware.protocol import AnyResponse
from burrow.mime import ContentTypes

logger = logging.getLogger("burrow.static")

DEFAULT_CHUNK_SIZE = 64 * 1024


async def serve_file(
    path: Path,
    content_types: Callable[[Path], str] | None = None,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> AnyResponse:
    """Build the response for *path*: a streamed 200 or an empty 404.

    Every stat failure (missing, permission denied, not a regular file,
    name too long) is the same 404 so that responses never reveal what
    exists on disk.
    """
    try:
        info = await anyio.Path(path).stat()
    except (OSError, ValueError):
        return Response(status=404)
    if not stat.S_ISREG(info.st_mode):
        return Response(status=404)

    lookup = content_types or ContentTypes()
    return FileResponse(
        chunks=read_chunks(path, info.st_size, chunk_size=chunk_size),
        content_type=lookup(path),
        content_length=info.st_size,
    )


async def read_chunks(
    path: Path,
    size: int,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> AsyncGenerator[bytes, None]:
    """Yield at most *size* bytes of *path*, *chunk_size* at a time.

    Reads run in a worker thread via anyio, so a slow disk never stalls
    other connections. The byte cap matches the ``Content-Length``
    already promised to the client even if the file grows meanwhile.
    """
    remaining = size
    try:
        async with await anyio.open_file(path, "rb") as fh:
            while remaining > 0:
                chunk = await fh.read(min(chunk_size, remaining))
                if not chunk:
                    break
                remaining -= len(chunk)
                yield chunk
    except OSError as exc:
        # Headers are already out; all that is left is to end the body.
        logger.warning("Read failed mid-stream for %s: %s", path, exc)
    if remaining > 0:
        logger.warning("Short read for %s: %d of %d bytes missing", path, remaining, size)
