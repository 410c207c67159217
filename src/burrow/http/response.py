"""HTTP responses with a chainable .with_*() transformation API.

Each transformation returns a new response. Immutable by convention,
built incrementally by design.
"""

from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Response:
    """A buffered HTTP response.

    Every error path in the gateway answers with one of these and an
    empty body; ``content_type`` is omitted from the wire when ``None``.
    """

    body: bytes = b""
    status: int = 200
    content_type: str | None = None
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> "Response":
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> "Response":
        """Return a new Response with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))


@dataclass(frozen=True, slots=True)
class FileResponse:
    """A file streamed to the client chunk by chunk.

    ``chunks`` is a lazy async generator; nothing is read from disk until
    the sender starts pulling. Supports the same ``.with_*()`` API as
    ``Response`` so middleware can add headers without knowing the body
    is streamed.
    """

    chunks: AsyncGenerator[bytes, None]
    content_type: str
    content_length: int | None = None
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> "FileResponse":
        """Return a new FileResponse with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> "FileResponse":
        """Return a new FileResponse with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> "FileResponse":
        """Return a new FileResponse with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))
