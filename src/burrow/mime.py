"""Content type lookup for static files.

A small pure capability: file extension in, content type out. The
static responder receives an instance instead of consulting a global
table, so tests and deployments can pin types the platform's
``mimetypes`` database lacks.
"""

import mimetypes
from collections.abc import Mapping
from pathlib import PurePath

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class ContentTypes:
    """Map file names to content types.

    Lookup order: explicit *overrides* (by lowercase extension, with the
    leading dot), then :func:`mimetypes.guess_type`, then *fallback*.
    """

    __slots__ = ("_fallback", "_overrides")

    def __init__(
        self,
        overrides: Mapping[str, str] | None = None,
        *,
        fallback: str = DEFAULT_CONTENT_TYPE,
    ) -> None:
        self._overrides = {ext.lower(): value for ext, value in (overrides or {}).items()}
        self._fallback = fallback

    def __call__(self, path: str | PurePath) -> str:
        suffix = PurePath(path).suffix.lower()
        if suffix in self._overrides:
            return self._overrides[suffix]
        content_type, _ = mimetypes.guess_type(PurePath(path).name)
        return content_type or self._fallback

    @property
    def fallback(self) -> str:
        return self._fallback
