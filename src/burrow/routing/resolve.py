"""Traversal-safe path joining.

Pure string manipulation: nothing here touches the filesystem, so the
result says nothing about existence. The static responder checks that.
"""

import os
import posixpath
from pathlib import Path


def safe_join(base: str | Path, target: str) -> Path | None:
    """Join an untrusted URL sub-path onto *base* without escaping it.

    *target* is normalized as if it were rooted at ``/`` **before** it is
    joined, so leading ``..`` segments are clamped at that synthetic root
    and can never climb above *base*::

        safe_join("/srv/uv", "a/../b.js")         # /srv/uv/b.js
        safe_join("/srv/uv", "../../etc/passwd")  # /srv/uv/etc/passwd
        safe_join("/srv/uv", "")                  # /srv/uv

    Returns ``None`` when the joined result is not *base* or inside it
    (see :func:`is_within`), or when *target* contains a NUL byte.
    """
    if "\x00" in target:
        return None

    root = os.path.abspath(base)
    # normpath keeps a leading "//" (POSIX implementation-defined root)
    relative = posixpath.normpath("/" + target).lstrip("/")
    if os.sep != "/":
        relative = relative.replace("/", os.sep)
    resolved = os.path.normpath(os.path.join(root, relative)) if relative else root

    if not is_within(root, resolved):
        return None
    return Path(resolved)


def is_within(root: str, candidate: str) -> bool:
    """True if *candidate* equals *root* or lies beneath it.

    Compares strings, not path components, so the separator is required
    after *root*: ``/srv/uv-evil`` is not within ``/srv/uv``.
    """
    if candidate == root:
        return True
    # The filesystem root already ends with the separator.
    prefix = root if root.endswith(os.sep) else root + os.sep
    return candidate.startswith(prefix)
