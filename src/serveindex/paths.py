"""Request path decoding and root containment.

The containment check in :func:`resolve_directory` is the only defence against
path traversal: it runs before anything touches the filesystem.
"""

from __future__ import annotations

import logging
import os
import re
from urllib.parse import unquote_to_bytes

from starlette.types import Scope

from serveindex.errors import BadRequest, Forbidden

logger = logging.getLogger(__name__)

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_path(raw: str) -> str:
    """Percent-decode *raw* strictly.

    A ``%`` that does not start a two-digit hex escape, or escapes that do not
    form valid UTF-8, raise :class:`BadRequest`.
    """
    if _BAD_ESCAPE.search(raw):
        raise BadRequest("Malformed percent-encoding in request path")
    try:
        return unquote_to_bytes(raw).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise BadRequest("Request path is not valid UTF-8") from exc


def request_paths(scope: Scope) -> tuple[str, str]:
    """Return ``(route_path, original_path)`` for an HTTP scope.

    ``original_path`` is the full decoded URL path, used for display and links.
    ``route_path`` drops the mount prefix and is resolved against the root.
    """
    raw_path = scope.get("raw_path")
    if raw_path is not None:
        original = decode_path(raw_path.split(b"?", 1)[0].decode("latin-1"))
    else:
        original = scope["path"]

    root_path = scope.get("root_path", "")
    route = original
    if root_path and original.startswith(root_path):
        route = original[len(root_path):] or "/"
    return route, original


def normalize_root(root: str | os.PathLike[str]) -> str:
    """Absolute, normalized root ending in the OS separator."""
    return os.path.join(os.path.normpath(os.path.abspath(root)), "")


def resolve_directory(root_path: str, route_path: str) -> str:
    """Join *route_path* onto *root_path* and refuse anything outside it."""
    path = os.path.normpath(root_path + route_path.lstrip("/"))

    if "\0" in path:
        raise BadRequest("Request path contains a NUL byte")

    if not (path + os.sep).startswith(root_path):
        logger.debug('malicious path "%s"', path)
        raise Forbidden()

    return path


def show_up(path: str, root_path: str) -> bool:
    """Whether a synthetic ``..`` entry belongs in the listing of *path*."""
    return os.path.join(os.path.normpath(path), "") != root_path
