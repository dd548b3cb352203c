"""serve-index: directory listings for ASGI applications."""

from serveindex.config import ServeIndexOptions, Settings, get_settings
from serveindex.errors import (
    BadRequest,
    Forbidden,
    InternalError,
    NotAcceptable,
    PathTooLong,
    ServeIndexError,
)
from serveindex.listing import Entry, FileStat
from serveindex.middleware import ServeIndex
from serveindex.renderers import (
    ListingContext,
    RenderLocals,
    render_html,
    render_json,
    render_plain,
)

__all__ = [
    "BadRequest",
    "Entry",
    "FileStat",
    "Forbidden",
    "InternalError",
    "ListingContext",
    "NotAcceptable",
    "PathTooLong",
    "RenderLocals",
    "ServeIndex",
    "ServeIndexError",
    "ServeIndexOptions",
    "Settings",
    "get_settings",
    "render_html",
    "render_json",
    "render_plain",
]
