"""ASGI middleware that serves directory listings.

Usage with FastAPI/Starlette, listing directories and handing everything else
(files, missing paths) to ``StaticFiles``::

    app.mount("/pub", ServeIndex(StaticFiles(directory="pub"), "pub", icons=True))

Terminal failures are raised as :class:`~serveindex.errors.ServeIndexError`
so the application's exception middleware turns them into responses. Mounted
apps sit inside that middleware; when added with ``app.add_middleware`` they
do not, and errors surface as 500s.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send

from serveindex.config import ServeIndexOptions
from serveindex.errors import NotAcceptable
from serveindex.listing import PARENT, probe_directory, read_directory
from serveindex.negotiation import MEDIA_TYPES, negotiate
from serveindex.paths import request_paths, resolve_directory, show_up
from serveindex.renderers import (
    ListingContext,
    Renderer,
    render_html,
    render_json,
    render_plain,
)

logger = logging.getLogger(__name__)

ALLOW = "GET, HEAD, OPTIONS"


async def not_found(scope: Scope, receive: Receive, send: Send) -> None:
    """Fallback "next" app when the middleware wraps nothing."""
    response = PlainTextResponse("Not Found", status_code=404)
    await response(scope, receive, send)


class ServeIndex:
    """Serve directory listings for *root*, passing other requests to *app*.

    Keyword options are those of :class:`~serveindex.config.ServeIndexOptions`;
    a prebuilt ``options`` record can be passed instead.
    """

    def __init__(
        self,
        app: ASGIApp | None,
        root: str | os.PathLike[str] | None = None,
        *,
        options: ServeIndexOptions | None = None,
        **kwargs: Any,
    ) -> None:
        if options is None:
            if not root:
                raise TypeError("serve_index() root path required")
            options = ServeIndexOptions(root=root, **kwargs)

        self.app: ASGIApp = app if app is not None else not_found
        self.options = options
        self.root_path = options.root
        self.renderers: dict[str, Renderer] = {
            "text/html": options.html_renderer or render_html,
            "text/plain": options.plain_renderer or render_plain,
            "application/json": options.json_renderer or render_json,
        }

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope["method"]
        if method not in ("GET", "HEAD"):
            response = Response(
                status_code=200 if method == "OPTIONS" else 405,
                headers={"Allow": ALLOW, "Content-Length": "0"},
            )
            await response(scope, receive, send)
            return

        route_path, original_path = request_paths(scope)
        path = resolve_directory(self.root_path, route_path)
        display_up = show_up(path, self.root_path)

        if not await probe_directory(path):
            await self.app(scope, receive, send)
            return

        files = await read_directory(
            path, hidden=self.options.hidden, filter=self.options.filter
        )

        request = Request(scope, receive)
        media_type = negotiate(request.headers.get("accept"), MEDIA_TYPES)
        if media_type is None:
            logger.debug("no acceptable type for %r", request.headers.get("accept"))
            raise NotAcceptable()

        if display_up:
            files.insert(0, PARENT)

        ctx = ListingContext(
            request=request,
            files=files,
            directory=original_path,
            path=path,
            show_up=display_up,
            options=self.options,
        )
        response = await self.renderers[media_type](ctx)
        await response(scope, receive, send)
