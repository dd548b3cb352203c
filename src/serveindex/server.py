"""Standalone directory listing server for ``serve-index``.

Serves one root directory: directories get a listing, files are streamed by
Starlette's ``StaticFiles``, and anything else falls through to its 404.
"""

from __future__ import annotations

import logging

from serveindex.config import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None):
    """Build the FastAPI application for *settings* (defaults to env config)."""
    from fastapi import FastAPI
    from fastapi.staticfiles import StaticFiles

    from serveindex.middleware import ServeIndex

    settings = settings or get_settings()
    options = settings.to_options()

    app = FastAPI(
        title="serve-index",
        description="Directory listings for a single root directory.",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    static = StaticFiles(directory=str(settings.root), html=False)
    app.mount("/", ServeIndex(static, options=options), name="index")

    logger.debug("Serving %s (view=%s, icons=%s)", options.root, options.view, options.icons)
    return app


def run_server(settings: Settings | None = None) -> None:
    """Start uvicorn for :func:`create_app`."""
    import uvicorn

    settings = settings or get_settings()
    app = create_app(settings)

    print(f"\nServing {settings.root.resolve()} at http://{settings.host}:{settings.port}\n")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
