"""Built-in HTML, JSON and plain text renderers for directory listings.

A renderer is an async callable taking a :class:`ListingContext` and returning
a response. The middleware picks one per request from the negotiated media
type; applications replace any of them through ``ServeIndexOptions``.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import os
import posixpath
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from html import escape
from pathlib import Path
from urllib.parse import quote

from fastapi import Request
from fastapi.responses import Response

from serveindex.config import ServeIndexOptions
from serveindex.errors import InternalError
from serveindex.icons import icon_lookup, icon_style
from serveindex.listing import PARENT, Entry, sort_entries, stat_entries

logger = logging.getLogger(__name__)


@dataclass
class ListingContext:
    """Everything a renderer needs to answer one listing request."""

    request: Request
    files: list[str]
    directory: str  # decoded URL path, used for display and links
    path: str  # resolved filesystem directory
    show_up: bool
    options: ServeIndexOptions

    async def entries(self) -> list[Entry]:
        """Attach metadata to :attr:`files` and return them in display order."""
        entries = await stat_entries(self.path, self.files, brief=self.options.brief)
        return sort_entries(entries)


@dataclass(frozen=True)
class RenderLocals:
    """Values handed to an HTML template render function."""

    directory: str
    display_icons: bool
    file_list: list[Entry]
    path: str
    style: str
    view_name: str


Renderer = Callable[[ListingContext], Awaitable[Response]]
TemplateRender = Callable[[RenderLocals], "str | Awaitable[str]"]


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------


def send(media_type: str, body: str) -> Response:
    """UTF-8 response with an exact Content-Length and ``nosniff``."""
    return Response(
        content=body.encode("utf-8"),
        headers={
            "X-Content-Type-Options": "nosniff",
            "Content-Type": f"{media_type}; charset=utf-8",
        },
    )


def encode_uri_component(value: str) -> str:
    return quote(value, safe="!'()*")


def normalize_url_path(path: str) -> str:
    normalized = posixpath.normpath(path)
    # normpath keeps a leading "//" (POSIX allows it); URLs must not.
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return normalized


def html_path(directory: str) -> str:
    """Breadcrumb markup linking every component of *directory*."""
    parts = [encode_uri_component(part) for part in directory.split("/")]
    crumbs = []
    for i, part in enumerate(directory.split("/")):
        if part:
            href = "/".join(parts[: i + 1])
            crumbs.append(f'<a href="{escape(href)}">{escape(part)}</a>')
        else:
            crumbs.append("")
    return " / ".join(crumbs)


def _format_date(entry: Entry) -> str:
    if entry.stat is None or entry.stat.mtime is None or entry.name == PARENT:
        return ""
    return entry.stat.mtime.strftime("%x %X")


def _format_size(entry: Entry) -> str:
    if entry.stat is None or entry.is_dir or entry.stat.size is None:
        return ""
    return str(entry.stat.size)


def create_html_file_list(
    entries: list[Entry], directory: str, use_icons: bool, view: str
) -> str:
    """``<ul id="files">`` markup for *entries* listed under *directory*."""
    html = f'<ul id="files" class="view-{escape(view)}">'
    if view == "details":
        html += (
            '<li class="header">'
            '<span class="name">Name</span>'
            '<span class="size">Size</span>'
            '<span class="date">Modified</span>'
            "</li>"
        )

    base = [encode_uri_component(part) for part in directory.split("/")]
    items = []
    for entry in entries:
        classes: list[str] = []
        if use_icons:
            classes.append("icon")
            if entry.is_dir:
                classes.append("icon-directory")
            else:
                ext = os.path.splitext(entry.name)[1]
                if ext[1:]:
                    classes.append(f"icon-{ext[1:]}")
                icon = icon_lookup(entry.name)
                if icon.class_name not in classes:
                    classes.append(icon.class_name)

        href = normalize_url_path("/".join([*base, encode_uri_component(entry.name)]))
        items.append(
            f'<li><a href="{escape(href)}" class="{escape(" ".join(classes))}"'
            f' title="{escape(entry.name)}">'
            f'<span class="name">{escape(entry.name)}</span>'
            f'<span class="size">{escape(_format_size(entry))}</span>'
            f'<span class="date">{escape(_format_date(entry))}</span>'
            "</a></li>"
        )

    html += "\n".join(items)
    html += "</ul>"
    return html


# ---------------------------------------------------------------------------
# Template rendering
# ---------------------------------------------------------------------------

_TOKENS = re.compile(r"\{(style|files|directory|linked-path)\}")


def create_html_render(template: Path) -> TemplateRender:
    """Render function for a token template file, read fresh on every call."""

    async def render(render_locals: RenderLocals) -> str:
        text = await asyncio.to_thread(template.read_text, encoding="utf-8")
        values = {
            "style": render_locals.style
            + icon_style(render_locals.file_list, render_locals.display_icons),
            "files": create_html_file_list(
                render_locals.file_list,
                render_locals.directory,
                render_locals.display_icons,
                render_locals.view_name,
            ),
            "directory": escape(render_locals.directory),
            "linked-path": html_path(render_locals.directory),
        }
        # Single pass, so substituted text is never scanned for tokens again.
        return _TOKENS.sub(lambda m: values[m.group(1)], text)

    return render


async def _read_style(options: ServeIndexOptions) -> str:
    if options.style is not None:
        return options.style
    return await asyncio.to_thread(options.stylesheet.read_text, encoding="utf-8")


# ---------------------------------------------------------------------------
# Built-in renderers
# ---------------------------------------------------------------------------


async def render_html(ctx: ListingContext) -> Response:
    options = ctx.options
    template = options.template
    render = create_html_render(template) if isinstance(template, Path) else template

    file_list = await ctx.entries()

    try:
        style = await _read_style(options)
        body = render(
            RenderLocals(
                directory=ctx.directory,
                display_icons=options.icons,
                file_list=file_list,
                path=ctx.path,
                style=style,
                view_name=options.view,
            )
        )
        if inspect.isawaitable(body):
            body = await body
    except OSError as exc:
        logger.debug("failed to render listing for %s: %s", ctx.path, exc)
        raise InternalError() from exc

    return send("text/html", body)


async def render_json(ctx: ListingContext) -> Response:
    file_list = await ctx.entries()
    body = json.dumps([entry.name for entry in file_list], ensure_ascii=False, separators=(",", ":"))
    return send("application/json", body)


async def render_plain(ctx: ListingContext) -> Response:
    file_list = await ctx.entries()
    body = "\n".join(entry.name for entry in file_list) + "\n"
    return send("text/plain", body)
