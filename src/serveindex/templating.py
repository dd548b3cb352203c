# Jinja2 templates for HTML listings.
# Created: 2026-10-19
#
# jinja_template(path) turns a Jinja2 file into a render function usable as
# ServeIndexOptions.template. Autoescaping is on; the pre-rendered markup
# (files, linked_path) is passed as Markup so it is not escaped twice.

from __future__ import annotations

import asyncio
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup

from serveindex.icons import icon_style
from serveindex.renderers import (
    RenderLocals,
    TemplateRender,
    create_html_file_list,
    html_path,
)


def jinja_template(path: str | Path) -> TemplateRender:
    """Build a render function from the Jinja2 template at *path*.

    The template is looked up on every render, so edits show up without a
    restart. Available variables: ``directory``, ``display_icons``,
    ``file_list``, ``path``, ``style``, ``view_name``, ``icon_style``,
    ``files`` and ``linked_path``.
    """
    template_path = Path(path)
    env = Environment(
        loader=FileSystemLoader(str(template_path.parent)),
        autoescape=select_autoescape(default=True, default_for_string=True),
        auto_reload=True,
    )

    def _render(render_locals: RenderLocals) -> str:
        try:
            template = env.get_template(template_path.name)
        except TemplateNotFound as exc:
            raise FileNotFoundError(f"Template not found: {template_path}") from exc
        return template.render(
            directory=render_locals.directory,
            display_icons=render_locals.display_icons,
            file_list=render_locals.file_list,
            path=render_locals.path,
            style=Markup(render_locals.style),
            view_name=render_locals.view_name,
            icon_style=Markup(icon_style(render_locals.file_list, render_locals.display_icons)),
            files=Markup(
                create_html_file_list(
                    render_locals.file_list,
                    render_locals.directory,
                    render_locals.display_icons,
                    render_locals.view_name,
                )
            ),
            linked_path=Markup(html_path(render_locals.directory)),
        )

    async def render(render_locals: RenderLocals) -> str:
        return await asyncio.to_thread(_render, render_locals)

    return render
