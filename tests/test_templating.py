# Tests for Jinja2 listing templates.
# Created: 2026-10-19

import os

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from serveindex.listing import Entry, FileStat
from serveindex.middleware import ServeIndex
from serveindex.renderers import RenderLocals
from serveindex.templating import jinja_template


def _locals(entries, directory="/", icons=False):
    return RenderLocals(
        directory=directory,
        display_icons=icons,
        file_list=entries,
        path="/srv",
        style="body { color: red; }",
        view_name="details",
    )


class TestJinjaTemplate:
    @pytest.mark.asyncio
    async def test_variables(self, tmp_path):
        (tmp_path / "listing.html").write_text(
            "{{ directory }}|{{ view_name }}|{{ display_icons }}|{{ path }}|"
            "{% for entry in file_list %}{{ entry.name }};{% endfor %}"
        )
        render = jinja_template(tmp_path / "listing.html")

        entries = [Entry("a.txt", FileStat(is_dir=False, size=3)), Entry("sub")]
        html = await render(_locals(entries, "/docs/"))

        assert html == "/docs/|details|False|/srv|a.txt;sub;"

    @pytest.mark.asyncio
    async def test_autoescape(self, tmp_path):
        (tmp_path / "listing.html").write_text(
            "{{ directory }}{% for entry in file_list %}[{{ entry.name }}]{% endfor %}"
        )
        render = jinja_template(str(tmp_path / "listing.html"))

        html = await render(_locals([Entry("<script>")], "/a&b/"))

        assert html == "/a&amp;b/[&lt;script&gt;]"

    @pytest.mark.asyncio
    async def test_prerendered_markup_not_double_escaped(self, tmp_path):
        (tmp_path / "listing.html").write_text(
            "<style>{{ style }}{{ icon_style }}</style>{{ linked_path }}{{ files }}"
        )
        render = jinja_template(tmp_path / "listing.html")

        entries = [Entry("x & y", FileStat(is_dir=False, size=1))]
        html = await render(_locals(entries, "/pub/", icons=True))

        assert "<style>body { color: red; }#files .icon-default .name {" in html
        assert '<a href="/pub">pub</a>' in html
        assert '<ul id="files" class="view-details">' in html
        assert '<span class="name">x &amp; y</span>' in html

    @pytest.mark.asyncio
    async def test_edits_are_picked_up(self, tmp_path):
        template = tmp_path / "listing.html"
        template.write_text("first")
        render = jinja_template(template)

        assert await render(_locals([])) == "first"
        template.write_text("second, longer")
        mtime = template.stat().st_mtime + 10
        os.utime(template, (mtime, mtime))
        assert await render(_locals([])) == "second, longer"

    @pytest.mark.asyncio
    async def test_missing_template(self, tmp_path):
        render = jinja_template(tmp_path / "nope.html")
        with pytest.raises(FileNotFoundError):
            await render(_locals([]))


class TestJinjaTemplateMounted:
    def test_listing(self, tmp_path):
        root = tmp_path / "root"
        root.mkdir()
        (root / "notes.txt").write_text("hi")
        template = tmp_path / "listing.html"
        template.write_text("<h1>{{ directory }}</h1>{{ files }}")

        app = FastAPI()
        app.mount("/", ServeIndex(None, str(root), template=jinja_template(template)))
        client = TestClient(app)

        response = client.get("/", headers={"Accept": "text/html"})

        assert response.status_code == 200
        assert response.text.startswith("<h1>/</h1><ul id=\"files\"")
        assert 'title="notes.txt"' in response.text

    def test_missing_template_is_server_error(self, tmp_path):
        app = FastAPI()
        app.mount(
            "/", ServeIndex(None, str(tmp_path), template=jinja_template(tmp_path / "gone.html"))
        )
        client = TestClient(app)

        response = client.get("/", headers={"Accept": "text/html"})

        assert response.status_code == 500
