# Tests for the bundled server app and command-line entry point.
# Created: 2026-10-19

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from serveindex.__main__ import build_parser, main, settings_from_args
from serveindex.config import Settings
from serveindex.server import create_app, run_server


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for key in list(os.environ):
        if key.startswith("SERVE_INDEX_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def site(tmp_path):
    root = tmp_path / "site"
    (root / "docs").mkdir(parents=True)
    (root / "docs" / "guide.txt").write_text("read me")
    (root / "hello.txt").write_text("hello")
    return root


class TestCreateApp:
    def test_lists_root(self, site):
        client = TestClient(create_app(Settings(root=site)))

        response = client.get("/", headers={"Accept": "application/json"})

        assert response.status_code == 200
        assert response.json() == ["docs", "hello.txt"]

    def test_details_view_by_default(self, site):
        client = TestClient(create_app(Settings(root=site)))

        response = client.get("/docs/", headers={"Accept": "text/html"})

        assert response.status_code == 200
        assert 'class="view-details"' in response.text
        assert 'href="/docs/guide.txt"' in response.text

    def test_serves_files(self, site):
        client = TestClient(create_app(Settings(root=site)))

        response = client.get("/hello.txt")

        assert response.status_code == 200
        assert response.text == "hello"

    def test_missing_is_not_found(self, site):
        client = TestClient(create_app(Settings(root=site)))
        assert client.get("/nope.txt").status_code == 404

    def test_traversal_rejected(self, site):
        client = TestClient(create_app(Settings(root=site)))
        assert client.get("/%2e%2e/", headers={"Accept": "text/plain"}).status_code == 403

    def test_no_api_docs(self, site):
        app = create_app(Settings(root=site))
        assert app.docs_url is None
        assert app.openapi_url is None


class TestRunServer:
    def test_starts_uvicorn(self, site):
        settings = Settings(root=site, host="0.0.0.0", port=9000)
        with patch("uvicorn.run") as run:
            run_server(settings)

        run.assert_called_once()
        assert run.call_args.kwargs["host"] == "0.0.0.0"
        assert run.call_args.kwargs["port"] == 9000


class TestCli:
    def test_defaults_are_unset(self):
        args = build_parser().parse_args([])
        assert all(value is None for value in vars(args).values())

    def test_flags(self, tmp_path):
        args = build_parser().parse_args(
            [str(tmp_path), "--icons", "--hidden", "-p", "8000", "--view", "tiles"]
        )

        settings = settings_from_args(args)

        assert settings.root == tmp_path
        assert settings.icons is True
        assert settings.hidden is True
        assert settings.brief is False
        assert settings.port == 8000
        assert settings.view == "tiles"

    def test_flags_override_environment(self, monkeypatch):
        monkeypatch.setenv("SERVE_INDEX_PORT", "7000")
        monkeypatch.setenv("SERVE_INDEX_BRIEF", "true")

        settings = settings_from_args(build_parser().parse_args(["--port", "7001"]))

        assert settings.port == 7001
        assert settings.brief is True
        assert settings.root == Path(".")

    def test_main_runs_server(self, site):
        with patch("serveindex.server.run_server") as run:
            main([str(site), "--log-level", "WARNING"])

        settings = run.call_args.args[0]
        assert settings.root == site
        assert settings.log_level == "WARNING"

    def test_main_handles_interrupt(self, site):
        with patch("serveindex.server.run_server", side_effect=KeyboardInterrupt):
            main([str(site)])
