# Tests for request path decoding and root containment.
# Created: 2026-10-19

import os

import pytest

from serveindex.errors import BadRequest, Forbidden
from serveindex.paths import (
    decode_path,
    normalize_root,
    request_paths,
    resolve_directory,
    show_up,
)


class TestDecodePath:
    def test_plain(self):
        assert decode_path("/users/") == "/users/"

    def test_percent_escapes(self):
        assert decode_path("/g%23%20%253%20o%20%252525%20%2537%20dir") == "/g# %3 o %2525 %37 dir"

    def test_utf8(self):
        assert decode_path("/caf%C3%A9") == "/café"

    def test_encoded_slash(self):
        assert decode_path("/a%2Fb") == "/a/b"

    @pytest.mark.parametrize("raw", ["/%zz", "/%", "/%4", "/a%g1"])
    def test_malformed_escape(self, raw):
        with pytest.raises(BadRequest):
            decode_path(raw)

    @pytest.mark.parametrize("raw", ["/%ff", "/%C3", "/%80abc"])
    def test_invalid_utf8(self, raw):
        with pytest.raises(BadRequest):
            decode_path(raw)


class TestRequestPaths:
    def test_uses_raw_path(self):
        scope = {"path": "/ignored", "raw_path": b"/users/%23x/", "root_path": ""}
        assert request_paths(scope) == ("/users/#x/", "/users/#x/")

    def test_strips_query_from_raw_path(self):
        scope = {"path": "/a", "raw_path": b"/a?b=c", "root_path": ""}
        assert request_paths(scope) == ("/a", "/a")

    def test_strips_mount_prefix(self):
        scope = {"path": "/pub/users/", "raw_path": b"/pub/users/", "root_path": "/pub"}
        assert request_paths(scope) == ("/users/", "/pub/users/")

    def test_mount_root(self):
        scope = {"path": "/pub", "raw_path": b"/pub", "root_path": "/pub"}
        assert request_paths(scope) == ("/", "/pub")

    def test_falls_back_to_path(self):
        scope = {"path": "/already decoded", "root_path": ""}
        assert request_paths(scope) == ("/already decoded", "/already decoded")


class TestResolveDirectory:
    @pytest.fixture
    def root(self, tmp_path):
        return normalize_root(tmp_path)

    def test_normalize_root_trailing_separator(self, tmp_path):
        assert normalize_root(tmp_path) == str(tmp_path) + os.sep
        assert normalize_root(str(tmp_path) + os.sep) == str(tmp_path) + os.sep

    def test_root_itself(self, root, tmp_path):
        assert resolve_directory(root, "/") == str(tmp_path)

    def test_child(self, root, tmp_path):
        assert resolve_directory(root, "/users/") == str(tmp_path / "users")

    def test_dot_segments_inside_root(self, root, tmp_path):
        assert resolve_directory(root, "/users/../nums/./") == str(tmp_path / "nums")

    @pytest.mark.parametrize("route", ["/../", "/..", "/users/../../", "/../../etc/passwd"])
    def test_escape_forbidden(self, root, route):
        with pytest.raises(Forbidden):
            resolve_directory(root, route)

    def test_sibling_with_shared_prefix_forbidden(self, tmp_path):
        root = normalize_root(tmp_path / "app")
        with pytest.raises(Forbidden):
            resolve_directory(root, "/../app-secrets/")

    def test_leading_double_slash_stays_inside(self, root, tmp_path):
        assert resolve_directory(root, "//etc/") == str(tmp_path / "etc")

    def test_nul_byte(self, root):
        with pytest.raises(BadRequest):
            resolve_directory(root, "/a\0b")


class TestShowUp:
    def test_false_at_root(self, tmp_path):
        root = normalize_root(tmp_path)
        assert show_up(resolve_directory(root, "/"), root) is False

    def test_true_below_root(self, tmp_path):
        root = normalize_root(tmp_path)
        assert show_up(resolve_directory(root, "/users/"), root) is True
