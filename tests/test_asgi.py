"""Tests for burrow._internal.asgi — typed connection scope."""

import pytest

from burrow._internal.asgi import ConnectionScope


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope dict."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/uv/sw.js",
        "raw_path": b"/uv/sw.js",
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "server": ("localhost", 8080),
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


class TestConnectionScope:
    def test_from_scope_basic(self) -> None:
        parsed = ConnectionScope.from_scope(_make_scope(method="HEAD"))

        assert parsed.type == "http"
        assert parsed.method == "HEAD"
        assert parsed.path == "/uv/sw.js"
        assert parsed.server == ("localhost", 8080)
        assert parsed.client == ("127.0.0.1", 54321)

    def test_headers_become_tuple(self) -> None:
        parsed = ConnectionScope.from_scope(_make_scope(headers=[(b"host", b"x")]))
        assert parsed.headers == ((b"host", b"x"),)

    def test_defaults_for_missing_keys(self) -> None:
        parsed = ConnectionScope.from_scope({"type": "websocket"})

        assert parsed.method == "GET"
        assert parsed.path == "/"
        assert parsed.raw_path == b""
        assert parsed.headers == ()
        assert parsed.server is None
        assert parsed.client is None

    def test_none_raw_path_treated_as_missing(self) -> None:
        parsed = ConnectionScope.from_scope(_make_scope(raw_path=None, path="/wisp/"))
        assert parsed.raw_path == b""
        assert parsed.target == "/wisp/"

    def test_target_prefers_raw_path(self) -> None:
        parsed = ConnectionScope.from_scope(_make_scope(path="/a b", raw_path=b"/a%20b?q=1"))
        assert parsed.target == "/a%20b"

    def test_frozen(self) -> None:
        parsed = ConnectionScope.from_scope(_make_scope())
        with pytest.raises(AttributeError):
            parsed.path = "/"  # type: ignore[misc]
