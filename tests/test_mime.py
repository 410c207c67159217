"""Tests for burrow.mime — extension to content type lookup."""

from pathlib import Path

from burrow.mime import DEFAULT_CONTENT_TYPE, ContentTypes


class TestContentTypes:
    def test_known_extension(self) -> None:
        assert ContentTypes()("style.css") == "text/css"
        assert ContentTypes()("index.html") == "text/html"

    def test_javascript(self) -> None:
        assert "javascript" in ContentTypes()("uv.bundle.js")

    def test_unknown_extension_falls_back(self) -> None:
        assert ContentTypes()("blob.unknownext") == DEFAULT_CONTENT_TYPE

    def test_no_extension_falls_back(self) -> None:
        assert ContentTypes()("LICENSE") == "application/octet-stream"

    def test_custom_fallback(self) -> None:
        lookup = ContentTypes(fallback="text/plain")
        assert lookup("blob.unknownext") == "text/plain"
        assert lookup.fallback == "text/plain"

    def test_override_wins_over_platform_table(self) -> None:
        lookup = ContentTypes({".js": "text/javascript; charset=utf-8"})
        assert lookup("app.js") == "text/javascript; charset=utf-8"

    def test_override_is_case_insensitive(self) -> None:
        lookup = ContentTypes({".WASM": "application/wasm"})
        assert lookup("epoxy.wasm") == "application/wasm"
        assert lookup("EPOXY.WASM") == "application/wasm"

    def test_accepts_paths(self) -> None:
        assert ContentTypes()(Path("/srv/uv/style.css")) == "text/css"

    def test_directory_names_do_not_matter(self) -> None:
        assert ContentTypes()("/srv/a.css/blob.unknownext") == DEFAULT_CONTENT_TYPE
