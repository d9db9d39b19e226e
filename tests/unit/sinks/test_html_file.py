"""Tests for output sinks."""

import json

import pytest

from livetex.config.settings import OutputConfig
from livetex.exceptions import RenderError
from livetex.sinks import HtmlFileSink, MemorySink
from livetex.sinks.html_file import mathjax_config


class TestMemorySink:
    """Tests for MemorySink."""

    @pytest.mark.asyncio
    async def test_replace_keeps_history(self):
        sink = MemorySink()

        await sink.replace("one")
        await sink.replace("two")

        assert sink.content == "two"
        assert sink.history == ["one", "two"]


class TestMathJaxConfig:
    """Tests for mathjax_config."""

    def test_uses_canonical_escapes(self):
        config = mathjax_config(["ams"])

        assert config["tex"]["inlineMath"] == [["\\(", "\\)"]]
        assert config["tex"]["displayMath"] == [["\\[", "\\]"]]
        assert config["loader"]["load"] == ["[tex]/ams"]

    def test_no_packages(self):
        config = mathjax_config([])

        assert "loader" not in config
        assert "packages" not in config["tex"]


class TestHtmlFileSink:
    """Tests for HtmlFileSink."""

    @pytest.mark.asyncio
    async def test_writes_page(self, tmp_path):
        """Test that replace writes a complete HTML page."""
        path = tmp_path / "preview.html"
        sink = HtmlFileSink(path)

        await sink.replace("<p>\\(x\\)</p>")

        page = path.read_text(encoding="utf-8")
        assert page.startswith("<!DOCTYPE html>")
        assert "<p>\\(x\\)</p>" in page
        assert "MathJax-script" in page
        assert json.dumps(mathjax_config(["ams"]), indent=2) in page

    @pytest.mark.asyncio
    async def test_replace_overwrites_whole_page(self, tmp_path):
        """Test that each replace leaves only the newest body."""
        path = tmp_path / "preview.html"
        sink = HtmlFileSink(path)

        await sink.replace("<p>first</p>")
        await sink.replace("<p>second</p>")

        page = path.read_text(encoding="utf-8")
        assert "<p>second</p>" in page
        assert "<p>first</p>" not in page
        assert list(tmp_path.iterdir()) == [path]

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "out" / "nested" / "preview.html"

        await HtmlFileSink(path).replace("<p>x</p>")

        assert path.exists()

    @pytest.mark.asyncio
    async def test_write_failure_raises_render_error(self, tmp_path):
        """Test that an unwritable target is reported as RenderError."""
        target = tmp_path / "preview.html"
        target.mkdir()

        with pytest.raises(RenderError, match="Could not write preview"):
            await HtmlFileSink(target).replace("<p>x</p>")

    def test_title_is_escaped(self, tmp_path):
        page = HtmlFileSink(tmp_path / "p.html", title="<A & B>").render_page("")

        assert "<title>&lt;A &amp; B&gt;</title>" in page

    def test_reload_meta(self, tmp_path):
        with_reload = HtmlFileSink(tmp_path / "p.html", reload_seconds=2).render_page("")
        without_reload = HtmlFileSink(tmp_path / "p.html").render_page("")

        assert '<meta http-equiv="refresh" content="2">' in with_reload
        assert "http-equiv" not in without_reload

    def test_from_config(self, tmp_path):
        config = OutputConfig(
            path=str(tmp_path / "configured.html"),
            title="Notes",
            math_packages=["ams", "physics"],
            reload_seconds=5,
        )

        sink = HtmlFileSink.from_config(config)

        assert sink.path == tmp_path / "configured.html"
        assert sink.title == "Notes"
        assert sink.math_packages == ["ams", "physics"]
        assert sink.reload_seconds == 5

    def test_from_config_path_override(self, tmp_path):
        override = tmp_path / "override.html"

        sink = HtmlFileSink.from_config(OutputConfig(), path=override)

        assert sink.path == override
