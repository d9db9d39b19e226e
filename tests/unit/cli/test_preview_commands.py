"""Tests for the transform, render and watch commands."""

import asyncio

import pytest
from typer.testing import CliRunner

from livetex.cli.commands.preview import watch_file
from livetex.cli.main import app
from livetex.core.pipeline import PreviewPipeline
from livetex.markup.transformer import transform


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


class TestVersion:
    def test_version(self, runner):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "livetex" in result.stdout


class TestTransformCommand:
    """Tests for the transform command."""

    def test_prints_markup(self, runner, isolated_settings, sample_source):  # noqa: ARG002
        result = runner.invoke(app, ["transform", str(sample_source)])

        assert result.exit_code == 0
        assert "<p>Energy: \\(E=mc^2\\)</p>" in result.stdout
        assert "\\[\\int_0^1 x\\,dx\\]" in result.stdout

    def test_uses_configured_delimiters(self, runner, isolated_settings):
        (isolated_settings / "livetex.yaml").write_text(
            "delimiters:\n  inline: ['@', '@']\n", encoding="utf-8"
        )
        source = isolated_settings / "custom.tex"
        source.write_text("@x@ and $y$", encoding="utf-8")

        result = runner.invoke(app, ["transform", str(source)])

        assert result.exit_code == 0
        assert "\\(x\\) and $y$" in result.stdout

    def test_missing_file(self, runner, isolated_settings):
        result = runner.invoke(app, ["transform", str(isolated_settings / "missing.tex")])

        assert result.exit_code != 0


class TestRenderCommand:
    """Tests for the render command."""

    def test_writes_preview(self, runner, isolated_settings, sample_source):
        """Test rendering a file into an HTML page."""
        output = isolated_settings / "notes.html"

        result = runner.invoke(app, ["render", str(sample_source), "-o", str(output)])

        assert result.exit_code == 0
        assert "Preview written to" in result.stdout
        page = output.read_text(encoding="utf-8")
        assert "<p>Energy: \\(E=mc^2\\)</p>" in page
        assert "MathJax-script" in page

    def test_invalid_engine(self, runner, isolated_settings, sample_source):  # noqa: ARG002
        result = runner.invoke(app, ["render", str(sample_source), "--engine", "latexml"])

        assert result.exit_code != 0

    def test_command_engine_without_command(self, runner, isolated_settings, sample_source):  # noqa: ARG002
        result = runner.invoke(app, ["render", str(sample_source), "--engine", "command"])

        assert result.exit_code == 1
        assert "Error:" in result.stdout

    def test_engine_failure(self, runner, isolated_settings, sample_source):
        """Test a failing engine leaves no preview and exits non-zero."""
        output = isolated_settings / "notes.html"

        result = runner.invoke(
            app,
            [
                "render",
                str(sample_source),
                "-o",
                str(output),
                "--command",
                "livetex-no-such-typesetter --mathml",
            ],
        )

        assert result.exit_code == 1
        assert "Render failed" in result.stdout
        assert not output.exists()


class TestWatchFile:
    """Tests for the watch loop."""

    @pytest.mark.asyncio
    async def test_renders_changes(self, tmp_path, engine, sink):
        source = tmp_path / "live.tex"
        source.write_text("first", encoding="utf-8")
        pipeline = PreviewPipeline(engine, sink, input_delay=0.01, render_delay=0.01)
        stop = asyncio.Event()

        task = asyncio.create_task(watch_file(source, pipeline, 0.01, stop))
        await asyncio.sleep(0.15)
        source.write_text("second $x$", encoding="utf-8")
        await asyncio.sleep(0.15)
        stop.set()
        await task

        assert engine.calls == [transform("first"), transform("second $x$")]
        assert sink.content == f"<typeset>{transform('second $x$')}</typeset>"

    @pytest.mark.asyncio
    async def test_flushes_pending_edit_on_stop(self, tmp_path, engine, sink):
        source = tmp_path / "live.tex"
        source.write_text("draft", encoding="utf-8")
        pipeline = PreviewPipeline(engine, sink, input_delay=10.0, render_delay=10.0)
        stop = asyncio.Event()

        task = asyncio.create_task(watch_file(source, pipeline, 0.01, stop))
        await asyncio.sleep(0.05)
        stop.set()
        await task

        assert engine.calls == [transform("draft")]

    @pytest.mark.asyncio
    async def test_unreadable_content_keeps_watching(self, tmp_path, engine, sink):
        """A non-UTF-8 save is skipped and the next good save is rendered."""
        source = tmp_path / "live.tex"
        source.write_bytes(b"\xff\xfe\xfa broken")
        pipeline = PreviewPipeline(engine, sink, input_delay=0.01, render_delay=0.01)
        stop = asyncio.Event()

        task = asyncio.create_task(watch_file(source, pipeline, 0.01, stop))
        await asyncio.sleep(0.05)
        assert not task.done()
        assert engine.calls == []

        source.write_text("fixed", encoding="utf-8")
        await asyncio.sleep(0.15)
        stop.set()
        await task

        assert engine.calls == [transform("fixed")]

    @pytest.mark.asyncio
    async def test_missing_file_keeps_watching(self, tmp_path, engine, sink):
        source = tmp_path / "later.tex"
        pipeline = PreviewPipeline(engine, sink, input_delay=0.01, render_delay=0.01)
        stop = asyncio.Event()

        task = asyncio.create_task(watch_file(source, pipeline, 0.01, stop))
        await asyncio.sleep(0.05)
        assert engine.calls == []

        source.write_text("now here", encoding="utf-8")
        await asyncio.sleep(0.15)
        stop.set()
        await task

        assert engine.calls == [transform("now here")]
