"""Sink writing a standalone HTML preview page."""

import html
import json
from pathlib import Path

import anyio

from livetex.config.constants import (
    DEFAULT_MATH_PACKAGES,
    DEFAULT_MATHJAX_URL,
    DEFAULT_PAGE_TITLE,
    DISPLAY_MATH_CLOSE,
    DISPLAY_MATH_OPEN,
    INLINE_MATH_CLOSE,
    INLINE_MATH_OPEN,
)
from livetex.config.settings import OutputConfig
from livetex.exceptions import RenderError
from livetex.sinks.base import OutputSink
from livetex.utils.fs import atomic_write
from livetex.utils.logging import get_logger

log = get_logger(__name__)

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
{refresh}<title>{title}</title>
<script>
window.MathJax = {mathjax_config};
</script>
<script id="MathJax-script" async src="{mathjax_url}"></script>
</head>
<body>
<main id="preview">
{body}
</main>
</body>
</html>
"""


def mathjax_config(packages: list[str]) -> dict:
    """MathJax configuration matching the transformer's canonical escapes."""
    config: dict = {
        "tex": {
            "inlineMath": [[INLINE_MATH_OPEN, INLINE_MATH_CLOSE]],
            "displayMath": [[DISPLAY_MATH_OPEN, DISPLAY_MATH_CLOSE]],
            "processEscapes": True,
            "processEnvironments": True,
        },
        "options": {
            "skipHtmlTags": ["script", "noscript", "style", "textarea", "pre"],
        },
    }
    if packages:
        config["loader"] = {"load": [f"[tex]/{p}" for p in packages]}
        config["tex"]["packages"] = {"[+]": list(packages)}
    return config


class HtmlFileSink(OutputSink):
    """Write each rendered document into a full HTML page on disk."""

    def __init__(
        self,
        path: Path | str,
        title: str = DEFAULT_PAGE_TITLE,
        mathjax_url: str = DEFAULT_MATHJAX_URL,
        math_packages: list[str] | None = None,
        reload_seconds: int = 0,
    ) -> None:
        """Initialize the sink.

        Args:
            path: Target HTML file
            title: Page title
            mathjax_url: MathJax script location
            math_packages: TeX extension packages to load
            reload_seconds: Browser auto-reload interval, 0 to disable
        """
        self.path = Path(path)
        self.title = title
        self.mathjax_url = mathjax_url
        self.math_packages = DEFAULT_MATH_PACKAGES if math_packages is None else math_packages
        self.reload_seconds = reload_seconds

    @classmethod
    def from_config(cls, config: OutputConfig, path: Path | None = None) -> "HtmlFileSink":
        return cls(
            path=path or Path(config.path),
            title=config.title,
            mathjax_url=config.mathjax_url,
            math_packages=config.math_packages,
            reload_seconds=config.reload_seconds,
        )

    def render_page(self, body: str) -> str:
        refresh = (
            f'<meta http-equiv="refresh" content="{self.reload_seconds}">\n'
            if self.reload_seconds > 0
            else ""
        )
        return PAGE_TEMPLATE.format(
            refresh=refresh,
            title=html.escape(self.title),
            mathjax_config=json.dumps(mathjax_config(self.math_packages), indent=2),
            mathjax_url=self.mathjax_url,
            body=body,
        )

    async def replace(self, document: str) -> None:
        page = self.render_page(document)
        try:
            await anyio.to_thread.run_sync(atomic_write, self.path, page)
        except OSError as e:
            raise RenderError(f"Could not write preview to {self.path}: {e}", cause=e) from e
        log.debug("Preview written", path=str(self.path), size=len(page))
