"""Output sinks for rendered previews."""

from livetex.sinks.base import OutputSink
from livetex.sinks.html_file import HtmlFileSink
from livetex.sinks.memory import MemorySink

__all__ = [
    "HtmlFileSink",
    "MemorySink",
    "OutputSink",
]
