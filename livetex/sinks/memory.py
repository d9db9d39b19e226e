"""In-memory sink."""

from livetex.sinks.base import OutputSink


class MemorySink(OutputSink):
    """Keep the current document in memory, with a history of replacements."""

    def __init__(self) -> None:
        self.content: str | None = None
        self.history: list[str] = []

    async def replace(self, document: str) -> None:
        self.content = document
        self.history.append(document)
