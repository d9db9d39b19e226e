"""Editor formatting commands (bold, italic, inline and display math)."""

from dataclasses import dataclass

from livetex.config.constants import EDITOR_COMMANDS
from livetex.markup.transformer import MathDelimiters


@dataclass(frozen=True)
class EditResult:
    """Text after a command was applied and where the cursor lands."""

    text: str
    cursor: int
    changed: bool = True


def command_markers(command: str, delimiters: MathDelimiters | None = None) -> tuple[str, str] | None:
    """Return the (start, end) markers for ``command``, or None if unknown."""
    if command not in EDITOR_COMMANDS:
        return None
    markers = EDITOR_COMMANDS[command]
    if markers is not None:
        return markers
    delimiters = delimiters or MathDelimiters()
    return delimiters.display if command == "displaymath" else delimiters.inline


def apply_command(
    text: str,
    start: int,
    end: int,
    command: str,
    delimiters: MathDelimiters | None = None,
) -> EditResult:
    """Wrap the selection ``text[start:end]`` in the markers of ``command``.

    With an empty selection the cursor is placed between the markers, ready
    for typing; otherwise it is placed after the wrapped text.

    Args:
        text: Full editor content
        start: Selection start offset
        end: Selection end offset
        command: One of ``bold``, ``italic``, ``math``, ``displaymath``
        delimiters: Delimiters used by the math commands

    Returns:
        EditResult; unchanged text and cursor at ``end`` for unknown commands
    """
    markers = command_markers(command, delimiters)
    if markers is None:
        return EditResult(text=text, cursor=end, changed=False)

    start, end = sorted((max(0, min(start, len(text))), max(0, min(end, len(text)))))
    open_, close = markers
    replacement = f"{open_}{text[start:end]}{close}"
    new_text = text[:start] + replacement + text[end:]

    if start == end:
        cursor = start + len(open_)
    else:
        cursor = start + len(replacement)
    return EditResult(text=new_text, cursor=cursor)
