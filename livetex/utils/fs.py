"""File system helpers for livetex."""

import os
import tempfile
from pathlib import Path


def atomic_write(file_path: Path, text: str, encoding: str = "utf-8") -> None:
    """Replace ``file_path`` with ``text`` in a single rename.

    A browser auto-reloading the preview never observes a half-written page:
    the content goes to a sibling temp file which is then moved over the
    target.

    Args:
        file_path: Target file path
        text: Full new file content
        encoding: Text encoding
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd, temp_name = tempfile.mkstemp(
        dir=file_path.parent,
        prefix=f".{file_path.name}.",
    )
    temp_path = Path(temp_name)

    try:
        with os.fdopen(temp_fd, "w", encoding=encoding) as f:
            f.write(text)
        temp_path.replace(file_path)
    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise
