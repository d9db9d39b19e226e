"""Engine that pipes markup through an external command."""

import shutil
import subprocess

import anyio

from livetex.engines.base import TypesettingEngine
from livetex.exceptions import EngineNotFoundError, RenderError
from livetex.utils.logging import get_logger

log = get_logger(__name__)


class CommandEngine(TypesettingEngine):
    """Typeset by running an external program.

    The markup is written to the program's stdin and its stdout is the
    typeset body, e.g. ``["pandoc", "--from", "html", "--to", "html", "--mathml"]``.
    The blocking call runs in a worker thread. No timeout is applied: a hung
    program stalls rendering until it exits.
    """

    name = "command"

    def __init__(self, command: list[str]) -> None:
        """Initialize the command engine.

        Args:
            command: Program and arguments
        """
        if not command:
            raise ValueError("CommandEngine requires a non-empty command")
        self.command = list(command)
        self._executable: str | None = None

    def _resolve_executable(self) -> str:
        if self._executable is None:
            found = shutil.which(self.command[0])
            if found is None:
                log.warning("Typesetting command not found in PATH", command=self.command[0])
                raise EngineNotFoundError(self.command[0])
            log.debug("Found typesetting command", path=found)
            self._executable = found
        return self._executable

    async def typeset(self, markup: str) -> str:
        executable = self._resolve_executable()
        try:
            return await anyio.to_thread.run_sync(self._typeset_sync, executable, markup)
        except subprocess.CalledProcessError as e:
            log.error(
                "Typesetting command failed",
                command=self.command[0],
                returncode=e.returncode,
                error=e.stderr,
            )
            raise RenderError(
                f"{self.command[0]} exited with status {e.returncode}: {(e.stderr or '').strip()}",
                cause=e,
            ) from e
        except OSError as e:
            raise RenderError(f"Could not run {self.command[0]}: {e}", cause=e) from e

    def _typeset_sync(self, executable: str, markup: str) -> str:
        result = subprocess.run(
            [executable, *self.command[1:]],
            input=markup,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
        )
        return result.stdout
