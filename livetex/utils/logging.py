"""Logging configuration using structlog."""

import logging
import sys
import uuid
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from structlog.typing import EventDict, WrappedLogger

import structlog


class SafeStreamHandler(logging.StreamHandler):
    """A StreamHandler that survives consoles unable to encode math symbols.

    Documents routinely contain characters (Greek letters, arrows) that a
    legacy console code page cannot display; those are replaced instead of
    aborting the log call.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            stream = self.stream
            try:
                stream.write(msg + self.terminator)
            except UnicodeEncodeError:
                encoding = stream.encoding or "utf-8"
                stream.write(
                    msg.encode(encoding, errors="replace").decode(encoding, errors="replace")
                    + self.terminator
                )
            self.flush()
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)


# Document bodies can be large; keep log lines readable
_MAX_VALUE_LENGTH = 300

_NOISY_LOGGERS = [
    "asyncio",
    "anyio",
]

# Keys that are handled specially by ConsoleRenderer (not user context)
_INTERNAL_KEYS = {"event", "level", "timestamp", "_record", "_from_structlog"}


def _truncate_long_values(
    _logger: "WrappedLogger", _method_name: str, event_dict: "EventDict"
) -> "EventDict":
    """Shorten document-sized strings in the event dict."""
    for key, value in list(event_dict.items()):
        if key in _INTERNAL_KEYS:
            continue
        if isinstance(value, str) and len(value) > _MAX_VALUE_LENGTH:
            event_dict[key] = value[:_MAX_VALUE_LENGTH] + f"... [{len(value)} chars total]"
    return event_dict


def _add_separator(
    _logger: "WrappedLogger", _method_name: str, event_dict: "EventDict"
) -> "EventDict":
    """Add a visual separator between event message and context variables."""
    has_context = any(k not in _INTERNAL_KEYS for k in event_dict)
    if has_context and "event" in event_dict:
        event_dict["event"] = f"{event_dict['event']} |"
    return event_dict


def _build_formatter(
    shared_processors: list[structlog.types.Processor],
    json_format: bool,
    colors: bool,
) -> structlog.stdlib.ProcessorFormatter:
    if json_format:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=colors,
            exception_formatter=structlog.dev.plain_traceback,
            pad_event_to=0,
            pad_level=False,
        )
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    json_format: bool = False,
    console_level: str | None = None,
    file_level: str | None = None,
) -> None:
    """Configure structlog for the application.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path; rotated at midnight, 7 days retained
        json_format: If True, output JSON lines
        console_level: Optional override for the console handler level
        file_level: Optional override for the file handler level
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(max(log_level, logging.WARNING))

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _truncate_long_values,
        _add_separator,
    ]

    console_handler = SafeStreamHandler(sys.stderr)
    c_level = getattr(logging, console_level.upper(), log_level) if console_level else log_level
    console_handler.setLevel(c_level)
    console_handler.setFormatter(_build_formatter(shared_processors, json_format, colors=True))
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            log_file,
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
        file_handler.suffix = "%Y-%m-%d"
        f_level = getattr(logging, file_level.upper(), log_level) if file_level else log_level
        file_handler.setLevel(f_level)
        file_handler.setFormatter(_build_formatter(shared_processors, json_format, colors=False))
        root_logger.addHandler(file_handler)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Optional logger name

    Returns:
        A structlog bound logger
    """
    return structlog.get_logger(name)


def create_session_log_path(log_dir: str | Path, prefix: str = "session") -> tuple[str, Path]:
    """Create a unique log file path for one preview session.

    Example:
        >>> session_id, log_path = create_session_log_path(".logs", "watch")
        >>> print(log_path)  # .logs/watch_20260109_143052_a1b2c3d4.log
    """
    log_dir_path = Path(log_dir)
    log_dir_path.mkdir(parents=True, exist_ok=True)

    session_id = str(uuid.uuid4())[:8]
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return session_id, log_dir_path / f"{prefix}_{timestamp}_{session_id}.log"


def setup_session_logging(
    log_dir: str | Path,
    prefix: str = "session",
    verbose: bool = False,
) -> tuple[str, Path]:
    """Setup logging for a CLI session.

    The console shows WARNING and above unless ``verbose`` is set, so render
    outcomes printed by the CLI stay readable; the session file always
    receives DEBUG.

    Returns:
        Tuple of (session_id, log_file_path)
    """
    session_id, log_path = create_session_log_path(log_dir, prefix)

    setup_logging(
        level="DEBUG",
        log_file=str(log_path),
        console_level="DEBUG" if verbose else "WARNING",
        file_level="DEBUG",
    )
    structlog.contextvars.bind_contextvars(session_id=session_id)

    return session_id, log_path
