"""Constants for livetex."""

from pathlib import Path

from livetex import __version__

# Application constants
APP_NAME = "livetex"
APP_VERSION = __version__

# Default paths
DEFAULT_LOG_DIR = ".logs"
DEFAULT_CONFIG_FILE = "livetex.yaml"
DEFAULT_OUTPUT_FILE = "preview.html"

USER_CONFIG_FILE = Path.home() / ".config" / APP_NAME / "config.yaml"

# Config file locations (in order of priority)
CONFIG_LOCATIONS = [
    Path.cwd() / DEFAULT_CONFIG_FILE,
    USER_CONFIG_FILE,
]

# Math delimiters (open, close)
DEFAULT_INLINE_DELIMITERS = ("$", "$")
DEFAULT_DISPLAY_DELIMITERS = ("$$", "$$")

# Canonical escape forms understood by MathJax
INLINE_MATH_OPEN = "\\("
INLINE_MATH_CLOSE = "\\)"
DISPLAY_MATH_OPEN = "\\["
DISPLAY_MATH_CLOSE = "\\]"

# Debounce settings (milliseconds)
DEFAULT_INPUT_DEBOUNCE_MS = 300  # Raw edit events
DEFAULT_RENDER_DEBOUNCE_MS = 500  # Process-and-render stage

# An engine call running longer than this is reported once; it is never cancelled
DEFAULT_STALL_WARNING_SECONDS = 10.0

# Watch command polling interval (seconds)
DEFAULT_POLL_INTERVAL = 0.2

# Typesetting engines
ENGINE_KINDS = ["passthrough", "command"]

# MathJax page settings
DEFAULT_MATHJAX_URL = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-chtml.js"
DEFAULT_MATH_PACKAGES = ["ams"]
DEFAULT_PAGE_TITLE = "LaTeX Preview"

# Editor commands: name -> (start, end). None means "use configured delimiters".
EDITOR_COMMANDS: dict[str, tuple[str, str] | None] = {
    "bold": ("\\textbf{", "}"),
    "italic": ("\\textit{", "}"),
    "math": None,
    "displaymath": None,
}
