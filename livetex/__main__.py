"""Allow ``python -m livetex``."""

from livetex.cli.main import app

app()
