"""
Logging setup.

Modules log through logging.getLogger(__name__); only the entry points
(CLI, interactive mode) call setup_logging(). Console output goes through
rich so log lines match the rest of the terminal UI.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler


def setup_logging(level: str = "WARNING") -> None:
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(numeric_level)

    # Prevent duplicate handlers when main() runs more than once (tests)
    if any(isinstance(h, RichHandler) for h in root.handlers):
        for h in root.handlers:
            h.setLevel(numeric_level)
        return

    handler = RichHandler(show_path=False, rich_tracebacks=False)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
    root.addHandler(handler)
