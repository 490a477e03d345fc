"""
Diagnostic channel for the command line tool.

Library modules only call ``logging.getLogger(__name__)``. The entry point
calls ``configure_logging`` once, which routes every record to stderr through
a ``rich`` console: highlighted when stderr is an interactive terminal, plain
text when it is redirected or when colour is turned off.
"""

import logging
from typing import Optional, TextIO

from rich.console import Console
from rich.text import Text

LOG_FORMAT = "%(levelname)s: %(message)s"

LEVEL_STYLES = {
    logging.WARNING: "bold red",
    logging.ERROR: "bold white on red",
    logging.CRITICAL: "bold white on red",
}


def make_console(color: str = "auto", stream: Optional[TextIO] = None) -> Console:
    force_terminal = {"always": True, "never": False}.get(color)
    return Console(
        file=stream,
        stderr=stream is None,
        force_terminal=force_terminal,
        no_color=True if color == "never" else None,
        highlight=False,
        soft_wrap=True,
    )


class DiagnosticHandler(logging.Handler):
    """Writes one line per record to a rich console."""

    def __init__(self, console: Console, level: int = logging.NOTSET):
        super().__init__(level)
        self.console = console

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            style = LEVEL_STYLES.get(record.levelno, "")
            self.console.print(Text(message, style=style))
        except Exception:
            self.handleError(record)


def configure_logging(
    level: int = logging.WARNING,
    color: str = "auto",
    stream: Optional[TextIO] = None,
) -> DiagnosticHandler:
    """Install the diagnostic handler on the root logger, replacing a previous one."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, DiagnosticHandler):
            root.removeHandler(handler)

    handler = DiagnosticHandler(make_console(color, stream))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    return handler
