"""
Runtime settings, read from environment variables.

``LEDGER_REPLAY_LOG_LEVEL``
    Level of the diagnostic channel on stderr, as a level name (``INFO``,
    ``DEBUG``...) or number. Defaults to ``WARNING``, which shows one line per
    rejected or unparseable record.
``LEDGER_REPLAY_COLOR``
    ``auto`` (decorate diagnostics only when stderr is a terminal),
    ``always`` or ``never``. The ``NO_COLOR`` convention is honoured as well.

Unrecognised values fall back to the defaults.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

LOG_LEVEL_VAR = "LEDGER_REPLAY_LOG_LEVEL"
COLOR_VAR = "LEDGER_REPLAY_COLOR"
COLOR_MODES = ("auto", "always", "never")


def parse_level(value: Optional[str], default: int = logging.WARNING) -> int:
    if not value:
        return default
    value = value.strip().upper()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value)
    if isinstance(level, int):
        return level
    return default


def parse_color(value: Optional[str]) -> str:
    if not value:
        return "auto"
    value = value.strip().lower()
    return value if value in COLOR_MODES else "auto"


@dataclass(frozen=True)
class Settings:
    log_level: int = logging.WARNING
    color: str = "auto"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        return cls(
            log_level=parse_level(environ.get(LOG_LEVEL_VAR)),
            color=parse_color(environ.get(COLOR_VAR)),
        )
