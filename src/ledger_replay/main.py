import logging
import sys
from typing import List, Optional

from .config import Settings
from .errors import InputFileError
from .logging_setup import configure_logging
from .replay_engine import ReplayEngine
from .reporter import write_accounts

logger = logging.getLogger(__name__)

USAGE = "Usage: ledger-replay <input.csv>"


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.color)

    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        return 2

    filepath = args[0]
    engine = ReplayEngine()
    try:
        accounts = engine.process_file(filepath)
    except InputFileError as e:
        logger.error(str(e))
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
