import csv
import logging
from typing import Dict, Iterable

from .errors import InputFileError, RecordParseError
from .ledger_store import LedgerStore
from .models import ClientAccount, ProcessingResult, ProcessingStats
from .record_parser import parse_record
from .transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class ReplayEngine:
    """
    Replays a transaction log against a fresh ledger, one record at a time
    and strictly in input order.
    """

    def __init__(self):
        self._store = LedgerStore()
        self._processor = TransactionProcessor(self._store)
        self._stats = ProcessingStats()

    @property
    def store(self) -> LedgerStore:
        return self._store

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Replaying transactions from {filepath}")
        try:
            with open(filepath, "r", newline="", encoding="utf-8-sig") as f:
                return self.process_lines(f)
        except (OSError, UnicodeDecodeError) as e:
            raise InputFileError(f"cannot read input file {filepath}: {e}") from e

    def process_lines(self, lines: Iterable[str]) -> Dict[int, ClientAccount]:
        """Process raw CSV lines and return final account states."""
        reader = csv.reader(lines)

        for fields in reader:
            if not any(field.strip() for field in fields):
                continue

            try:
                transaction = parse_record(fields, reader.line_num)
            except RecordParseError as e:
                self._stats.record_parse_failure()
                # a bad physical line 1 is dropped without a diagnostic, so a header row is harmless
                if reader.line_num == 1:
                    logger.debug(f"Skipping first line: {e}")
                else:
                    logger.warning(str(e))
                continue

            result = self._processor.process_transaction(transaction)
            if result == ProcessingResult.SUCCESS:
                self._stats.record_success()
            else:
                self._stats.record_rejection()

        logger.info(f"Replay complete. {self._stats}")
        return self._store.snapshot()
