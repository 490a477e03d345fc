from enum import Enum
from typing import Optional


class RejectionReason(Enum):
    ACCOUNT_LOCKED = "account is locked"
    DUPLICATE_TRANSACTION = "transaction id already used by this client"
    INSUFFICIENT_FUNDS = "insufficient available funds"
    UNKNOWN_TRANSACTION = "referenced transaction not found for this client"
    NOT_A_DEPOSIT = "only deposits can be disputed"
    ALREADY_DISPUTED = "referenced transaction is already disputed"
    NOT_DISPUTED = "referenced transaction is not under dispute"
    BALANCE_OUT_OF_RANGE = "resulting balance cannot be represented exactly"


class RecordParseError(ValueError):
    """Raised when an input record cannot be turned into a Transaction."""

    def __init__(self, reason: str, line_number: Optional[int] = None):
        self.reason = reason
        self.line_number = line_number
        super().__init__(reason)

    def __str__(self) -> str:
        if self.line_number is None:
            return f"invalid transaction record: {self.reason}"
        return f"invalid transaction record on line {self.line_number}: {self.reason}"


class TransactionRejected(Exception):
    """
    Raised by ClientAccount when a transaction fails its preconditions.
    The account is left untouched.
    """

    def __init__(self, reason: RejectionReason, transaction):
        self.reason = reason
        self.transaction = transaction
        super().__init__(reason.value)

    def __str__(self) -> str:
        return f"{self.transaction!r} rejected: {self.reason.value}"


class InputFileError(OSError):
    """The input file could not be opened or read. Fatal for the run."""
