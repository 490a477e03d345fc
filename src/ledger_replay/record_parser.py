"""
Turns one split input record into a Transaction.

Records are laid out as ``type, tx, client[, amount]``. The type keyword is
case-insensitive and every field is stripped of surrounding whitespace.
"""

from decimal import Decimal, InvalidOperation
from typing import List, Optional, Sequence

from .errors import RecordParseError
from .models import MAX_AMOUNT_DIGITS, MAX_CLIENT_ID, MAX_TRANSACTION_ID, Transaction, TransactionType


def parse_record(fields: Sequence[str], line_number: Optional[int] = None) -> Transaction:
    """Parse a record, raising RecordParseError if it is malformed."""
    normalized = _normalize_fields(fields)
    if not normalized or not normalized[0]:
        raise RecordParseError("empty record", line_number)

    keyword = normalized[0].lower()
    try:
        transaction_type = TransactionType(keyword)
    except ValueError:
        raise RecordParseError(f"unknown transaction type {normalized[0]!r}", line_number) from None

    expected = 4 if transaction_type.carries_amount else 3
    if len(normalized) != expected:
        raise RecordParseError(
            f"{keyword} expects {expected - 1} fields after the type, got {len(normalized) - 1}",
            line_number,
        )

    transaction_id = _parse_id(normalized[1], "tx", MAX_TRANSACTION_ID, line_number)
    client_id = _parse_id(normalized[2], "client", MAX_CLIENT_ID, line_number)

    amount = None
    if transaction_type.carries_amount:
        amount = parse_amount(normalized[3], line_number)

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def parse_amount(text: str, line_number: Optional[int] = None) -> Decimal:
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise RecordParseError(f"amount {text!r} is not a decimal number", line_number) from None

    if not amount.is_finite():
        raise RecordParseError(f"amount {text!r} is not a finite number", line_number)
    if amount < 0:
        raise RecordParseError(f"amount {text!r} is negative", line_number)
    if amount.adjusted() >= MAX_AMOUNT_DIGITS or amount.as_tuple().exponent < -MAX_AMOUNT_DIGITS:
        raise RecordParseError(f"amount {text!r} is out of range (max {MAX_AMOUNT_DIGITS} digits either side of the point)", line_number)
    return amount


def _parse_id(text: str, name: str, maximum: int, line_number: Optional[int]) -> int:
    # no signs, underscores or non-ascii digits, all of which int() accepts
    if not text.isascii() or not text.isdigit():
        raise RecordParseError(f"{name} id {text!r} is not an unsigned integer", line_number)
    value = int(text)
    if value > maximum:
        raise RecordParseError(f"{name} id {text} is out of range (max {maximum})", line_number)
    return value


def _normalize_fields(fields: Sequence[str]) -> List[str]:
    return [f.strip() for f in fields]
