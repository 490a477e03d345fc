from dataclasses import dataclass, field
from decimal import Context, Decimal, Inexact, InvalidOperation, Overflow, localcontext
from enum import Enum
from typing import Dict, Optional, Set

from .errors import RejectionReason, TransactionRejected


MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

# amounts carry at most this many digits on either side of the point
MAX_AMOUNT_DIGITS = 28

# balance arithmetic never rounds: any result that does not fit is a rejection
BALANCE_CONTEXT = Context(prec=4 * MAX_AMOUNT_DIGITS, traps=[Inexact, Overflow, InvalidOperation])


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class ProcessingResult(Enum):
    SUCCESS = "success"
    REJECTED = "rejected"


@dataclass
class Transaction:
    """
    One parsed input record.

    For deposits and withdrawals, transaction_id is the id being created and
    amount is set. For disputes, resolves and chargebacks, transaction_id is
    the id of the deposit being referenced and amount is None.
    """

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        if self.amount is None:
            return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id})"
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    """
    Per-client ledger state and the transitions that mutate it.

    Every transition either mutates the account completely or raises
    TransactionRejected without touching it.
    """

    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False
    history: Dict[int, Transaction] = field(default_factory=dict, repr=False)
    disputed: Set[int] = field(default_factory=set, repr=False)

    @property
    def total(self) -> Decimal:
        with localcontext(BALANCE_CONTEXT):
            return self.available + self.held

    # Each primitive computes every new balance before assigning any, so a
    # trapped signal leaves the account untouched. apply() runs them in BALANCE_CONTEXT.

    def credit(self, amount: Decimal) -> None:
        self.available = self.available + amount

    def debit(self, amount: Decimal) -> None:
        self.available = self.available - amount

    def hold(self, amount: Decimal) -> None:
        available, held = self.available - amount, self.held + amount
        self.available, self.held = available, held

    def release_hold(self, amount: Decimal) -> None:
        available, held = self.available + amount, self.held - amount
        self.available, self.held = available, held

    def remove_held(self, amount: Decimal) -> None:
        self.held = self.held - amount

    def lock(self) -> None:
        self.locked = True

    def is_disputed(self, transaction_id: int) -> bool:
        return transaction_id in self.disputed

    def apply(self, transaction: Transaction) -> None:
        """Apply a transaction to this account or raise TransactionRejected."""
        if self.locked:
            raise TransactionRejected(RejectionReason.ACCOUNT_LOCKED, transaction)

        try:
            with localcontext(BALANCE_CONTEXT):
                match transaction.transaction_type:
                    case TransactionType.DEPOSIT:
                        self.deposit(transaction)
                    case TransactionType.WITHDRAWAL:
                        self.withdraw(transaction)
                    case TransactionType.DISPUTE:
                        self.dispute(transaction)
                    case TransactionType.RESOLVE:
                        self.resolve(transaction)
                    case TransactionType.CHARGEBACK:
                        self.chargeback(transaction)
        except (Inexact, Overflow, InvalidOperation) as e:
            raise TransactionRejected(RejectionReason.BALANCE_OUT_OF_RANGE, transaction) from e

    def deposit(self, transaction: Transaction) -> None:
        self._check_unused_id(transaction)
        self.credit(transaction.amount)
        self.history[transaction.transaction_id] = transaction

    def withdraw(self, transaction: Transaction) -> None:
        self._check_unused_id(transaction)
        if self.available < transaction.amount:
            raise TransactionRejected(RejectionReason.INSUFFICIENT_FUNDS, transaction)
        self.debit(transaction.amount)
        self.history[transaction.transaction_id] = transaction

    def dispute(self, transaction: Transaction) -> None:
        original = self.history.get(transaction.transaction_id)
        if original is None:
            raise TransactionRejected(RejectionReason.UNKNOWN_TRANSACTION, transaction)

        # TODO: withdrawal disputes need a rule for funds that already left the account
        if original.transaction_type != TransactionType.DEPOSIT:
            raise TransactionRejected(RejectionReason.NOT_A_DEPOSIT, transaction)

        if self.is_disputed(transaction.transaction_id):
            raise TransactionRejected(RejectionReason.ALREADY_DISPUTED, transaction)

        self.hold(original.amount)
        self.disputed.add(transaction.transaction_id)

    def resolve(self, transaction: Transaction) -> None:
        original = self._disputed_original(transaction)
        self.release_hold(original.amount)
        self.disputed.discard(transaction.transaction_id)

    def chargeback(self, transaction: Transaction) -> None:
        original = self._disputed_original(transaction)
        self.remove_held(original.amount)
        self.lock()
        self.disputed.discard(transaction.transaction_id)

    def _check_unused_id(self, transaction: Transaction) -> None:
        if transaction.transaction_id in self.history:
            raise TransactionRejected(RejectionReason.DUPLICATE_TRANSACTION, transaction)

    def _disputed_original(self, transaction: Transaction) -> Transaction:
        if not self.is_disputed(transaction.transaction_id):
            raise TransactionRejected(RejectionReason.NOT_DISPUTED, transaction)
        return self.history[transaction.transaction_id]


class ProcessingStats:
    """Counters for one replay run."""

    def __init__(self):
        self.read = 0
        self.applied = 0
        self.rejected = 0
        self.unparseable = 0

    def record_success(self):
        self.read += 1
        self.applied += 1

    def record_rejection(self):
        self.read += 1
        self.rejected += 1

    def record_parse_failure(self):
        self.read += 1
        self.unparseable += 1

    def __str__(self) -> str:
        return (
            f"Read: {self.read}, "
            f"Applied: {self.applied}, "
            f"Rejected: {self.rejected}, "
            f"Unparseable: {self.unparseable}"
        )
