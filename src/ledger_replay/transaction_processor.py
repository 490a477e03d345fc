import logging

from .errors import TransactionRejected
from .ledger_store import LedgerStore
from .models import Transaction, ProcessingResult

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to the account of the client named on each record.
    Rejections are reported as warnings and never change any account.
    """

    def __init__(self, store: LedgerStore):
        self._store = store

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: Applied to the client account
            REJECTED: Dropped, the account is unchanged
        """
        account = self._store.get_or_create_account(transaction.client_id)

        try:
            account.apply(transaction)
        except TransactionRejected as e:
            logger.warning(
                f"{transaction.transaction_type.value.capitalize()} tx {transaction.transaction_id} "
                f"for client {transaction.client_id} rejected: {e.reason.value}"
            )
            return ProcessingResult.REJECTED

        logger.debug(f"Applied {transaction}")
        return ProcessingResult.SUCCESS
