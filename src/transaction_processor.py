import logging
from typing import Dict, Iterable, Optional

from models import ClientAccount, HistoryEntry, ProcessingResult, Transaction, TransactionType
from state_manager import LedgerState

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to a LedgerState, one at a time and in input order.
    Business-rule rejections are never raised: the record is ignored and
    ProcessingResult.IGNORED is returned.
    """

    def __init__(self, state: LedgerState):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            SUCCESS: State was changed
            IGNORED: Rejected by a business rule (locked account, insufficient
                funds, unknown or foreign tx, wrong dispute status); no state changed
        """
        account = self._state.get_or_create_account(transaction.client_id)

        if account.locked:
            logger.debug(f"{transaction}: account {transaction.client_id} is locked")
            return ProcessingResult.IGNORED

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)

    def _has_valid_amount(self, transaction: Transaction) -> bool:
        if transaction.amount is None or transaction.amount < 0:
            logger.debug(f"{transaction}: invalid amount {transaction.amount}")
            return False
        return True

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if not self._has_valid_amount(transaction):
            return ProcessingResult.IGNORED

        account.credit(transaction.amount)
        self._state.record_transaction(transaction)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if not self._has_valid_amount(transaction):
            return ProcessingResult.IGNORED

        if account.available < transaction.amount:
            logger.debug(f"{transaction}: insufficient funds (available {account.available})")
            return ProcessingResult.IGNORED

        account.debit(transaction.amount)
        # Withdrawals are recorded too, so they can be disputed like deposits.
        self._state.record_transaction(transaction)
        return ProcessingResult.SUCCESS

    def _find_owned_entry(self, transaction: Transaction) -> Optional[HistoryEntry]:
        """Look up the referenced transaction, rejecting unknown ids and other clients' ids."""
        entry = self._state.get_history_entry(transaction.transaction_id)

        if entry is None:
            logger.debug(f"{transaction}: referenced transaction not found")
            return None

        if entry.client_id != transaction.client_id:
            logger.debug(f"{transaction}: referenced transaction belongs to client {entry.client_id}")
            return None

        return entry

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        entry = self._find_owned_entry(transaction)
        if entry is None:
            return ProcessingResult.IGNORED

        if entry.disputed:
            logger.debug(f"{transaction}: transaction already disputed")
            return ProcessingResult.IGNORED

        account.hold(entry.amount)
        entry.disputed = True
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        entry = self._find_owned_entry(transaction)
        if entry is None:
            return ProcessingResult.IGNORED

        if not entry.disputed:
            logger.debug(f"{transaction}: transaction is not disputed")
            return ProcessingResult.IGNORED

        account.release_hold(entry.amount)
        entry.disputed = False
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        entry = self._find_owned_entry(transaction)
        if entry is None:
            return ProcessingResult.IGNORED

        if not entry.disputed:
            logger.debug(f"{transaction}: transaction is not disputed")
            return ProcessingResult.IGNORED

        # The entry stays disputed; the account lock makes it inert.
        account.charge_back(entry.amount)
        return ProcessingResult.SUCCESS


def process_transactions(
    transactions: Iterable[Transaction],
    state: Optional[LedgerState] = None,
) -> Dict[int, ClientAccount]:
    """Replay transactions in order and return the final account of every client referenced."""
    if state is None:
        state = LedgerState()
    processor = TransactionProcessor(state)
    for transaction in transactions:
        processor.process_transaction(transaction)
    return state.get_all_accounts()
