from typing import Dict, Optional

from models import ClientAccount, HistoryEntry, Transaction


class LedgerState:
    """
    Owns the two tables a ledger run mutates: client accounts, and the
    history of amount-bearing transactions kept for dispute lookups.
    """

    def __init__(self):
        self.accounts: Dict[int, ClientAccount] = {}
        self.history: Dict[int, HistoryEntry] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        account = self.accounts.get(client_id)
        if account is None:
            account = ClientAccount(client_id=client_id)
            self.accounts[client_id] = account
        return account

    def record_transaction(self, transaction: Transaction) -> None:
        """Store transaction for future dispute lookups. A reused id overwrites the earlier entry."""
        self.history[transaction.transaction_id] = HistoryEntry(
            client_id=transaction.client_id,
            amount=transaction.amount,
        )

    def get_history_entry(self, transaction_id: int) -> Optional[HistoryEntry]:
        """Retrieve stored transaction by ID."""
        return self.history.get(transaction_id)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self.accounts)
