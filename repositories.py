from abc import ABC, abstractmethod
from typing import Dict, List, Optional
import structlog

from models import Account, AccountSnapshot, Transaction

logger = structlog.get_logger()


class LedgerRepository(ABC):
    @abstractmethod
    def get_or_create_account(self, client_id: int) -> Account:
        """Get the account for a client, opening an empty one if it doesn't exist."""
        pass

    @abstractmethod
    def get_account(self, client_id: int) -> Optional[Account]:
        """Get account. Returns None if the client was never seen."""
        pass

    @abstractmethod
    def save_transaction(self, transaction: Transaction) -> None:
        """Store a deposit or withdrawal so later disputes can reference it."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get stored transaction by id. Returns None if it was never stored."""
        pass

    @abstractmethod
    def snapshot_accounts(self) -> List[AccountSnapshot]:
        """Get a read-only view of every known account."""
        pass

    @abstractmethod
    def accounts_count(self) -> int:
        pass

    @abstractmethod
    def transactions_count(self) -> int:
        pass


class InMemoryLedger(LedgerRepository):
    def __init__(self):
        self.accounts: Dict[int, Account] = {}
        self.transactions: Dict[int, Transaction] = {}

    def get_or_create_account(self, client_id: int) -> Account:
        account = self.accounts.get(client_id)
        if account is None:
            account = Account(id=client_id)
            self.accounts[client_id] = account
            logger.debug("Account opened", client_id=client_id)
        return account

    def get_account(self, client_id: int) -> Optional[Account]:
        return self.accounts.get(client_id)

    def save_transaction(self, transaction: Transaction) -> None:
        # Last write wins on a repeated id
        if transaction.transaction_id in self.transactions:
            logger.debug(
                "Overwriting stored transaction",
                transaction_id=transaction.transaction_id,
                kind=transaction.kind.value
            )
        self.transactions[transaction.transaction_id] = transaction

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self.transactions.get(transaction_id)

    def snapshot_accounts(self) -> List[AccountSnapshot]:
        return [self.accounts[client_id].snapshot() for client_id in sorted(self.accounts)]

    def accounts_count(self) -> int:
        return len(self.accounts)

    def transactions_count(self) -> int:
        return len(self.transactions)
