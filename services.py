from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, assert_never
from decimal import Decimal
import structlog

from models import Account, Transaction, TransactionKind, TransactionOutcome
from repositories import LedgerRepository

logger = structlog.get_logger()


class TransactionProcessor:
    """Apply transaction records to a ledger, one at a time.

    Deposits and withdrawals are stored in the ledger so that disputes,
    resolves and chargebacks can find them later by transaction id. The
    dispute-kind records take their amount from the stored record, never
    from their own amount column.

    Nothing here raises for a rejected transaction. A locked account, an
    unknown reference or a balance too small for the operation all leave the
    ledger untouched and are reported through the returned outcome.
    """

    def execute(self, transaction: Transaction, ledger: LedgerRepository) -> TransactionOutcome:
        kind = transaction.kind

        if kind is TransactionKind.deposit:
            outcome = self._process_deposit(transaction, ledger)
        elif kind is TransactionKind.withdrawal:
            outcome = self._process_withdrawal(transaction, ledger)
        elif kind is TransactionKind.dispute:
            outcome = self._process_reference(transaction, ledger, Account.dispute)
        elif kind is TransactionKind.resolve:
            outcome = self._process_reference(transaction, ledger, Account.resolve)
        elif kind is TransactionKind.chargeback:
            outcome = self._process_reference(transaction, ledger, Account.chargeback)
        else:
            assert_never(kind)

        logger.debug(
            "Transaction processed",
            kind=kind.value,
            client_id=transaction.client_id,
            transaction_id=transaction.transaction_id,
            outcome=outcome.value
        )
        return outcome

    def _process_deposit(self, transaction: Transaction, ledger: LedgerRepository) -> TransactionOutcome:
        account = ledger.get_or_create_account(transaction.client_id)
        if account.locked:
            return TransactionOutcome.account_locked

        account.deposit(transaction.amount)
        transaction.success = True
        ledger.save_transaction(transaction)
        return TransactionOutcome.applied

    def _process_withdrawal(self, transaction: Transaction, ledger: LedgerRepository) -> TransactionOutcome:
        account = ledger.get_or_create_account(transaction.client_id)
        if account.locked:
            return TransactionOutcome.account_locked

        transaction.success = account.withdraw(transaction.amount)
        # Stored even when it failed, with success=False
        ledger.save_transaction(transaction)
        if not transaction.success:
            return TransactionOutcome.insufficient_funds
        return TransactionOutcome.applied

    def _process_reference(
        self,
        transaction: Transaction,
        ledger: LedgerRepository,
        operation: Callable[[Account, Decimal], bool]
    ) -> TransactionOutcome:
        referenced = ledger.get_transaction(transaction.transaction_id)
        account = ledger.get_or_create_account(transaction.client_id)
        if account.locked:
            return TransactionOutcome.account_locked
        if referenced is None:
            return TransactionOutcome.unknown_reference

        transaction.success = operation(account, referenced.amount)
        if not transaction.success:
            return TransactionOutcome.insufficient_funds
        return TransactionOutcome.applied


@dataclass
class ReplaySummary:
    processed: int = 0
    outcomes: Counter = field(default_factory=Counter)

    def record(self, outcome: TransactionOutcome) -> None:
        self.processed += 1
        self.outcomes[outcome] += 1

    @property
    def applied(self) -> int:
        return self.outcomes[TransactionOutcome.applied]

    @property
    def rejected(self) -> int:
        return self.processed - self.applied


def replay(
    source: Iterable[Transaction],
    ledger: LedgerRepository,
    processor: Optional[TransactionProcessor] = None
) -> ReplaySummary:
    """Run every record from ``source`` through the processor, in input order."""
    processor = processor or TransactionProcessor()
    summary = ReplaySummary()

    for transaction in source:
        summary.record(processor.execute(transaction, ledger))

    logger.info(
        "Replay finished",
        processed=summary.processed,
        applied=summary.applied,
        rejected=summary.rejected,
        accounts=ledger.accounts_count(),
        stored_transactions=ledger.transactions_count()
    )
    return summary
