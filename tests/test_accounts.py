import pytest
from decimal import Decimal
from pydantic import ValidationError

from models import Account, AccountSnapshot, Transaction, TransactionKind


@pytest.fixture
def account():
    return Account(id=1)


class TestAccountDefaults:
    """Test a freshly opened account."""

    def test_new_account_is_empty(self, account):
        """Test new account is empty."""
        assert account.id == 1
        assert account.available == Decimal(0)
        assert account.held == Decimal(0)
        assert account.total == Decimal(0)
        assert account.locked is False

    def test_custom_account(self):
        """Test custom account."""
        account = Account(id=7, available=Decimal("53454.3654"), held=Decimal("12.5"), locked=False)

        assert account.available == Decimal("53454.3654")
        assert account.held == Decimal("12.5")
        assert account.total == Decimal("53466.8654")

    def test_client_id_out_of_range(self):
        """Test client id out of range."""
        with pytest.raises(ValidationError):
            Account(id=70000)


class TestAccountOperations:
    """Test balance movements on a single account."""

    def test_deposit(self, account):
        """Test deposit."""
        account.deposit(Decimal("125.2563"))
        assert str(account.available) == "125.2563"

        account.deposit(Decimal("125.2563"))
        assert str(account.available) == "250.5126"

    def test_withdraw(self, account):
        """Test withdraw."""
        account.deposit(Decimal("125.2563"))
        account.deposit(Decimal("125.2563"))

        assert account.withdraw(Decimal("100")) is True
        assert str(account.available) == "150.5126"

    def test_withdraw_insufficient_funds(self, account):
        """Test withdraw insufficient funds."""
        account.deposit(Decimal("10"))

        assert account.withdraw(Decimal("10.0001")) is False
        assert account.available == Decimal("10")

    def test_withdraw_entire_balance(self, account):
        """Test withdraw entire balance."""
        account.deposit(Decimal("10"))

        assert account.withdraw(Decimal("10")) is True
        assert account.available == Decimal(0)

    def test_dispute(self, account):
        """Test dispute."""
        account.deposit(Decimal("225.2563"))

        assert account.dispute(Decimal("100")) is True
        assert str(account.available) == "125.2563"
        assert str(account.held) == "100"
        assert str(account.total) == "225.2563"

    def test_dispute_more_than_available(self, account):
        """Test dispute more than available."""
        account.deposit(Decimal("50"))

        assert account.dispute(Decimal("100")) is False
        assert account.available == Decimal("50")
        assert account.held == Decimal(0)

    def test_resolve(self, account):
        """Test resolve."""
        account.deposit(Decimal("125.2563"))
        account.dispute(Decimal("100"))

        assert account.resolve(Decimal("50")) is True
        assert str(account.available) == "75.2563"
        assert str(account.held) == "50"

    def test_resolve_more_than_held(self, account):
        """Test resolve more than held."""
        account.deposit(Decimal("100"))
        account.dispute(Decimal("40"))

        assert account.resolve(Decimal("41")) is False
        assert account.available == Decimal("60")
        assert account.held == Decimal("40")

    def test_chargeback(self, account):
        """Test chargeback."""
        account.deposit(Decimal("125.2563"))
        account.dispute(Decimal("100"))

        assert account.chargeback(Decimal("50")) is True
        assert str(account.available) == "25.2563"
        assert str(account.held) == "50"
        assert str(account.total) == "75.2563"
        assert account.locked is True

    def test_failed_chargeback_does_not_lock(self, account):
        """Test failed chargeback does not lock."""
        account.deposit(Decimal("100"))

        assert account.chargeback(Decimal("1")) is False
        assert account.locked is False
        assert account.available == Decimal("100")

    def test_snapshot(self, account):
        """Test snapshot."""
        account.deposit(Decimal("10.5"))
        account.dispute(Decimal("0.5"))

        snapshot = account.snapshot()

        assert snapshot == AccountSnapshot(
            client=1,
            available=Decimal("10.0"),
            held=Decimal("0.5"),
            total=Decimal("10.5"),
            locked=False
        )


class TestTransactionValidation:
    """Test parsing of raw transaction records."""

    def test_parse_deposit(self):
        """Test parse deposit."""
        transaction = Transaction.model_validate(
            {"type": "deposit", "client": "1", "tx": "1", "amount": "1.5"}
        )

        assert transaction.kind is TransactionKind.deposit
        assert transaction.client_id == 1
        assert transaction.transaction_id == 1
        assert transaction.amount == Decimal("1.5")
        assert transaction.success is False

    def test_kind_is_case_insensitive(self):
        """Test kind is case insensitive."""
        transaction = Transaction.model_validate(
            {"type": " Withdrawal ", "client": "2", "tx": "9", "amount": "3"}
        )
        assert transaction.kind is TransactionKind.withdrawal

    def test_dispute_without_amount(self):
        """Test dispute without amount."""
        transaction = Transaction.model_validate({"type": "dispute", "client": "1", "tx": "1", "amount": ""})
        assert transaction.amount == Decimal(0)

        transaction = Transaction.model_validate({"type": "chargeback", "client": "1", "tx": "1"})
        assert transaction.amount == Decimal(0)

    @pytest.mark.parametrize("kind", ["deposit", "withdrawal"])
    def test_amount_required_for_funds_movement(self, kind):
        """Test amount required for funds movement."""
        with pytest.raises(ValidationError):
            Transaction.model_validate({"type": kind, "client": "1", "tx": "1", "amount": " "})

    @pytest.mark.parametrize("record", [
        {"type": "refund", "client": "1", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "65536", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "-1", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "1", "tx": "4294967296", "amount": "1"},
        {"type": "deposit", "client": "1", "tx": "1", "amount": "-5"},
        {"type": "deposit", "client": "1", "tx": "1", "amount": "1.00001"},
        {"type": "deposit", "client": "1", "tx": "1", "amount": "abc"},
        {"type": "deposit", "client": "one", "tx": "1", "amount": "1"},
    ])
    def test_malformed_records(self, record):
        """Test malformed records."""
        with pytest.raises(ValidationError):
            Transaction.model_validate(record)

    def test_construct_by_field_name(self):
        """Test construct by field name."""
        transaction = Transaction(
            kind=TransactionKind.resolve, client_id=3, transaction_id=8, amount=Decimal(0)
        )
        assert transaction.kind is TransactionKind.resolve
        assert transaction.client_id == 3

    def test_kinds_that_move_funds(self):
        """Test kinds that move funds."""
        assert TransactionKind.deposit.moves_funds
        assert TransactionKind.withdrawal.moves_funds
        assert not TransactionKind.dispute.moves_funds
        assert not TransactionKind.resolve.moves_funds
        assert not TransactionKind.chargeback.moves_funds
