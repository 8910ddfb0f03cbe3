from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum
from typing import Optional
from decimal import Decimal


CLIENT_ID_MAX = 2**16 - 1
TRANSACTION_ID_MAX = 2**32 - 1
AMOUNT_DECIMAL_PLACES = 4


class TransactionKind(str, Enum):
    deposit = "deposit"
    withdrawal = "withdrawal"
    dispute = "dispute"
    resolve = "resolve"
    chargeback = "chargeback"

    @property
    def moves_funds(self) -> bool:
        """Deposits and withdrawals carry an amount and are kept for later disputes."""
        return self in (TransactionKind.deposit, TransactionKind.withdrawal)


class TransactionOutcome(str, Enum):
    applied = "applied"
    insufficient_funds = "insufficient_funds"
    account_locked = "account_locked"
    unknown_reference = "unknown_reference"


class Transaction(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: TransactionKind = Field(..., alias="type", description="Transaction kind")
    client_id: int = Field(
        ...,
        alias="client",
        ge=0,
        le=CLIENT_ID_MAX,
        description="Client account identifier"
    )
    transaction_id: int = Field(
        ...,
        alias="tx",
        ge=0,
        le=TRANSACTION_ID_MAX,
        description="Globally unique transaction identifier"
    )
    amount: Optional[Decimal] = Field(
        None,
        ge=0,
        decimal_places=AMOUNT_DECIMAL_PLACES,
        description="Amount moved; only meaningful for deposits and withdrawals"
    )
    success: bool = Field(False, exclude=True, description="Set by the processor after execution")

    @field_validator('kind', mode='before')
    @classmethod
    def normalize_kind(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator('client_id', 'transaction_id', 'amount', mode='before')
    @classmethod
    def strip_blank(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
        return v

    @model_validator(mode='after')
    def validate_amount_for_kind(self):
        if self.kind.moves_funds:
            if self.amount is None:
                raise ValueError(f'{self.kind.value} transactions require an amount')
        elif self.amount is None:
            self.amount = Decimal(0)
        return self


class AccountSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    client: int = Field(..., description="Client identifier")
    available: Decimal = Field(..., description="Funds available for withdrawal")
    held: Decimal = Field(..., description="Funds held by open disputes")
    total: Decimal = Field(..., description="available + held")
    locked: bool = Field(..., description="Whether the account was frozen by a chargeback")


class Account(BaseModel):
    """Balance state for one client.

    The boolean operations leave the account untouched and return False when
    the balance they draw from is too small. Callers check ``locked`` before
    calling any of them.
    """

    id: int = Field(..., ge=0, le=CLIENT_ID_MAX)
    available: Decimal = Decimal(0)
    held: Decimal = Decimal(0)
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def deposit(self, amount: Decimal) -> None:
        self.available += amount

    def withdraw(self, amount: Decimal) -> bool:
        if self.available < amount:
            return False
        self.available -= amount
        return True

    def dispute(self, amount: Decimal) -> bool:
        if self.available < amount:
            return False
        self.available -= amount
        self.held += amount
        return True

    def resolve(self, amount: Decimal) -> bool:
        if self.held < amount:
            return False
        self.held -= amount
        self.available += amount
        return True

    def chargeback(self, amount: Decimal) -> bool:
        if self.held < amount:
            return False
        self.held -= amount
        self.locked = True
        return True

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            client=self.id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked
        )
