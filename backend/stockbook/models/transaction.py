"""Immutable transaction and account records consumed by the engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from decimal import Decimal


class MalformedTransactionError(ValueError):
    """Raised when a transaction violates the engine's input preconditions."""

    def __init__(self, message: str, *, transaction_id: int | None = None):
        super().__init__(message)
        self.transaction_id = transaction_id


class Side(str, enum.Enum):
    BUY = "Buy"
    SELL = "Sell"

    @classmethod
    def parse(cls, value: "Side | str") -> "Side":
        """Return the side for ``value`` regardless of its case."""

        if isinstance(value, Side):
            return value
        normalized = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        raise MalformedTransactionError(f"Unknown transaction side: {value!r}")


@dataclass(frozen=True)
class Transaction:
    """A recorded buy or sell of one instrument in one account."""

    id: int
    account_id: str
    date: date
    instrument: str
    side: Side
    quantity: Decimal
    price: Decimal
    brokerage: Decimal = Decimal("0")
    trade_value: Decimal | None = None
    source: str | None = None
    order_ref: str | None = None
    remarks: str | None = None

    @property
    def gross_value(self) -> Decimal:
        """Return ``quantity * price``; the persisted trade value may be stale."""

        return self.quantity * self.price

    @property
    def is_buy(self) -> bool:
        return self.side is Side.BUY

    @property
    def is_sell(self) -> bool:
        return self.side is Side.SELL

    def validate(self) -> None:
        if not isinstance(self.side, Side):
            raise MalformedTransactionError(
                f"Transaction {self.id} has unknown side {self.side!r}", transaction_id=self.id
            )
        if self.quantity <= 0:
            raise MalformedTransactionError(
                f"Transaction {self.id} quantity must be > 0", transaction_id=self.id
            )
        if self.price <= 0:
            raise MalformedTransactionError(
                f"Transaction {self.id} price must be > 0", transaction_id=self.id
            )
        if self.brokerage < 0:
            raise MalformedTransactionError(
                f"Transaction {self.id} brokerage must be >= 0", transaction_id=self.id
            )


@dataclass(frozen=True)
class AccountRecord:
    """Account metadata joined in by callers for display."""

    id: str
    name: str
    active: bool = True


__all__ = [
    "AccountRecord",
    "MalformedTransactionError",
    "Side",
    "Transaction",
]
