"""Pydantic schemas validating transaction records at the boundary."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from ..models import AccountRecord, Side, Transaction


class TransactionRecordSchema(BaseModel):
    id: int
    account_id: str = Field(..., min_length=1, examples=["A1"])
    date: date
    instrument: str = Field(..., examples=["XYZ"])
    side: Side
    quantity: Decimal
    price: Decimal
    brokerage: Decimal = Decimal("0")
    trade_value: Decimal | None = None
    source: str | None = None
    order_ref: str | None = None
    remarks: str | None = None

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "account_id": "A1",
                "date": "2024-01-01",
                "instrument": "XYZ",
                "side": "Buy",
                "quantity": "10",
                "price": "100",
                "brokerage": "10",
                "trade_value": "1000",
                "source": "manual",
                "order_ref": None,
                "remarks": "Initial position",
            }
        }

    @field_validator("instrument")
    @classmethod
    def _normalize_instrument(cls, value: str) -> str:
        normalized = value.strip().upper()
        if not normalized:
            raise ValueError("instrument must not be empty")
        return normalized

    @field_validator("side", mode="before")
    @classmethod
    def _parse_side(cls, value: object) -> Side:
        return Side.parse(value)  # type: ignore[arg-type]

    @field_validator("quantity", "price")
    @classmethod
    def _positive(cls, value: Decimal) -> Decimal:
        if value <= 0:
            raise ValueError("must be > 0")
        return value

    @field_validator("brokerage")
    @classmethod
    def _non_negative(cls, value: Decimal) -> Decimal:
        if value < 0:
            raise ValueError("must be >= 0")
        return value

    def to_transaction(self) -> Transaction:
        return Transaction(
            id=self.id,
            account_id=self.account_id,
            date=self.date,
            instrument=self.instrument,
            side=self.side,
            quantity=self.quantity,
            price=self.price,
            brokerage=self.brokerage,
            trade_value=self.trade_value,
            source=self.source,
            order_ref=self.order_ref,
            remarks=self.remarks,
        )


class AccountRecordSchema(BaseModel):
    id: str = Field(..., min_length=1)
    name: str
    active: bool = True

    def to_record(self) -> AccountRecord:
        return AccountRecord(id=self.id, name=self.name, active=self.active)


__all__ = ["AccountRecordSchema", "TransactionRecordSchema"]
