"""Sell-to-buy lot matching: FIFO across days, LIFO within the sell's day.

One call handles one (account, instrument) group. Buys are ordered by
``(date, id)``. Each sell first consumes buys dated on the same calendar day,
newest entry (highest id) first, then falls back to older buys oldest first.
Whatever a sell cannot match is reported as a :class:`Shortfall` instead of
being absorbed or matched against an invented zero-cost lot.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from ..models import Transaction
from .rounding import ZERO, percent, round2

DEFAULT_LONG_TERM_DAYS = 365


class PnLClass(str, enum.Enum):
    LONG_TERM = "long_term"
    SHORT_TERM = "short_term"
    INTRADAY = "intraday"


@dataclass(frozen=True)
class OpenLot:
    """A buy transaction with the quantity no sell has consumed yet."""

    transaction_id: int
    account_id: str
    instrument: str
    date: date
    price: Decimal
    brokerage: Decimal
    original_quantity: Decimal
    remaining_quantity: Decimal
    source: str | None = None
    order_ref: str | None = None
    remarks: str | None = None

    @property
    def consumed_quantity(self) -> Decimal:
        return self.original_quantity - self.remaining_quantity

    @property
    def is_open(self) -> bool:
        return self.remaining_quantity > 0

    @property
    def remaining_value(self) -> Decimal:
        return self.remaining_quantity * self.price


@dataclass(frozen=True)
class Match:
    sell_id: int
    buy_id: int
    account_id: str
    instrument: str
    sell_date: date
    buy_date: date
    matched_quantity: Decimal
    buy_price: Decimal
    sell_price: Decimal
    cost_basis: Decimal
    proceeds: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal
    holding_days: int
    is_long_term: bool
    is_intraday: bool

    @property
    def classification(self) -> PnLClass:
        if self.is_intraday:
            return PnLClass.INTRADAY
        if self.is_long_term:
            return PnLClass.LONG_TERM
        return PnLClass.SHORT_TERM


@dataclass(frozen=True)
class Shortfall:
    """Sell quantity left over once every eligible buy was consumed."""

    sell_id: int
    account_id: str
    instrument: str
    date: date
    quantity: Decimal
    matched_quantity: Decimal
    unmatched_quantity: Decimal


@dataclass(frozen=True)
class MatchResult:
    matches: tuple[Match, ...] = ()
    lots: tuple[OpenLot, ...] = ()
    shortfalls: tuple[Shortfall, ...] = ()

    @property
    def open_lots(self) -> tuple[OpenLot, ...]:
        return tuple(lot for lot in self.lots if lot.is_open)

    @property
    def remaining_quantity(self) -> Decimal:
        return sum((lot.remaining_quantity for lot in self.lots), ZERO)

    @property
    def matched_quantity(self) -> Decimal:
        return sum((match.matched_quantity for match in self.matches), ZERO)

    def matches_for(self, sell_id: int) -> tuple[Match, ...]:
        return tuple(match for match in self.matches if match.sell_id == sell_id)

    def shortfall_for(self, sell_id: int) -> Shortfall | None:
        for shortfall in self.shortfalls:
            if shortfall.sell_id == sell_id:
                return shortfall
        return None


@dataclass
class _BuySlot:
    tx: Transaction
    remaining: Decimal


def _ordering_key(tx: Transaction) -> tuple[date, int]:
    return (tx.date, tx.id)


def _candidates(buys: Sequence[_BuySlot], sell: Transaction, intraday_lifo: bool) -> list[_BuySlot]:
    same_day = [slot for slot in buys if slot.tx.date == sell.date]
    earlier = [slot for slot in buys if slot.tx.date < sell.date]
    if intraday_lifo:
        return list(reversed(same_day)) + earlier
    return earlier + same_day


def _build_match(sell: Transaction, buy: Transaction, quantity: Decimal, long_term_days: int) -> Match:
    cost_basis = round2(quantity * buy.price + buy.brokerage * quantity / buy.quantity)
    proceeds = round2(quantity * sell.price - sell.brokerage * quantity / sell.quantity)
    profit_loss = proceeds - cost_basis
    holding_days = abs((sell.date - buy.date).days)
    return Match(
        sell_id=sell.id,
        buy_id=buy.id,
        account_id=sell.account_id,
        instrument=sell.instrument,
        sell_date=sell.date,
        buy_date=buy.date,
        matched_quantity=quantity,
        buy_price=buy.price,
        sell_price=sell.price,
        cost_basis=cost_basis,
        proceeds=proceeds,
        profit_loss=profit_loss,
        profit_loss_percent=percent(profit_loss, cost_basis),
        holding_days=holding_days,
        is_long_term=holding_days >= long_term_days,
        is_intraday=buy.date == sell.date,
    )


def _to_open_lot(slot: _BuySlot) -> OpenLot:
    tx = slot.tx
    return OpenLot(
        transaction_id=tx.id,
        account_id=tx.account_id,
        instrument=tx.instrument,
        date=tx.date,
        price=tx.price,
        brokerage=tx.brokerage,
        original_quantity=tx.quantity,
        remaining_quantity=slot.remaining,
        source=tx.source,
        order_ref=tx.order_ref,
        remarks=tx.remarks,
    )


def match_lots(
    transactions: Iterable[Transaction],
    *,
    intraday_lifo: bool = True,
    long_term_days: int = DEFAULT_LONG_TERM_DAYS,
    validate: bool = True,
) -> MatchResult:
    """Match every sell of one (account, instrument) group against its buys.

    ``intraday_lifo=False`` gives the plain FIFO variant used by the summary
    book, where same-day buys simply queue behind older ones. ``validate``
    may be switched off by callers that already validated at the boundary.
    """

    ordered = sorted(transactions, key=_ordering_key)
    if not ordered:
        return MatchResult()
    groups = {(tx.account_id, tx.instrument) for tx in ordered}
    if len(groups) > 1:
        raise ValueError("match_lots expects transactions for a single account and instrument")
    if validate:
        for tx in ordered:
            tx.validate()

    buys = [_BuySlot(tx=tx, remaining=tx.quantity) for tx in ordered if tx.is_buy]
    matches: list[Match] = []
    shortfalls: list[Shortfall] = []

    for sell in (tx for tx in ordered if tx.is_sell):
        outstanding = sell.quantity
        for slot in _candidates(buys, sell, intraday_lifo):
            if outstanding <= 0:
                break
            if slot.remaining <= 0:
                continue
            take = min(outstanding, slot.remaining)
            slot.remaining -= take
            outstanding -= take
            matches.append(_build_match(sell, slot.tx, take, long_term_days))
        if outstanding > 0:
            shortfalls.append(
                Shortfall(
                    sell_id=sell.id,
                    account_id=sell.account_id,
                    instrument=sell.instrument,
                    date=sell.date,
                    quantity=sell.quantity,
                    matched_quantity=sell.quantity - outstanding,
                    unmatched_quantity=outstanding,
                )
            )

    return MatchResult(
        matches=tuple(matches),
        lots=tuple(_to_open_lot(slot) for slot in buys),
        shortfalls=tuple(shortfalls),
    )


__all__ = [
    "DEFAULT_LONG_TERM_DAYS",
    "Match",
    "MatchResult",
    "OpenLot",
    "PnLClass",
    "Shortfall",
    "match_lots",
]
