"""Open-position holdings built from FIFO remaining lots."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from ..models import AccountScope, Transaction
from .grouping import group_transactions, select_transactions
from .lot_matcher import OpenLot, Shortfall, match_lots
from .rounding import ZERO, round2, safe_div, sum_rounded


@dataclass(frozen=True)
class AccountHolding:
    account_id: str
    instrument: str
    remaining_quantity: Decimal
    average_cost: Decimal
    buy_quantity: Decimal
    sell_quantity: Decimal
    total_buy_value: Decimal
    total_brokerage: Decimal
    investment: Decimal
    unmatched_sell_quantity: Decimal
    lots: tuple[OpenLot, ...]


@dataclass(frozen=True)
class StockHolding:
    instrument: str
    remaining_quantity: Decimal
    average_cost: Decimal
    buy_quantity: Decimal
    sell_quantity: Decimal
    total_buy_value: Decimal
    total_brokerage: Decimal
    investment: Decimal
    accounts: tuple[AccountHolding, ...]


@dataclass(frozen=True)
class HoldingsView:
    stocks: tuple[StockHolding, ...] = ()
    total_investment: Decimal = ZERO
    total_brokerage: Decimal = ZERO
    position_count: int = 0
    shortfalls: tuple[Shortfall, ...] = ()

    def find(self, instrument: str) -> StockHolding | None:
        symbol = instrument.strip().upper()
        for stock in self.stocks:
            if stock.instrument == symbol:
                return stock
        return None


def _account_holding(
    account_id: str,
    instrument: str,
    transactions: list[Transaction],
    intraday_lifo: bool,
) -> tuple[AccountHolding, tuple[Shortfall, ...], bool]:
    result = match_lots(transactions, intraday_lifo=intraday_lifo)
    open_lots = sorted(result.open_lots, key=lambda lot: (lot.date, lot.transaction_id), reverse=True)
    buys = [tx for tx in transactions if tx.is_buy]
    sells = [tx for tx in transactions if tx.is_sell]

    # Unrounded: lots may be smaller than a cent.
    remaining = result.remaining_quantity
    investment = sum_rounded(round2(lot.remaining_value) for lot in open_lots)
    holding = AccountHolding(
        account_id=account_id,
        instrument=instrument,
        remaining_quantity=round2(remaining),
        average_cost=round2(safe_div(investment, remaining)),
        buy_quantity=round2(sum((tx.quantity for tx in buys), ZERO)),
        sell_quantity=round2(sum((tx.quantity for tx in sells), ZERO)),
        total_buy_value=sum_rounded(round2(tx.gross_value) for tx in buys),
        total_brokerage=sum_rounded(tx.brokerage for tx in transactions),
        investment=investment,
        unmatched_sell_quantity=round2(sum((s.unmatched_quantity for s in result.shortfalls), ZERO)),
        lots=tuple(open_lots),
    )
    return holding, result.shortfalls, remaining > 0


def _stock_holding(instrument: str, accounts: list[AccountHolding]) -> StockHolding:
    accounts = sorted(accounts, key=lambda a: a.account_id)
    remaining = sum((lot.remaining_quantity for a in accounts for lot in a.lots), ZERO)
    investment = sum_rounded(a.investment for a in accounts)
    return StockHolding(
        instrument=instrument,
        remaining_quantity=round2(remaining),
        average_cost=round2(safe_div(investment, remaining)),
        buy_quantity=sum_rounded(a.buy_quantity for a in accounts),
        sell_quantity=sum_rounded(a.sell_quantity for a in accounts),
        total_buy_value=sum_rounded(a.total_buy_value for a in accounts),
        total_brokerage=sum_rounded(a.total_brokerage for a in accounts),
        investment=investment,
        accounts=tuple(accounts),
    )


def compute_holdings(
    transactions: Iterable[Transaction],
    scope: AccountScope | None = None,
    *,
    instrument: str | None = None,
    intraday_lifo: bool = True,
) -> HoldingsView:
    """Return open positions per instrument and account for ``scope``.

    Fully closed (account, instrument) groups are left out; openness is judged
    on unrounded lot quantities. Money totals of a stock are the rounded sums of
    its account rows. Quantities are summed exactly and rounded once.
    """

    selected = select_transactions(transactions, scope, instrument=instrument)
    by_instrument: dict[str, list[AccountHolding]] = {}
    shortfalls: list[Shortfall] = []
    for (account_id, symbol), group in group_transactions(selected).items():
        holding, group_shortfalls, is_open = _account_holding(account_id, symbol, group, intraday_lifo)
        shortfalls.extend(group_shortfalls)
        if not is_open:
            continue
        by_instrument.setdefault(symbol, []).append(holding)

    stocks = [_stock_holding(symbol, accounts) for symbol, accounts in by_instrument.items()]
    stocks.sort(key=lambda s: s.instrument)
    return HoldingsView(
        stocks=tuple(stocks),
        total_investment=sum_rounded(s.investment for s in stocks),
        total_brokerage=sum_rounded(s.total_brokerage for s in stocks),
        position_count=sum(len(s.accounts) for s in stocks),
        shortfalls=tuple(sorted(shortfalls, key=lambda s: (s.date, s.sell_id))),
    )


__all__ = [
    "AccountHolding",
    "HoldingsView",
    "StockHolding",
    "compute_holdings",
]
