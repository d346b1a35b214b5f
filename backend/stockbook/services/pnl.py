"""Realized profit/loss rolled up from sell-level lot matches."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Sequence

from ..models import AccountScope, DateRange, Transaction
from .grouping import group_transactions, select_transactions
from .lot_matcher import DEFAULT_LONG_TERM_DAYS, Match, PnLClass, Shortfall, match_lots
from .rounding import ZERO, percent, round2, safe_div, sum_rounded


class PnLSortKey(str, enum.Enum):
    PROFIT_LOSS = "profit_loss"
    PROFIT_LOSS_PERCENT = "profit_loss_percent"
    SELL_VALUE = "sell_value"
    COST_BASIS = "cost_basis"
    INSTRUMENT = "instrument"


@dataclass(frozen=True)
class ClassTotals:
    matched_quantity: Decimal = ZERO
    sell_value: Decimal = ZERO
    cost_basis: Decimal = ZERO
    profit_loss: Decimal = ZERO
    profit_loss_percent: Decimal = ZERO


@dataclass(frozen=True)
class SellPnL:
    sell_id: int
    account_id: str
    instrument: str
    date: date
    quantity: Decimal
    matched_quantity: Decimal
    unmatched_quantity: Decimal
    sell_price: Decimal
    sell_value: Decimal
    cost_basis: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal
    long_term_pnl: Decimal
    short_term_pnl: Decimal
    intraday_pnl: Decimal
    matches: tuple[Match, ...]


@dataclass(frozen=True)
class AccountPnL:
    account_id: str
    instrument: str
    sold_quantity: Decimal
    sell_value: Decimal
    cost_basis: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal
    sells: tuple[SellPnL, ...]


@dataclass(frozen=True)
class StockPnL:
    instrument: str
    sold_quantity: Decimal
    sell_value: Decimal
    cost_basis: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal
    accounts: tuple[AccountPnL, ...]


@dataclass(frozen=True)
class PnLView:
    stocks: tuple[StockPnL, ...] = ()
    sold_quantity: Decimal = ZERO
    sell_value: Decimal = ZERO
    cost_basis: Decimal = ZERO
    profit_loss: Decimal = ZERO
    profit_loss_percent: Decimal = ZERO
    long_term: ClassTotals = ClassTotals()
    short_term: ClassTotals = ClassTotals()
    intraday: ClassTotals = ClassTotals()
    shortfalls: tuple[Shortfall, ...] = ()

    @property
    def sells(self) -> tuple[SellPnL, ...]:
        return tuple(sell for stock in self.stocks for account in stock.accounts for sell in account.sells)

    def find(self, instrument: str) -> StockPnL | None:
        symbol = instrument.strip().upper()
        for stock in self.stocks:
            if stock.instrument == symbol:
                return stock
        return None

    def sorted_by(self, key: PnLSortKey | str, descending: bool = True) -> "PnLView":
        return replace(self, stocks=_sort_stocks(self.stocks, PnLSortKey(key), descending))


@dataclass(frozen=True)
class TradingStats:
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: Decimal = ZERO
    gross_profit: Decimal = ZERO
    gross_loss: Decimal = ZERO
    average_win: Decimal = ZERO
    average_loss: Decimal = ZERO
    profit_factor: Decimal = ZERO


@dataclass(frozen=True)
class InstrumentMonthPnL:
    instrument: str
    sold_quantity: Decimal
    profit_loss: Decimal
    sell_count: int


@dataclass(frozen=True)
class MonthlyPnL:
    month: str
    profit_loss: Decimal
    sell_count: int
    profitable_instruments: int
    loss_instruments: int
    instruments: tuple[InstrumentMonthPnL, ...]


def _class_pnl(matches: Iterable[Match], pnl_class: PnLClass) -> Decimal:
    return sum_rounded(m.profit_loss for m in matches if m.classification is pnl_class)


def _class_totals(matches: Sequence[Match], pnl_class: PnLClass) -> ClassTotals:
    selected = [m for m in matches if m.classification is pnl_class]
    cost_basis = sum_rounded(m.cost_basis for m in selected)
    profit_loss = sum_rounded(m.profit_loss for m in selected)
    return ClassTotals(
        matched_quantity=sum_rounded(m.matched_quantity for m in selected),
        sell_value=sum_rounded(m.proceeds for m in selected),
        cost_basis=cost_basis,
        profit_loss=profit_loss,
        profit_loss_percent=percent(profit_loss, cost_basis),
    )


def _sell_pnl(sell: Transaction, matches: tuple[Match, ...], shortfall: Shortfall | None) -> SellPnL:
    cost_basis = sum_rounded(m.cost_basis for m in matches)
    profit_loss = sum_rounded(m.profit_loss for m in matches)
    return SellPnL(
        sell_id=sell.id,
        account_id=sell.account_id,
        instrument=sell.instrument,
        date=sell.date,
        quantity=sell.quantity,
        matched_quantity=sum_rounded(m.matched_quantity for m in matches),
        unmatched_quantity=round2(shortfall.unmatched_quantity) if shortfall else ZERO,
        sell_price=sell.price,
        sell_value=sum_rounded(m.proceeds for m in matches),
        cost_basis=cost_basis,
        profit_loss=profit_loss,
        profit_loss_percent=percent(profit_loss, cost_basis),
        long_term_pnl=_class_pnl(matches, PnLClass.LONG_TERM),
        short_term_pnl=_class_pnl(matches, PnLClass.SHORT_TERM),
        intraday_pnl=_class_pnl(matches, PnLClass.INTRADAY),
        matches=matches,
    )


def _account_pnl(account_id: str, instrument: str, sells: list[SellPnL]) -> AccountPnL:
    sells = sorted(sells, key=lambda s: (s.date, s.sell_id), reverse=True)
    cost_basis = sum_rounded(s.cost_basis for s in sells)
    profit_loss = sum_rounded(s.profit_loss for s in sells)
    return AccountPnL(
        account_id=account_id,
        instrument=instrument,
        sold_quantity=sum_rounded(s.matched_quantity for s in sells),
        sell_value=sum_rounded(s.sell_value for s in sells),
        cost_basis=cost_basis,
        profit_loss=profit_loss,
        profit_loss_percent=percent(profit_loss, cost_basis),
        sells=tuple(sells),
    )


def _stock_pnl(instrument: str, accounts: list[AccountPnL]) -> StockPnL:
    accounts = sorted(accounts, key=lambda a: a.account_id)
    cost_basis = sum_rounded(a.cost_basis for a in accounts)
    profit_loss = sum_rounded(a.profit_loss for a in accounts)
    return StockPnL(
        instrument=instrument,
        sold_quantity=sum_rounded(a.sold_quantity for a in accounts),
        sell_value=sum_rounded(a.sell_value for a in accounts),
        cost_basis=cost_basis,
        profit_loss=profit_loss,
        profit_loss_percent=percent(profit_loss, cost_basis),
        accounts=tuple(accounts),
    )


def _sort_stocks(stocks: Iterable[StockPnL], key: PnLSortKey, descending: bool) -> tuple[StockPnL, ...]:
    ordered = sorted(stocks, key=lambda s: s.instrument)
    if key is PnLSortKey.INSTRUMENT:
        return tuple(reversed(ordered)) if descending else tuple(ordered)
    return tuple(sorted(ordered, key=lambda s: getattr(s, key.value), reverse=descending))


def compute_realized_pnl(
    transactions: Iterable[Transaction],
    scope: AccountScope | None = None,
    *,
    instrument: str | None = None,
    year: int | None = None,
    date_range: DateRange | None = None,
    long_term_days: int = DEFAULT_LONG_TERM_DAYS,
    intraday_lifo: bool = True,
    sort_key: PnLSortKey | str = PnLSortKey.PROFIT_LOSS,
    descending: bool = True,
) -> PnLView:
    """Return realized P/L per instrument, account and sell.

    ``year`` and ``date_range`` select sells by their trade date only; the
    matcher always sees the group's full history so earlier buys still supply
    the cost basis of a sell inside the window.
    """

    sort_key = PnLSortKey(sort_key)
    selected = select_transactions(transactions, scope, instrument=instrument)

    def in_window(tx: Transaction) -> bool:
        if year is not None and tx.date.year != year:
            return False
        if date_range is not None and not date_range.contains(tx.date):
            return False
        return True

    by_instrument: dict[str, list[AccountPnL]] = {}
    all_matches: list[Match] = []
    shortfalls: list[Shortfall] = []
    for (account_id, symbol), group in group_transactions(selected).items():
        result = match_lots(group, intraday_lifo=intraday_lifo, long_term_days=long_term_days)
        sells = [
            _sell_pnl(tx, result.matches_for(tx.id), result.shortfall_for(tx.id))
            for tx in group
            if tx.is_sell and in_window(tx)
        ]
        if not sells:
            continue
        for sell in sells:
            all_matches.extend(sell.matches)
        sell_ids = {sell.sell_id for sell in sells}
        shortfalls.extend(s for s in result.shortfalls if s.sell_id in sell_ids)
        by_instrument.setdefault(symbol, []).append(_account_pnl(account_id, symbol, sells))

    stocks = [_stock_pnl(symbol, accounts) for symbol, accounts in by_instrument.items()]
    cost_basis = sum_rounded(s.cost_basis for s in stocks)
    profit_loss = sum_rounded(s.profit_loss for s in stocks)
    return PnLView(
        stocks=_sort_stocks(stocks, sort_key, descending),
        sold_quantity=sum_rounded(s.sold_quantity for s in stocks),
        sell_value=sum_rounded(s.sell_value for s in stocks),
        cost_basis=cost_basis,
        profit_loss=profit_loss,
        profit_loss_percent=percent(profit_loss, cost_basis),
        long_term=_class_totals(all_matches, PnLClass.LONG_TERM),
        short_term=_class_totals(all_matches, PnLClass.SHORT_TERM),
        intraday=_class_totals(all_matches, PnLClass.INTRADAY),
        shortfalls=tuple(sorted(shortfalls, key=lambda s: (s.date, s.sell_id))),
    )


def compute_trading_stats(view: PnLView) -> TradingStats:
    """Win/loss statistics where each matched sell counts as one trade."""

    trades = [sell for sell in view.sells if sell.matched_quantity > 0]
    wins = [sell.profit_loss for sell in trades if sell.profit_loss > 0]
    losses = [sell.profit_loss for sell in trades if sell.profit_loss < 0]
    gross_profit = sum_rounded(wins)
    gross_loss = abs(sum_rounded(losses))
    average_win = round2(safe_div(gross_profit, Decimal(len(wins))))
    average_loss = round2(safe_div(gross_loss, Decimal(len(losses))))
    return TradingStats(
        total_trades=len(trades),
        winning_trades=len(wins),
        losing_trades=len(losses),
        win_rate=percent(Decimal(len(wins)), Decimal(len(wins) + len(losses))),
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        average_win=average_win,
        average_loss=average_loss,
        profit_factor=round2(safe_div(average_win, average_loss)),
    )


def monthly_breakdown(view: PnLView) -> list[MonthlyPnL]:
    """Group realized P/L by the calendar month of each sell."""

    months: dict[str, dict[str, list[SellPnL]]] = {}
    for sell in view.sells:
        month_key = sell.date.strftime("%Y-%m")
        months.setdefault(month_key, {}).setdefault(sell.instrument, []).append(sell)

    breakdown: list[MonthlyPnL] = []
    for month_key in sorted(months):
        rows = [
            InstrumentMonthPnL(
                instrument=symbol,
                sold_quantity=sum_rounded(s.matched_quantity for s in sells),
                profit_loss=sum_rounded(s.profit_loss for s in sells),
                sell_count=len(sells),
            )
            for symbol, sells in months[month_key].items()
        ]
        rows.sort(key=lambda r: (-abs(r.profit_loss), r.instrument))
        breakdown.append(
            MonthlyPnL(
                month=month_key,
                profit_loss=sum_rounded(r.profit_loss for r in rows),
                sell_count=sum(r.sell_count for r in rows),
                profitable_instruments=sum(1 for r in rows if r.profit_loss > 0),
                loss_instruments=sum(1 for r in rows if r.profit_loss < 0),
                instruments=tuple(rows),
            )
        )
    return breakdown


__all__ = [
    "AccountPnL",
    "ClassTotals",
    "InstrumentMonthPnL",
    "MonthlyPnL",
    "PnLSortKey",
    "PnLView",
    "SellPnL",
    "StockPnL",
    "TradingStats",
    "compute_realized_pnl",
    "compute_trading_stats",
    "monthly_breakdown",
]
