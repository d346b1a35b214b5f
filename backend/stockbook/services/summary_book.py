"""Flat buy/sell books without realized P/L matching."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from ..models import AggregationRequest, HoldingStatus, Transaction
from .grouping import group_transactions, select_transactions
from .lot_matcher import OpenLot, match_lots
from .rounding import ZERO, round2, safe_div, sum_rounded

HOLDING = "Holding"
CLOSED = "Closed"


def _status(net_quantity: Decimal) -> str:
    """Judge on the exact net quantity, before it is rounded for display."""

    return HOLDING if net_quantity > 0 else CLOSED


@dataclass(frozen=True)
class BookAccountRow:
    account_id: str
    instrument: str
    buy_quantity: Decimal
    sell_quantity: Decimal
    net_quantity: Decimal
    buy_value: Decimal
    sell_value: Decimal
    brokerage: Decimal
    average_buy_price: Decimal
    average_sell_price: Decimal
    status: str
    transactions: tuple[Transaction, ...]
    remaining_lots: tuple[OpenLot, ...]


@dataclass(frozen=True)
class BookStockRow:
    instrument: str
    buy_quantity: Decimal
    sell_quantity: Decimal
    net_quantity: Decimal
    buy_value: Decimal
    sell_value: Decimal
    brokerage: Decimal
    average_buy_price: Decimal
    average_sell_price: Decimal
    status: str
    accounts: tuple[BookAccountRow, ...]


@dataclass(frozen=True)
class BookOverview:
    total_buy_value: Decimal = ZERO
    total_sell_value: Decimal = ZERO
    total_brokerage: Decimal = ZERO
    current_investment: Decimal = ZERO
    realized_pnl: Decimal = ZERO
    unique_stocks: int = 0
    active_positions: int = 0


@dataclass(frozen=True)
class SummaryBookView:
    stocks: tuple[BookStockRow, ...] = ()
    overview: BookOverview = BookOverview()


@dataclass(frozen=True)
class TradeBookSummary:
    buy_total: Decimal = ZERO
    sell_total: Decimal = ZERO
    buy_quantity: Decimal = ZERO
    sell_quantity: Decimal = ZERO
    net_quantity: Decimal = ZERO
    average_buy_price: Decimal = ZERO
    average_sell_price: Decimal = ZERO
    current_investment: Decimal = ZERO
    realized_pnl: Decimal = ZERO
    remaining_average_buy_price: Decimal = ZERO
    remaining_buy_value: Decimal = ZERO


def _account_row(account_id: str, instrument: str, transactions: list[Transaction]) -> BookAccountRow:
    buys = [tx for tx in transactions if tx.is_buy]
    sells = [tx for tx in transactions if tx.is_sell]
    exact_buy = sum((tx.quantity for tx in buys), ZERO)
    exact_sell = sum((tx.quantity for tx in sells), ZERO)
    buy_quantity = round2(exact_buy)
    sell_quantity = round2(exact_sell)
    buy_value = sum_rounded(round2(tx.gross_value) for tx in buys)
    sell_value = sum_rounded(round2(tx.gross_value) for tx in sells)
    result = match_lots(transactions, intraday_lifo=False)
    return BookAccountRow(
        account_id=account_id,
        instrument=instrument,
        buy_quantity=buy_quantity,
        sell_quantity=sell_quantity,
        net_quantity=round2(exact_buy - exact_sell),
        buy_value=buy_value,
        sell_value=sell_value,
        brokerage=sum_rounded(tx.brokerage for tx in transactions),
        average_buy_price=round2(safe_div(buy_value, exact_buy)),
        average_sell_price=round2(safe_div(sell_value, exact_sell)),
        status=_status(exact_buy - exact_sell),
        transactions=tuple(sorted(transactions, key=lambda tx: (tx.date, tx.id), reverse=True)),
        remaining_lots=result.open_lots,
    )


def _stock_row(instrument: str, accounts: list[BookAccountRow]) -> BookStockRow:
    accounts = sorted(accounts, key=lambda a: a.account_id)
    trades = [tx for a in accounts for tx in a.transactions]
    exact_buy = sum((tx.quantity for tx in trades if tx.is_buy), ZERO)
    exact_sell = sum((tx.quantity for tx in trades if tx.is_sell), ZERO)
    buy_value = sum_rounded(a.buy_value for a in accounts)
    sell_value = sum_rounded(a.sell_value for a in accounts)
    return BookStockRow(
        instrument=instrument,
        buy_quantity=round2(exact_buy),
        sell_quantity=round2(exact_sell),
        net_quantity=round2(exact_buy - exact_sell),
        buy_value=buy_value,
        sell_value=sell_value,
        brokerage=sum_rounded(a.brokerage for a in accounts),
        average_buy_price=round2(safe_div(buy_value, exact_buy)),
        average_sell_price=round2(safe_div(sell_value, exact_sell)),
        status=_status(exact_buy - exact_sell),
        accounts=tuple(accounts),
    )


def _overview(stocks: list[BookStockRow]) -> BookOverview:
    holding = [s for s in stocks if s.status == HOLDING]
    sold = [s for s in stocks if s.sell_quantity > 0]
    return BookOverview(
        total_buy_value=sum_rounded(s.buy_value for s in stocks),
        total_sell_value=sum_rounded(s.sell_value for s in stocks),
        total_brokerage=sum_rounded(s.brokerage for s in stocks),
        current_investment=sum_rounded(round2(s.net_quantity * s.average_buy_price) for s in holding),
        realized_pnl=sum_rounded(round2(s.sell_value - s.average_buy_price * s.sell_quantity) for s in sold),
        unique_stocks=len(stocks),
        active_positions=len(holding),
    )


def compute_summary_book(
    transactions: Iterable[Transaction],
    request: AggregationRequest | None = None,
) -> SummaryBookView:
    """Return per-instrument, per-account buy/sell totals for ``request``.

    The date range is applied to transactions before grouping, so totals and
    remaining lots describe only the activity inside the window.
    """

    request = request or AggregationRequest()
    selected = select_transactions(
        transactions,
        request.scope,
        instrument=request.instrument,
        date_range=request.date_range,
    )
    by_instrument: dict[str, list[BookAccountRow]] = {}
    for (account_id, symbol), group in group_transactions(selected).items():
        by_instrument.setdefault(symbol, []).append(_account_row(account_id, symbol, group))

    stocks = [_stock_row(symbol, accounts) for symbol, accounts in by_instrument.items()]
    if request.status is HoldingStatus.HOLDING:
        stocks = [s for s in stocks if s.status == HOLDING]
    elif request.status is HoldingStatus.CLOSED:
        stocks = [s for s in stocks if s.status == CLOSED]
    stocks.sort(key=lambda s: s.instrument)
    return SummaryBookView(stocks=tuple(stocks), overview=_overview(stocks))


def compute_trade_book_summary(transactions: Iterable[Transaction]) -> TradeBookSummary:
    """Totals for a flat list of trades, with a FIFO view of what remains open."""

    transactions = list(transactions)
    if not transactions:
        return TradeBookSummary()
    buys = [tx for tx in transactions if tx.is_buy]
    sells = [tx for tx in transactions if tx.is_sell]
    buy_total = sum_rounded(round2(tx.gross_value + tx.brokerage) for tx in buys)
    sell_total = sum_rounded(round2(tx.gross_value - tx.brokerage) for tx in sells)
    buy_quantity = sum((tx.quantity for tx in buys), ZERO)
    sell_quantity = sum((tx.quantity for tx in sells), ZERO)
    average_buy_price = round2(safe_div(sum_rounded(round2(tx.gross_value) for tx in buys), buy_quantity))
    average_sell_price = round2(safe_div(sum_rounded(round2(tx.gross_value) for tx in sells), sell_quantity))

    open_lots: list[OpenLot] = []
    for group in group_transactions(transactions).values():
        open_lots.extend(match_lots(group, intraday_lifo=False).open_lots)
    remaining_quantity = sum((lot.remaining_quantity for lot in open_lots), ZERO)
    remaining_buy_value = sum_rounded(round2(lot.remaining_value) for lot in open_lots)

    return TradeBookSummary(
        buy_total=buy_total,
        sell_total=sell_total,
        buy_quantity=round2(buy_quantity),
        sell_quantity=round2(sell_quantity),
        net_quantity=round2(buy_quantity - sell_quantity),
        average_buy_price=average_buy_price,
        average_sell_price=average_sell_price,
        current_investment=buy_total - sell_total,
        realized_pnl=round2(sell_total - average_buy_price * sell_quantity),
        remaining_average_buy_price=round2(safe_div(remaining_buy_value, remaining_quantity)),
        remaining_buy_value=remaining_buy_value,
    )


__all__ = [
    "BookAccountRow",
    "BookOverview",
    "BookStockRow",
    "CLOSED",
    "HOLDING",
    "SummaryBookView",
    "TradeBookSummary",
    "compute_summary_book",
    "compute_trade_book_summary",
]
