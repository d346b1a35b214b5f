from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from stockbook.models import AccountScope, AggregationRequest, DateRange, HoldingStatus
from stockbook.services.holdings import compute_holdings
from stockbook.services.summary_book import (
    CLOSED,
    HOLDING,
    TradeBookSummary,
    compute_summary_book,
    compute_trade_book_summary,
)


@pytest.fixture
def book(make_tx):
    return [
        make_tx("Buy", date(2024, 1, 1), 10, "100", brokerage="10", account="A1"),
        make_tx("Buy", date(2024, 2, 1), 5, "110", brokerage="5", account="A1"),
        make_tx("Sell", date(2024, 3, 1), 12, "120", brokerage="12", account="A1"),
        make_tx("Buy", date(2024, 1, 15), 4, "105", brokerage="4", account="A2"),
        make_tx("Buy", date(2024, 1, 5), 10, "50", account="A1", instrument="ABC"),
        make_tx("Sell", date(2024, 2, 5), 10, "55", account="A1", instrument="ABC"),
    ]


def test_account_rows(book):
    view = compute_summary_book(book)
    assert [s.instrument for s in view.stocks] == ["ABC", "XYZ"]
    xyz = view.stocks[1]
    a1, a2 = xyz.accounts

    assert a1.buy_quantity == Decimal("15.00")
    assert a1.sell_quantity == Decimal("12.00")
    assert a1.net_quantity == Decimal("3.00")
    assert a1.buy_value == Decimal("1550.00")
    assert a1.sell_value == Decimal("1440.00")
    assert a1.brokerage == Decimal("27.00")
    assert a1.average_buy_price == Decimal("103.33")
    assert a1.average_sell_price == Decimal("120.00")
    assert a1.status == HOLDING
    assert [tx.id for tx in a1.transactions] == [3, 2, 1]
    assert [(lot.transaction_id, lot.remaining_quantity) for lot in a1.remaining_lots] == [(2, Decimal("3"))]

    assert a2.average_buy_price == Decimal("105.00")
    assert a2.average_sell_price == Decimal("0.00")


def test_stock_rows_roll_up_accounts(book):
    abc, xyz = compute_summary_book(book).stocks

    assert xyz.buy_quantity == Decimal("19.00")
    assert xyz.net_quantity == Decimal("7.00")
    assert xyz.buy_value == Decimal("1970.00")
    assert xyz.brokerage == Decimal("31.00")
    assert xyz.average_buy_price == Decimal("103.68")
    assert xyz.status == HOLDING

    assert abc.net_quantity == Decimal("0.00")
    assert abc.status == CLOSED
    assert abc.accounts[0].remaining_lots == ()


def test_overview(book):
    overview = compute_summary_book(book).overview

    assert overview.total_buy_value == Decimal("2470.00")
    assert overview.total_sell_value == Decimal("1990.00")
    assert overview.total_brokerage == Decimal("31.00")
    assert overview.current_investment == Decimal("725.76")
    assert overview.realized_pnl == Decimal("245.84")
    assert overview.unique_stocks == 2
    assert overview.active_positions == 1


@pytest.mark.parametrize(
    "status, expected",
    [(HoldingStatus.ALL, ["ABC", "XYZ"]), (HoldingStatus.HOLDING, ["XYZ"]), (HoldingStatus.CLOSED, ["ABC"])],
)
def test_status_filter(book, status, expected):
    view = compute_summary_book(book, AggregationRequest(status=status))
    assert [s.instrument for s in view.stocks] == expected
    assert view.overview.unique_stocks == len(expected)


def test_date_range_prefilters_transactions(book):
    request = AggregationRequest(date_range=DateRange(start=date(2024, 2, 1)))
    view = compute_summary_book(book, request)
    abc, xyz = view.stocks

    assert [a.account_id for a in xyz.accounts] == ["A1"]
    assert xyz.net_quantity == Decimal("-7.00")
    assert xyz.status == CLOSED
    assert xyz.accounts[0].remaining_lots == ()
    assert abc.net_quantity == Decimal("-10.00")


def test_scope_and_instrument(book):
    view = compute_summary_book(book, AggregationRequest(scope=AccountScope.single("A2"), instrument="xyz"))
    (xyz,) = view.stocks
    assert [a.account_id for a in xyz.accounts] == ["A2"]


def test_remaining_lots_use_plain_fifo(make_tx):
    transactions = [
        make_tx("Buy", date(2024, 1, 1), 5, "10"),
        make_tx("Buy", date(2024, 1, 3), 5, "11"),
        make_tx("Sell", date(2024, 1, 3), 5, "12"),
    ]
    book_row = compute_summary_book(transactions).stocks[0].accounts[0]
    holding = compute_holdings(transactions).stocks[0].accounts[0]

    assert [lot.transaction_id for lot in book_row.remaining_lots] == [2]
    assert [lot.transaction_id for lot in holding.lots] == [1]


def test_trade_book_summary(book):
    summary = compute_trade_book_summary(tx for tx in book if tx.account_id == "A1" and tx.instrument == "XYZ")

    assert summary.buy_total == Decimal("1565.00")
    assert summary.sell_total == Decimal("1428.00")
    assert summary.net_quantity == Decimal("3.00")
    assert summary.average_buy_price == Decimal("103.33")
    assert summary.average_sell_price == Decimal("120.00")
    assert summary.current_investment == Decimal("137.00")
    assert summary.realized_pnl == Decimal("188.04")
    assert summary.remaining_buy_value == Decimal("330.00")
    assert summary.remaining_average_buy_price == Decimal("110.00")


def test_trade_book_summary_of_nothing():
    assert compute_trade_book_summary([]) == TradeBookSummary()


def test_sub_cent_net_position_counts_as_holding(make_tx):
    transactions = [
        make_tx("Buy", date(2024, 1, 1), 1, "10"),
        make_tx("Sell", date(2024, 1, 2), "0.996", "12"),
    ]
    view = compute_summary_book(transactions, AggregationRequest(status=HoldingStatus.HOLDING))
    (stock,) = view.stocks

    assert stock.status == HOLDING
    assert stock.accounts[0].status == HOLDING
    assert view.overview.active_positions == 1
    assert compute_summary_book(transactions, AggregationRequest(status=HoldingStatus.CLOSED)).stocks == ()


def test_trade_book_quantities_are_rounded_once(make_tx):
    transactions = [make_tx("Buy", date(2024, 1, day), "0.005", "10") for day in (1, 2, 3)]
    summary = compute_trade_book_summary(transactions)

    assert summary.buy_quantity == Decimal("0.02")
    assert summary.remaining_average_buy_price == Decimal("10.00")
