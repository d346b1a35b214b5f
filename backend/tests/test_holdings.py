from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from stockbook.models import AccountScope
from stockbook.services.holdings import HoldingsView, compute_holdings


@pytest.fixture
def two_account_book(make_tx):
    return [
        make_tx("Buy", date(2024, 1, 1), 10, "100", brokerage="10", account="A1"),
        make_tx("Sell", date(2024, 2, 1), 4, "120", brokerage="5", account="A1"),
        make_tx("Buy", date(2024, 1, 15), 3, "33.333", account="A2"),
        make_tx("Buy", date(2024, 1, 20), 2, "50", account="A1", instrument="ABC"),
        make_tx("Buy", date(2024, 3, 1), 1, "60", account="A1", instrument="ABC"),
    ]


def test_empty_input_yields_empty_view():
    assert compute_holdings([]) == HoldingsView()


def test_fully_closed_position_is_excluded(make_tx):
    transactions = [
        make_tx("Buy", date(2024, 1, 1), 10, "100", brokerage="10"),
        make_tx("Sell", date(2024, 6, 1), 10, "120", brokerage="12"),
    ]
    view = compute_holdings(transactions)

    assert view.stocks == ()
    assert view.find("XYZ") is None
    assert view.position_count == 0


def test_account_rows_use_remaining_lots(two_account_book):
    view = compute_holdings(two_account_book)
    stock = view.find("xyz")
    a1, a2 = stock.accounts

    assert a1.account_id == "A1"
    assert a1.remaining_quantity == Decimal("6.00")
    assert a1.investment == Decimal("600.00")
    assert a1.average_cost == Decimal("100.00")
    assert a1.buy_quantity == Decimal("10.00")
    assert a1.sell_quantity == Decimal("4.00")
    assert a1.total_buy_value == Decimal("1000.00")
    assert a1.total_brokerage == Decimal("15.00")

    assert a2.investment == Decimal("100.00")
    assert a2.average_cost == Decimal("33.33")

    assert stock.remaining_quantity == Decimal("9.00")
    assert stock.investment == Decimal("700.00")
    assert stock.average_cost == Decimal("77.78")


def test_stock_totals_equal_sum_of_accounts(two_account_book):
    view = compute_holdings(two_account_book)
    for stock in view.stocks:
        for field in ("remaining_quantity", "investment", "buy_quantity", "sell_quantity", "total_brokerage"):
            assert getattr(stock, field) == sum(getattr(a, field) for a in stock.accounts)
    assert view.total_investment == sum(s.investment for s in view.stocks)
    assert view.position_count == 3


def test_stocks_sorted_and_lots_newest_first(two_account_book):
    view = compute_holdings(two_account_book)

    assert [s.instrument for s in view.stocks] == ["ABC", "XYZ"]
    abc_lots = view.find("ABC").accounts[0].lots
    assert [lot.date for lot in abc_lots] == [date(2024, 3, 1), date(2024, 1, 20)]


def test_scope_restricts_accounts(two_account_book):
    single = compute_holdings(two_account_book, AccountScope.single("A2"))
    assert [s.instrument for s in single.stocks] == ["XYZ"]
    assert [a.account_id for a in single.stocks[0].accounts] == ["A2"]
    assert single.stocks[0].investment == Decimal("100.00")

    several = compute_holdings(two_account_book, AccountScope.accounts(["A1", "A9"]))
    assert {a.account_id for s in several.stocks for a in s.accounts} == {"A1"}

    nobody = compute_holdings(two_account_book, AccountScope.accounts([]))
    assert nobody.stocks == ()


def test_instrument_filter_is_case_insensitive(two_account_book):
    view = compute_holdings(two_account_book, instrument=" abc ")
    assert [s.instrument for s in view.stocks] == ["ABC"]


def test_unmatched_sell_is_surfaced(make_tx):
    transactions = [
        make_tx("Sell", date(2024, 1, 1), 3, "12"),
        make_tx("Buy", date(2024, 1, 2), 5, "10"),
    ]
    view = compute_holdings(transactions)

    holding = view.stocks[0].accounts[0]
    assert holding.remaining_quantity == Decimal("5.00")
    assert holding.unmatched_sell_quantity == Decimal("3.00")
    assert [s.sell_id for s in view.shortfalls] == [1]


def test_computation_is_idempotent(two_account_book):
    snapshot = list(two_account_book)
    assert compute_holdings(two_account_book) == compute_holdings(two_account_book)
    assert two_account_book == snapshot


def test_sub_cent_lots_stay_open(make_tx):
    transactions = [make_tx("Buy", date(2024, 1, day), "0.004", "100") for day in (1, 2, 3)]
    view = compute_holdings(transactions)

    stock = view.find("XYZ")
    assert stock is not None
    assert len(stock.accounts[0].lots) == 3
    assert stock.remaining_quantity == Decimal("0.01")
    assert stock.investment == Decimal("1.20")
    assert stock.average_cost == Decimal("100.00")


def test_fractional_quantities_are_rounded_once(make_tx):
    transactions = [make_tx("Buy", date(2024, 1, day), "0.005", "10") for day in (1, 2, 3)]
    holding = compute_holdings(transactions).stocks[0].accounts[0]

    # 0.015 rounds to 0.02; rounding after each lot would give 0.03.
    assert holding.remaining_quantity == Decimal("0.02")
    assert holding.buy_quantity == Decimal("0.02")


def test_sub_cent_remainder_after_a_sell_stays_open(make_tx):
    transactions = [
        make_tx("Buy", date(2024, 1, 1), 1, "10"),
        make_tx("Sell", date(2024, 1, 2), "0.996", "12"),
    ]
    (stock,) = compute_holdings(transactions).stocks
    (lot,) = stock.accounts[0].lots

    assert lot.remaining_quantity == Decimal("0.004")
    assert stock.average_cost == Decimal("10.00")
