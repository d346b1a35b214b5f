from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

import pytest

from stockbook.config import StockbookSettings
from stockbook.models import AccountRecord, AccountScope, AggregationRequest, DateRange
from stockbook.services.analytics import PortfolioAnalytics
from stockbook.services.store import InMemoryTransactionStore


@pytest.fixture
def store(make_tx):
    return InMemoryTransactionStore(
        [
            make_tx("Buy", date(2023, 3, 1), 10, "10", account="A1"),
            make_tx("Sell", date(2023, 9, 1), 4, "12", account="A1"),
            make_tx("Sell", date(2024, 2, 1), 6, "15", account="A1"),
            make_tx("Buy", date(2024, 1, 1), 5, "20", account="A2"),
        ],
        accounts=[AccountRecord("A1", "Primary"), AccountRecord("A2", "Dormant", active=False)],
    )


def test_default_scope_uses_active_accounts(store):
    analytics = PortfolioAnalytics(store, StockbookSettings())
    assert analytics.resolve_scope() == AccountScope.accounts(["A1"])

    view = analytics.summary_book()
    assert {a.account_id for s in view.stocks for a in s.accounts} == {"A1"}


def test_default_scope_all(store):
    analytics = PortfolioAnalytics(store, StockbookSettings(default_scope="all"))
    view = analytics.holdings()
    assert [a.account_id for a in view.stocks[0].accounts] == ["A2"]


def test_explicit_scope_wins(store):
    analytics = PortfolioAnalytics(store, StockbookSettings())
    view = analytics.summary_book(AggregationRequest(scope=AccountScope.single("A2")))
    assert view.stocks[0].accounts[0].account_id == "A2"


def test_year_request_keeps_prior_year_buys(store):
    analytics = PortfolioAnalytics(store, StockbookSettings())
    view = analytics.realized_pnl(AggregationRequest(scope=AccountScope.all(), year=2024))

    assert [s.sell_id for s in view.sells] == [3]
    assert view.cost_basis == Decimal("60.00")
    assert view.profit_loss == Decimal("30.00")


def test_long_term_days_setting_reaches_matcher(store):
    analytics = PortfolioAnalytics(store, StockbookSettings(long_term_holding_days=300))
    view = analytics.realized_pnl(AggregationRequest(scope=AccountScope.all(), year=2024))
    assert view.long_term.profit_loss == Decimal("30.00")


def test_stats_monthly_and_trade_book(store):
    analytics = PortfolioAnalytics(store, StockbookSettings(default_scope="all"))

    stats = analytics.trading_stats()
    assert stats.total_trades == 2
    assert stats.winning_trades == 2

    months = analytics.monthly_pnl()
    assert [m.month for m in months] == ["2023-09", "2024-02"]

    request = AggregationRequest(scope=AccountScope.single("A1"), date_range=DateRange(end=date(2023, 12, 31)))
    summary = analytics.trade_book(request)
    assert summary.buy_quantity == Decimal("10.00")
    assert summary.sell_quantity == Decimal("4.00")
    assert summary.remaining_buy_value == Decimal("60.00")


def test_shortfall_is_logged_as_warning(make_tx, caplog):
    store = InMemoryTransactionStore([make_tx("Sell", date(2024, 1, 2), 3, "10", id=7)])
    analytics = PortfolioAnalytics(store, StockbookSettings(default_scope="all"))

    with caplog.at_level(logging.WARNING, logger="stockbook.services.analytics"):
        view = analytics.realized_pnl()

    assert view.shortfalls[0].sell_id == 7
    assert "sell 7 of XYZ in account A1 has 3 units without buy history" in caplog.text


def test_each_call_logs_a_summary_line(store, caplog):
    analytics = PortfolioAnalytics(store, StockbookSettings())
    with caplog.at_level(logging.INFO, logger="stockbook.services.analytics"):
        analytics.holdings()
    assert "Computed holdings" in caplog.text
