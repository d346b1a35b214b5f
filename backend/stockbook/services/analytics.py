"""Calling layer that fetches transactions and runs the aggregation engine."""

from __future__ import annotations

import logging
from typing import Sequence

from opentelemetry import metrics, trace

from ..config import StockbookSettings, get_settings
from ..models import AccountScope, AggregationRequest, DateRange, Transaction
from .holdings import HoldingsView, compute_holdings
from .lot_matcher import Shortfall
from .pnl import (
    MonthlyPnL,
    PnLSortKey,
    PnLView,
    TradingStats,
    compute_realized_pnl,
    compute_trading_stats,
    monthly_breakdown,
)
from .store import TransactionStore
from .summary_book import SummaryBookView, TradeBookSummary, compute_summary_book, compute_trade_book_summary

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)
meter = metrics.get_meter(__name__)

_processed_counter = meter.create_counter(
    "stockbook.transactions.processed",
    unit="1",
    description="Transactions fed into an aggregation call",
)


class PortfolioAnalytics:
    """Fetch a scope from the store and hand it to the pure aggregators."""

    def __init__(self, store: TransactionStore, settings: StockbookSettings | None = None):
        self.store = store
        self.settings = settings or get_settings()

    def resolve_scope(self, scope: AccountScope | None = None) -> AccountScope:
        if scope is not None:
            return scope
        if self.settings.default_scope == "all":
            return AccountScope.all()
        active = self.store.list_accounts(active_only=True)
        return AccountScope.accounts(account.id for account in active)

    def _request(self, request: AggregationRequest | None) -> AggregationRequest:
        if request is not None:
            return request
        return AggregationRequest(scope=self.resolve_scope())

    def _fetch(
        self,
        view: str,
        request: AggregationRequest,
        *,
        date_range: DateRange | None = None,
    ) -> list[Transaction]:
        transactions = self.store.fetch_transactions(
            scope=request.scope,
            instrument=request.instrument,
            date_range=date_range,
        )
        _processed_counter.add(len(transactions), {"view": view})
        span = trace.get_current_span()
        span.set_attribute("stockbook.scope", request.scope.kind.value)
        span.set_attribute("stockbook.transactions", len(transactions))
        return transactions

    def _report_shortfalls(self, view: str, shortfalls: Sequence[Shortfall]) -> None:
        for shortfall in shortfalls:
            logger.warning(
                "%s: sell %s of %s in account %s has %s units without buy history",
                view,
                shortfall.sell_id,
                shortfall.instrument,
                shortfall.account_id,
                shortfall.unmatched_quantity,
            )

    def holdings(self, request: AggregationRequest | None = None) -> HoldingsView:
        request = self._request(request)
        with tracer.start_as_current_span("stockbook.holdings"):
            transactions = self._fetch("holdings", request)
            view = compute_holdings(
                transactions,
                request.scope,
                instrument=request.instrument,
                intraday_lifo=self.settings.intraday_lifo,
            )
        logger.info(
            "Computed holdings: %d instruments, %d positions from %d transactions",
            len(view.stocks),
            view.position_count,
            len(transactions),
        )
        self._report_shortfalls("holdings", view.shortfalls)
        return view

    def realized_pnl(
        self,
        request: AggregationRequest | None = None,
        *,
        sort_key: PnLSortKey | str = PnLSortKey.PROFIT_LOSS,
        descending: bool = True,
    ) -> PnLView:
        request = self._request(request)
        with tracer.start_as_current_span("stockbook.realized_pnl"):
            # Full history: the window filters sells, never the buys feeding them.
            transactions = self._fetch("realized_pnl", request)
            view = compute_realized_pnl(
                transactions,
                request.scope,
                instrument=request.instrument,
                year=request.year,
                date_range=request.date_range,
                long_term_days=self.settings.long_term_holding_days,
                intraday_lifo=self.settings.intraday_lifo,
                sort_key=sort_key,
                descending=descending,
            )
        logger.info(
            "Computed realized P&L: %d instruments, total %s from %d transactions",
            len(view.stocks),
            view.profit_loss,
            len(transactions),
        )
        self._report_shortfalls("realized_pnl", view.shortfalls)
        return view

    def trading_stats(self, request: AggregationRequest | None = None) -> TradingStats:
        return compute_trading_stats(self.realized_pnl(request))

    def monthly_pnl(self, request: AggregationRequest | None = None) -> list[MonthlyPnL]:
        return monthly_breakdown(self.realized_pnl(request))

    def summary_book(self, request: AggregationRequest | None = None) -> SummaryBookView:
        request = self._request(request)
        with tracer.start_as_current_span("stockbook.summary_book"):
            transactions = self._fetch("summary_book", request, date_range=request.date_range)
            view = compute_summary_book(transactions, request)
        logger.info(
            "Computed summary book: %d instruments from %d transactions",
            len(view.stocks),
            len(transactions),
        )
        return view

    def trade_book(self, request: AggregationRequest | None = None) -> TradeBookSummary:
        request = self._request(request)
        with tracer.start_as_current_span("stockbook.trade_book"):
            transactions = self._fetch("trade_book", request, date_range=request.date_range)
            summary = compute_trade_book_summary(transactions)
        logger.info("Computed trade book summary over %d transactions", len(transactions))
        return summary


__all__ = ["PortfolioAnalytics"]
