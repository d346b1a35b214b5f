"""Lot matching and aggregation services."""

from .analytics import PortfolioAnalytics
from .holdings import AccountHolding, HoldingsView, StockHolding, compute_holdings
from .lot_matcher import Match, MatchResult, OpenLot, PnLClass, Shortfall, match_lots
from .pnl import (
    AccountPnL,
    ClassTotals,
    MonthlyPnL,
    PnLSortKey,
    PnLView,
    SellPnL,
    StockPnL,
    TradingStats,
    compute_realized_pnl,
    compute_trading_stats,
    monthly_breakdown,
)
from .store import InMemoryTransactionStore, TransactionStore
from .summary_book import (
    BookAccountRow,
    BookOverview,
    BookStockRow,
    SummaryBookView,
    TradeBookSummary,
    compute_summary_book,
    compute_trade_book_summary,
)

__all__ = [
    "AccountHolding",
    "AccountPnL",
    "BookAccountRow",
    "BookOverview",
    "BookStockRow",
    "ClassTotals",
    "HoldingsView",
    "InMemoryTransactionStore",
    "Match",
    "MatchResult",
    "MonthlyPnL",
    "OpenLot",
    "PnLClass",
    "PnLSortKey",
    "PnLView",
    "PortfolioAnalytics",
    "SellPnL",
    "Shortfall",
    "StockHolding",
    "StockPnL",
    "SummaryBookView",
    "TradeBookSummary",
    "TradingStats",
    "TransactionStore",
    "compute_holdings",
    "compute_realized_pnl",
    "compute_summary_book",
    "compute_trade_book_summary",
    "compute_trading_stats",
    "match_lots",
    "monthly_breakdown",
]
