"""Lot matching and position aggregation for multi-account stock ledgers."""

from .models import (
    AccountRecord,
    AccountScope,
    AggregationRequest,
    DateRange,
    HoldingStatus,
    MalformedTransactionError,
    Side,
    Transaction,
)
from .services import (
    PortfolioAnalytics,
    compute_holdings,
    compute_realized_pnl,
    compute_summary_book,
    compute_trade_book_summary,
    compute_trading_stats,
    match_lots,
    monthly_breakdown,
)

__version__ = "0.1.0"

__all__ = [
    "AccountRecord",
    "AccountScope",
    "AggregationRequest",
    "DateRange",
    "HoldingStatus",
    "MalformedTransactionError",
    "PortfolioAnalytics",
    "Side",
    "Transaction",
    "compute_holdings",
    "compute_realized_pnl",
    "compute_summary_book",
    "compute_trade_book_summary",
    "compute_trading_stats",
    "match_lots",
    "monthly_breakdown",
]
