"""Pydantic schema exports."""

from .transactions import AccountRecordSchema, TransactionRecordSchema
from .views import (
    AccountHoldingSchema,
    AccountPnLSchema,
    BookAccountRowSchema,
    BookOverviewSchema,
    BookStockRowSchema,
    ClassTotalsSchema,
    HoldingsViewSchema,
    InstrumentMonthPnLSchema,
    MatchSchema,
    MonthlyPnLSchema,
    OpenLotSchema,
    PnLViewSchema,
    SellPnLSchema,
    ShortfallSchema,
    StockHoldingSchema,
    StockPnLSchema,
    SummaryBookViewSchema,
    TradeBookSummarySchema,
    TradingStatsSchema,
)

__all__ = [
    "AccountRecordSchema",
    "TransactionRecordSchema",
    "AccountHoldingSchema",
    "AccountPnLSchema",
    "BookAccountRowSchema",
    "BookOverviewSchema",
    "BookStockRowSchema",
    "ClassTotalsSchema",
    "HoldingsViewSchema",
    "InstrumentMonthPnLSchema",
    "MatchSchema",
    "MonthlyPnLSchema",
    "OpenLotSchema",
    "PnLViewSchema",
    "SellPnLSchema",
    "ShortfallSchema",
    "StockHoldingSchema",
    "StockPnLSchema",
    "SummaryBookViewSchema",
    "TradeBookSummarySchema",
    "TradingStatsSchema",
]
