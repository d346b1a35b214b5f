"""Pydantic schemas serialising aggregation views for presentation and export."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from ..services.lot_matcher import PnLClass
from .transactions import TransactionRecordSchema


class _ViewSchema(BaseModel):
    class Config:
        from_attributes = True


class OpenLotSchema(_ViewSchema):
    transaction_id: int
    account_id: str
    instrument: str
    date: date
    price: Decimal
    brokerage: Decimal
    original_quantity: Decimal
    remaining_quantity: Decimal
    order_ref: str | None = None
    remarks: str | None = None


class ShortfallSchema(_ViewSchema):
    sell_id: int
    account_id: str
    instrument: str
    date: date
    quantity: Decimal
    matched_quantity: Decimal
    unmatched_quantity: Decimal


class AccountHoldingSchema(_ViewSchema):
    account_id: str
    remaining_quantity: Decimal
    average_cost: Decimal
    buy_quantity: Decimal
    sell_quantity: Decimal
    total_buy_value: Decimal
    total_brokerage: Decimal
    investment: Decimal
    unmatched_sell_quantity: Decimal
    lots: list[OpenLotSchema]


class StockHoldingSchema(_ViewSchema):
    instrument: str
    remaining_quantity: Decimal
    average_cost: Decimal
    buy_quantity: Decimal
    sell_quantity: Decimal
    total_buy_value: Decimal
    total_brokerage: Decimal
    investment: Decimal
    accounts: list[AccountHoldingSchema]


class HoldingsViewSchema(_ViewSchema):
    stocks: list[StockHoldingSchema]
    total_investment: Decimal
    total_brokerage: Decimal
    position_count: int
    shortfalls: list[ShortfallSchema]


class MatchSchema(_ViewSchema):
    sell_id: int
    buy_id: int
    buy_date: date
    sell_date: date
    matched_quantity: Decimal
    buy_price: Decimal
    sell_price: Decimal
    cost_basis: Decimal
    proceeds: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal
    holding_days: int
    is_long_term: bool
    is_intraday: bool
    classification: PnLClass


class SellPnLSchema(_ViewSchema):
    sell_id: int
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
    matches: list[MatchSchema]


class AccountPnLSchema(_ViewSchema):
    account_id: str
    sold_quantity: Decimal
    sell_value: Decimal
    cost_basis: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal
    sells: list[SellPnLSchema]


class StockPnLSchema(_ViewSchema):
    instrument: str
    sold_quantity: Decimal
    sell_value: Decimal
    cost_basis: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal
    accounts: list[AccountPnLSchema]


class ClassTotalsSchema(_ViewSchema):
    matched_quantity: Decimal
    sell_value: Decimal
    cost_basis: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal


class PnLViewSchema(_ViewSchema):
    stocks: list[StockPnLSchema]
    sold_quantity: Decimal
    sell_value: Decimal
    cost_basis: Decimal
    profit_loss: Decimal
    profit_loss_percent: Decimal
    long_term: ClassTotalsSchema
    short_term: ClassTotalsSchema
    intraday: ClassTotalsSchema
    shortfalls: list[ShortfallSchema]


class TradingStatsSchema(_ViewSchema):
    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate: Decimal
    gross_profit: Decimal
    gross_loss: Decimal
    average_win: Decimal
    average_loss: Decimal
    profit_factor: Decimal


class InstrumentMonthPnLSchema(_ViewSchema):
    instrument: str
    sold_quantity: Decimal
    profit_loss: Decimal
    sell_count: int


class MonthlyPnLSchema(_ViewSchema):
    month: str
    profit_loss: Decimal
    sell_count: int
    profitable_instruments: int
    loss_instruments: int
    instruments: list[InstrumentMonthPnLSchema]


class BookAccountRowSchema(_ViewSchema):
    account_id: str
    buy_quantity: Decimal
    sell_quantity: Decimal
    net_quantity: Decimal
    buy_value: Decimal
    sell_value: Decimal
    brokerage: Decimal
    average_buy_price: Decimal
    average_sell_price: Decimal
    status: str
    transactions: list[TransactionRecordSchema]
    remaining_lots: list[OpenLotSchema]


class BookStockRowSchema(_ViewSchema):
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
    accounts: list[BookAccountRowSchema]


class BookOverviewSchema(_ViewSchema):
    total_buy_value: Decimal
    total_sell_value: Decimal
    total_brokerage: Decimal
    current_investment: Decimal
    realized_pnl: Decimal
    unique_stocks: int
    active_positions: int


class SummaryBookViewSchema(_ViewSchema):
    stocks: list[BookStockRowSchema]
    overview: BookOverviewSchema


class TradeBookSummarySchema(_ViewSchema):
    buy_total: Decimal
    sell_total: Decimal
    buy_quantity: Decimal
    sell_quantity: Decimal
    net_quantity: Decimal
    average_buy_price: Decimal
    average_sell_price: Decimal
    current_investment: Decimal
    realized_pnl: Decimal
    remaining_average_buy_price: Decimal
    remaining_buy_value: Decimal


__all__ = [
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
