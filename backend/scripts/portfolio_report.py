"""Print holdings, realized P&L or summary books for a trade-book CSV export."""

from __future__ import annotations

import argparse
import logging
from datetime import date

from stockbook.config import get_settings
from stockbook.core.logging import setup_logging
from stockbook.core.telemetry import setup_telemetry
from stockbook.ingest import load_transactions_csv
from stockbook.models import AccountScope, AggregationRequest, DateRange, HoldingStatus
from stockbook.schemas import (
    HoldingsViewSchema,
    PnLViewSchema,
    SummaryBookViewSchema,
    TradeBookSummarySchema,
    TradingStatsSchema,
)
from stockbook.services import InMemoryTransactionStore, PnLSortKey, PortfolioAnalytics

logger = logging.getLogger("stockbook.report")

VIEWS = ("holdings", "pnl", "stats", "book", "tradebook")


def build_request(args: argparse.Namespace) -> AggregationRequest:
    if not args.account:
        scope = AccountScope.all()
    elif len(args.account) == 1:
        scope = AccountScope.single(args.account[0])
    else:
        scope = AccountScope.accounts(args.account)
    date_range = None
    if args.date_from or args.date_to:
        date_range = DateRange(start=args.date_from, end=args.date_to)
    return AggregationRequest(
        scope=scope,
        instrument=args.instrument,
        date_range=date_range,
        year=args.year,
        status=HoldingStatus(args.status),
    )


def render(view_name: str, analytics: PortfolioAnalytics, request: AggregationRequest, args: argparse.Namespace) -> str:
    if view_name == "holdings":
        return HoldingsViewSchema.model_validate(analytics.holdings(request)).model_dump_json(indent=2)
    if view_name == "pnl":
        view = analytics.realized_pnl(request, sort_key=args.sort, descending=not args.ascending)
        return PnLViewSchema.model_validate(view).model_dump_json(indent=2)
    if view_name == "stats":
        return TradingStatsSchema.model_validate(analytics.trading_stats(request)).model_dump_json(indent=2)
    if view_name == "book":
        return SummaryBookViewSchema.model_validate(analytics.summary_book(request)).model_dump_json(indent=2)
    return TradeBookSummarySchema.model_validate(analytics.trade_book(request)).model_dump_json(indent=2)


def main() -> None:
    parser = argparse.ArgumentParser(description="Report on a trade-book CSV export")
    parser.add_argument("csv_file")
    parser.add_argument("view", choices=VIEWS)
    parser.add_argument("--account", action="append", default=[], help="Account id; repeat for several")
    parser.add_argument("--instrument")
    parser.add_argument("--year", type=int)
    parser.add_argument("--from", dest="date_from", type=date.fromisoformat)
    parser.add_argument("--to", dest="date_to", type=date.fromisoformat)
    parser.add_argument("--status", default=HoldingStatus.ALL.value, choices=[s.value for s in HoldingStatus])
    parser.add_argument("--sort", default=PnLSortKey.PROFIT_LOSS.value, choices=[k.value for k in PnLSortKey])
    parser.add_argument("--ascending", action="store_true")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.log_level)
    setup_telemetry(settings)

    transactions = load_transactions_csv(args.csv_file)
    logger.info("Loaded %d transactions from %s", len(transactions), args.csv_file)
    analytics = PortfolioAnalytics(InMemoryTransactionStore(transactions), settings)
    print(render(args.view, analytics, build_request(args), args))


if __name__ == "__main__":
    main()
