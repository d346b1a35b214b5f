"""Filtering and grouping helpers shared by the aggregators."""

from __future__ import annotations

from typing import Iterable

from ..models import AccountScope, DateRange, Transaction

GroupKey = tuple[str, str]


def select_transactions(
    transactions: Iterable[Transaction],
    scope: AccountScope | None = None,
    *,
    instrument: str | None = None,
    date_range: DateRange | None = None,
) -> list[Transaction]:
    """Return the transactions inside ``scope`` and the optional filters."""

    scope = scope or AccountScope.all()
    symbol = instrument.strip().upper() if instrument else None
    selected: list[Transaction] = []
    for tx in transactions:
        if not scope.includes(tx.account_id):
            continue
        if symbol and tx.instrument != symbol:
            continue
        if date_range and not date_range.contains(tx.date):
            continue
        selected.append(tx)
    return selected


def group_transactions(transactions: Iterable[Transaction]) -> dict[GroupKey, list[Transaction]]:
    """Group by ``(account_id, instrument)``."""

    grouped: dict[GroupKey, list[Transaction]] = {}
    for tx in transactions:
        grouped.setdefault((tx.account_id, tx.instrument), []).append(tx)
    return grouped


__all__ = ["GroupKey", "group_transactions", "select_transactions"]
