"""Account scopes and aggregation requests."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable


class ScopeKind(str, enum.Enum):
    SINGLE = "SINGLE"
    ACCOUNTS = "ACCOUNTS"
    ALL = "ALL"


@dataclass(frozen=True)
class AccountScope:
    """Account selection applied before any grouping."""

    kind: ScopeKind = ScopeKind.ALL
    account_ids: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def single(cls, account_id: str) -> "AccountScope":
        return cls(kind=ScopeKind.SINGLE, account_ids=frozenset({account_id}))

    @classmethod
    def accounts(cls, account_ids: Iterable[str]) -> "AccountScope":
        return cls(kind=ScopeKind.ACCOUNTS, account_ids=frozenset(account_ids))

    @classmethod
    def all(cls) -> "AccountScope":
        return cls(kind=ScopeKind.ALL)

    def includes(self, account_id: str) -> bool:
        if self.kind is ScopeKind.ALL:
            return True
        return account_id in self.account_ids


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar range; either bound may be open."""

    start: date | None = None
    end: date | None = None

    def __post_init__(self) -> None:
        if self.start and self.end and self.start > self.end:
            raise ValueError("start cannot be after end")

    def contains(self, day: date) -> bool:
        if self.start and day < self.start:
            return False
        if self.end and day > self.end:
            return False
        return True


class HoldingStatus(str, enum.Enum):
    ALL = "all"
    HOLDING = "holding"
    CLOSED = "closed"


@dataclass(frozen=True)
class AggregationRequest:
    scope: AccountScope = field(default_factory=AccountScope.all)
    instrument: str | None = None
    date_range: DateRange | None = None
    year: int | None = None
    status: HoldingStatus = HoldingStatus.ALL

    def __post_init__(self) -> None:
        if self.instrument is not None:
            normalized = self.instrument.strip().upper()
            object.__setattr__(self, "instrument", normalized or None)


__all__ = [
    "AccountScope",
    "AggregationRequest",
    "DateRange",
    "HoldingStatus",
    "ScopeKind",
]
