"""Domain model exports."""

from .request import AccountScope, AggregationRequest, DateRange, HoldingStatus, ScopeKind
from .transaction import AccountRecord, MalformedTransactionError, Side, Transaction

__all__ = [
    "AccountRecord",
    "AccountScope",
    "AggregationRequest",
    "DateRange",
    "HoldingStatus",
    "MalformedTransactionError",
    "ScopeKind",
    "Side",
    "Transaction",
]
