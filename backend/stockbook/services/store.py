"""Transaction store boundary and an in-memory implementation."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, Protocol

from ..models import AccountRecord, AccountScope, DateRange, Side, Transaction
from .grouping import select_transactions


class TransactionStore(Protocol):
    """Read-only source of transactions and account metadata."""

    def fetch_transactions(
        self,
        *,
        scope: AccountScope,
        instrument: str | None = None,
        date_range: DateRange | None = None,
        side: Side | None = None,
    ) -> list[Transaction]:
        ...

    def list_accounts(self, *, active_only: bool = False) -> list[AccountRecord]:
        ...


class InMemoryTransactionStore:
    """Simple store for tests, scripts and examples."""

    def __init__(
        self,
        transactions: Iterable[Transaction] = (),
        accounts: Iterable[AccountRecord] = (),
    ):
        self._transactions: Dict[int, Transaction] = {}
        self._accounts: Dict[str, AccountRecord] = {}
        for account in accounts:
            self.add_account(account)
        for tx in transactions:
            self.add(tx)

    def add(self, tx: Transaction) -> Transaction:
        tx.validate()
        if tx.id in self._transactions:
            raise ValueError(f"Transaction {tx.id} already exists")
        normalized = tx.instrument.strip().upper()
        if normalized != tx.instrument:
            tx = replace(tx, instrument=normalized)
        self._transactions[tx.id] = tx
        return tx

    def add_account(self, account: AccountRecord) -> AccountRecord:
        if account.id in self._accounts:
            raise ValueError(f"Account {account.id} already exists")
        self._accounts[account.id] = account
        return account

    def fetch_transactions(
        self,
        *,
        scope: AccountScope,
        instrument: str | None = None,
        date_range: DateRange | None = None,
        side: Side | None = None,
    ) -> list[Transaction]:
        selected = select_transactions(
            self._transactions.values(), scope, instrument=instrument, date_range=date_range
        )
        if side is not None:
            selected = [tx for tx in selected if tx.side is side]
        return sorted(selected, key=lambda tx: (tx.date, tx.id))

    def list_accounts(self, *, active_only: bool = False) -> list[AccountRecord]:
        accounts = list(self._accounts.values())
        if active_only:
            accounts = [a for a in accounts if a.active]
        return sorted(accounts, key=lambda a: a.id)


__all__ = ["InMemoryTransactionStore", "TransactionStore"]
