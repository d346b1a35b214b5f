"""Read trade-book CSV exports into validated transactions."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from ..models import Transaction
from ..schemas import TransactionRecordSchema

# Header spellings seen in trade-book exports, keyed by their normalised form.
COLUMN_ALIASES: dict[str, str] = {
    "stock": "instrument",
    "symbol": "instrument",
    "action": "side",
    "type": "side",
    "userid": "account_id",
    "account": "account_id",
    "account_id": "account_id",
    "tradevalue": "trade_value",
    "trade_value": "trade_value",
    "orderref": "order_ref",
    "order_ref": "order_ref",
}


def _normalize_header(name: str) -> str:
    key = str(name).strip().lower().replace(" ", "_")
    compact = key.replace("_", "")
    return COLUMN_ALIASES.get(key) or COLUMN_ALIASES.get(compact) or key


def normalize_frame(frame: pd.DataFrame) -> pd.DataFrame:
    """Rename export headers and coerce dates; missing ids become row numbers."""

    df = frame.rename(columns=_normalize_header).copy()
    if df.empty:
        return df
    if "id" not in df.columns:
        df["id"] = range(1, len(df) + 1)
    df["date"] = pd.to_datetime(df["date"], dayfirst=False).dt.date
    return df


def _row_payload(row: dict[str, Any]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key, value in row.items():
        if value is None or (not isinstance(value, str) and pd.isna(value)):
            continue
        if key in {"quantity", "price", "brokerage", "trade_value"}:
            value = str(value)
        elif key == "id":
            value = int(value)
        elif key == "account_id":
            value = str(value).strip()
        payload[key] = value
    return payload


def frame_to_transactions(frame: pd.DataFrame) -> list[Transaction]:
    df = normalize_frame(frame)
    return [
        TransactionRecordSchema(**_row_payload(row)).to_transaction()
        for row in df.to_dict(orient="records")
    ]


def load_transactions_csv(path: Path | str) -> list[Transaction]:
    """Load a CSV export; raises ``pydantic.ValidationError`` on malformed rows."""

    frame = pd.read_csv(path)
    return frame_to_transactions(frame)


__all__ = ["COLUMN_ALIASES", "frame_to_transactions", "load_transactions_csv", "normalize_frame"]
