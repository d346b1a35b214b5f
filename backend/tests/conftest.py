import itertools
import pathlib
import sys
from datetime import date
from decimal import Decimal

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from stockbook.config import get_settings  # noqa: E402
from stockbook.models import Side, Transaction  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_tx():
    """Factory for transactions; ids auto-increment unless given explicitly."""

    counter = itertools.count(1)

    def _make(
        side: str,
        day: date,
        quantity,
        price,
        *,
        brokerage="0",
        account: str = "A1",
        instrument: str = "XYZ",
        id: int | None = None,
        **extra,
    ) -> Transaction:
        return Transaction(
            id=id if id is not None else next(counter),
            account_id=account,
            date=day,
            instrument=instrument,
            side=Side.parse(side),
            quantity=Decimal(str(quantity)),
            price=Decimal(str(price)),
            brokerage=Decimal(str(brokerage)),
            **extra,
        )

    return _make
