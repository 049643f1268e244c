# This test file validates applying a manual price to a range of dates.
# It exists so operators get exactly one rounded price on every date in the inclusive range.
# The tests also check that invalid ranges are rejected and that the input strategy is left untouched.

from __future__ import annotations

import pytest

from src.room_pricing.market_data import InMemoryStrategyStore
from src.room_pricing.overrides import OverrideRangeError, apply_override_range, set_manual_override_range
from tests.room_pricing.support import build_strategy


def test_range_writes_every_inclusive_date() -> None:
    strategy = build_strategy(overrides={"2025-06-30": 150.0})

    result = apply_override_range(strategy, start_date="2025-07-01", end_date="2025-07-03", price=249.5)

    assert result.override_count == 3
    assert result.price == 250
    assert result.strategy.overrides == {
        "2025-06-30": 150.0,
        "2025-07-01": 250.0,
        "2025-07-02": 250.0,
        "2025-07-03": 250.0,
    }
    assert strategy.overrides == {"2025-06-30": 150.0}


def test_single_day_range_and_month_boundary() -> None:
    result = apply_override_range(build_strategy(), start_date="2025-01-31", end_date="2025-02-01", price=99.4)
    assert result.strategy.overrides == {"2025-01-31": 99.0, "2025-02-01": 99.0}


def test_existing_override_is_replaced() -> None:
    strategy = build_strategy(overrides={"2025-07-04": 300.0})
    result = apply_override_range(strategy, start_date="2025-07-04", end_date="2025-07-04", price=410.0)
    assert result.strategy.overrides == {"2025-07-04": 410.0}


@pytest.mark.parametrize(
    ("start_date", "end_date", "price", "message"),
    [
        ("2025-07-05", "2025-07-04", 200.0, "on or after"),
        ("07/04/2025", "2025-07-05", 200.0, "Invalid date range"),
        ("2025-07-04", "2025-07-05", -1.0, "nonnegative"),
    ],
)
def test_invalid_range_is_rejected(start_date: str, end_date: str, price: float, message: str) -> None:
    with pytest.raises(OverrideRangeError, match=message):
        apply_override_range(build_strategy(), start_date=start_date, end_date=end_date, price=price)


def test_set_manual_override_range_persists_to_store() -> None:
    store = InMemoryStrategyStore(build_strategy())

    result = set_manual_override_range(store, start_date="2025-12-24", end_date="2025-12-26", price=480.0)

    assert result.override_count == 3
    assert store.load_active().overrides["2025-12-25"] == 480.0


def test_invalid_range_leaves_store_untouched() -> None:
    original = build_strategy()
    store = InMemoryStrategyStore(original)
    with pytest.raises(OverrideRangeError):
        set_manual_override_range(store, start_date="2025-12-26", end_date="2025-12-24", price=480.0)
    assert store.load_active() is original
