# This module applies an operator's manual price to a range of dates on a pricing strategy.
# Overrides are a sparse overlay keyed by YYYY-MM-DD and are consulted only by the guardrail stage.
# The price is rounded half-up once, before it is stored.
# A new strategy is returned; the input strategy and its override map are never mutated.

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from src.room_pricing.calendar_dates import date_window, parse_date_key, to_date_key
from src.room_pricing.guardrails import round_half_up
from src.room_pricing.market_data import StrategyStore
from src.room_pricing.strategy import PricingStrategy

LOGGER = logging.getLogger("room_pricing")


class OverrideRangeError(ValueError):
    pass


@dataclass(frozen=True)
class OverrideRangeResult:
    strategy: PricingStrategy
    override_count: int
    price: int


def apply_override_range(
    strategy: PricingStrategy,
    *,
    start_date: date | str,
    end_date: date | str,
    price: float,
) -> OverrideRangeResult:
    try:
        start = parse_date_key(start_date)
        end = parse_date_key(end_date)
    except ValueError as exc:
        raise OverrideRangeError(f"Invalid date range: {exc}") from exc
    if end < start:
        raise OverrideRangeError("end_date must be on or after start_date.")
    if price < 0:
        raise OverrideRangeError("override price must be nonnegative")

    rounded_price = round_half_up(price)
    overrides = dict(strategy.overrides)
    days_inclusive = (end - start).days + 1
    for day in date_window(start, days_inclusive):
        overrides[to_date_key(day)] = float(rounded_price)

    LOGGER.info(
        "manual override applied start=%s end=%s price=%s dates=%d",
        start.isoformat(),
        end.isoformat(),
        rounded_price,
        days_inclusive,
    )
    return OverrideRangeResult(
        strategy=strategy.with_changes(overrides=overrides),
        override_count=days_inclusive,
        price=rounded_price,
    )


def set_manual_override_range(
    store: StrategyStore,
    *,
    start_date: date | str,
    end_date: date | str,
    price: float,
) -> OverrideRangeResult:
    result = apply_override_range(store.load_active(), start_date=start_date, end_date=end_date, price=price)
    store.save_active(result.strategy)
    return result

