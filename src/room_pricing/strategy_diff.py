# This module compares the current pricing strategy with a proposed one over the same window.
# Both calendars are generated from identical observations, so differences come only from the strategy.
# Benchmarks (competitor average, historical achieved rate) give the proposal a market reference.
# Proposals are validated through the strategy boundary before any calendar is priced.

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

import numpy as np

from src.room_pricing.calendar_builder import compute_calendar, resolve_historical_adr
from src.room_pricing.market_data import DailyMarketObservation, MarketObservationProvider
from src.room_pricing.strategy import PricingStrategy, parse_strategy

LOGGER = logging.getLogger("room_pricing")

DEFAULT_COMPARISON_DAYS = 30
# The freedom index is a user-only setting and cannot be changed through a proposal.
PROPOSABLE_FIELDS = frozenset(
    {
        "base_rate",
        "floor",
        "ceiling",
        "smoothing_factor",
        "strategy_differential",
        "competitor_weights",
        "overrides",
    }
)


@dataclass(frozen=True)
class StrategyMetrics:
    competitor_avg: float | None
    historical_avg_rate: float | None
    old_price: float | None
    new_price: float | None
    proposed_market_base: float | None

    @property
    def yield_impact(self) -> float | None:
        if self.new_price is None or self.proposed_market_base is None:
            return None
        return self.new_price - self.proposed_market_base

    def to_dict(self) -> dict[str, Any]:
        return {
            "competitor_avg": self.competitor_avg,
            "historical_avg_rate": self.historical_avg_rate,
            "old_price": self.old_price,
            "new_price": self.new_price,
            "proposed_market_base": self.proposed_market_base,
            "yield_impact": self.yield_impact,
        }


def finite_average(values: Iterable[float | None]) -> float | None:
    array = np.array([value for value in values if value is not None], dtype=float)
    array = array[np.isfinite(array)]
    if array.size == 0:
        return None
    return float(array.mean())


def historical_average_rate(observations: Sequence[DailyMarketObservation]) -> float | None:
    revenue = 0.0
    rooms_sold = 0
    for observation in observations:
        if observation.adr is None or not np.isfinite(observation.adr) or observation.rooms_sold <= 0:
            continue
        revenue += observation.adr * observation.rooms_sold
        rooms_sold += observation.rooms_sold
    return revenue / rooms_sold if rooms_sold > 0 else None


def propose_strategy(current: PricingStrategy, changes: Mapping[str, Any]) -> PricingStrategy:
    unknown = set(changes).difference(PROPOSABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unsupported strategy fields in proposal: {sorted(unknown)}")
    return parse_strategy({**current.to_dict(), **dict(changes)})


def build_strategy_metrics(
    start_date: date | str,
    *,
    current: PricingStrategy,
    proposed: PricingStrategy,
    provider: MarketObservationProvider,
    days: int = DEFAULT_COMPARISON_DAYS,
) -> StrategyMetrics:
    observations = list(provider.observations(start_date, days))

    competitor_avg = finite_average(observation.competitor_average for observation in observations)
    historical_adr = resolve_historical_adr(provider.historical_adr(), current)
    current_calendar = compute_calendar(observations, strategy=current, historical_adr=historical_adr)
    # The proposal resolves its own ADR fallback, as a standalone calendar run would.
    proposed_calendar = compute_calendar(
        observations,
        strategy=proposed,
        historical_adr=resolve_historical_adr(provider.historical_adr(), proposed),
    )

    metrics = StrategyMetrics(
        competitor_avg=competitor_avg,
        historical_avg_rate=historical_average_rate(observations),
        old_price=finite_average(point.final_price for point in current_calendar),
        new_price=finite_average(point.final_price for point in proposed_calendar),
        proposed_market_base=finite_average(point.trace.market_anchor.base_price for point in proposed_calendar),
    )
    LOGGER.info(
        "strategy comparison days=%d old_price=%s new_price=%s",
        len(observations),
        metrics.old_price,
        metrics.new_price,
    )
    return metrics
