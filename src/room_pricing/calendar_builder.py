# This module builds a priced calendar over a window of consecutive nights.
# Smoothing needs each neighbor's unsmoothed stage-2 price, including the next night's, so one forward pass is not enough.
# Pass 1 collects every night's stage-2 price into an immutable, position-aligned tuple.
# Pass 2 reruns the full per-night pipeline, reading neighbors from that tuple by index.

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from src.room_pricing.calendar_dates import date_window
from src.room_pricing.market_data import DailyMarketObservation, MarketObservationProvider
from src.room_pricing.pricing_engine import compute_day_price, compute_stage2_price
from src.room_pricing.strategy import PricingStrategy
from src.room_pricing.trace import PricePoint


@dataclass(frozen=True)
class StateCalendars:
    observations: list[DailyMarketObservation]
    active: list[PricePoint]
    simulation: list[PricePoint]


def resolve_historical_adr(historical_adr: float | None, strategy: PricingStrategy) -> float:
    if historical_adr is not None and historical_adr > 0:
        return float(historical_adr)
    return strategy.base_rate


def align_observations(
    dates: Sequence[date],
    observations: Sequence[DailyMarketObservation],
) -> list[DailyMarketObservation]:
    by_date = {observation.date: observation for observation in observations}
    return [by_date.get(day) or DailyMarketObservation.empty(day) for day in dates]


def compute_stage2_sequence(
    observations: Sequence[DailyMarketObservation],
    *,
    strategy: PricingStrategy,
    historical_adr: float,
) -> tuple[float, ...]:
    return tuple(
        compute_stage2_price(
            historical_adr=historical_adr,
            occupancy_pct=observation.occupancy_pct,
            competitor_rates=observation.competitor_rates,
            strategy=strategy,
        )
        for observation in observations
    )


def compute_calendar(
    observations: Sequence[DailyMarketObservation],
    *,
    strategy: PricingStrategy,
    historical_adr: float,
) -> list[PricePoint]:
    stage2_prices = compute_stage2_sequence(observations, strategy=strategy, historical_adr=historical_adr)
    last_index = len(stage2_prices) - 1

    calendar: list[PricePoint] = []
    for idx, observation in enumerate(observations):
        trace = compute_day_price(
            day=observation.date,
            historical_adr=historical_adr,
            occupancy_pct=observation.occupancy_pct,
            competitor_rates=observation.competitor_rates,
            previous_day_price=stage2_prices[idx - 1] if idx > 0 else None,
            next_day_price=stage2_prices[idx + 1] if idx < last_index else None,
            strategy=strategy,
        )
        calendar.append(PricePoint.from_trace(observation.date, trace))
    return calendar


def generate_calendar(
    start_date: date | str,
    day_count: int,
    strategy: PricingStrategy,
    provider: MarketObservationProvider,
) -> list[PricePoint]:
    dates = date_window(start_date, day_count)
    if not dates:
        return []

    historical_adr = resolve_historical_adr(provider.historical_adr(), strategy)
    observations = align_observations(dates, provider.observations(dates[0], len(dates)))
    return compute_calendar(observations, strategy=strategy, historical_adr=historical_adr)


def generate_calendars_for_state(
    start_date: date | str,
    day_count: int,
    *,
    active: PricingStrategy,
    simulation: PricingStrategy | None,
    provider: MarketObservationProvider,
) -> StateCalendars:
    """Active and simulation calendars over one shared set of observations."""

    dates = date_window(start_date, day_count)
    if not dates:
        return StateCalendars(observations=[], active=[], simulation=[])

    # Both calendars use the ADR resolved against the active strategy.
    historical_adr = resolve_historical_adr(provider.historical_adr(), active)
    observations = align_observations(dates, provider.observations(dates[0], len(dates)))
    return StateCalendars(
        observations=observations,
        active=compute_calendar(observations, strategy=active, historical_adr=historical_adr),
        simulation=compute_calendar(observations, strategy=simulation or active, historical_adr=historical_adr),
    )
