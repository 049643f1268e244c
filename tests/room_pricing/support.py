# This file provides shared builders for room-pricing engine tests.
# It exists so every test starts from the same strategy and market fixtures.
# The builders return plain records, so tests never touch YAML or the environment unless they mean to.
# Dates are fixed so expected prices stay deterministic.

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, timedelta
from typing import Any

from src.room_pricing.market_data import (
    CompetitorRate,
    DailyMarketObservation,
    DailyStat,
    InMemoryMarketProvider,
)
from src.room_pricing.strategy import PricingStrategy

START_DATE = date(2025, 6, 2)


def build_strategy(**changes: Any) -> PricingStrategy:
    """Strategy used by the end-to-end pricing scenario."""

    strategy = PricingStrategy(
        base_rate=200.0,
        floor=100.0,
        ceiling=500.0,
        smoothing_factor=0.5,
        freedom_index=1.0,
        strategy_differential=0.0,
        overrides={},
    )
    return strategy.with_changes(**changes) if changes else strategy


def build_observations(
    occupancies: Sequence[float],
    *,
    start: date = START_DATE,
    rates: dict[int, Sequence[tuple[str, float]]] | None = None,
) -> list[DailyMarketObservation]:
    rates = rates or {}
    observations = []
    for offset, occupancy in enumerate(occupancies):
        day = start + timedelta(days=offset)
        observations.append(
            DailyMarketObservation(
                date=day,
                occupancy_pct=occupancy,
                competitor_rates=tuple(
                    CompetitorRate(competitor_id=competitor_id, date=day, rate=rate)
                    for competitor_id, rate in rates.get(offset, ())
                ),
            )
        )
    return observations


class StaticMarketProvider:
    """Provider that returns fixed observations and records each request."""

    def __init__(self, observations: Sequence[DailyMarketObservation], *, historical_adr: float = 200.0) -> None:
        self._observations = list(observations)
        self._historical_adr = historical_adr
        self.requests: list[tuple[date, int]] = []

    def historical_adr(self) -> float:
        return self._historical_adr

    def observations(self, start_date: date, day_count: int) -> list[DailyMarketObservation]:
        self.requests.append((start_date, day_count))
        end_date = start_date + timedelta(days=day_count - 1)
        return [item for item in self._observations if start_date <= item.date <= end_date]


def build_daily_stats(
    rooms_sold: Sequence[int],
    *,
    start: date = START_DATE,
    rooms_available: int = 10,
    adr: float | None = 150.0,
) -> list[DailyStat]:
    stats = []
    for offset, sold in enumerate(rooms_sold):
        stats.append(
            DailyStat(
                date=start + timedelta(days=offset),
                rooms_sold=sold,
                rooms_available=rooms_available,
                occupancy_pct=sold / rooms_available * 100,
                adr=adr,
                rev_par=None if adr is None else adr * sold / rooms_available,
            )
        )
    return stats


def build_provider(
    rooms_sold: Sequence[int],
    *,
    competitor_rates: Sequence[CompetitorRate] = (),
    historical_adr: float = 200.0,
    room_count: int = 10,
) -> InMemoryMarketProvider:
    return InMemoryMarketProvider(
        daily_stats=build_daily_stats(rooms_sold, rooms_available=room_count),
        competitor_rates=competitor_rates,
        historical_adr=historical_adr,
        room_count=room_count,
    )
