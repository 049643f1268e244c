# This module defines the market inputs the pricing engine consumes and the interfaces that supply them.
# Storage and rate ingestion live outside the engine; only typed records cross this boundary.
# The in-memory provider enriches historical daily stats with competitor rates and a weekday occupancy forecast.
# A busiest-window helper picks the default starting date for dashboards and previews.

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol

import numpy as np
import pandas as pd

from src.room_pricing.calendar_dates import date_window, parse_date_key
from src.room_pricing.guardrails import round_half_up
from src.room_pricing.strategy import PricingStrategy

DEFAULT_ROOM_COUNT = 15


@dataclass(frozen=True)
class CompetitorRate:
    competitor_id: str
    date: date
    rate: float


@dataclass(frozen=True)
class DailyStat:
    date: date
    rooms_sold: int
    rooms_available: int
    occupancy_pct: float
    adr: float | None = None
    rev_par: float | None = None


@dataclass(frozen=True)
class DailyMarketObservation:
    date: date
    occupancy_pct: float
    competitor_rates: tuple[CompetitorRate, ...] = ()
    rooms_sold: int = 0
    rooms_available: int = 0
    adr: float | None = None
    rev_par: float | None = None

    @property
    def competitor_average(self) -> float | None:
        if not self.competitor_rates:
            return None
        return sum(rate.rate for rate in self.competitor_rates) / len(self.competitor_rates)

    @classmethod
    def empty(cls, day: date) -> DailyMarketObservation:
        return cls(date=day, occupancy_pct=0.0)


class MarketObservationProvider(Protocol):
    def historical_adr(self) -> float: ...

    def observations(self, start_date: date, day_count: int) -> Sequence[DailyMarketObservation]: ...


class StrategyStore(Protocol):
    def load_active(self) -> PricingStrategy: ...

    def save_active(self, strategy: PricingStrategy) -> None: ...


class InMemoryStrategyStore:
    def __init__(self, strategy: PricingStrategy) -> None:
        self._strategy = strategy

    def load_active(self) -> PricingStrategy:
        return self._strategy

    def save_active(self, strategy: PricingStrategy) -> None:
        self._strategy = strategy


def group_rates_by_date(competitor_rates: Sequence[CompetitorRate]) -> dict[date, tuple[CompetitorRate, ...]]:
    grouped: dict[date, list[CompetitorRate]] = {}
    for rate in competitor_rates:
        grouped.setdefault(rate.date, []).append(rate)
    return {day: tuple(rates) for day, rates in grouped.items()}


def weekday_occupancy_forecast(stats: Sequence[DailyStat]) -> dict[int, float]:
    """Average historical occupancy per weekday (Monday=0); unseen weekdays get the overall average."""

    if not stats:
        return {weekday: 0.0 for weekday in range(7)}

    frame = pd.DataFrame(
        {
            "weekday": [stat.date.weekday() for stat in stats],
            "occupancy_pct": [float(stat.occupancy_pct) for stat in stats],
        }
    )
    overall_average = float(frame["occupancy_pct"].mean())
    by_weekday = frame.groupby("weekday")["occupancy_pct"].mean()
    return {weekday: float(by_weekday.get(weekday, overall_average)) for weekday in range(7)}


class InMemoryMarketProvider:
    """Market observations backed by already-ingested daily stats and competitor rates."""

    def __init__(
        self,
        *,
        daily_stats: Sequence[DailyStat],
        competitor_rates: Sequence[CompetitorRate] = (),
        historical_adr: float = 0.0,
        room_count: int = DEFAULT_ROOM_COUNT,
    ) -> None:
        self._stats = sorted(daily_stats, key=lambda stat: stat.date)
        self._stat_map = {stat.date: stat for stat in self._stats}
        self._rates_by_date = group_rates_by_date(competitor_rates)
        self._historical_adr = historical_adr
        self._room_count = room_count or DEFAULT_ROOM_COUNT
        self._forecast = weekday_occupancy_forecast(self._stats)

    def historical_adr(self) -> float:
        return self._historical_adr

    @property
    def daily_stats(self) -> list[DailyStat]:
        return list(self._stats)

    def observations(self, start_date: date | str, day_count: int) -> list[DailyMarketObservation]:
        if not self._stats:
            return []

        range_start = self._stats[0].date
        range_end = self._stats[-1].date
        start = max(parse_date_key(start_date), range_start)

        enriched: list[DailyMarketObservation] = []
        for day in date_window(start, max(1, day_count)):
            rates = self._rates_by_date.get(day, ())
            base = self._stat_map.get(day)
            if base is not None:
                enriched.append(
                    DailyMarketObservation(
                        date=day,
                        occupancy_pct=base.occupancy_pct,
                        competitor_rates=rates,
                        rooms_sold=base.rooms_sold,
                        rooms_available=base.rooms_available,
                        adr=base.adr,
                        rev_par=base.rev_par,
                    )
                )
                continue

            # Gaps inside the history are real zero-occupancy nights; only future dates are forecast.
            forecast_pct = self._forecast[day.weekday()] if day > range_end else 0.0
            enriched.append(
                DailyMarketObservation(
                    date=day,
                    occupancy_pct=forecast_pct,
                    competitor_rates=rates,
                    rooms_sold=round_half_up(forecast_pct / 100 * self._room_count),
                    rooms_available=self._room_count,
                )
            )
        return enriched


def find_busiest_window_start(stats: Sequence[DailyStat], *, window_days: int = 30) -> date | None:
    """Start date of the window with the most rooms sold; the earliest wins on ties."""

    if not stats:
        return None
    window_days = max(1, window_days)

    sold = pd.Series(
        [int(stat.rooms_sold) for stat in stats],
        index=pd.DatetimeIndex([pd.Timestamp(stat.date) for stat in stats]),
    )
    sold = sold.groupby(level=0).sum().sort_index()
    timeline = sold.reindex(pd.date_range(sold.index.min(), sold.index.max(), freq="D"), fill_value=0)

    if len(timeline) < window_days:
        return timeline.index[0].date()

    # Warm-up rows are NaN; -1 keeps them below any real total.
    rolling = timeline.rolling(window=window_days, min_periods=window_days).sum().fillna(-1)
    end_position = int(np.argmax(rolling.to_numpy()))
    return timeline.index[end_position - window_days + 1].date()
