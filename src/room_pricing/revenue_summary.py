# This module rolls daily market observations and priced calendars up into dashboard KPIs.
# Historical nights contribute realized revenue; nights after the last historical date contribute projected revenue.
# Projected revenue multiplies the calendar's final price by forecast rooms sold for that night.
# Outputs are small frozen records so the dashboard layer only formats and renders them.

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

import numpy as np
import pandas as pd

from src.room_pricing.guardrails import round_half_up
from src.room_pricing.market_data import DailyMarketObservation
from src.room_pricing.trace import PricePoint

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


@dataclass(frozen=True)
class HistoricalAggregate:
    revenue: float
    booked_nights: int
    available_nights: int

    @property
    def occupancy_pct(self) -> float:
        return self.booked_nights / self.available_nights * 100 if self.available_nights > 0 else 0.0

    @property
    def adr(self) -> float:
        return self.revenue / self.booked_nights if self.booked_nights > 0 else 0.0

    @property
    def rev_par(self) -> float:
        return self.revenue / self.available_nights if self.available_nights > 0 else 0.0


@dataclass(frozen=True)
class Metric:
    label: str
    value: str
    delta_pct: float | None


@dataclass(frozen=True)
class MonthlySummary:
    month_key: str
    month_label: str
    historical_revenue: float | None
    projected_revenue: float | None
    adr: float | None
    competitor_average: float | None


def format_money(value: float) -> str:
    return f"${round_half_up(value):,}"


def format_percent(value: float) -> str:
    return f"{value:.0f}%"


def month_label(month_key: str) -> str:
    try:
        month = int(month_key[5:7])
    except ValueError:
        return month_key
    return MONTH_LABELS[month - 1] if 1 <= month <= 12 else month_key


def percent_change(current: float, previous: float) -> float | None:
    if not math.isfinite(current) or not math.isfinite(previous) or previous <= 0:
        return None
    return (current - previous) / previous * 100


def aggregate_historical(observations: Sequence[DailyMarketObservation], max_date: date) -> HistoricalAggregate:
    revenue = 0.0
    booked = 0
    available = 0
    for observation in observations:
        if observation.date > max_date:
            continue
        revenue += (observation.rev_par or 0.0) * observation.rooms_available
        booked += observation.rooms_sold
        available += observation.rooms_available
    return HistoricalAggregate(revenue=revenue, booked_nights=booked, available_nights=available)


def build_kpis(
    current_window: Sequence[DailyMarketObservation],
    previous_window: Sequence[DailyMarketObservation] | None,
    *,
    max_historical_date: date,
) -> list[Metric]:
    current = aggregate_historical(current_window, max_historical_date)
    previous = aggregate_historical(previous_window, max_historical_date) if previous_window else None

    if previous is not None and previous.available_nights > 0:
        deltas = [
            percent_change(current.revenue, previous.revenue),
            percent_change(current.occupancy_pct, previous.occupancy_pct),
            percent_change(current.adr, previous.adr),
            percent_change(current.rev_par, previous.rev_par),
        ]
    else:
        deltas = [None, None, None, None]

    return [
        Metric(label="Room Revenue", value=format_money(current.revenue), delta_pct=deltas[0]),
        Metric(label="Occupancy", value=format_percent(current.occupancy_pct), delta_pct=deltas[1]),
        Metric(label="ADR", value=format_money(current.adr), delta_pct=deltas[2]),
        Metric(label="RevPAR", value=format_money(current.rev_par), delta_pct=deltas[3]),
    ]


def _optional(value: float) -> float | None:
    return None if pd.isna(value) else float(value)


def build_monthly_summary(
    observations: Sequence[DailyMarketObservation],
    calendar: Sequence[PricePoint],
    *,
    max_historical_date: date,
) -> list[MonthlySummary]:
    if not observations:
        return []

    final_prices = {point.date: point.final_price for point in calendar}
    frame = pd.DataFrame(
        {
            "date": [observation.date for observation in observations],
            "rooms_sold": [observation.rooms_sold for observation in observations],
            "rooms_available": [observation.rooms_available for observation in observations],
            "occupancy_pct": [observation.occupancy_pct for observation in observations],
            "rev_par": [observation.rev_par or 0.0 for observation in observations],
            "competitor_average": [
                np.nan if observation.competitor_average is None else observation.competitor_average
                for observation in observations
            ],
            "final_price": [final_prices.get(observation.date, 0) for observation in observations],
        }
    )
    frame["month_key"] = [day.strftime("%Y-%m") for day in frame["date"]]
    frame["is_historical"] = [day <= max_historical_date for day in frame["date"]]

    historical = frame["is_historical"]
    frame["historical_revenue"] = (frame["rev_par"] * frame["rooms_available"]).where(historical, 0.0)
    frame["historical_rooms_sold"] = frame["rooms_sold"].where(historical, 0)
    projected_rooms = frame["rooms_available"] * frame["occupancy_pct"] / 100
    frame["projected_revenue"] = (frame["final_price"] * projected_rooms).where(~historical, 0.0)

    grouped = frame.groupby("month_key", sort=True).agg(
        historical_revenue=("historical_revenue", "sum"),
        projected_revenue=("projected_revenue", "sum"),
        historical_rooms_sold=("historical_rooms_sold", "sum"),
        historical_days=("is_historical", "sum"),
        day_count=("is_historical", "size"),
        competitor_average=("competitor_average", "mean"),
    )

    summaries: list[MonthlySummary] = []
    for month_key, row in grouped.iterrows():
        historical_days = int(row["historical_days"])
        projected_days = int(row["day_count"]) - historical_days
        rooms_sold = float(row["historical_rooms_sold"])
        summaries.append(
            MonthlySummary(
                month_key=str(month_key),
                month_label=month_label(str(month_key)),
                historical_revenue=float(row["historical_revenue"]) if historical_days > 0 else None,
                projected_revenue=float(row["projected_revenue"]) if projected_days > 0 else None,
                adr=float(row["historical_revenue"]) / rooms_sold if rooms_sold > 0 else None,
                competitor_average=_optional(row["competitor_average"]),
            )
        )
    return summaries
