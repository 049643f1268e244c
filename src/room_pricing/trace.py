# This module defines the explainability trace produced for every priced date.
# Each stage contributes one frozen sub-record so audits can replay exactly which value moved the price.
# `PricePoint` flattens the headline numbers next to the full trace for charts and tooltips.
# Dict and DataFrame exports are provided for audit payloads and dashboard tables.

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Any

import pandas as pd

CALENDAR_COLUMNS = [
    "date",
    "anchor_price",
    "stage2_price",
    "smoothed_price",
    "clamped_price",
    "final_price",
    "occupancy_pct",
    "stage_multiplier",
    "effective_multiplier",
    "shoulder_adj",
    "override_applied",
]


@dataclass(frozen=True)
class CompetitorWeight:
    competitor_id: str
    rate: float
    distance: float
    raw_weight: float
    normalized_weight: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "competitor_id": self.competitor_id,
            "rate": self.rate,
            "distance": self.distance,
            "raw_weight": self.raw_weight,
            "normalized_weight": self.normalized_weight,
        }


@dataclass(frozen=True)
class MarketAnchorTrace:
    historical_adr: float
    weighted_average: float
    strategy_differential: float
    smart_weights: tuple[CompetitorWeight, ...]
    base_price: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "historical_adr": self.historical_adr,
            "weighted_average": self.weighted_average,
            "strategy_differential": self.strategy_differential,
            "smart_weights": [weight.to_dict() for weight in self.smart_weights],
            "base_price": self.base_price,
        }


@dataclass(frozen=True)
class YieldMultiplierTrace:
    occupancy_pct: float
    stage_multiplier: float
    freedom_index: float
    effective_multiplier: float
    price_after_multiplier: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "occupancy_pct": self.occupancy_pct,
            "stage_multiplier": self.stage_multiplier,
            "freedom_index": self.freedom_index,
            "effective_multiplier": self.effective_multiplier,
            "price_after_multiplier": self.price_after_multiplier,
        }


@dataclass(frozen=True)
class SmoothingWindow:
    previous: float | None
    current: float
    next: float | None

    def to_dict(self) -> dict[str, Any]:
        return {"previous": self.previous, "current": self.current, "next": self.next}


@dataclass(frozen=True)
class ShoulderSmoothingTrace:
    smoothing_factor: float
    window: SmoothingWindow
    smoothed_price: float
    shoulder_adj: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "smoothing_factor": self.smoothing_factor,
            "window": self.window.to_dict(),
            "smoothed_price": self.smoothed_price,
            "shoulder_adj": self.shoulder_adj,
        }


@dataclass(frozen=True)
class GuardrailTrace:
    floor: float
    ceiling: float
    clamped_price: float
    override_applied: bool
    override_value: float | None
    final_price: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "floor": self.floor,
            "ceiling": self.ceiling,
            "clamped_price": self.clamped_price,
            "override_applied": self.override_applied,
            "override_value": self.override_value,
            "final_price": self.final_price,
        }


@dataclass(frozen=True)
class PricingTrace:
    market_anchor: MarketAnchorTrace
    yield_multiplier: YieldMultiplierTrace
    shoulder_smoothing: ShoulderSmoothingTrace
    guardrails: GuardrailTrace

    def to_dict(self) -> dict[str, Any]:
        return {
            "market_anchor": self.market_anchor.to_dict(),
            "yield_multiplier": self.yield_multiplier.to_dict(),
            "shoulder_smoothing": self.shoulder_smoothing.to_dict(),
            "guardrails": self.guardrails.to_dict(),
        }


@dataclass(frozen=True)
class PricePoint:
    date: date
    anchor_price: float
    stage2_price: float
    smoothed_price: float
    clamped_price: float
    final_price: int
    trace: PricingTrace

    @classmethod
    def from_trace(cls, day: date, trace: PricingTrace) -> PricePoint:
        return cls(
            date=day,
            anchor_price=trace.market_anchor.base_price,
            stage2_price=trace.yield_multiplier.price_after_multiplier,
            smoothed_price=trace.shoulder_smoothing.smoothed_price,
            clamped_price=trace.guardrails.clamped_price,
            final_price=trace.guardrails.final_price,
            trace=trace,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "anchor_price": self.anchor_price,
            "stage2_price": self.stage2_price,
            "smoothed_price": self.smoothed_price,
            "clamped_price": self.clamped_price,
            "final_price": self.final_price,
            "trace": self.trace.to_dict(),
        }


def calendar_to_frame(calendar: Sequence[PricePoint]) -> pd.DataFrame:
    rows = [
        {
            "date": pd.Timestamp(point.date),
            "anchor_price": point.anchor_price,
            "stage2_price": point.stage2_price,
            "smoothed_price": point.smoothed_price,
            "clamped_price": point.clamped_price,
            "final_price": point.final_price,
            "occupancy_pct": point.trace.yield_multiplier.occupancy_pct,
            "stage_multiplier": point.trace.yield_multiplier.stage_multiplier,
            "effective_multiplier": point.trace.yield_multiplier.effective_multiplier,
            "shoulder_adj": point.trace.shoulder_smoothing.shoulder_adj,
            "override_applied": point.trace.guardrails.override_applied,
        }
        for point in calendar
    ]
    return pd.DataFrame(rows, columns=CALENDAR_COLUMNS)
