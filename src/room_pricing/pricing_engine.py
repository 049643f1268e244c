# This module runs the per-night pricing pipeline: market anchor, yield, shoulder smoothing, guardrails.
# Every function is pure; identical inputs always give an identical trace.
# `compute_stage2_price` stops before smoothing and is what the calendar's first pass collects.
# Neighbor prices are passed in explicitly, so there is no hidden state shared between nights.

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from src.room_pricing.guardrails import apply_guardrails
from src.room_pricing.market_anchor import compute_market_anchor
from src.room_pricing.market_data import CompetitorRate
from src.room_pricing.shoulder_smoothing import smooth_shoulder
from src.room_pricing.strategy import PricingStrategy
from src.room_pricing.trace import MarketAnchorTrace, PricingTrace, YieldMultiplierTrace
from src.room_pricing.yield_multiplier import compute_yield_multiplier


@dataclass(frozen=True)
class Stage2Result:
    market_anchor: MarketAnchorTrace
    yield_multiplier: YieldMultiplierTrace

    @property
    def stage2_price(self) -> float:
        return self.yield_multiplier.price_after_multiplier


def _compute_stage2(
    *,
    historical_adr: float,
    occupancy_pct: float,
    competitor_rates: Sequence[CompetitorRate],
    strategy: PricingStrategy,
) -> Stage2Result:
    market_anchor = compute_market_anchor(
        historical_adr=historical_adr,
        competitor_rates=competitor_rates,
        strategy=strategy,
    )
    yield_multiplier = compute_yield_multiplier(
        occupancy_pct=occupancy_pct,
        base_price=market_anchor.base_price,
        freedom_index=strategy.freedom_index,
    )
    return Stage2Result(market_anchor=market_anchor, yield_multiplier=yield_multiplier)


def compute_stage2_price(
    *,
    historical_adr: float,
    occupancy_pct: float,
    competitor_rates: Sequence[CompetitorRate],
    strategy: PricingStrategy,
) -> float:
    """Price after market anchor and yield, before smoothing and guardrails."""

    return _compute_stage2(
        historical_adr=historical_adr,
        occupancy_pct=occupancy_pct,
        competitor_rates=competitor_rates,
        strategy=strategy,
    ).stage2_price


def compute_day_price(
    *,
    day: date | str,
    historical_adr: float,
    occupancy_pct: float,
    competitor_rates: Sequence[CompetitorRate],
    previous_day_price: float | None,
    next_day_price: float | None,
    strategy: PricingStrategy,
) -> PricingTrace:
    """Full single-night pipeline; neighbor prices must be unsmoothed stage-2 values."""

    stage2 = _compute_stage2(
        historical_adr=historical_adr,
        occupancy_pct=occupancy_pct,
        competitor_rates=competitor_rates,
        strategy=strategy,
    )
    shoulder_smoothing = smooth_shoulder(
        current=stage2.stage2_price,
        previous=previous_day_price,
        next_price=next_day_price,
        smoothing_factor=strategy.smoothing_factor,
    )
    guardrails = apply_guardrails(
        day=day,
        smoothed_price=shoulder_smoothing.smoothed_price,
        floor=strategy.floor,
        ceiling=strategy.ceiling,
        overrides=strategy.overrides,
    )
    return PricingTrace(
        market_anchor=stage2.market_anchor,
        yield_multiplier=stage2.yield_multiplier,
        shoulder_smoothing=shoulder_smoothing,
        guardrails=guardrails,
    )
