# This module estimates a fair market price for one night from competitor rates.
# Rates close to the hotel's historical ADR get more weight via inverse-distance weighting.
# With no competitor data the configured base rate is the anchor, not the historical ADR.
# The per-competitor weight breakdown is kept in the trace so the anchor can be explained line by line.

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from src.room_pricing.market_data import CompetitorRate
from src.room_pricing.strategy import PricingStrategy
from src.room_pricing.trace import CompetitorWeight, MarketAnchorTrace


@dataclass(frozen=True)
class SmartWeights:
    weighted_average: float
    breakdown: tuple[CompetitorWeight, ...]


def compute_smart_weights(competitor_rates: Sequence[CompetitorRate], historical_adr: float) -> SmartWeights:
    if not competitor_rates:
        return SmartWeights(weighted_average=historical_adr, breakdown=())

    raw: list[tuple[CompetitorRate, float, float]] = []
    for rate in competitor_rates:
        distance = abs(rate.rate - historical_adr)
        raw.append((rate, distance, 1.0 / (distance + 1.0)))

    total_raw = 0.0
    for _, _, raw_weight in raw:
        total_raw += raw_weight
    safe_total = total_raw if total_raw > 0 else 1.0

    breakdown = tuple(
        CompetitorWeight(
            competitor_id=rate.competitor_id,
            rate=rate.rate,
            distance=distance,
            raw_weight=raw_weight,
            normalized_weight=raw_weight / safe_total,
        )
        for rate, distance, raw_weight in raw
    )

    weighted_average = 0.0
    for row in breakdown:
        weighted_average += row.rate * row.normalized_weight
    return SmartWeights(weighted_average=weighted_average, breakdown=breakdown)


def compute_market_anchor(
    *,
    historical_adr: float,
    competitor_rates: Sequence[CompetitorRate],
    strategy: PricingStrategy,
) -> MarketAnchorTrace:
    smart = compute_smart_weights(competitor_rates, historical_adr)
    # Without competitor rates the base rate wins over the helper's historical-ADR fallback.
    weighted_average = smart.weighted_average if competitor_rates else strategy.base_rate
    base_price = weighted_average + strategy.strategy_differential

    return MarketAnchorTrace(
        historical_adr=historical_adr,
        weighted_average=weighted_average,
        strategy_differential=strategy.strategy_differential,
        smart_weights=smart.breakdown,
        base_price=base_price,
    )
