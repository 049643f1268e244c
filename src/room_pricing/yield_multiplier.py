# This module converts a night's occupancy into a yield multiplier on the market anchor.
# The curve is a hockey stick: flat through mid occupancy, a discount when empty, steep premiums when nearly full.
# Thresholds are exclusive and evaluated top-down, so 90.0 stays in the neutral band.
# The freedom index dampens the curve toward 1.0 and is clamped to [0, 1] even when the stored config is not.

from __future__ import annotations

from src.room_pricing.trace import YieldMultiplierTrace

# (exclusive lower bound, multiplier), checked in order before the low-occupancy discount.
HIGH_OCCUPANCY_BANDS: tuple[tuple[float, float], ...] = (
    (90.0, 1.45),
    (80.0, 1.2),
    (70.0, 1.1),
)
LOW_OCCUPANCY_THRESHOLD = 30.0
LOW_OCCUPANCY_MULTIPLIER = 0.85
NEUTRAL_MULTIPLIER = 1.0


def occupancy_stage_multiplier(occupancy_pct: float) -> float:
    for threshold, multiplier in HIGH_OCCUPANCY_BANDS:
        if occupancy_pct > threshold:
            return multiplier
    if occupancy_pct < LOW_OCCUPANCY_THRESHOLD:
        return LOW_OCCUPANCY_MULTIPLIER
    return NEUTRAL_MULTIPLIER


def clamp_freedom_index(freedom_index: float | None) -> float:
    value = 1.0 if freedom_index is None else freedom_index
    return max(0.0, min(1.0, value))


def compute_yield_multiplier(
    *,
    occupancy_pct: float,
    base_price: float,
    freedom_index: float | None,
) -> YieldMultiplierTrace:
    stage_multiplier = occupancy_stage_multiplier(occupancy_pct)
    clamped_index = clamp_freedom_index(freedom_index)
    effective_multiplier = 1 + (stage_multiplier - 1) * clamped_index

    return YieldMultiplierTrace(
        occupancy_pct=occupancy_pct,
        stage_multiplier=stage_multiplier,
        freedom_index=clamped_index,
        effective_multiplier=effective_multiplier,
        price_after_multiplier=base_price * effective_multiplier,
    )
