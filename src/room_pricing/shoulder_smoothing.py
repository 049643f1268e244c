# This module blends a night's stage-2 price with its calendar neighbors to avoid sawtooth stays.
# Neighbors are the unsmoothed stage-2 prices, so smoothing never compounds across a window.
# Boundary days (missing previous or next) pass through unchanged.
# The strategy's smoothing factor is carried into the trace but the 0.2/0.6/0.2 weights are fixed.

from __future__ import annotations

from src.room_pricing.trace import ShoulderSmoothingTrace, SmoothingWindow

NEIGHBOR_WEIGHT = 0.2
CURRENT_WEIGHT = 0.6


def smooth_shoulder(
    *,
    current: float,
    previous: float | None,
    next_price: float | None,
    smoothing_factor: float,
) -> ShoulderSmoothingTrace:
    window = SmoothingWindow(previous=previous, current=current, next=next_price)
    if previous is None or next_price is None:
        return ShoulderSmoothingTrace(
            smoothing_factor=smoothing_factor,
            window=window,
            smoothed_price=current,
            shoulder_adj=0.0,
        )

    smoothed_price = previous * NEIGHBOR_WEIGHT + current * CURRENT_WEIGHT + next_price * NEIGHBOR_WEIGHT
    return ShoulderSmoothingTrace(
        smoothing_factor=smoothing_factor,
        window=window,
        smoothed_price=smoothed_price,
        shoulder_adj=smoothed_price - current,
    )
