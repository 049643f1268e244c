# This module applies the floor/ceiling band and manual overrides to a smoothed nightly price.
# Clamping happens first on real-valued bounds, then the override (when present) replaces the clamped value.
# Overrides are hard prices: they are rounded but never clamped back into the band.
# Non-override prices are clamped again on an integer band that tolerates an inverted configuration.

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date

from src.room_pricing.calendar_dates import to_date_key
from src.room_pricing.trace import GuardrailTrace


@dataclass(frozen=True)
class IntegerGuardBand:
    floor_int: int
    ceiling_int: int
    safe_ceiling_int: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""

    return int(math.floor(value + 0.5))


def integer_guard_band(floor: float, ceiling: float) -> IntegerGuardBand:
    floor_int = int(math.ceil(floor))
    ceiling_int = int(math.floor(ceiling))
    return IntegerGuardBand(
        floor_int=floor_int,
        ceiling_int=ceiling_int,
        safe_ceiling_int=max(ceiling_int, floor_int),
    )


def lookup_override(overrides: Mapping[str, float], day: date | str) -> float | None:
    if not overrides:
        return None
    value = overrides.get(to_date_key(day))
    return None if value is None else float(value)


def apply_guardrails(
    *,
    day: date | str,
    smoothed_price: float,
    floor: float,
    ceiling: float,
    overrides: Mapping[str, float],
) -> GuardrailTrace:
    clamped_price = max(floor, min(ceiling, smoothed_price))

    override_value = lookup_override(overrides, day)
    override_applied = override_value is not None
    pre_rounded = override_value if override_value is not None else clamped_price
    rounded = round_half_up(pre_rounded)

    if override_applied:
        final_price = rounded
    else:
        band = integer_guard_band(floor, ceiling)
        final_price = max(band.floor_int, min(band.safe_ceiling_int, rounded))

    return GuardrailTrace(
        floor=floor,
        ceiling=ceiling,
        clamped_price=clamped_price,
        override_applied=override_applied,
        override_value=override_value,
        final_price=final_price,
    )
