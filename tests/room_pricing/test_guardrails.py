# This test file validates floor/ceiling clamping with half-up rounding and manual overrides.
# It exists so a hard override always wins while every other price stays inside the band.
# The tests also cover an inverted band, which the engine tolerates without raising.
# Inputs are plain numbers and dates so failures point directly at the guardrail stage.

from __future__ import annotations

from datetime import date

import pytest

from src.room_pricing.guardrails import (
    apply_guardrails,
    integer_guard_band,
    lookup_override,
    round_half_up,
)

DAY = date(2025, 7, 4)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(2.5, 3), (2.4999, 2), (100.6, 101), (100.4, 100), (-2.5, -2), (0.5, 1)],
)
def test_round_half_up(value: float, expected: int) -> None:
    assert round_half_up(value) == expected


def test_price_inside_band_is_rounded() -> None:
    trace = apply_guardrails(day=DAY, smoothed_price=100.6, floor=50.0, ceiling=500.0, overrides={})
    assert trace.clamped_price == pytest.approx(100.6)
    assert trace.final_price == 101
    assert trace.override_applied is False
    assert trace.override_value is None


def test_price_is_clamped_to_floor_and_ceiling() -> None:
    low = apply_guardrails(day=DAY, smoothed_price=42.0, floor=100.0, ceiling=500.0, overrides={})
    high = apply_guardrails(day=DAY, smoothed_price=812.0, floor=100.0, ceiling=500.0, overrides={})
    assert low.clamped_price == 100.0
    assert low.final_price == 100
    assert high.clamped_price == 500.0
    assert high.final_price == 500


def test_fractional_band_stays_inside_integer_bounds() -> None:
    trace = apply_guardrails(day=DAY, smoothed_price=99.0, floor=99.4, ceiling=200.0, overrides={})
    # 99.4 rounds down to 99, which sits below the floor; the integer band lifts it to 100.
    assert trace.final_price == 100


def test_override_bypasses_ceiling() -> None:
    trace = apply_guardrails(
        day=DAY,
        smoothed_price=320.0,
        floor=100.0,
        ceiling=500.0,
        overrides={"2025-07-04": 9999.0},
    )
    assert trace.final_price == 9999
    assert trace.override_applied is True
    assert trace.override_value == 9999.0
    assert trace.clamped_price == 320.0


def test_override_bypasses_floor_and_is_rounded() -> None:
    trace = apply_guardrails(
        day="2025-07-04",
        smoothed_price=320.0,
        floor=100.0,
        ceiling=500.0,
        overrides={"2025-07-04": 12.5},
    )
    assert trace.final_price == 13
    assert trace.override_applied is True


def test_override_for_other_date_is_ignored() -> None:
    trace = apply_guardrails(
        day=DAY,
        smoothed_price=320.0,
        floor=100.0,
        ceiling=500.0,
        overrides={"2025-07-05": 80.0},
    )
    assert trace.override_applied is False
    assert trace.final_price == 320


def test_inverted_band_does_not_raise() -> None:
    band = integer_guard_band(300.0, 200.0)
    assert band.floor_int == 300
    assert band.ceiling_int == 200
    assert band.safe_ceiling_int == 300

    trace = apply_guardrails(day=DAY, smoothed_price=250.0, floor=300.0, ceiling=200.0, overrides={})
    assert trace.final_price == 300


def test_lookup_override_normalizes_dates() -> None:
    overrides = {"2025-07-04": 250.0}
    assert lookup_override(overrides, DAY) == 250.0
    assert lookup_override(overrides, "2025-07-04") == 250.0
    assert lookup_override(overrides, date(2025, 7, 5)) is None
    assert lookup_override({}, DAY) is None
