# This test file validates the exported shape of pricing traces and calendars.
# It exists so audit payloads and dashboard tables keep stable keys and columns.

from __future__ import annotations

import json

from src.room_pricing.calendar_builder import compute_calendar
from src.room_pricing.trace import CALENDAR_COLUMNS, calendar_to_frame
from tests.room_pricing.support import build_observations, build_strategy


def test_price_point_to_dict_is_json_ready() -> None:
    observations = build_observations([95.0, 50.0], rates={0: [("marriott", 210.0)]})
    point = compute_calendar(observations, strategy=build_strategy(), historical_adr=200.0)[0]

    payload = point.to_dict()

    assert payload["date"] == "2025-06-02"
    assert set(payload["trace"]) == {"market_anchor", "yield_multiplier", "shoulder_smoothing", "guardrails"}
    assert payload["trace"]["market_anchor"]["smart_weights"][0]["competitor_id"] == "marriott"
    assert payload["trace"]["shoulder_smoothing"]["window"]["previous"] is None
    assert json.loads(json.dumps(payload)) == payload


def test_calendar_to_frame() -> None:
    calendar = compute_calendar(build_observations([95.0, 50.0, 10.0]), strategy=build_strategy(), historical_adr=200.0)

    frame = calendar_to_frame(calendar)

    assert list(frame.columns) == CALENDAR_COLUMNS
    assert frame["final_price"].tolist() == [290, 212, 170]
    assert frame["override_applied"].tolist() == [False, False, False]
    assert frame["stage_multiplier"].tolist() == [1.45, 1.0, 0.85]


def test_empty_calendar_frame_keeps_columns() -> None:
    frame = calendar_to_frame([])
    assert frame.empty
    assert list(frame.columns) == CALENDAR_COLUMNS
