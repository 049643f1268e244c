# This test file validates comparing a proposed strategy against the active one.
# It exists so proposals are validated first and both calendars are priced from identical observations.
# The tests check benchmark averages and the yield impact of a proposal.

from __future__ import annotations

import pytest

from src.room_pricing.market_data import CompetitorRate, DailyMarketObservation
from src.room_pricing.strategy import StrategyValidationError
from src.room_pricing.strategy_diff import (
    StrategyMetrics,
    build_strategy_metrics,
    finite_average,
    historical_average_rate,
    propose_strategy,
)
from tests.room_pricing.support import START_DATE, build_provider, build_strategy


def test_finite_average_skips_missing_values() -> None:
    assert finite_average([100.0, None, float("nan"), 200.0]) == pytest.approx(150.0)
    assert finite_average([None, float("inf")]) is None
    assert finite_average([]) is None


def test_historical_average_rate_is_weighted_by_rooms_sold() -> None:
    observations = [
        DailyMarketObservation(date=START_DATE, occupancy_pct=80.0, rooms_sold=8, adr=100.0),
        DailyMarketObservation(date=START_DATE, occupancy_pct=20.0, rooms_sold=2, adr=200.0),
        DailyMarketObservation(date=START_DATE, occupancy_pct=0.0, rooms_sold=0, adr=999.0),
    ]
    assert historical_average_rate(observations) == pytest.approx(120.0)
    assert historical_average_rate([DailyMarketObservation(date=START_DATE, occupancy_pct=0.0)]) is None


def test_propose_strategy_rejects_unknown_fields() -> None:
    with pytest.raises(ValueError, match="Unsupported strategy fields"):
        propose_strategy(build_strategy(), {"freedom_index": 0.1})


def test_propose_strategy_validates_result() -> None:
    with pytest.raises(StrategyValidationError):
        propose_strategy(build_strategy(), {"floor": 600.0})
    assert propose_strategy(build_strategy(), {"base_rate": 220.0}).base_rate == 220.0


def test_strategy_metrics_compare_calendars() -> None:
    provider = build_provider([10, 5, 1])
    current = build_strategy()
    proposed = propose_strategy(current, {"base_rate": 220.0})

    metrics = build_strategy_metrics(START_DATE, current=current, proposed=proposed, provider=provider, days=3)

    assert metrics.competitor_avg is None
    assert metrics.historical_avg_rate == pytest.approx(150.0)
    assert metrics.old_price == pytest.approx((290 + 212 + 170) / 3)
    assert metrics.new_price == pytest.approx((319 + 233 + 187) / 3)
    assert metrics.proposed_market_base == pytest.approx(220.0)
    assert metrics.yield_impact == pytest.approx((319 + 233 + 187) / 3 - 220.0)
    assert metrics.to_dict()["yield_impact"] == metrics.yield_impact


def test_strategy_metrics_competitor_average() -> None:
    rates = [
        CompetitorRate(competitor_id="marriott", date=START_DATE, rate=180.0),
        CompetitorRate(competitor_id="hilton", date=START_DATE, rate=220.0),
    ]
    provider = build_provider([5, 5], competitor_rates=rates)
    strategy = build_strategy()

    metrics = build_strategy_metrics(START_DATE, current=strategy, proposed=strategy, provider=provider, days=2)

    assert metrics.competitor_avg == pytest.approx(200.0)
    assert metrics.old_price == metrics.new_price


def test_yield_impact_requires_both_values() -> None:
    metrics = StrategyMetrics(
        competitor_avg=None,
        historical_avg_rate=None,
        old_price=None,
        new_price=None,
        proposed_market_base=None,
    )
    assert metrics.yield_impact is None
