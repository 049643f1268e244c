# This module answers "why is this night priced like this" for one date.
# It prices a three-night window centered on the date so the smoothing neighbors match the full calendar.
# The trace is then rendered into short plain-language lines for chat answers and tooltips.
# Wording is deterministic and tied directly to trace values and guardrail flags.

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from src.room_pricing.calendar_builder import compute_stage2_sequence, resolve_historical_adr
from src.room_pricing.calendar_dates import parse_date_key
from src.room_pricing.guardrails import round_half_up
from src.room_pricing.market_data import MarketObservationProvider
from src.room_pricing.pricing_engine import compute_day_price
from src.room_pricing.strategy import PricingStrategy
from src.room_pricing.trace import PricingTrace

BAND_HIT_TOLERANCE = 0.01


@dataclass(frozen=True)
class PriceExplanation:
    date: date
    trace: PricingTrace
    lines: list[str]


def format_currency(value: float) -> str:
    rounded = round_half_up(value)
    return f"{'-' if rounded < 0 else ''}${abs(rounded)}"


def format_delta(value: float) -> str:
    rounded = round_half_up(value)
    return f"{'+' if rounded >= 0 else '-'}${abs(rounded)}"


def format_multiplier(value: float) -> str:
    return f"{value:.2f}x"


def render_price_breakdown(day: date | str, trace: PricingTrace) -> list[str]:
    """Plain-language lines, one block per pipeline stage."""

    anchor = trace.market_anchor
    yield_step = trace.yield_multiplier
    smoothing = trace.shoulder_smoothing
    guardrails = trace.guardrails

    lines = [f"Price explainer for {parse_date_key(day).isoformat()}"]
    lines.append(
        "Market anchor: "
        f"historical ADR {format_currency(anchor.historical_adr)} | "
        f"weighted avg {format_currency(anchor.weighted_average)} | "
        f"diff {format_currency(anchor.strategy_differential)} | "
        f"base {format_currency(anchor.base_price)}"
    )
    if anchor.smart_weights:
        for weight in anchor.smart_weights:
            share = round_half_up(weight.normalized_weight * 100)
            lines.append(f"  {weight.competitor_id}: {format_currency(weight.rate)} | w {share}%")
    else:
        lines.append("  No competitor rates for this date; the strategy base rate anchors the price.")

    lines.append(
        "Yield: "
        f"occupancy {round_half_up(yield_step.occupancy_pct)}% | "
        f"curve {format_multiplier(yield_step.stage_multiplier)} | "
        f"freedom {yield_step.freedom_index:.2f} | "
        f"effective {format_multiplier(yield_step.effective_multiplier)} | "
        f"price {format_currency(yield_step.price_after_multiplier)}"
    )

    if smoothing.window.previous is None or smoothing.window.next is None:
        lines.append("Shoulder smoothing: window edge, no neighbor adjustment.")
    else:
        lines.append(
            "Shoulder smoothing: "
            f"neighbors {format_currency(smoothing.window.previous)} / {format_currency(smoothing.window.next)} | "
            f"adjustment {format_delta(smoothing.shoulder_adj)} | "
            f"smoothed {format_currency(smoothing.smoothed_price)}"
        )

    hit_floor = abs(guardrails.clamped_price - guardrails.floor) < BAND_HIT_TOLERANCE
    hit_ceiling = abs(guardrails.clamped_price - guardrails.ceiling) < BAND_HIT_TOLERANCE
    band = f"band {format_currency(guardrails.floor)}-{format_currency(guardrails.ceiling)}"
    if hit_floor:
        band += " (floor applied)"
    elif hit_ceiling:
        band += " (ceiling applied)"
    lines.append(f"Guardrails: {band} | clamped {format_currency(guardrails.clamped_price)}")

    if guardrails.override_applied and guardrails.override_value is not None:
        lines.append(
            f"Manual override {format_currency(guardrails.override_value)} replaces the computed price "
            "and ignores the floor and ceiling."
        )
    lines.append(f"Final price: {format_currency(guardrails.final_price)}")
    return lines


def explain_date(
    day: date | str,
    *,
    strategy: PricingStrategy,
    provider: MarketObservationProvider,
) -> PriceExplanation | None:
    target = parse_date_key(day)
    window = list(provider.observations(target - timedelta(days=1), 3))
    target_index = next((idx for idx, observation in enumerate(window) if observation.date == target), None)
    if target_index is None:
        return None

    historical_adr = resolve_historical_adr(provider.historical_adr(), strategy)
    stage2_prices = compute_stage2_sequence(window, strategy=strategy, historical_adr=historical_adr)
    observation = window[target_index]
    trace = compute_day_price(
        day=target,
        historical_adr=historical_adr,
        occupancy_pct=observation.occupancy_pct,
        competitor_rates=observation.competitor_rates,
        previous_day_price=stage2_prices[target_index - 1] if target_index > 0 else None,
        next_day_price=stage2_prices[target_index + 1] if target_index < len(stage2_prices) - 1 else None,
        strategy=strategy,
    )
    return PriceExplanation(date=target, trace=trace, lines=render_price_breakdown(target, trace))
