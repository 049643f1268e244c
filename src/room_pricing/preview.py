# This module is the command-line preview for the nightly room-price engine.
# It loads the strategy and a market sample from YAML, then prints one priced line per night.
# By default the window starts where the sample sold the most rooms so yield and smoothing effects are visible.
# The first night's full trace is printed as JSON for audit-style inspection.

from __future__ import annotations

import argparse
import json
import logging
from datetime import date
from typing import Any

import yaml

from src.common.logging import configure_logging
from src.common.settings import get_settings
from src.room_pricing.calendar_builder import generate_calendar
from src.room_pricing.calendar_dates import parse_date_key
from src.room_pricing.market_data import (
    DEFAULT_ROOM_COUNT,
    CompetitorRate,
    DailyStat,
    InMemoryMarketProvider,
    find_busiest_window_start,
)
from src.room_pricing.strategy import load_strategy
from src.room_pricing.trace import PricePoint

LOGGER = logging.getLogger("room_pricing.preview")


def _daily_stat(raw: dict[str, Any], room_count: int) -> DailyStat:
    rooms_available = int(raw.get("rooms_available", room_count))
    rooms_sold = int(raw.get("rooms_sold", 0))
    occupancy_pct = raw.get("occupancy_pct")
    if occupancy_pct is None:
        occupancy_pct = rooms_sold / rooms_available * 100 if rooms_available > 0 else 0.0
    adr = raw.get("adr")
    rev_par = None
    if adr is not None and rooms_available > 0:
        rev_par = float(adr) * rooms_sold / rooms_available
    return DailyStat(
        date=parse_date_key(raw["date"]),
        rooms_sold=rooms_sold,
        rooms_available=rooms_available,
        occupancy_pct=float(occupancy_pct),
        adr=None if adr is None else float(adr),
        rev_par=rev_par,
    )


def load_market_sample(path: str) -> InMemoryMarketProvider:
    with open(path, encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Market sample {path} must be a mapping, got: {type(loaded).__name__}")

    room_count = int(loaded.get("room_count", DEFAULT_ROOM_COUNT))
    stats = [_daily_stat(dict(item), room_count) for item in loaded.get("daily_stats", [])]
    rates = [
        CompetitorRate(
            competitor_id=str(item["competitor_id"]),
            date=parse_date_key(item["date"]),
            rate=float(item["rate"]),
        )
        for item in loaded.get("competitor_rates", [])
    ]
    return InMemoryMarketProvider(
        daily_stats=stats,
        competitor_rates=rates,
        historical_adr=float(loaded.get("historical_adr", 0.0)),
        room_count=room_count,
    )


def default_start_date(provider: InMemoryMarketProvider, days: int) -> date | None:
    return find_busiest_window_start(provider.daily_stats, window_days=days)


def format_preview_line(point: PricePoint) -> str:
    trace = point.trace
    return (
        f"{point.date.isoformat()} | Occ {trace.yield_multiplier.occupancy_pct:.1f}% | "
        f"CompAvg ${trace.market_anchor.weighted_average:.2f} | "
        f"Curve {trace.yield_multiplier.stage_multiplier:.2f}x | "
        f"Effective {trace.yield_multiplier.effective_multiplier:.2f}x | "
        f"ShoulderAdj ${trace.shoulder_smoothing.shoulder_adj:.2f} | "
        f"Final ${trace.guardrails.final_price:.2f}"
    )


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Nightly room-price preview")
    parser.add_argument("--start-date", type=str, default=None, help="YYYY-MM-DD; defaults to the busiest window")
    parser.add_argument("--days", type=int, default=None)
    parser.add_argument("--strategy-path", type=str, default=None)
    parser.add_argument("--market-path", type=str, default=None)
    parser.add_argument("--log-level", type=str, default=None)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()
    configure_logging(level_override=args.log_level)

    strategy = load_strategy(config_path=args.strategy_path or settings.PRICING_STRATEGY_PATH)
    provider = load_market_sample(args.market_path or settings.MARKET_SAMPLE_PATH)
    days = args.days or settings.PREVIEW_DAYS

    start = parse_date_key(args.start_date) if args.start_date else default_start_date(provider, days)
    if start is None:
        LOGGER.warning("market sample has no daily stats; nothing to preview")
        return

    calendar = generate_calendar(start, days, strategy, provider)
    print(f"Pricing preview ({days} days starting {start.isoformat()}):")
    for point in calendar:
        print(format_preview_line(point))

    if calendar:
        print("\nSample pricing trace (day 1):")
        print(json.dumps(calendar[0].trace.to_dict(), indent=2, default=str))


if __name__ == "__main__":
    main()
