# This module defines the pricing strategy consumed by the nightly room-price engine.
# The engine-facing `PricingStrategy` is a plain frozen record that the stages trust without re-checking.
# `PricingStrategyPayload` is the validation boundary; ranges and band ordering are enforced there.
# The YAML loader merges file values with PRICING_* environment overrides before validating.

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from src.room_pricing.calendar_dates import is_date_key

LOGGER = logging.getLogger("room_pricing")

LEGACY_FREEDOM_INDEX_KEY = "aggressiveness"

ENV_OVERRIDES = {
    "base_rate": "PRICING_BASE_RATE",
    "floor": "PRICING_FLOOR",
    "ceiling": "PRICING_CEILING",
    "freedom_index": "PRICING_FREEDOM_INDEX",
    "smoothing_factor": "PRICING_SMOOTHING_FACTOR",
    "strategy_differential": "PRICING_STRATEGY_DIFFERENTIAL",
}


class StrategyValidationError(ValueError):
    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


@dataclass(frozen=True)
class PricingStrategy:
    base_rate: float
    floor: float
    ceiling: float
    smoothing_factor: float
    freedom_index: float = 1.0
    competitor_weights: dict[str, float] = field(default_factory=dict)
    strategy_differential: float = 0.0
    overrides: dict[str, float] = field(default_factory=dict)

    def with_changes(self, **changes: Any) -> PricingStrategy:
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_rate": self.base_rate,
            "floor": self.floor,
            "ceiling": self.ceiling,
            "freedom_index": self.freedom_index,
            "smoothing_factor": self.smoothing_factor,
            "competitor_weights": dict(self.competitor_weights),
            "strategy_differential": self.strategy_differential,
            "overrides": dict(self.overrides),
        }


class PricingStrategyPayload(BaseModel):
    """Validated strategy shape accepted from config files and strategy stores."""

    model_config = ConfigDict(extra="forbid")

    base_rate: float = Field(ge=0)
    floor: float = Field(ge=0)
    ceiling: float = Field(ge=0)
    freedom_index: float = Field(default=1.0, ge=0, le=1)
    smoothing_factor: float = Field(ge=0, le=1)
    competitor_weights: dict[str, float] = Field(default_factory=dict)
    strategy_differential: float = 0.0
    overrides: dict[str, float] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _migrate_legacy_keys(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        raw = dict(data)
        legacy = raw.pop(LEGACY_FREEDOM_INDEX_KEY, None)
        if raw.get("freedom_index") is None and isinstance(legacy, int | float):
            raw["freedom_index"] = legacy
        return raw

    @field_validator("competitor_weights")
    @classmethod
    def _weights_nonnegative(cls, value: dict[str, float]) -> dict[str, float]:
        for competitor_id, weight in value.items():
            if weight < 0:
                raise ValueError(f"competitor weight for {competitor_id!r} must be nonnegative")
        return value

    @field_validator("overrides")
    @classmethod
    def _overrides_keyed_by_date(cls, value: dict[str, float]) -> dict[str, float]:
        for key, price in value.items():
            if not is_date_key(key):
                raise ValueError(f"override key {key!r} must be a YYYY-MM-DD date")
            if price < 0:
                raise ValueError(f"override price for {key} must be nonnegative")
        return value

    @model_validator(mode="after")
    def _band_is_ordered(self) -> PricingStrategyPayload:
        if self.floor > self.ceiling:
            raise ValueError("floor must be less than or equal to ceiling")
        if self.base_rate < self.floor:
            raise ValueError("base_rate should not be below the floor")
        if self.base_rate > self.ceiling:
            raise ValueError("base_rate should not exceed the ceiling")
        return self

    def to_strategy(self) -> PricingStrategy:
        return PricingStrategy(
            base_rate=self.base_rate,
            floor=self.floor,
            ceiling=self.ceiling,
            freedom_index=self.freedom_index,
            smoothing_factor=self.smoothing_factor,
            competitor_weights=dict(self.competitor_weights),
            strategy_differential=self.strategy_differential,
            overrides=dict(self.overrides),
        )


def parse_strategy(payload: Mapping[str, Any]) -> PricingStrategy:
    try:
        return PricingStrategyPayload.model_validate(dict(payload)).to_strategy()
    except ValidationError as exc:
        details = [
            {"loc": list(error.get("loc", ())), "msg": str(error.get("msg", ""))}
            for error in exc.errors(include_url=False)
        ]
        raise StrategyValidationError(f"Invalid pricing strategy: {exc.error_count()} issue(s)", details=details) from exc


def _load_yaml(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise StrategyValidationError(f"Strategy file {path} must be a mapping, got: {type(loaded).__name__}")
    return dict(loaded)


def _env_float(name: str, default: float | None = None) -> float | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


def load_strategy(*, config_path: str = "configs/pricing_strategy.yaml") -> PricingStrategy:
    cfg = _load_yaml(config_path)
    for key, env_name in ENV_OVERRIDES.items():
        override = _env_float(env_name)
        if override is not None:
            LOGGER.info("strategy override from env %s=%s", env_name, override)
            cfg[key] = override

    strategy = parse_strategy(cfg)
    LOGGER.info(
        "loaded pricing strategy path=%s base_rate=%s floor=%s ceiling=%s overrides=%d",
        config_path,
        strategy.base_rate,
        strategy.floor,
        strategy.ceiling,
        len(strategy.overrides),
    )
    return strategy
