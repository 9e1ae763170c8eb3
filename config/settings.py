#Purpose: Engine configuration loaded from environment variables.
#Reads an optional .env file, then TOW_* variables, and builds the policy
#objects every other module takes as plain arguments.
#Example .env:
#TOW_TIER_THRESHOLD_KM=40
#TOW_LOW_TIER_PRICE=150.00
#TOW_RANDOM_SEED=7
#TOW_PROVIDERS_CSV=mock_providers.csv
#Unset variables fall back to the policy defaults.

from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, TypeVar

from dotenv import load_dotenv

from pricing.policy import PricingPolicy
from rides.policy import TimingPolicy
from routing.distance_estimator import DistanceHeuristic

load_dotenv()

T = TypeVar("T")


@dataclass(frozen=True)
class EngineSettings:
    pricing: PricingPolicy = field(default_factory=PricingPolicy)
    timing: TimingPolicy = field(default_factory=TimingPolicy)
    heuristic: DistanceHeuristic = field(default_factory=DistanceHeuristic)
    random_seed: Optional[int] = None
    providers_csv: Optional[str] = None

    def validate(self) -> None:
        self.pricing.validate()
        self.timing.validate()
        self.heuristic.validate()


def _env(name: str, parse: Callable[[str], T], default: T) -> T:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default

    try:
        return parse(raw.strip())
    except (ValueError, InvalidOperation) as exc:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from exc


def load_settings() -> EngineSettings:
    """
    Build EngineSettings from the environment and validate every policy.
    """
    pricing_defaults = PricingPolicy()
    timing_defaults = TimingPolicy()
    heuristic_defaults = DistanceHeuristic()

    pricing = PricingPolicy(
        tier_threshold_km=_env("TOW_TIER_THRESHOLD_KM", float, pricing_defaults.tier_threshold_km),
        low_tier_price=_env("TOW_LOW_TIER_PRICE", Decimal, pricing_defaults.low_tier_price),
        high_tier_price=_env("TOW_HIGH_TIER_PRICE", Decimal, pricing_defaults.high_tier_price),
        fallback_distance_km=_env("TOW_FALLBACK_DISTANCE_KM", float, pricing_defaults.fallback_distance_km),
    )

    timing = TimingPolicy(
        debounce_seconds=_env("TOW_DEBOUNCE_SECONDS", float, timing_defaults.debounce_seconds),
        recalculation_latency_seconds=_env(
            "TOW_RECALC_LATENCY_SECONDS", float, timing_defaults.recalculation_latency_seconds
        ),
        quote_latency_seconds=_env("TOW_QUOTE_LATENCY_SECONDS", float, timing_defaults.quote_latency_seconds),
        accept_after_seconds=_env("TOW_ACCEPT_AFTER_SECONDS", float, timing_defaults.accept_after_seconds),
        en_route_after_seconds=_env("TOW_EN_ROUTE_AFTER_SECONDS", float, timing_defaults.en_route_after_seconds),
        arrive_after_seconds=_env("TOW_ARRIVE_AFTER_SECONDS", float, timing_defaults.arrive_after_seconds),
    )

    heuristic = DistanceHeuristic(
        base_distance_km=_env("TOW_BASE_DISTANCE_KM", float, heuristic_defaults.base_distance_km),
    )

    settings = EngineSettings(
        pricing=pricing,
        timing=timing,
        heuristic=heuristic,
        random_seed=_env("TOW_RANDOM_SEED", int, None),
        providers_csv=os.getenv("TOW_PROVIDERS_CSV") or None,
    )
    settings.validate()
    return settings
