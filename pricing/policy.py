"""
Purpose: Central configuration and rule for tiered tow pricing.
What it does:

Two fixed price bands split at a distance threshold:

distance_km <= 40  -> 150.00
distance_km >  40  -> 180.00

Rule: the policy is pure. It never substitutes a default distance; callers
that have no computed distance use `fallback_distance_km` themselves.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class PricingPolicy:
    """
    Central configuration for quote pricing.
    """

    # --- Tier boundary ---
    # Exactly at the threshold is still the low tier.
    tier_threshold_km: float = 40.0

    # --- Tier prices ---
    low_tier_price: Decimal = Decimal("150.00")
    high_tier_price: Decimal = Decimal("180.00")

    # --- Fallback ---
    # Distance quoted when no estimate has completed yet (applied by the caller).
    fallback_distance_km: float = 35.0

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.tier_threshold_km <= 0:
            raise ValueError("tier_threshold_km must be > 0")

        if self.low_tier_price <= 0 or self.high_tier_price <= 0:
            raise ValueError("tier prices must be > 0")

        if self.high_tier_price < self.low_tier_price:
            raise ValueError("high_tier_price must be >= low_tier_price")

        if self.fallback_distance_km <= 0:
            raise ValueError("fallback_distance_km must be > 0")


def default_pricing_policy() -> PricingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = PricingPolicy()
    p.validate()
    return p


def price_for_distance(distance_km: float, policy: Optional[PricingPolicy] = None) -> Decimal:
    """
    Price of a tow of `distance_km` kilometres.
    """
    policy = policy or default_pricing_policy()

    if distance_km is None:
        raise ValueError("distance_km is required; apply the fallback distance before pricing")
    if not math.isfinite(distance_km):
        raise ValueError(f"distance_km must be a finite number, got {distance_km}")
    if distance_km < 0:
        raise ValueError(f"distance_km must be >= 0, got {distance_km}")

    if distance_km <= policy.tier_threshold_km:
        price = policy.low_tier_price
    else:
        price = policy.high_tier_price

    return Decimal(price).quantize(CENTS)
