#Purpose: Distance estimation heuristic (no real routing / geocoding).
#Maps two free-text addresses to an estimated trip length in km:
#base distance
#x one factor per keyword hint found in either address ("centro", "aeroporto", "shopping")
#x random jitter in [0.8, 1.2] to mimic a real routing answer
#rounded to one decimal
#The RNG is injectable so tests can pin the jitter.

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Optional, Protocol, Tuple

from dispatch.exceptions import EmptyAddressError

logger = logging.getLogger(__name__)


class UniformSource(Protocol):
    def uniform(self, a: float, b: float) -> float: ...


@dataclass(frozen=True)
class DistanceHeuristic:
    """
    Tunable constants for the keyword heuristic.
    """
    base_distance_km: float = 25.0

    # (keyword, factor). Each keyword applies at most once per estimate.
    keyword_factors: Tuple[Tuple[str, float], ...] = field(
        default_factory=lambda: (
            ("centro", 0.8),
            ("aeroporto", 1.5),
            ("shopping", 1.2),
        )
    )

    jitter_low: float = 0.8
    jitter_high: float = 1.2

    # floor so an estimate is never 0 after rounding
    min_distance_km: float = 0.1

    def validate(self) -> None:
        if self.base_distance_km <= 0:
            raise ValueError("base_distance_km must be > 0")

        if any(factor <= 0 for _, factor in self.keyword_factors):
            raise ValueError("keyword factors must be > 0")

        if not 0 < self.jitter_low <= self.jitter_high:
            raise ValueError("jitter range must satisfy 0 < low <= high")

        if self.min_distance_km <= 0:
            raise ValueError("min_distance_km must be > 0")


def default_heuristic() -> DistanceHeuristic:
    h = DistanceHeuristic()
    h.validate()
    return h


def keyword_multiplier(origin: str, destination: str, heuristic: DistanceHeuristic) -> float:
    """
    Compound one factor per keyword present (case-insensitive) in origin or destination.
    """
    origin_lower = origin.lower()
    destination_lower = destination.lower()

    multiplier = 1.0
    for keyword, factor in heuristic.keyword_factors:
        if keyword in origin_lower or keyword in destination_lower:
            multiplier *= factor
    return multiplier


def round_half_up(value: float, places: int = 1) -> float:
    scale = 10 ** places
    return math.floor(value * scale + 0.5) / scale


class DistanceEstimator:
    """
    Stateless apart from its RNG.
    """

    def __init__(
        self,
        rng: Optional[UniformSource] = None,
        heuristic: Optional[DistanceHeuristic] = None,
        seed: Optional[int] = None,
    ):
        if rng is not None and seed is not None:
            raise ValueError("pass either rng or seed, not both")

        self.rng = rng if rng is not None else random.Random(seed)
        self.heuristic = heuristic or default_heuristic()

    def estimate(self, origin: str, destination: str) -> float:
        if not origin or not origin.strip():
            raise EmptyAddressError("origin address is empty")
        if not destination or not destination.strip():
            raise EmptyAddressError("destination address is empty")

        h = self.heuristic
        multiplier = keyword_multiplier(origin, destination, h)
        jitter = self.rng.uniform(h.jitter_low, h.jitter_high)

        km = round_half_up(h.base_distance_km * multiplier * jitter, 1)
        km = max(km, h.min_distance_km)

        logger.debug(f"Estimated {km} km (multiplier={multiplier:.3f}, jitter={jitter:.3f})")
        return km


def estimate_distance(
    origin: str,
    destination: str,
    *,
    rng: Optional[UniformSource] = None,
    heuristic: Optional[DistanceHeuristic] = None,
) -> float:
    """
    One-shot convenience wrapper around DistanceEstimator.estimate.
    """
    return DistanceEstimator(rng=rng, heuristic=heuristic).estimate(origin, destination)
