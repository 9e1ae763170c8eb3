"""
Purpose: Central configuration for every simulated latency in a session.
What it does:

Stores the tunable delays (seconds):

DEBOUNCE = 0.5            quiet period after the last address edit
RECALCULATION = 1.5       simulated distance lookup
QUOTE = 2.0               simulated price lookup
ACCEPT_AFTER = 3          request -> accepted
EN_ROUTE_AFTER = 5        request -> en route
ARRIVE_AFTER = 15         request -> arrived

Lifecycle offsets are absolute from request creation, not chained.

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TimingPolicy:
    """
    Central configuration for session timers.
    """

    # --- Address edits ---
    debounce_seconds: float = 0.5
    recalculation_latency_seconds: float = 1.5

    # --- Quote ---
    quote_latency_seconds: float = 2.0

    # --- Lifecycle (offsets from creation) ---
    accept_after_seconds: float = 3.0
    en_route_after_seconds: float = 5.0
    arrive_after_seconds: float = 15.0

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.debounce_seconds <= 0:
            raise ValueError("debounce_seconds must be > 0")

        if self.recalculation_latency_seconds < 0 or self.quote_latency_seconds < 0:
            raise ValueError("latencies must be >= 0")

        if self.accept_after_seconds <= 0:
            raise ValueError("accept_after_seconds must be > 0")

        if not self.accept_after_seconds < self.en_route_after_seconds < self.arrive_after_seconds:
            raise ValueError("lifecycle offsets must satisfy accept < en_route < arrive")


def default_timing_policy() -> TimingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = TimingPolicy()
    p.validate()
    return p
