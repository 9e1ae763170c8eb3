"""
Purpose: Recalculation Controller (debounced distance estimates).
What it does:
- Every address edit calls `on_address_change(draft)`.
- Any pending debounce timer or in-flight computation is cancelled, then a
  new quiet window starts.
- When the window elapses with both addresses filled in, a simulated lookup
  runs for `recalculation_latency_seconds`, calls the Distance Estimator and
  hands `(draft_id, km)` to `on_result`.

At most one outstanding computation exists; a result for a superseded draft
is never delivered.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from routing.distance_estimator import DistanceEstimator
from scheduling.clock import Cancellable, Scheduler
from .models import QuoteDraft
from .policy import TimingPolicy, default_timing_policy

logger = logging.getLogger(__name__)

ResultCallback = Callable[[int, float], None]


class RecalculationController:
    def __init__(
        self,
        scheduler: Scheduler,
        estimator: DistanceEstimator,
        on_result: ResultCallback,
        timing: Optional[TimingPolicy] = None,
        on_start: Optional[Callable[[int], None]] = None,
        on_error: Optional[Callable[[int], None]] = None,
    ):
        self.scheduler = scheduler
        self.estimator = estimator
        self.on_result = on_result
        self.on_start = on_start
        self.on_error = on_error
        self.timing = timing or default_timing_policy()

        self._debounce: Optional[Cancellable] = None
        self._in_flight: Optional[Cancellable] = None
        self.completed_runs = 0

    def is_computing(self) -> bool:
        return self._in_flight is not None

    def is_pending(self) -> bool:
        """
        True while waiting out the debounce window.
        """
        return self._debounce is not None

    def on_address_change(self, draft: QuoteDraft) -> None:
        self.cancel()
        self._debounce = self.scheduler.call_later(self.timing.debounce_seconds, self._on_quiet, draft)
        logger.debug(f"Draft {draft.draft_id}: recalculation in {self.timing.debounce_seconds}s")

    def cancel(self) -> None:
        """
        Drop the pending debounce and discard any in-flight computation.
        """
        if self._debounce is not None:
            self._debounce.cancel()
            self._debounce = None

        if self._in_flight is not None:
            self._in_flight.cancel()
            self._in_flight = None

    def _on_quiet(self, draft: QuoteDraft) -> None:
        self._debounce = None

        if not draft.has_addresses:
            logger.debug(f"Draft {draft.draft_id}: addresses incomplete, nothing to compute")
            return

        self._in_flight = self.scheduler.call_later(
            self.timing.recalculation_latency_seconds, self._compute, draft
        )
        if self.on_start:
            self.on_start(draft.draft_id)

    def _compute(self, draft: QuoteDraft) -> None:
        try:
            km = self.estimator.estimate(draft.origin, draft.destination)
        except Exception:
            self._in_flight = None
            logger.exception(f"Draft {draft.draft_id}: distance estimate failed")
            if self.on_error:
                self.on_error(draft.draft_id)
            raise

        self._in_flight = None

        self.completed_runs += 1
        logger.info(f"Draft {draft.draft_id}: estimated {km} km")
        self.on_result(draft.draft_id, km)
