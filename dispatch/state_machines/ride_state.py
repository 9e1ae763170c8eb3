"""
Purpose: Request Lifecycle State Machine.
What it does:
Owns the single in-flight RideRequest of a session and moves it forward:

REQUESTING --(+3s)--> ACCEPTED --(+5s)--> EN_ROUTE --(+15s)--> ARRIVED --finalize()--> FINISHED

The three timed transitions are independent scheduled events keyed by request
id. Each one is re-validated when it fires: it only applies if the same
request is still active and the target is strictly later than the current
status. Reset cancels them; anything that still fires afterwards is a no-op.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from providers.models import ServiceProvider
from rides.models import RideRequest, RideStatus
from rides.policy import TimingPolicy, default_timing_policy
from scheduling.clock import Cancellable, Scheduler
from ..exceptions import InvalidTransitionError, NoProviderAvailableError

logger = logging.getLogger(__name__)


class RideLifecycle:
    """
    At most one active request at a time. `on_change` is called with the new
    request (or None) after every applied mutation.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        timing: Optional[TimingPolicy] = None,
        on_change: Optional[Callable[[Optional[RideRequest]], None]] = None,
    ):
        self.scheduler = scheduler
        self.timing = timing or default_timing_policy()
        self.on_change = on_change
        self._active: Optional[RideRequest] = None
        self._timers: Dict[str, List[Cancellable]] = {}

    @property
    def active(self) -> Optional[RideRequest]:
        return self._active

    @property
    def status(self) -> RideStatus:
        return self._active.status if self._active else RideStatus.NONE

    def create(
        self,
        origin: str,
        destination: str,
        distance_km: float,
        price: Decimal,
        provider: Optional[ServiceProvider],
    ) -> RideRequest:
        if provider is None:
            raise NoProviderAvailableError("Cannot create a request without an assigned provider")

        if self._active is not None:
            raise InvalidTransitionError(
                f"Request {self._active.id} is still active ({self._active.status.value}); reset first"
            )

        request = RideRequest.new(
            origin=origin,
            destination=destination,
            distance_km=distance_km,
            price=price,
            provider=provider,
            created_at=self.scheduler.now(),
        )
        self._active = request

        schedule = [
            (self.timing.accept_after_seconds, RideStatus.ACCEPTED),
            (self.timing.en_route_after_seconds, RideStatus.EN_ROUTE),
            (self.timing.arrive_after_seconds, RideStatus.ARRIVED),
        ]
        self._timers[request.id] = [
            self.scheduler.call_later(delay, self.advance, request.id, target)
            for delay, target in schedule
        ]

        logger.info(f"Request {request.id} created: {distance_km} km, {price}, provider {provider.id}")
        self._notify()
        return request

    def advance(self, request_id: str, target: RideStatus) -> bool:
        """
        Apply `target` if it still makes sense for `request_id`. Returns True if applied.
        """
        current = self._active

        if current is None or current.id != request_id:
            logger.debug(f"Dropping {target.value} for superseded request {request_id}")
            return False

        if target == RideStatus.FINISHED:
            # only finalize() closes a request
            return False

        if not current.status.precedes(target):
            logger.debug(f"Ignoring {target.value} for request {request_id}: already {current.status.value}")
            return False

        self._active = current.advanced_to(target)
        logger.info(f"Request {request_id}: {current.status.value} -> {target.value}")
        self._notify()
        return True

    def finalize(self) -> RideRequest:
        current = self._active

        if current is None:
            raise InvalidTransitionError("No active request to finalize")

        if current.status != RideStatus.ARRIVED:
            raise InvalidTransitionError(
                f"Cannot finalize request {current.id} from {current.status.value}; it must be arrived"
            )

        self._active = current.advanced_to(RideStatus.FINISHED)
        self._cancel_timers(current.id)
        logger.info(f"Request {current.id} finished")
        self._notify()
        return self._active

    def reset(self) -> None:
        """
        Drop the active request (if any) and cancel its pending transitions.
        """
        current = self._active
        self._active = None

        for request_id in list(self._timers):
            self._cancel_timers(request_id)

        if current is not None:
            logger.info(f"Request {current.id} reset from {current.status.value}")
            self._notify()

    def _cancel_timers(self, request_id: str) -> None:
        for handle in self._timers.pop(request_id, []):
            handle.cancel()

    def _notify(self) -> None:
        if self.on_change:
            self.on_change(self._active)
