"""
Purpose: The session orchestrator (the "glue").
What it does:
Owns one QuoteDraft, the latest Quote and the RideLifecycle for a single
user, and exposes the commands the presentation layer issues:

edit_origin / edit_destination -> debounced distance recalculation
request_quote                  -> price after the quote latency
confirm_request                -> nearest provider + new request
finalize / reset

After every mutation (including timed ones) listeners get a fresh
SessionSnapshot. Nothing is global: every piece of state hangs off the
session object.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from dispatch.exceptions import EmptyAddressError, InvalidTransitionError, NoProviderAvailableError
from dispatch.matcher import match_provider
from dispatch.state_machines.ride_state import RideLifecycle
from pricing.policy import PricingPolicy, default_pricing_policy, price_for_distance
from providers.directory import ProviderDirectory, default_provider_directory, load_providers_csv
from routing.distance_estimator import DistanceEstimator
from scheduling.clock import Cancellable, Scheduler
from .models import Quote, QuoteDraft, RideRequest, SessionSnapshot
from .policy import TimingPolicy, default_timing_policy
from .recalculation import RecalculationController

logger = logging.getLogger(__name__)

Listener = Callable[[SessionSnapshot], None]


class TowSession:
    """
    A single user's tow request session. Single-threaded: commands and timer
    callbacks never run concurrently, so no locking is needed.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        estimator: Optional[DistanceEstimator] = None,
        directory: Optional[ProviderDirectory] = None,
        pricing: Optional[PricingPolicy] = None,
        timing: Optional[TimingPolicy] = None,
    ):
        self.scheduler = scheduler
        self.estimator = estimator or DistanceEstimator()
        self.directory = directory or default_provider_directory()
        self.pricing = pricing or default_pricing_policy()
        self.timing = timing or default_timing_policy()

        self._draft = QuoteDraft(draft_id=0)
        self._quote: Optional[Quote] = None
        self._pending_quote: Optional[Cancellable] = None
        self._listeners: List[Listener] = []

        self.recalculation = RecalculationController(
            scheduler,
            self.estimator,
            self._on_distance,
            timing=self.timing,
            on_start=lambda draft_id: self._publish(),
            on_error=lambda draft_id: self._publish(),
        )
        self.lifecycle = RideLifecycle(scheduler, timing=self.timing, on_change=self._on_request_change)

    @classmethod
    def from_settings(cls, settings, scheduler: Scheduler, directory: Optional[ProviderDirectory] = None) -> TowSession:
        """
        Build a session from an EngineSettings (see config.settings.load_settings).
        """
        if directory is None:
            if settings.providers_csv:
                directory = load_providers_csv(settings.providers_csv)
            else:
                directory = default_provider_directory()

        return cls(
            scheduler,
            estimator=DistanceEstimator(heuristic=settings.heuristic, seed=settings.random_seed),
            directory=directory,
            pricing=settings.pricing,
            timing=settings.timing,
        )

    # --- Read API ---

    @property
    def draft(self) -> QuoteDraft:
        return self._draft

    @property
    def quote(self) -> Optional[Quote]:
        return self._quote

    @property
    def request(self) -> Optional[RideRequest]:
        return self.lifecycle.active

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            draft=self._draft,
            quote=self._quote,
            request=self.lifecycle.active,
            computing_distance=self.recalculation.is_computing(),
            quoting=self._pending_quote is not None,
            providers=tuple(self.directory.list_available()),
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener; returns a callable that unregisters it.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Commands ---

    def edit_origin(self, text: str) -> None:
        self._replace_draft(self._draft.edited(origin=text))

    def edit_destination(self, text: str) -> None:
        self._replace_draft(self._draft.edited(destination=text))

    def request_quote(self) -> None:
        draft = self._draft

        if not draft.has_addresses:
            logger.warning("Quote requested with an empty origin or destination")
            raise EmptyAddressError("Both origin and destination are required for a quote")

        if self.lifecycle.active is not None:
            logger.warning("Quote requested while a request is active")
            raise InvalidTransitionError("A request is already active; reset before quoting again")

        # the fallback is the caller's job, the pricing policy stays pure
        fallback_used = draft.distance_km is None
        distance_km = self.pricing.fallback_distance_km if fallback_used else draft.distance_km

        if self._pending_quote is not None:
            self._pending_quote.cancel()

        self._pending_quote = self.scheduler.call_later(
            self.timing.quote_latency_seconds, self._deliver_quote, draft.draft_id, distance_km, fallback_used
        )
        self._publish()

    def confirm_request(self) -> RideRequest:
        if self._quote is None or self._pending_quote is not None:
            logger.warning("Confirm attempted without a finished quote")
            raise InvalidTransitionError("No quote to confirm")

        if self.lifecycle.active is not None:
            logger.warning("Confirm attempted while a request is active")
            raise InvalidTransitionError("A request is already active")

        try:
            provider = match_provider(self.directory.list_available())
        except NoProviderAvailableError:
            logger.warning("Confirm failed: no provider available")
            raise

        quote = self._quote
        return self.lifecycle.create(
            origin=self._draft.origin,
            destination=self._draft.destination,
            distance_km=quote.distance_km,
            price=quote.price,
            provider=provider,
        )

    def finalize(self) -> RideRequest:
        try:
            return self.lifecycle.finalize()
        except InvalidTransitionError as exc:
            logger.warning(f"Finalize rejected: {exc}")
            raise

    def reset(self) -> None:
        self.recalculation.cancel()
        if self._pending_quote is not None:
            self._pending_quote.cancel()
            self._pending_quote = None

        self._draft = QuoteDraft(draft_id=self._draft.draft_id + 1)
        self._quote = None
        logger.info("Session reset")

        # the lifecycle publishes through _on_request_change when it drops a request
        had_request = self.lifecycle.active is not None
        self.lifecycle.reset()
        if not had_request:
            self._publish()

    # --- Internal ---

    def _replace_draft(self, draft: QuoteDraft) -> None:
        self._draft = draft
        self._quote = None
        if self._pending_quote is not None:
            self._pending_quote.cancel()
            self._pending_quote = None

        self.recalculation.on_address_change(draft)
        self._publish()

    def _on_distance(self, draft_id: int, distance_km: float) -> None:
        if draft_id != self._draft.draft_id:
            logger.debug(f"Discarding distance for superseded draft {draft_id}")
            return

        self._draft = self._draft.with_distance(distance_km)
        self._publish()

    def _deliver_quote(self, draft_id: int, distance_km: float, fallback_used: bool) -> None:
        self._pending_quote = None

        if draft_id != self._draft.draft_id:
            logger.debug(f"Discarding quote for superseded draft {draft_id}")
            return

        price = price_for_distance(distance_km, self.pricing)
        self._quote = Quote(
            draft_id=draft_id,
            distance_km=distance_km,
            price=price,
            fallback_used=fallback_used,
        )
        logger.info(f"Quote ready: {distance_km} km -> {price}" + (" (fallback distance)" if fallback_used else ""))
        self._publish()

    def _on_request_change(self, request: Optional[RideRequest]) -> None:
        self._publish()

    def _publish(self) -> None:
        if not self._listeners:
            return

        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
