"""
Purpose: Domain models for a tow request session.
What it does:
- Defines core data structures:
- QuoteDraft (draft_id, origin, destination, computed distance)
- Quote (price/distance pair computed for a draft)
- RideRequest (id, addresses, frozen distance & price, status, provider, eta)
- SessionSnapshot (what the presentation layer reads after every mutation)

Defines enums:
- RideStatus = NONE | REQUESTING | ACCEPTED | EN_ROUTE | ARRIVED | FINISHED
- SessionStage = START | QUOTED | REQUESTING | TRACKING | PAYMENT

Rule: No scheduling, no pricing logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple
import uuid

from providers.models import ServiceProvider


class RideStatus(str, Enum):
    """
    Strict forward order of a request. `rank` is the position in that order.
    """
    NONE = "none"
    REQUESTING = "requesting"
    ACCEPTED = "accepted"
    EN_ROUTE = "en_route"
    ARRIVED = "arrived"
    FINISHED = "finished"

    @property
    def rank(self) -> int:
        return _STATUS_ORDER.index(self)

    def precedes(self, other: RideStatus) -> bool:
        return self.rank < other.rank


_STATUS_ORDER = [
    RideStatus.NONE,
    RideStatus.REQUESTING,
    RideStatus.ACCEPTED,
    RideStatus.EN_ROUTE,
    RideStatus.ARRIVED,
    RideStatus.FINISHED,
]


class SessionStage(str, Enum):
    START = "start"
    QUOTED = "quoted"
    REQUESTING = "requesting"
    TRACKING = "tracking"
    PAYMENT = "payment"


@dataclass(frozen=True)
class QuoteDraft:
    """
    Pre-request state. A new draft (new draft_id) replaces the old one on
    every address edit, so late results can be matched against it by id.
    """
    draft_id: int
    origin: str = ""
    destination: str = ""
    distance_km: Optional[float] = None

    @property
    def has_addresses(self) -> bool:
        return bool(self.origin.strip()) and bool(self.destination.strip())

    def edited(self, *, origin: Optional[str] = None, destination: Optional[str] = None) -> QuoteDraft:
        return QuoteDraft(
            draft_id=self.draft_id + 1,
            origin=self.origin if origin is None else origin,
            destination=self.destination if destination is None else destination,
            distance_km=None,
        )

    def with_distance(self, distance_km: float) -> QuoteDraft:
        return replace(self, distance_km=distance_km)


@dataclass(frozen=True)
class Quote:
    draft_id: int
    distance_km: float
    price: Decimal
    fallback_used: bool = False


@dataclass(frozen=True)
class RideRequest:
    """
    A confirmed tow request. Only `status` ever changes, and only forward,
    by producing a new instance via `advanced_to`.
    """
    id: str
    origin: str
    destination: str
    distance_km: float
    price: Decimal
    provider: ServiceProvider
    eta_minutes: int
    status: RideStatus = RideStatus.REQUESTING
    created_at: float = 0.0

    @staticmethod # Factory method to create a request from a confirmed quote and matched provider
    def new(
        origin: str,
        destination: str,
        distance_km: float,
        price: Decimal,
        provider: ServiceProvider,
        created_at: float = 0.0,
    ) -> RideRequest:
        return RideRequest(
            id=str(uuid.uuid4()),
            origin=origin,
            destination=destination,
            distance_km=distance_km,
            price=price,
            provider=provider,
            eta_minutes=provider.eta_minutes,
            status=RideStatus.REQUESTING,
            created_at=created_at,
        )

    def advanced_to(self, status: RideStatus) -> RideRequest:
        return replace(self, status=status)


@dataclass(frozen=True)
class SessionSnapshot:
    draft: QuoteDraft
    quote: Optional[Quote] = None
    request: Optional[RideRequest] = None
    computing_distance: bool = False
    quoting: bool = False
    providers: Tuple[ServiceProvider, ...] = ()

    @property
    def status(self) -> RideStatus:
        return self.request.status if self.request else RideStatus.NONE

    @property
    def stage(self) -> SessionStage:
        status = self.status

        if status == RideStatus.NONE:
            return SessionStage.QUOTED if self.quote else SessionStage.START
        if status == RideStatus.REQUESTING:
            return SessionStage.REQUESTING
        if status == RideStatus.FINISHED:
            return SessionStage.PAYMENT
        return SessionStage.TRACKING
