"""
Purpose: Core data models for the providers domain.
What it does:
Defines the structure of a towing ServiceProvider without relying on any
ORM or directory backend.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceProvider:
    """
    An immutable snapshot of a tow truck unit at the time the directory was queried.
    """
    id: str
    name: str
    plate: str
    rating: float
    distance_km: float
    eta_minutes: int
    available: bool = True

    def __post_init__(self):
        if not 0.0 <= self.rating <= 5.0:
            raise ValueError(f"Provider {self.id}: rating must be between 0 and 5, got {self.rating}")

        if self.distance_km < 0:
            raise ValueError(f"Provider {self.id}: distance_km must be >= 0, got {self.distance_km}")

        if self.eta_minutes < 0:
            raise ValueError(f"Provider {self.id}: eta_minutes must be >= 0, got {self.eta_minutes}")

    @classmethod
    def new(
        cls,
        provider_id,
        name: str,
        plate: str,
        rating: float | str,
        distance_km: float | str,
        eta_minutes: int | str,
        available: bool | str = True,
    ) -> ServiceProvider:
        # CSV rows and mock generators hand us strings / numpy scalars
        if isinstance(available, str):
            available = available.strip().lower() in ("1", "true", "yes", "available")

        return cls(
            id=str(provider_id),
            name=str(name),
            plate=str(plate),
            rating=float(rating),
            distance_km=float(distance_km),
            eta_minutes=int(eta_minutes),
            available=bool(available),
        )
