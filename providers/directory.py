"""
Purpose: Provider Directory (the "who could come" collaborator).
What it does:
Supplies the candidate providers as read-only snapshots. In production this
would be a live fleet service; here it is a static list, optionally loaded
from a CSV file produced by `scripts/generate_mock_providers.py`.

Rule: the engine never mutates providers, it only reads `list_available()`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Protocol, Tuple, Union

import pandas as pd

from .models import ServiceProvider

logger = logging.getLogger(__name__)

PROVIDER_CSV_COLUMNS = [
    "provider_id",
    "name",
    "plate",
    "rating",
    "distance_km",
    "eta_minutes",
    "available",
]


class ProviderDirectory(Protocol):
    def list_available(self) -> Tuple[ServiceProvider, ...]: ...


class StaticProviderDirectory:
    """
    Fixed in-memory directory. Keeps the original order, which the matcher
    uses to break distance ties.
    """

    def __init__(self, providers: Iterable[ServiceProvider] = ()):
        self._providers: Tuple[ServiceProvider, ...] = tuple(providers)

    def list_available(self) -> Tuple[ServiceProvider, ...]:
        return tuple(provider for provider in self._providers if provider.available)

    def __len__(self) -> int:
        return len(self._providers)


def default_provider_directory() -> StaticProviderDirectory:
    """
    The two stock tow trucks the demo app ships with.
    """
    return StaticProviderDirectory([
        ServiceProvider(
            id="1",
            name="Leandro Silva",
            plate="ABC-1234",
            rating=4.8,
            distance_km=2.3,
            eta_minutes=8,
            available=True,
        ),
        ServiceProvider(
            id="3",
            name="Daniel Motorista",
            plate="GHI-9012",
            rating=4.7,
            distance_km=3.1,
            eta_minutes=12,
            available=True,
        ),
    ])


def load_providers_csv(path: Union[str, Path]) -> StaticProviderDirectory:
    """
    Build a directory from a CSV with the PROVIDER_CSV_COLUMNS header.
    Raises ValueError if a column is missing.
    """
    df = pd.read_csv(path, dtype={"provider_id": str, "plate": str})

    missing = [column for column in PROVIDER_CSV_COLUMNS if column not in df.columns]
    if missing:
        raise ValueError(f"Provider CSV {path} is missing columns: {', '.join(missing)}")

    providers = []
    for _, row in df.iterrows():
        providers.append(
            ServiceProvider.new(
                provider_id=row["provider_id"],
                name=row["name"],
                plate=row["plate"],
                rating=row["rating"],
                distance_km=row["distance_km"],
                eta_minutes=row["eta_minutes"],
                # blank cells come back as NaN, which bool() would call available
                available=False if pd.isna(row["available"]) else row["available"],
            )
        )

    logger.info(f"Loaded {len(providers)} providers from {path}")
    return StaticProviderDirectory(providers)
