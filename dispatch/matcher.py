"""
Purpose: Dispatch Matcher (the "who goes" decision).
What it does:
Filters a directory snapshot to available providers and picks the nearest
one. Ties keep directory order: the first minimum encountered wins, so the
choice is deterministic for a given snapshot.
"""

import logging
from typing import Iterable, List

from providers.models import ServiceProvider
from .exceptions import NoProviderAvailableError

logger = logging.getLogger(__name__)


def filter_available_providers(providers: Iterable[ServiceProvider]) -> List[ServiceProvider]:
    """
    Returns only providers flagged as available, in their original order.
    """
    eligible = []

    for provider in providers:
        if not provider.available:
            continue

        eligible.append(provider)

    return eligible


def match_provider(providers: Iterable[ServiceProvider]) -> ServiceProvider:
    """
    Select the nearest available provider.

    Raises NoProviderAvailableError when the filtered list is empty.
    """
    eligible = filter_available_providers(providers)

    if not eligible:
        raise NoProviderAvailableError("No tow provider is available right now")

    # min() returns the first minimal element, which keeps directory order on ties
    chosen = min(eligible, key=lambda provider: provider.distance_km)

    logger.info(f"Matched provider {chosen.id} ({chosen.name}) at {chosen.distance_km} km out of {len(eligible)} candidates")
    return chosen
