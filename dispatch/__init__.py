#Expose the high-level pipeline pieces:
#Error kinds shared by the whole engine
#Matching (nearest available provider)
#Request lifecycle state machine

from .exceptions import (
    EmptyAddressError,
    InvalidTransitionError,
    NoProviderAvailableError,
    TowDispatchError,
)
from .matcher import filter_available_providers, match_provider #the main function to pick a tow truck for a request
from .state_machines.ride_state import RideLifecycle

__all__ = [
    "TowDispatchError",
    "EmptyAddressError",
    "NoProviderAvailableError",
    "InvalidTransitionError",
    "filter_available_providers",
    "match_provider",
    "RideLifecycle",
]
