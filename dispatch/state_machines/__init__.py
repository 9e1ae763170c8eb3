from .ride_state import RideLifecycle

__all__ = ["RideLifecycle"]
