"""Error kinds raised by the tow dispatch engine.

All of them are recoverable: the caller can fix its input, retry or reset.
"""


class TowDispatchError(Exception):
    """Base class for every engine error."""
    pass


class EmptyAddressError(TowDispatchError):
    """Raised when origin or destination is blank."""
    pass


class NoProviderAvailableError(TowDispatchError):
    """Raised when matching finds zero available providers."""
    pass


class InvalidTransitionError(TowDispatchError):
    """Raised when a command is not allowed in the current request state."""
    pass
