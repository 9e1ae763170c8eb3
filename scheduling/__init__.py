#Marks scheduling as a package.
#Re-exports the clock abstraction so the engine and tests can do:
#from scheduling import VirtualClock, AsyncioScheduler
#No business logic.

from .clock import AsyncioScheduler, Scheduler, TimerHandle, VirtualClock

__all__ = [
    "Scheduler",
    "TimerHandle",
    "VirtualClock",
    "AsyncioScheduler",
]
