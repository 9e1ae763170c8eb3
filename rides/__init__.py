"""
Rides domain package.

Public API:
- Domain models: QuoteDraft, Quote, RideRequest, RideStatus,
  SessionSnapshot, SessionStage
- Timing: TimingPolicy, default_timing_policy

The session itself lives in rides.session (import it from there).
"""
from .models import Quote, QuoteDraft, RideRequest, RideStatus, SessionSnapshot, SessionStage
from .policy import TimingPolicy, default_timing_policy

__all__ = ["QuoteDraft",
           "Quote",
             "RideRequest",
               "RideStatus",
               "SessionSnapshot",
               "SessionStage",
               "TimingPolicy",
               "default_timing_policy",
               ]
