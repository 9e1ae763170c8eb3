#Marks routing as a package.
#Re-exports the distance estimation API so other modules import from routing
#without knowing internal file names.
#No business logic.

from .distance_estimator import (
    DistanceEstimator,
    DistanceHeuristic,
    default_heuristic,
    estimate_distance,
)

__all__ = [
           "DistanceEstimator",
           "DistanceHeuristic",
             "default_heuristic",
             "estimate_distance",
             ]
