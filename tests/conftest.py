import pytest

from providers.directory import StaticProviderDirectory
from providers.models import ServiceProvider
from routing.distance_estimator import DistanceEstimator
from scheduling.clock import VirtualClock


class FixedJitter:
    """
    RNG stand-in whose uniform() always returns the same value.
    """
    def __init__(self, value=1.0):
        self.value = value
        self.calls = []

    def uniform(self, a, b):
        self.calls.append((a, b))
        return self.value


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def fixed_jitter():
    return FixedJitter(1.0)


@pytest.fixture
def estimator(fixed_jitter):
    return DistanceEstimator(rng=fixed_jitter)


@pytest.fixture
def two_providers():
    # directory order: farther truck first
    return [
        ServiceProvider.new("3", "Daniel Motorista", "GHI-9012", 4.7, 3.1, 12, True),
        ServiceProvider.new("1", "Leandro Silva", "ABC-1234", 4.8, 2.3, 8, True),
    ]


@pytest.fixture
def directory(two_providers):
    return StaticProviderDirectory(two_providers)


@pytest.fixture
def make_jitter():
    return FixedJitter
