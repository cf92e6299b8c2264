"""
Shared fixtures: the bundled catalog, a controllable clock and an engine
assembled from in-memory collaborators only.
"""
from datetime import datetime, timedelta, timezone

import pytest

from triage.catalog import InMemoryCatalog
from triage.composer import AdvisoryComposer
from triage.engine import TriageEngine
from triage.rate_limiter import InMemoryRateLimitStore, RateLimiter


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog():
    return InMemoryCatalog.from_json()


@pytest.fixture
def rate_limiter(clock):
    return RateLimiter(InMemoryRateLimitStore(), window_seconds=3600, max_requests=20, clock=clock)


@pytest.fixture
def engine(catalog, rate_limiter):
    engine = TriageEngine(catalog=catalog, rate_limiter=rate_limiter, composer=AdvisoryComposer())
    yield engine
    engine.shutdown()
