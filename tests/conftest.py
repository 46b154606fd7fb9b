"""Shared fixtures: a fixed clock and journeys backed by in-memory stores."""

from datetime import datetime, timedelta, timezone

import pytest

from empowerjourney.classroom import LearningJourney, MemoryProfileStore


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 4, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return MemoryProfileStore()


@pytest.fixture
def journey(store, clock):
    j = LearningJourney(store, clock=clock)
    j.onboard("Ada", email="ada@example.com")
    return j
