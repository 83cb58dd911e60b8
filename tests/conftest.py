"""Shared fixtures."""

from datetime import datetime, timedelta, UTC

import pytest

from coldguard.config import ColdEmailLimits
from coldguard.guard import ColdEmailGuard


class FakeClock:
    """Settable clock for rollover tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 15, 12, 0, tzinfo=UTC))


@pytest.fixture
def limits():
    return ColdEmailLimits()


@pytest.fixture
def guard(clock, limits):
    return ColdEmailGuard(limits=limits, clock=clock)
