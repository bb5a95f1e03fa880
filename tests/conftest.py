from datetime import datetime, timedelta, UTC

import pytest

from quotashortener.models import URLRecord


class ManualClock:
    """Clock double which only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def start_time() -> datetime:
    return datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def clock(start_time: datetime) -> ManualClock:
    return ManualClock(start_time)


@pytest.fixture
def record(start_time: datetime) -> URLRecord:
    return URLRecord.new(
        token='aZ3kP9qL',
        long_url='https://example.com/blog/chuck-norris-is-awesome',
        now=start_time,
        max_access=10,
        max_per_hour=5,
        max_age=3600,
    )
