"""Unit tests for create_url_record() and resolve_url_record().

These tests run the full create/redirect cycle against the in-memory record
store with a manual clock, so every write-back is awaited explicitly.

Test coverage includes:

1. Creation
   - Ensures tokens are 8 base62 characters and records are stored with their limits.
   - Ensures invalid input raises ValidationError without storing anything.
   - Ensures store errors propagate.

2. Total access limit
   - Pins current behavior: max_access=10 allows 11 redirects, then the record is gone.

3. Hourly access limit
   - Ensures max_per_hour=5 allows 5 redirects per window and recovers after an hour.

4. Expiry
   - Ensures max_age=1 records expire after their age.
   - Ensures allowed redirects refresh the TTL while rejected ones don't.

5. Concurrency
   - Documents the lost-update race of concurrent redirects.
"""

import string
from unittest.mock import MagicMock

import pytest

from quotashortener.exceptions import ValidationError
from quotashortener.policy import AccessOutcome
from quotashortener.dao.base import URLRecordBaseDAO
from quotashortener.dao.memory import URLRecordMemoryDAO
from quotashortener.dao.writer import BackgroundRecordWriter
from quotashortener.dao.exceptions import DataStoreError
from quotashortener.services import create_url_record, resolve_url_record


ALPHABET = set(string.ascii_letters + string.digits)


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def dao(clock):
    return URLRecordMemoryDAO(clock=clock)


@pytest.fixture
def writer(dao):
    _writer = BackgroundRecordWriter(dao, max_workers=1)
    yield _writer
    _writer.shutdown()


@pytest.fixture
def resolve(dao, writer, clock):
    """Resolve a token and wait for its write-back, like a sequential client would observe."""

    def _resolve(token):
        resolution = resolve_url_record(dao, token, writer=writer, clock=clock)
        if resolution.pending_write is not None:
            resolution.pending_write.result(timeout=5)
        return resolution

    return _resolve


# -------------------------------
# 1. Creation
# -------------------------------


def test_create_url_record(dao, clock):
    record = create_url_record(dao, long_url='https://example.com/page', max_access=3, max_per_hour=2, max_age=120, clock=clock)

    assert len(record.token) == 8
    assert set(record.token) <= ALPHABET
    assert dao.get(record.token) == record
    assert record.max_access == 3
    assert record.max_per_hour == 2
    assert record.created_at == clock()
    assert record.age_duration.total_seconds() == 120


def test_create_uses_defaults(dao, clock):
    record = create_url_record(dao, long_url='https://example.com/page', clock=clock)

    assert record.max_access == -1
    assert record.max_per_hour == -1
    assert record.age_duration.total_seconds() == 3600


def test_created_tokens_are_unique(dao, clock):
    tokens = {create_url_record(dao, long_url=f'https://example.com/{i}', clock=clock).token for i in range(500)}

    assert len(tokens) == 500
    assert len(dao) == 500


@pytest.mark.parametrize('long_url', ['', None])
def test_create_without_long_url(dao, clock, long_url):
    with pytest.raises(ValidationError, match='Missing long_url parameter'):
        create_url_record(dao, long_url=long_url, clock=clock)

    assert len(dao) == 0


@pytest.mark.parametrize('max_age', [0, -1, 31_536_001])
def test_create_with_out_of_range_max_age(dao, clock, max_age):
    with pytest.raises(ValidationError, match='Invalid max_age parameter'):
        create_url_record(dao, long_url='https://example.com', max_age=max_age, clock=clock)

    assert len(dao) == 0


@pytest.mark.parametrize('max_age', [1, 31_536_000])
def test_create_with_max_age_bounds(dao, clock, max_age):
    record = create_url_record(dao, long_url='https://example.com', max_age=max_age, clock=clock)

    assert record.age_duration.total_seconds() == max_age


def test_create_propagates_store_errors(clock):
    dao = MagicMock(spec=URLRecordBaseDAO)
    dao.exists.side_effect = DataStoreError("Can't connect to Redis at redis:6379/0.")

    with pytest.raises(DataStoreError):
        create_url_record(dao, long_url='https://example.com', clock=clock)

    dao.exists.assert_called_once()
    dao.save.assert_not_called()


# -------------------------------
# 2. Total access limit
# -------------------------------


def test_max_access_allows_eleven_redirects_for_ten(dao, clock, resolve):
    """Regression: max_access=10 serves 11 redirects, the 12th deletes the record."""
    token = create_url_record(dao, long_url='https://example.com/limited', max_access=10, clock=clock).token

    outcomes = [resolve(token).outcome for _ in range(12)]

    assert outcomes == [AccessOutcome.ALLOWED] * 11 + [AccessOutcome.MAX_ACCESS_REACHED]
    assert not dao.exists(token)
    assert resolve(token).outcome is AccessOutcome.NOT_FOUND
    assert resolve(token).outcome is AccessOutcome.NOT_FOUND


def test_allowed_redirect_targets_long_url(dao, clock, resolve):
    token = create_url_record(dao, long_url='https://example.com/target', clock=clock).token

    resolution = resolve(token)

    assert resolution.outcome is AccessOutcome.ALLOWED
    assert resolution.target == 'https://example.com/target'
    assert dao.get(token).current_access_count == 1
    assert dao.get(token).last_accessed_at == clock()


def test_unknown_token_is_not_found(resolve):
    resolution = resolve('missing0')

    assert resolution.outcome is AccessOutcome.NOT_FOUND
    assert resolution.target is None
    assert resolution.pending_write is None


# -------------------------------
# 3. Hourly access limit
# -------------------------------


def test_max_per_hour_allows_five_per_window(dao, clock, resolve):
    token = create_url_record(dao, long_url='https://example.com/hourly', max_per_hour=5, clock=clock).token

    outcomes = []
    for _ in range(6):
        clock.advance(minutes=1)
        outcomes.append(resolve(token).outcome)

    assert outcomes == [AccessOutcome.ALLOWED] * 5 + [AccessOutcome.MAX_PER_HOUR_REACHED]
    stored = dao.get(token)
    assert stored.hourly_access_count == 5
    assert stored.current_access_count == 5


def test_max_per_hour_recovers_after_window(dao, clock, resolve):
    token = create_url_record(dao, long_url='https://example.com/hourly', max_per_hour=5, max_age=7200, clock=clock).token
    for _ in range(5):
        resolve(token)

    clock.advance(minutes=30)
    assert resolve(token).outcome is AccessOutcome.MAX_PER_HOUR_REACHED

    clock.advance(minutes=30)
    resolution = resolve(token)

    assert resolution.outcome is AccessOutcome.ALLOWED
    assert resolution.record.hourly_access_count == 1
    assert resolution.record.last_hourly_reset_at == clock()


# -------------------------------
# 4. Expiry
# -------------------------------


def test_short_lived_record_expires(dao, clock, resolve):
    token = create_url_record(dao, long_url='https://example.com/brief', max_age=1, clock=clock).token

    assert resolve(token).outcome is AccessOutcome.ALLOWED

    clock.advance(seconds=2)
    assert resolve(token).outcome is AccessOutcome.NOT_FOUND


def test_allowed_redirect_refreshes_ttl(dao, clock, resolve):
    token = create_url_record(dao, long_url='https://example.com', max_age=60, clock=clock).token

    clock.advance(seconds=50)
    assert resolve(token).outcome is AccessOutcome.ALLOWED

    clock.advance(seconds=50)
    assert resolve(token).outcome is AccessOutcome.ALLOWED


def test_rejected_redirect_does_not_refresh_ttl(dao, clock, resolve):
    token = create_url_record(dao, long_url='https://example.com', max_per_hour=1, max_age=60, clock=clock).token
    assert resolve(token).outcome is AccessOutcome.ALLOWED

    clock.advance(seconds=50)
    assert resolve(token).outcome is AccessOutcome.MAX_PER_HOUR_REACHED

    clock.advance(seconds=20)
    assert resolve(token).outcome is AccessOutcome.NOT_FOUND


# -------------------------------
# 5. Concurrency
# -------------------------------


def test_concurrent_redirects_can_lose_an_update(dao, clock):
    """Two redirects reading the same state both succeed but only one increment survives."""
    token = create_url_record(dao, long_url='https://example.com', clock=clock).token
    deferred_writer = MagicMock(spec=BackgroundRecordWriter)

    # Both requests read the record before either write-back lands
    first = resolve_url_record(dao, token, writer=deferred_writer, clock=clock)
    second = resolve_url_record(dao, token, writer=deferred_writer, clock=clock)
    for call in deferred_writer.save.call_args_list:
        dao.save(*call.args)

    assert first.outcome is second.outcome is AccessOutcome.ALLOWED
    assert deferred_writer.save.call_count == 2
    assert dao.get(token).current_access_count == 1
