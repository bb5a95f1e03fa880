"""Access policy evaluated on every redirect of a short URL.

The policy is a pure function of a record and the current time. It never
touches the record store: loading the record, deleting it and persisting the
updated copy are the caller's responsibility.

Evaluation order:
    1. No record                                  -> NOT_FOUND
    2. current_access_count > max_access          -> MAX_ACCESS_REACHED (caller deletes)
    3. hourly window older than one hour          -> window resets to `now`
       hourly_access_count >= max_per_hour        -> MAX_PER_HOUR_REACHED (nothing persisted)
    4. counters incremented, last_accessed_at set -> ALLOWED (caller persists)

NOTE: the total access check compares with `>` before incrementing, so a record
      with max_access=N serves N + 1 redirects before it's rejected. Existing
      links rely on this, so it stays until the limit semantics are changed on
      purpose (see test_access_policy.py::test_max_access_allows_one_extra_access).

Example:
    >>> decision = evaluate_access(record, datetime.now(UTC))
    >>> decision.outcome
    <AccessOutcome.ALLOWED: 'allowed'>
    >>> decision.record.current_access_count
    1
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import StrEnum

from quotashortener.models import URLRecord


HOURLY_WINDOW = timedelta(hours=1)


class AccessOutcome(StrEnum):
    ALLOWED = 'allowed'
    NOT_FOUND = 'not_found'
    MAX_ACCESS_REACHED = 'max_access_reached'
    MAX_PER_HOUR_REACHED = 'max_per_hour_reached'


@dataclass(frozen=True)
class AccessDecision:
    """Result of evaluating one access attempt.

    Attributes:
        outcome (AccessOutcome):
            Whether the access is allowed and, if not, why.
        record (URLRecord | None):
            Updated record to persist when the access is allowed, otherwise None.
    """

    outcome: AccessOutcome
    record: URLRecord | None = None

    @property
    def allowed(self) -> bool:
        return self.outcome is AccessOutcome.ALLOWED

    @property
    def delete_record(self) -> bool:
        return self.outcome is AccessOutcome.MAX_ACCESS_REACHED


def evaluate_access(record: URLRecord | None, now: datetime) -> AccessDecision:
    """Decide whether an access to `record` at time `now` is permitted.

    Args:
        record (URLRecord | None):
            Record loaded from the store, or None if it doesn't exist (or expired).
        now (datetime):
            Current timezone-aware time.

    Returns:
        AccessDecision: the outcome and, for ALLOWED, the record to persist.
    """
    if record is None:
        return AccessDecision(AccessOutcome.NOT_FOUND)

    if record.has_access_limit and record.current_access_count > record.max_access:
        return AccessDecision(AccessOutcome.MAX_ACCESS_REACHED)

    hourly_access_count = record.hourly_access_count
    last_hourly_reset_at = record.last_hourly_reset_at

    if record.has_hourly_limit:
        if now - last_hourly_reset_at >= HOURLY_WINDOW:
            hourly_access_count = 0
            last_hourly_reset_at = now

        if hourly_access_count >= record.max_per_hour:
            return AccessDecision(AccessOutcome.MAX_PER_HOUR_REACHED)
        hourly_access_count += 1

    updated = replace(
        record,
        current_access_count=record.current_access_count + 1,
        hourly_access_count=hourly_access_count,
        last_hourly_reset_at=last_hourly_reset_at,
        last_accessed_at=now,
    )
    return AccessDecision(AccessOutcome.ALLOWED, updated)
