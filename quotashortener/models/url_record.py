"""URL record model and its JSON codec.

A URLRecord holds a short URL's destination, its usage limits and the
counters the access policy updates on every redirect. Records are immutable;
the access policy returns updated copies built with `dataclasses.replace()`.

Stored form (flat JSON object):

    {
        "token": "aZ3kP9qL",
        "long_url": "https://example.com/article/123",
        "max_access": 10,
        "current_access_count": 0,
        "max_per_hour": -1,
        "hourly_access_count": 0,
        "created_at": "2025-10-15T12:00:00Z",
        "last_accessed_at": "2025-10-15T12:00:00Z",
        "last_hourly_reset_at": "2025-10-15T12:00:00Z",
        "age_duration": 3600000000000
    }

Timestamps are RFC3339 at whole-second precision and `age_duration` is an
integer number of nanoseconds.
"""

import json
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta

from quotashortener.constants import Limits
from quotashortener.dao.exceptions import RecordSerializationError
from quotashortener.utils.helpers import (
    to_rfc3339,
    from_rfc3339,
    duration_to_nanoseconds,
    nanoseconds_to_duration,
)


INT_FIELDS = ('max_access', 'current_access_count', 'max_per_hour', 'hourly_access_count')
TIMESTAMP_FIELDS = ('created_at', 'last_accessed_at', 'last_hourly_reset_at')


# fmt: off
@dataclass(frozen=True, kw_only=True)
class URLRecord:
    """Represent a short URL together with its access limits and counters.

    Attributes:
        token (str):
            Unique short identifier; also the record store key.
        long_url (str):
            Destination the short URL redirects to.
        max_access (int):
            Total access cap; -1 means unlimited.
        current_access_count (int):
            Successful accesses so far.
        max_per_hour (int):
            Hourly access cap; -1 means unlimited.
        hourly_access_count (int):
            Successful accesses in the current hourly window.
        created_at (datetime):
            Creation time (UTC).
        last_accessed_at (datetime):
            Time of the last successful access (UTC).
        last_hourly_reset_at (datetime):
            Start of the current hourly window (UTC).
        age_duration (timedelta):
            TTL applied to the record's store entry on every write.

    Fields are keyword-only and the timestamps have no default; use
    URLRecord.new() to build a record for a fresh short URL.

    Example:
        >>> record = URLRecord.new(
        ...     token='aZ3kP9qL',
        ...     long_url='https://example.com/article/123',
        ...     max_access=10,
        ...     now=datetime(2025, 10, 15, 12, tzinfo=UTC),
        ... )
        >>> record.current_access_count
        0
        >>> record.age_duration
        datetime.timedelta(seconds=3600)
    """
    token: str
    long_url: str
    max_access: int = Limits.UNLIMITED
    current_access_count: int = 0
    max_per_hour: int = Limits.UNLIMITED
    hourly_access_count: int = 0
    created_at: datetime
    last_accessed_at: datetime
    last_hourly_reset_at: datetime
    age_duration: timedelta = timedelta(seconds=Limits.DEFAULT_AGE)
# fmt: on

    @classmethod
    def new(
        cls,
        *,
        token: str,
        long_url: str,
        now: datetime,
        max_access: int = Limits.UNLIMITED,
        max_per_hour: int = Limits.UNLIMITED,
        max_age: int = Limits.DEFAULT_AGE,
    ) -> 'URLRecord':
        """Build a fresh record with zeroed counters and all timestamps set to `now`."""
        return cls(
            token=token,
            long_url=long_url,
            max_access=max_access,
            current_access_count=0,
            max_per_hour=max_per_hour,
            hourly_access_count=0,
            created_at=now,
            last_accessed_at=now,
            last_hourly_reset_at=now,
            age_duration=timedelta(seconds=max_age),
        )

    @property
    def has_access_limit(self) -> bool:
        return self.max_access != Limits.UNLIMITED

    @property
    def has_hourly_limit(self) -> bool:
        return self.max_per_hour != Limits.UNLIMITED

    def to_dict(self) -> dict:
        data = asdict(self)
        for name in TIMESTAMP_FIELDS:
            data[name] = to_rfc3339(data[name])
        data['age_duration'] = duration_to_nanoseconds(self.age_duration)
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict) -> 'URLRecord':
        """Decode a record from its stored dictionary form

        Raises:
            RecordSerializationError: on missing fields or invalid field values
        """
        try:
            token = data['token']
            long_url = data['long_url']
            if not isinstance(token, str) or not isinstance(long_url, str):
                raise TypeError('token and long_url must be strings')

            counters = {}
            for name in INT_FIELDS:
                value = data[name]
                if not isinstance(value, int) or isinstance(value, bool):
                    raise TypeError(f'{name} must be an integer')
                counters[name] = value

            timestamps = {name: from_rfc3339(data[name]) for name in TIMESTAMP_FIELDS}

            age = data['age_duration']
            if not isinstance(age, int) or isinstance(age, bool):
                raise TypeError('age_duration must be an integer number of nanoseconds')
        except (KeyError, TypeError, ValueError) as e:
            raise RecordSerializationError(f'Malformed URL record: {e}') from e

        return cls(
            token=token,
            long_url=long_url,
            **counters,
            **timestamps,
            age_duration=nanoseconds_to_duration(age),
        )

    @classmethod
    def from_json(cls, payload: str | bytes) -> 'URLRecord':
        """Decode a record from its stored JSON form

        Raises:
            RecordSerializationError: on invalid JSON or a malformed record
        """
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
            raise RecordSerializationError(f'URL record is not valid JSON: {e}') from e
        if not isinstance(data, dict):
            raise RecordSerializationError('URL record must be a JSON object.')
        return cls.from_dict(data)
