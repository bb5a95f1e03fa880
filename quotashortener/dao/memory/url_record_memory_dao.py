"""In-process implementation of URLRecordBaseDAO.

Records live in a dictionary guarded by a lock, each with an absolute deadline
computed from the injected clock. Expired entries are treated as missing and
purged lazily. The TTL semantics match URLRecordRedisDAO: every save() moves
the deadline to `now + record.age_duration`.

Useful for local runs without Redis and for exercising the access policy
end-to-end with a controllable clock.

Example:
    >>> dao = URLRecordMemoryDAO(clock=lambda: datetime(2025, 10, 15, tzinfo=UTC))
    >>> dao.save(record).exists(record.token)
    True
"""

from datetime import datetime
from threading import Lock

from beartype import beartype

from quotashortener.types import Clock
from quotashortener.models import URLRecord
from quotashortener.dao.base import URLRecordBaseDAO
from quotashortener.dao.exceptions import URLRecordNotFoundError
from quotashortener.utils.helpers import utc_now


class URLRecordMemoryDAO(URLRecordBaseDAO):
    def __init__(self, clock: Clock = utc_now):
        self._clock = clock
        self._records: dict[str, tuple[str, datetime]] = {}
        self._lock = Lock()

    @beartype
    def get(self, token: str, **kwargs) -> URLRecord:
        with self._lock:
            payload = self._live_payload(token)
        if payload is None:
            raise URLRecordNotFoundError(f"URL record with token '{token}' not found.")
        return URLRecord.from_json(payload)

    @beartype
    def exists(self, token: str, **kwargs) -> bool:
        with self._lock:
            return self._live_payload(token) is not None

    @beartype
    def save(self, record: URLRecord, **kwargs) -> 'URLRecordMemoryDAO':
        # Store the serialized form so reads see exactly what Redis would return
        expires_at = self._clock() + record.age_duration
        with self._lock:
            self._records[record.token] = (record.to_json(), expires_at)
        return self

    @beartype
    def delete(self, token: str, **kwargs) -> bool:
        with self._lock:
            # An expired record is already gone; _live_payload() drops it
            return self._live_payload(token) is not None and self._records.pop(token, None) is not None

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired()
            return len(self._records)

    def _live_payload(self, token: str) -> str | None:
        """Return the stored payload for a live token. Caller must hold self._lock."""
        entry = self._records.get(token)
        if entry is None:
            return None
        payload, expires_at = entry
        if self._clock() >= expires_at:
            del self._records[token]
            return None
        return payload

    def _purge_expired(self) -> None:
        """Remove expired records. Caller must hold self._lock."""
        now = self._clock()
        expired = [token for token, (_, expires_at) in self._records.items() if now >= expires_at]
        for token in expired:
            del self._records[token]
