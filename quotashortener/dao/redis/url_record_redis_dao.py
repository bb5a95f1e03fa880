"""Data Access Object (DAO) implementation for managing URL records in Redis

This module provides a Redis-based implementation of URLRecordBaseDAO. Each
record is stored as a single JSON string under its token with a TTL equal to
the record's age_duration.

Responsibilities:
    - Save, retrieve and delete URL records in Redis;
    - Restart the record's TTL on every write (refresh-on-write expiry);
    - Provide defensive error handling and raise appropriate DAO exceptions.

Classes:
    URLRecordRedisDAO:
        DAO for storing and retrieving URLRecord in a Redis datastore.

Example:
    >>> from quotashortener.models import URLRecord
    >>> from quotashortener.dao.redis import URLRecordRedisDAO

    >>> dao = URLRecordRedisDAO(prefix='quotashortener:dev')
    >>> dao.save(record)
    <URLRecordRedisDAO>
    >>> dao.get('aZ3kP9qL').long_url
    'https://example.com/page'
    >>> dao.delete('aZ3kP9qL')
    True
"""

from beartype import beartype

from quotashortener.models import URLRecord
from quotashortener.dao.base import URLRecordBaseDAO
from quotashortener.dao.redis.mixins import RedisClientMixin
from quotashortener.dao.redis.helpers import handle_redis_connection_error
from quotashortener.dao.exceptions import URLRecordNotFoundError


class URLRecordRedisDAO(RedisClientMixin, URLRecordBaseDAO):
    """Redis-based Data Access Object (DAO) for managing URL records

    This class implements the URLRecordBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    NOTE:
        get() followed by save() is not atomic. A WATCH/MULTI transaction (or a
        Lua script) around the read-modify-write would remove the lost-update
        race between concurrent redirects; the service accepts the race instead.
    """

    @handle_redis_connection_error
    @beartype
    def get(self, token: str, **kwargs) -> URLRecord:
        """Retrieve a stored URL record by token

        Args:
            token (str):
                The token identifying the short URL.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            URLRecord: The decoded record.

        Raises:
            URLRecordNotFoundError:
                If the record does not exist in Redis (or has expired).
            RecordSerializationError:
                If the stored payload isn't a valid URL record.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('aZ3kP9qL')
            URLRecord(token='aZ3kP9qL', long_url='https://example.com', ...)
        """
        payload = self.redis.get(self.keys.record_key(token))
        if payload is None:
            raise URLRecordNotFoundError(f"URL record with token '{token}' not found.")
        return URLRecord.from_json(payload)

    @handle_redis_connection_error
    @beartype
    def exists(self, token: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.record_key(token)))

    @handle_redis_connection_error
    @beartype
    def save(self, record: URLRecord, **kwargs) -> 'URLRecordRedisDAO':
        """Write a URL record into Redis, replacing any previous value

        The key's TTL is set to record.age_duration from now, even when the
        key already exists. The absolute deadline therefore moves forward on
        every successful access.

        Args:
            record (URLRecord):
                URLRecord instance to store.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            URLRecordRedisDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If a Redis connection issue occurs.

        Example:
            >>> dao.save(record)
            <URLRecordRedisDAO>
        """
        self.redis.set(self.keys.record_key(record.token), record.to_json(), px=record.age_duration)
        return self

    @handle_redis_connection_error
    @beartype
    def delete(self, token: str, **kwargs) -> bool:
        return self.redis.delete(self.keys.record_key(token)) > 0
