import functools
from typing import Any
from collections.abc import Callable

import redis

from quotashortener.dao.exceptions import DataStoreError


__all__ = []

# Errors meaning "Redis isn't reachable", as opposed to command errors
CONNECTIVITY_ERRORS = (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError)


def describe_connection(client: redis.Redis) -> str:
    """Render a client's target as host:port/db for error messages"""
    info = client.connection_pool.connection_kwargs
    return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'


def handle_redis_connection_error[F: Callable[..., Any]](method: F) -> F:
    """Decorator: raise DataStoreError when a DAO method can't reach Redis

    Only connectivity failures (connection refused/dropped, timeouts) are
    translated. Command errors such as WRONGTYPE propagate unchanged.

    Example:
        >>> @handle_redis_connection_error
        ... def exists(self, token):
        ...     return self.redis.exists(token)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except CONNECTIVITY_ERRORS as e:
            raise DataStoreError(f"Can't connect to Redis at {describe_connection(self.redis)}.") from e

    return wrapper
