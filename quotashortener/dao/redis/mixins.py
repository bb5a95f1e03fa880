"""Redis client setup shared by Redis-backed DAOs.

RedisClientMixin builds (or adopts) the Redis client, attaches the key schema
and pings Redis once, so a DAO that constructs successfully has a reachable
store behind it.

Connection parameters arrive as `redis_<name>` keyword arguments, which is the
shape `quotashortener.utils.config.redis_config()` produces from a lambda's
AppConfig section:

    >>> dao = URLRecordRedisDAO(**redis_config(config), prefix='quotashortener:prod')
    >>> dao.redis.ping()
    True
"""

import redis

from quotashortener.dao.redis.redis_key_schema import RedisKeySchema
from quotashortener.dao.redis.helpers import CONNECTIVITY_ERRORS, describe_connection
from quotashortener.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Give a DAO a Redis client (`self.redis`) and key schema (`self.keys`).

    Args:
        redis_host (str): Redis hostname. Defaults to 'localhost'.
        redis_port (int | str): Redis port. Defaults to 6379.
        redis_db (int | str): database index. Defaults to 0.
        redis_username (str | None): ACL username, if any.
        redis_password (str | None): password, if any.
        redis_socket_timeout (float | None):
            Seconds to wait on connect and on each command before the client
            raises TimeoutError. None waits indefinitely.
        redis_client (redis.Redis | None):
            Ready client to use instead of building one from the parameters above.
        prefix (str | None):
            Key namespace, e.g. 'quotashortener:prod'.

    Raises:
        DataStoreError: if Redis doesn't answer the initial PING
    """

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int | str = 6379,
        redis_db: int | str = 0,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_socket_timeout: float | None = None,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        if redis_client is None:
            # Records are JSON text, so responses are always decoded
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                username=redis_username,
                password=redis_password,
                socket_timeout=redis_socket_timeout,
                socket_connect_timeout=redis_socket_timeout,
                decode_responses=True,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING Redis; return False (or raise DataStoreError) when it's unreachable"""
        try:
            self.redis.ping()
        except CONNECTIVITY_ERRORS as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {describe_connection(self.redis)}. Check the provided configuration parameters."
            ) from e
        return True
