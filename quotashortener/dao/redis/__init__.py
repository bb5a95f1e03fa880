from quotashortener.dao.redis.redis_key_schema import RedisKeySchema
from quotashortener.dao.redis.url_record_redis_dao import URLRecordRedisDAO
from quotashortener.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'URLRecordRedisDAO',
    'RedisClientMixin',
]
