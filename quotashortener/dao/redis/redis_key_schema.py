"""Redis key layout for URL records.

A record lives under its bare token. Deployments sharing one Redis database
namespace their keys with an `<app name>:<app env>` prefix:

    >>> RedisKeySchema().record_key('aZ3kP9qL')
    'aZ3kP9qL'
    >>> RedisKeySchema(prefix='quotashortener:prod').record_key('aZ3kP9qL')
    'quotashortener:prod:aZ3kP9qL'
"""

import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']


def prefix_key(func: Callable[..., str]) -> Callable[..., str]:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return key if self.prefix is None else f'{self.prefix}:{key}'

    return wrapper


class RedisKeySchema:
    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')
        self.prefix = prefix

    @prefix_key
    def record_key(self, token: str) -> str:
        return token
