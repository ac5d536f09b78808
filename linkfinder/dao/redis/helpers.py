import functools
from collections.abc import Callable

import redis

from linkfinder.dao.exceptions import DataStoreError


__all__ = ['handle_redis_connection_error']


def handle_redis_connection_error[F: Callable](method: F) -> F:
    """Turn Redis connectivity failures inside a DAO method into DataStoreError

    Only redis.exceptions.ConnectionError and redis.exceptions.TimeoutError are
    translated. DAO errors raised by the method (LinkNotFoundError, ...) and
    redis.WatchError retries are left alone.

    Example:
        >>> @handle_redis_connection_error
        ... @beartype
        ... def get(self, link_id: int, **kwargs) -> LinkModel:
        ...     return hash_to_link(self.redis.hgetall(self.keys.link_key(link_id)))
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            info = self.redis.connection_pool.connection_kwargs
            raise DataStoreError(f"Can't connect to Redis at {info.get('host')}:{info.get('port')}/{info.get('db')}.") from e

    return wrapper
