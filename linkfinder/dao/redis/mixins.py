"""Client setup shared by the Redis DAOs.

A DAO connects eagerly: constructing one PINGs the server, so a Lambda with a
bad `redis` configuration fails at the top of the handler with DataStoreError
instead of halfway through a request.

Connection settings come from the function's AppConfig `redis` block, passed
in with a `redis_` prefix:

    >>> redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    >>> dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
"""

from typing import Optional

import redis

from linkfinder.dao.redis.redis_key_schema import RedisKeySchema
from linkfinder.dao.exceptions import DataStoreError


# Seconds. Lambda invocations are short, an unreachable server must not eat the whole timeout
DEFAULT_SOCKET_TIMEOUT = 2.0


class RedisClientMixin:
    """Give a DAO a Redis client (`self.redis`) and a key schema (`self.keys`).

    Args:
        redis_host, redis_port, redis_db:
            Server location. Ignored when `redis_client` is given.
        redis_username, redis_password:
            ACL credentials, if the server requires them.
        redis_ssl (bool):
            Use TLS (ElastiCache with in-transit encryption).
        redis_socket_timeout (float):
            Connect and read timeout in seconds.
        redis_decode_responses (bool):
            Return `str` instead of `bytes`. The DAOs expect True.
        redis_client (Optional[redis.Redis]):
            Ready-made client, used as is.
        prefix (Optional[str]):
            Key namespace, usually `app_prefix()`.

    Raises:
        DataStoreError:
            If the server does not answer the initial PING.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_ssl: bool = False,
        redis_socket_timeout: float = DEFAULT_SOCKET_TIMEOUT,
        redis_decode_responses: bool = True,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                username=redis_username,
                password=redis_password,
                ssl=redis_ssl,
                socket_timeout=redis_socket_timeout,
                socket_connect_timeout=redis_socket_timeout,
                decode_responses=redis_decode_responses,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)
        self.ping()

    def _location(self) -> str:
        info = self.redis.connection_pool.connection_kwargs
        return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"

    def ping(self, raise_error: bool = True) -> bool:
        """Check that the server answers.

        Returns False instead of raising when `raise_error` is False, which is
        what the health check wants.
        """
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            raise DataStoreError(f"Redis is unreachable at {self._location()}. Check the function's redis configuration.") from e
        return True
