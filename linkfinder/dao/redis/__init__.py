from linkfinder.dao.redis.redis_key_schema import RedisKeySchema
from linkfinder.dao.redis.mixins import RedisClientMixin
from linkfinder.dao.redis.link_redis_dao import LinkRedisDAO
from linkfinder.dao.redis.user_redis_dao import UserRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'LinkRedisDAO',
    'UserRedisDAO',
]
