"""Data Access Object (DAO) implementation for operator accounts in Redis

Data layout (all keys namespaced by the DAO prefix):
    users:<id>                      HASH    user fields (see linkfinder.dao.redis.codecs)
    users:usernames:<username>      STRING  id of the user holding the username
    users:emails:<lower email>      STRING  id of the user holding the email
    users:roles:<role>              ZSET    user ids per role, scored by creation time
    users:counter                   STRING  last assigned user id
"""

import logging

import redis
from beartype import beartype

from linkfinder.models import UserModel, Role
from linkfinder.dao.base import UserBaseDAO
from linkfinder.dao.redis.mixins import RedisClientMixin
from linkfinder.dao.redis.helpers import handle_redis_connection_error
from linkfinder.dao.redis.codecs import user_to_hash, hash_to_user
from linkfinder.dao.exceptions import UserAlreadyExistsError, UserNotFoundError


logger = logging.getLogger(__name__)


class UserRedisDAO(RedisClientMixin, UserBaseDAO):
    @handle_redis_connection_error
    @beartype
    def insert(self, user: UserModel, **kwargs) -> UserModel:
        """Insert a new user, claiming its username and email keys atomically

        Raises:
            UserAlreadyExistsError:
                If the username or email (case-insensitive) is already claimed.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        username_key = self.keys.username_key(user.username)
        email_key = self.keys.email_key(user.email)
        user_id = int(self.redis.incr(self.keys.user_counter_key()))
        stored = UserModel(
            id=user_id,
            username=user.username,
            email=user.email,
            password_hash=user.password_hash,
            role=user.role,
            created_at=user.created_at,
        )
        score = stored.created_at.timestamp() if stored.created_at else float(user_id)

        with self.redis.pipeline() as pipe:
            while True:
                try:
                    pipe.watch(username_key, email_key)
                    if pipe.exists(username_key):
                        raise UserAlreadyExistsError(f"Username '{user.username}' is already taken.")
                    if pipe.exists(email_key):
                        raise UserAlreadyExistsError('Email is already registered.')

                    pipe.multi()
                    pipe.set(username_key, user_id)
                    pipe.set(email_key, user_id)
                    pipe.hset(self.keys.user_key(user_id), mapping=user_to_hash(stored))
                    pipe.zadd(self.keys.user_role_index_key(user.role), {str(user_id): score})
                    pipe.execute()
                except redis.WatchError:
                    logger.debug('User keys changed during insert. Retrying.')
                    continue
                else:
                    return stored

    @handle_redis_connection_error
    @beartype
    def get(self, user_id: int, **kwargs) -> UserModel:
        data = self.redis.hgetall(self.keys.user_key(user_id))
        if not data:
            raise UserNotFoundError(f"User with id '{user_id}' not found.")
        return hash_to_user(data)

    @handle_redis_connection_error
    @beartype
    def get_by_username(self, username: str, **kwargs) -> UserModel:
        user_id = self.redis.get(self.keys.username_key(username))
        if user_id is None:
            raise UserNotFoundError(f"User '{username}' not found.")

        data = self.redis.hgetall(self.keys.user_key(user_id))
        if not data:
            raise UserNotFoundError(f"User '{username}' not found.")
        return hash_to_user(data)

    @handle_redis_connection_error
    @beartype
    def exists_username(self, username: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.username_key(username)))

    @handle_redis_connection_error
    @beartype
    def exists_email(self, email: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.email_key(email)))

    @handle_redis_connection_error
    @beartype
    def list_by_role(self, role: Role, **kwargs) -> list[UserModel]:
        user_ids = self.redis.zrevrange(self.keys.user_role_index_key(role), 0, -1)
        if not user_ids:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for user_id in user_ids:
                pipe.hgetall(self.keys.user_key(user_id))
            rows = pipe.execute()

        return [hash_to_user(row) for row in rows if row]

    @handle_redis_connection_error
    @beartype
    def delete(self, user_id: int, **kwargs) -> None:
        user_key = self.keys.user_key(user_id)

        with self.redis.pipeline() as pipe:
            while True:
                try:
                    pipe.watch(user_key)
                    data = pipe.hgetall(user_key)
                    if not data:
                        raise UserNotFoundError(f"User with id '{user_id}' not found.")

                    pipe.multi()
                    pipe.delete(user_key)
                    pipe.delete(self.keys.username_key(data['username']))
                    pipe.delete(self.keys.email_key(data['email']))
                    pipe.zrem(self.keys.user_role_index_key(data['role']), str(user_id))
                    pipe.execute()
                except redis.WatchError:
                    logger.debug('User key changed during delete. Retrying.', extra={'userId': user_id})
                    continue
                else:
                    return None
