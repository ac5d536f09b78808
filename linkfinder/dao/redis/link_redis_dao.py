"""Data Access Object (DAO) implementation for managing links in Redis

This module provides a Redis-based implementation of LinkBaseDAO.

Data layout (all keys namespaced by the DAO prefix):
    links:<id>                  HASH    link fields (see linkfinder.dao.redis.codecs)
    links:codes:<lower code>    STRING  id of the link holding the reference code
    links:index                 ZSET    all link ids, scored by id
    links:counter               STRING  last assigned link id

Responsibilities:
    - Insert, update, delete and retrieve links;
    - Enforce case-insensitive reference code uniqueness with the links:codes:* keys,
      claimed inside optimistic WATCH/MULTI/EXEC transactions;
    - Provide ordered pagination via ZRANGE (id order) or SORT ... BY (field order).

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkModel in a Redis datastore.

Example:
    >>> from linkfinder.models import LinkModel
    >>> from linkfinder.dao.redis import LinkRedisDAO

    >>> dao = LinkRedisDAO(prefix="linkfinder:dev")
    >>> link = dao.insert(LinkModel(reference_code='PI-31001', full_url='https://example.com/doc1.pdf'))
    >>> link.id
    1
    >>> dao.get_by_reference_code('pi-31001').reference_code
    'PI-31001'
"""

import logging
from typing import Optional

import redis
from beartype import beartype

from linkfinder.models import LinkModel
from linkfinder.dao.base import LinkBaseDAO
from linkfinder.dao.redis.mixins import RedisClientMixin
from linkfinder.dao.redis.helpers import handle_redis_connection_error
from linkfinder.dao.redis.codecs import link_to_hash, hash_to_link
from linkfinder.dao.exceptions import LinkNotFoundError, ReferenceCodeTakenError


logger = logging.getLogger(__name__)


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing links

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    NOTE: Every mutation follows the redis-py optimistic locking recipe:
          WATCH the keys the decision depends on, validate, then MULTI/EXEC.
          If a concurrent writer touches a watched key, EXEC fails with
          WatchError and the whole attempt is retried, so the validation step
          runs again against fresh data and raises the proper DAO error.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, link: LinkModel, **kwargs) -> LinkModel:
        """Insert a new link into Redis

        Args:
            link (LinkModel):
                Link to store. Its `id` is ignored and assigned from the global counter.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            LinkModel: the stored link with its assigned id.

        Raises:
            ReferenceCodeTakenError:
                If the reference code (case-insensitive) is already claimed.
            DataStoreError:
                If a Redis connection issue occurs.

        Example:
            >>> dao.insert(LinkModel(reference_code='PI-31001', full_url='https://example.com'))
            LinkModel(reference_code='PI-31001', ..., id=1, ...)
        """
        code_key = self.keys.link_code_key(link.reference_code)
        link_id = int(self.redis.incr(self.keys.link_counter_key()))
        stored = LinkModel(
            id=link_id,
            reference_code=link.reference_code,
            full_url=link.full_url,
            description=link.description,
            brand_name=link.brand_name,
            status=link.status,
            created_by=link.created_by,
            created_at=link.created_at,
            updated_at=link.updated_at,
        )

        with self.redis.pipeline() as pipe:
            while True:
                try:
                    pipe.watch(code_key)
                    if pipe.exists(code_key):
                        raise ReferenceCodeTakenError(f"Reference code '{link.reference_code}' already exists.")

                    pipe.multi()
                    pipe.set(code_key, link_id)
                    pipe.hset(self.keys.link_key(link_id), mapping=link_to_hash(stored))
                    pipe.zadd(self.keys.link_index_key(), {str(link_id): link_id})
                    pipe.execute()
                except redis.WatchError:
                    logger.debug('Reference code key changed during insert. Retrying.', extra={'referenceCode': link.reference_code})
                    continue
                else:
                    return stored

    @handle_redis_connection_error
    @beartype
    def update(self, link: LinkModel, **kwargs) -> LinkModel:
        """Replace all stored fields of an existing link

        Moving a link to a new reference code releases the old code key and
        claims the new one in the same transaction. Re-saving a link under its
        own code (in any casing) is allowed.

        Args:
            link (LinkModel):
                Link carrying the id to update and the new field values.

        Returns:
            LinkModel: the updated link.

        Raises:
            LinkNotFoundError:
                If no link with `link.id` exists.
            ReferenceCodeTakenError:
                If the new reference code belongs to a different link.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        link_key = self.keys.link_key(link.id)
        new_code_key = self.keys.link_code_key(link.reference_code)

        with self.redis.pipeline() as pipe:
            while True:
                try:
                    pipe.watch(link_key, new_code_key)
                    current_code = pipe.hget(link_key, 'reference_code')
                    if current_code is None:
                        raise LinkNotFoundError(f"Link with id '{link.id}' not found.")

                    owner = pipe.get(new_code_key)
                    if owner is not None and int(owner) != link.id:
                        raise ReferenceCodeTakenError(f"Reference code '{link.reference_code}' already exists.")

                    old_code_key = self.keys.link_code_key(current_code)
                    pipe.multi()
                    if old_code_key != new_code_key:
                        pipe.delete(old_code_key)
                    pipe.set(new_code_key, link.id)
                    pipe.hset(link_key, mapping=link_to_hash(link))
                    pipe.execute()
                except redis.WatchError:
                    logger.debug('Link keys changed during update. Retrying.', extra={'linkId': link.id})
                    continue
                else:
                    return link

    @handle_redis_connection_error
    @beartype
    def delete(self, link_id: int, **kwargs) -> None:
        """Hard delete a link and release its reference code

        Raises:
            LinkNotFoundError:
                If no link with `link_id` exists.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        link_key = self.keys.link_key(link_id)

        with self.redis.pipeline() as pipe:
            while True:
                try:
                    pipe.watch(link_key)
                    reference_code = pipe.hget(link_key, 'reference_code')
                    if reference_code is None:
                        raise LinkNotFoundError(f"Link with id '{link_id}' not found.")

                    pipe.multi()
                    pipe.delete(link_key)
                    pipe.delete(self.keys.link_code_key(reference_code))
                    pipe.zrem(self.keys.link_index_key(), str(link_id))
                    pipe.execute()
                except redis.WatchError:
                    logger.debug('Link key changed during delete. Retrying.', extra={'linkId': link_id})
                    continue
                else:
                    return None

    @handle_redis_connection_error
    @beartype
    def get(self, link_id: int, **kwargs) -> LinkModel:
        data = self.redis.hgetall(self.keys.link_key(link_id))
        if not data:
            raise LinkNotFoundError(f"Link with id '{link_id}' not found.")
        return hash_to_link(data)

    @handle_redis_connection_error
    @beartype
    def get_by_reference_code(self, reference_code: str, **kwargs) -> LinkModel:
        """Retrieve a link by reference code (case-insensitive)

        Raises:
            LinkNotFoundError:
                If no link holds the reference code.
            DataStoreError:
                If a Redis connection issue occurs.

        Example:
            >>> dao.get_by_reference_code('pi-31001').reference_code
            'PI-31001'
        """
        link_id = self.redis.get(self.keys.link_code_key(reference_code))
        if link_id is None:
            raise LinkNotFoundError(f"Link with reference code '{reference_code}' not found.")

        data = self.redis.hgetall(self.keys.link_key(link_id))
        if not data:  # deleted between the two reads
            raise LinkNotFoundError(f"Link with reference code '{reference_code}' not found.")
        return hash_to_link(data)

    @handle_redis_connection_error
    @beartype
    def exists_reference_code(self, reference_code: str, exclude_id: Optional[int] = None, **kwargs) -> bool:
        owner = self.redis.get(self.keys.link_code_key(reference_code))
        if owner is None:
            return False
        return exclude_id is None or int(owner) != exclude_id

    @handle_redis_connection_error
    @beartype
    def page(self, offset: int, limit: int, sort_field: str = 'id', descending: bool = True, **kwargs) -> tuple[list[LinkModel], int]:
        """Retrieve an ordered slice of all links

        Ordering by id reads the index sorted set directly. Any other field is
        ordered server-side with SORT ... BY links:*-><field> ALPHA, which works
        for every field because timestamps are stored as ISO-8601 strings.

        Args:
            offset (int):
                Number of records to skip.
            limit (int):
                Maximum number of records to return.
            sort_field (str):
                One of LinkBaseDAO.SORTABLE_FIELDS. Defaults to 'id'.
            descending (bool):
                Sort direction. Defaults to True.

        Returns:
            tuple[list[LinkModel], int]:
                The requested slice and the total number of stored links.

        Raises:
            ValueError:
                If `sort_field` is not sortable.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        if sort_field not in self.SORTABLE_FIELDS:
            raise ValueError(f"Unsupported sort field '{sort_field}'.")

        index_key = self.keys.link_index_key()
        total = int(self.redis.zcard(index_key))
        if limit <= 0 or offset >= total:
            return [], total

        if sort_field == 'id':
            read = self.redis.zrevrange if descending else self.redis.zrange
            link_ids = read(index_key, offset, offset + limit - 1)
        else:
            # fmt: off
            link_ids = self.redis.sort(index_key,
                                       start=offset,
                                       num=limit,
                                       by=self.keys.link_sort_pattern(sort_field),
                                       alpha=True,
                                       desc=descending)
            # fmt: on

        return self._load(link_ids), total

    def _load(self, link_ids: list) -> list[LinkModel]:
        """Fetch link hashes in one round trip, preserving the order of `link_ids`."""
        if not link_ids:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for link_id in link_ids:
                pipe.hgetall(self.keys.link_key(link_id))
            rows = pipe.execute()

        # Links deleted between the index read and the hash read are dropped
        return [hash_to_link(row) for row in rows if row]
