import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "linkfinder:prod" or "linkfinder:dev".

    Uniqueness keys for reference codes and emails are lower-cased so that a
    single key guards every casing of the same value.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_key(self, link_id: int | str) -> str:
        return f'links:{link_id}'

    @prefix_key
    def link_sort_pattern(self, field: str) -> str:
        return f'links:*->{field}'

    @prefix_key
    def link_code_key(self, reference_code: str) -> str:
        return f'links:codes:{reference_code.lower()}'

    @prefix_key
    def link_index_key(self) -> str:
        return 'links:index'

    @prefix_key
    def link_counter_key(self) -> str:
        return 'links:counter'

    @prefix_key
    def user_key(self, user_id: int | str) -> str:
        return f'users:{user_id}'

    @prefix_key
    def username_key(self, username: str) -> str:
        return f'users:usernames:{username}'

    @prefix_key
    def email_key(self, email: str) -> str:
        return f'users:emails:{email.lower()}'

    @prefix_key
    def user_role_index_key(self, role: str) -> str:
        return f'users:roles:{role}'

    @prefix_key
    def user_counter_key(self) -> str:
        return 'users:counter'
