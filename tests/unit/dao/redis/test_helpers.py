"""Unit tests for handle_redis_connection_error decorator.

Test coverage includes:
    1. Normal function execution
       - Ensures the wrapped method executes and returns its result.
    2. Connection error handling
       - Ensures Redis connection errors and timeouts are converted into DataStoreError.
       - Ensures other exceptions propagate untouched.
    3. Function metadata preservation
       - Confirms functools.wraps preserves the original function's name and docstring.
"""

from unittest.mock import MagicMock

import pytest
import redis

from linkfinder.dao.redis.helpers import handle_redis_connection_error
from linkfinder.dao.exceptions import DataStoreError, LinkNotFoundError


class DummyDAO:
    def __init__(self, error=None):
        self.redis = MagicMock()
        self.redis.connection_pool.connection_kwargs = {'host': 'localhost', 'port': 6379, 'db': 0}
        self.error = error

    @handle_redis_connection_error
    def run(self):
        if self.error is not None:
            raise self.error
        return 'OK'


# -------------------------------
# 1. Normal execution
# -------------------------------


def test_decorator_allows_normal_execution():
    assert DummyDAO().run() == 'OK'


# -------------------------------
# 2. Connection error handling
# -------------------------------


@pytest.mark.parametrize(
    'error',
    [
        redis.exceptions.ConnectionError('Cannot connect'),
        redis.exceptions.TimeoutError('Timed out'),
    ],
)
def test_decorator_transforms_redis_connection_error(error):
    with pytest.raises(DataStoreError, match="Can't connect to Redis at localhost:6379/0."):
        DummyDAO(error).run()


def test_decorator_propagates_dao_errors():
    with pytest.raises(LinkNotFoundError):
        DummyDAO(LinkNotFoundError('missing')).run()


# -------------------------------
# 3. Function metadata preservation
# -------------------------------


def test_decorator_preserves_function_metadata():
    @handle_redis_connection_error
    def sample_function():
        """This is a sample docstring."""
        return 'OK'

    assert sample_function.__name__ == 'sample_function'
    assert 'sample docstring' in sample_function.__doc__
