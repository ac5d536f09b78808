"""Shared fixtures for Redis DAO tests.

Fixtures:
    - `app_prefix`: consistent Redis key prefix for predictable test output.
    - `redis_client`: mock Redis pipeline-compatible client. `pipeline()` returns
      the same mock so that calls made inside transactions can be asserted on.
"""

from unittest.mock import MagicMock

import pytest
import redis.client


@pytest.fixture
def app_prefix():
    """Provide a consistent Redis key prefix for testing."""
    return 'testapp:test'


@pytest.fixture
def redis_client():
    """Mock a Redis pipeline-compatible client."""
    _redis_client = MagicMock(spec=redis.client.Pipeline)
    _redis_client.ping.return_value = True
    _redis_client.exists.return_value = 0
    _redis_client.get.return_value = None
    _redis_client.pipeline.return_value = _redis_client
    _redis_client.__enter__.return_value = _redis_client
    _redis_client.__exit__.return_value = None
    _redis_client.connection_pool = MagicMock(connection_kwargs={'host': 'redis', 'port': 6379, 'db': 0})
    return _redis_client
