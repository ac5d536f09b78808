"""Unit tests for the RedisKeySchema class in redis_key_schema.py.

Test coverage includes:

1. Link keys
   - Ensures link hash, code, index, counter and sort pattern keys are well formed.
   - Ensures reference code keys are case-insensitive.

2. User keys
   - Ensures usernames are kept verbatim while emails are lower-cased.

3. Prefix behavior
   - Confirms keys are prefixed only when a prefix is provided.

4. Invalid prefix types
   - Ensures improper prefix types raise TypeError.
"""

import pytest

from linkfinder.dao.redis.redis_key_schema import RedisKeySchema


# -------------------------------
# 1. Link keys
# -------------------------------


def test_link_keys():
    keys = RedisKeySchema()
    assert keys.link_key(42) == 'links:42'
    assert keys.link_index_key() == 'links:index'
    assert keys.link_counter_key() == 'links:counter'
    assert keys.link_sort_pattern('brand_name') == 'links:*->brand_name'


@pytest.mark.parametrize('reference_code', ['PI-31001', 'pi-31001', 'Pi-31001'])
def test_link_code_key_is_case_insensitive(reference_code):
    keys = RedisKeySchema()
    assert keys.link_code_key(reference_code) == 'links:codes:pi-31001'


# -------------------------------
# 2. User keys
# -------------------------------


def test_user_keys():
    keys = RedisKeySchema()
    assert keys.user_key(3) == 'users:3'
    assert keys.username_key('Alice') == 'users:usernames:Alice'
    assert keys.email_key('Alice@Example.COM') == 'users:emails:alice@example.com'
    assert keys.user_role_index_key('ADMIN') == 'users:roles:ADMIN'
    assert keys.user_counter_key() == 'users:counter'


# -------------------------------
# 3. Prefix behavior
# -------------------------------


@pytest.mark.parametrize(
    'prefix, expected_link_key, expected_code_key',
    [
        ('testprefix', 'testprefix:links:1', 'testprefix:links:codes:ab'),
        ('linkfinder:prod', 'linkfinder:prod:links:1', 'linkfinder:prod:links:codes:ab'),
        (None, 'links:1', 'links:codes:ab'),
    ],
)
def test_key_prefixing(prefix, expected_link_key, expected_code_key):
    keys = RedisKeySchema(prefix=prefix)
    assert keys.link_key(1) == expected_link_key
    assert keys.link_code_key('AB') == expected_code_key


# -------------------------------
# 4. Invalid prefix types
# -------------------------------


@pytest.mark.parametrize('prefix', [123, -1, 45.6, [], {}])
def test_invalid_prefix_type_raises_error(prefix):
    """Ensure invalid prefix types raise a TypeError."""
    with pytest.raises(TypeError):
        RedisKeySchema(prefix=prefix)
