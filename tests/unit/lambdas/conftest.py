"""Shared fixtures for Lambda handler tests.

Fixtures:
    - `context`: minimal Lambda context.
    - `config`: AppConfig section returned by the patched `load_config()`.
    - `_env`: deployed (non-local) environment so that unexpected errors answer 500.
    - `make_event`: API Gateway proxy event builder.
"""

import json
from typing import cast

import pytest

from linkfinder.types import LambdaContext, LambdaConfiguration, LambdaEvent


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.setenv('APP_NAME', 'linkfinder')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'linkfinder'})


@pytest.fixture
def config() -> LambdaConfiguration:
    return cast(LambdaConfiguration, {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}, 'settings': {}})


@pytest.fixture
def make_event():
    def _make_event(method, resource, token=None, body=None, path=None, query=None, headers=None, **extra) -> LambdaEvent:
        event_headers = dict(headers or {})
        if token:
            event_headers['Authorization'] = f'Bearer {token}'
        return cast(
            LambdaEvent,
            {
                'httpMethod': method,
                'resource': resource,
                'headers': event_headers,
                'pathParameters': path,
                'queryStringParameters': query,
                'body': json.dumps(body) if isinstance(body, (dict, list)) else body,
                'isBase64Encoded': False,
                **extra,
            },
        )

    return _make_event
