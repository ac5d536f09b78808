"""Unit tests for helper functions in helpers.py.

Test coverage includes:

1. require_environment() decorator behavior
   - Ensures decorated functions execute when all env vars are present.
   - Ensures missing or empty env vars raise MissingEnvironmentVariableError.

2. guarantee_500_response() decorator behavior
   - Ensures successful responses pass through untouched.
   - Ensures unexpected exceptions become a generic 500 with a correlation id.
   - Ensures exceptions are re-raised when running locally.
"""

import json
import logging
from types import SimpleNamespace

import pytest

from linkfinder.exceptions import MissingEnvironmentVariableError
from linkfinder.utils import helpers
from linkfinder.utils.helpers import correlation_id, guarantee_500_response, require_environment


# -------------------------------
# 1. require_environment() decorator behavior
# -------------------------------


def test_require_environment_passes(monkeypatch):
    monkeypatch.setenv('FIRST_VAR', 'one')
    monkeypatch.setenv('SECOND_VAR', 'two')

    @require_environment('FIRST_VAR', 'SECOND_VAR')
    def sample(value):
        return value * 2

    assert sample(21) == 42


def test_require_environment_missing(monkeypatch):
    monkeypatch.delenv('FIRST_VAR', raising=False)
    monkeypatch.setenv('SECOND_VAR', '')

    @require_environment('FIRST_VAR', 'SECOND_VAR')
    def sample():
        return 'unreachable'

    with pytest.raises(MissingEnvironmentVariableError, match="Missing required environment variables: 'FIRST_VAR', 'SECOND_VAR'"):
        sample()


# -------------------------------
# 2. guarantee_500_response() decorator behavior
# -------------------------------


def test_correlation_id_format():
    value = correlation_id()
    assert value.startswith('ERR-')
    assert len(value) == 20
    assert value != correlation_id()


def test_guarantee_500_response_passes_through():
    @guarantee_500_response
    def handler(event, context):
        return {'statusCode': 200, 'body': '{}'}

    assert handler({}, None) == {'statusCode': 200, 'body': '{}'}


def test_guarantee_500_response_hides_exception(monkeypatch, caplog):
    monkeypatch.setattr(helpers, 'running_locally', lambda: False)

    @guarantee_500_response
    def handler(event, context):
        raise RuntimeError('database password is hunter2')

    with caplog.at_level(logging.ERROR, logger='linkfinder.utils.helpers'):
        response = handler({}, None)

    body = json.loads(response['body'])
    assert response['statusCode'] == 500
    assert body['message'] == 'Internal Server Error'
    assert body['errorCode'] == 'INTERNAL_ERROR'
    assert body['correlationId'].startswith('ERR-')
    assert 'hunter2' not in response['body']

    record = caplog.records[-1]
    assert record.correlationId == body['correlationId']
    assert record.exc_info is not None


def test_guarantee_500_response_reraises_locally(monkeypatch):
    monkeypatch.setattr(helpers, 'running_locally', lambda: True)

    @guarantee_500_response
    def handler(event, context):
        raise RuntimeError('boom')

    with pytest.raises(RuntimeError, match='boom'):
        handler({}, None)


def test_guarantee_500_response_logs_request_context(monkeypatch, caplog):
    monkeypatch.setattr(helpers, 'running_locally', lambda: False)
    context = SimpleNamespace(aws_request_id='req-42')

    @guarantee_500_response
    def handler(event, context):
        raise KeyError('redis')

    with caplog.at_level(logging.ERROR, logger='linkfinder.utils.helpers'):
        response = handler({'httpMethod': 'GET', 'resource': '/links'}, context)

    assert response['headers']['Content-Type'] == 'application/json'
    record = caplog.records[-1]
    assert record.requestId == 'req-42'
    assert record.route == 'GET /links'
