"""Accessors for API Gateway (Lambda proxy) events.

Every accessor raises `ValidationError` for malformed client input so that
handlers can map it straight to a 400 response.

Example:
    >>> event = {'headers': {'authorization': 'Bearer abc.def.ghi'}, 'queryStringParameters': {'page': '2'}}
    >>> bearer_token(event)
    'abc.def.ghi'
    >>> int_query_parameter(event, 'page', default=0)
    2
"""

import json
import base64
import binascii
from typing import Any, Optional

from linkfinder.types import LambdaEvent
from linkfinder.exceptions import ValidationError


def route_key(event: LambdaEvent) -> tuple[str, str]:
    """(httpMethod, resource) pair used by the handlers' routing tables."""
    return event.get('httpMethod', ''), event.get('resource', '')


def header(event: LambdaEvent, name: str) -> Optional[str]:
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value
    return None


def bearer_token(event: LambdaEvent) -> Optional[str]:
    authorization = header(event, 'Authorization')
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def json_body(event: LambdaEvent) -> dict[str, Any]:
    try:
        body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError as e:
        raise ValidationError('Invalid JSON body') from e
    if not isinstance(body, dict):
        raise ValidationError('Request body must be a JSON object')
    return body


def binary_body(event: LambdaEvent) -> bytes:
    body = event.get('body') or ''
    if not event.get('isBase64Encoded'):
        return body.encode('utf-8')
    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError('Invalid base64 request body') from e


def path_parameter(event: LambdaEvent, name: str) -> str:
    value = (event.get('pathParameters') or {}).get(name)
    if value is None or not str(value).strip():
        raise ValidationError(f"Missing '{name}' in path")
    return str(value)


def int_path_parameter(event: LambdaEvent, name: str) -> int:
    value = path_parameter(event, name)
    try:
        return int(value)
    except ValueError as e:
        raise ValidationError(f"Path parameter '{name}' must be an integer") from e


def query_parameter(event: LambdaEvent, name: str, default: Optional[str] = None) -> Optional[str]:
    return (event.get('queryStringParameters') or {}).get(name, default)


def int_query_parameter(event: LambdaEvent, name: str, default: int) -> int:
    value = query_parameter(event, name)
    if value is None or value == '':
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValidationError(f"Query parameter '{name}' must be an integer") from e
