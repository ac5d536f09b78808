"""API Gateway (Lambda proxy) response builders.

All responses are JSON with permissive CORS headers for the browser frontend.
"""

import json
from typing import Any

from linkfinder.types import LambdaResponse
from linkfinder.constants import ROUTE_NOT_FOUND
from linkfinder.exceptions import LinkFinderError


CORS_HEADERS = {
    'Content-Type': 'application/json',
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type,Authorization',
    'Access-Control-Allow-Methods': 'OPTIONS,GET,POST,PUT,DELETE',
}


def response_json(status_code: int, body: Any) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': dict(CORS_HEADERS),
        'body': json.dumps(body),
    }


def response_200(body: Any) -> LambdaResponse:
    return response_json(200, body)


def response_201(body: Any) -> LambdaResponse:
    return response_json(201, body)


def response_error(error: LinkFinderError, **extra: Any) -> LambdaResponse:
    """Translate a domain error into its HTTP response.

    Example:
        >>> response_error(NotFoundError('Link not found'))['statusCode']
        404
    """
    body = {'message': error.message, 'errorCode': error.error_code}
    body.update(extra)
    return response_json(error.status_code, body)


def response_404_route(method: str, resource: str) -> LambdaResponse:
    return response_json(404, {'message': f'No route for {method} {resource}', 'errorCode': ROUTE_NOT_FOUND})
