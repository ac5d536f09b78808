"""Helper utilities for AWS lambda functions.

Functions:
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    correlation_id() -> str
        Generate an identifier linking a generic 500 response to its server-side log
    guarantee_500_response(handler) -> Callable
        Decorator: Turn any unanticipated exception into a generic 500 response

Example:
    Typical usage inside a Lambda handler module:

        >>> from linkfinder.utils.helpers import guarantee_500_response
        >>> @guarantee_500_response
        ... def lambda_handler(event, context):
        ...     raise RuntimeError('boom')
        >>> lambda_handler({}, None)['statusCode']
        500
"""

import os
import uuid
import logging
import functools
from collections.abc import Callable

from linkfinder.types import LambdaEvent, LambdaContext, LambdaResponse
from linkfinder.constants import INTERNAL_ERROR
from linkfinder.exceptions import MissingEnvironmentVariableError
from linkfinder.utils.responses import response_json
from linkfinder.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def correlation_id() -> str:
    return f'ERR-{uuid.uuid4().hex[:16]}'


def guarantee_500_response(handler: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
    """Decorator: respond with a generic 500 when a handler fails unexpectedly.

    The full exception is logged together with a correlation id, and only the
    correlation id is returned to the caller. When running locally the
    exception is re-raised instead, so SAM shows the traceback.

    Response body:
        {"message": "Internal Server Error", "errorCode": "INTERNAL_ERROR", "correlationId": "ERR-..."}
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise

            error_id = correlation_id()
            logger.exception(
                'Unhandled exception in lambda handler. Responding with 500.',
                extra={
                    'event': INTERNAL_ERROR,
                    'correlationId': error_id,
                    'requestId': getattr(context, 'aws_request_id', None),
                    'route': f"{event.get('httpMethod')} {event.get('resource')}",
                },
            )
            return response_json(500, {'message': 'Internal Server Error', 'errorCode': INTERNAL_ERROR, 'correlationId': error_id})

    return wrapper
