"""Where the Lambda is running

Deployed functions talk to real AWS services. Under `sam local` (or with
APP_ENV=local) they talk to LocalStack instead, so clients built for
Secrets Manager must be pointed at its endpoint.
"""

import os

from linkfinder.constants import ENV


DEFAULT_LOCALSTACK_ENDPOINT = 'http://localhost:4566'


def running_locally() -> bool:
    """True under `sam local invoke/start-api` or when APP_ENV is 'local'."""
    return os.getenv(ENV.App.APP_ENV, '').lower() == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def aws_client_kwargs() -> dict[str, str]:
    """Extra boto3.client() arguments for the current runtime.

    Example:
        >>> boto3.client('secretsmanager', **aws_client_kwargs())
    """
    if not running_locally():
        return {}
    return {'endpoint_url': os.getenv(ENV.LocalStack.ENDPOINT, DEFAULT_LOCALSTACK_ENDPOINT)}
