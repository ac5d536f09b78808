"""Structured JSON logging for the Lambda functions

Every Lambda package calls `initialize_logging()` from its `__init__.py`, so
the configuration is in place before the handler module logs anything.

One log line per record:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "linkfinder.services.link_service",
    "message": "Link created.",
    "event": "LINK_CREATED",
    "linkId": 7
}

Context passed through `extra={...}` becomes top-level keys. Keys that could
carry credentials are masked. Exception info is rendered into `exception`.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC
from typing import Any

from linkfinder.constants import ENV


# Attributes every LogRecord has, anything else on a record came from `extra`
RECORD_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', None, None))) | {'message', 'asctime'}

REDACTED = '***'
SENSITIVE_KEYS = frozenset({'password', 'passwordHash', 'password_hash', 'token', 'authorization', 'signing_key', 'signingKey'})

# Chatty third-party loggers kept at WARNING whatever LOG_LEVEL says
QUIET_LOGGERS = ('botocore', 'boto3', 'urllib3')


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def context(self, record: logging.LogRecord) -> dict[str, Any]:
        return {
            key: REDACTED if key in SENSITIVE_KEYS else value
            for key, value in vars(record).items()
            if key not in RECORD_ATTRS
        }

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': _utc_timestamp(record.created),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            **self.context(record),
        }
        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        return json.dumps(log, default=str)


def initialize_logging() -> None:
    level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )
