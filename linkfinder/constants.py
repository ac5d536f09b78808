from enum import StrEnum


APPLICATION_NAME = 'Smart Link Finder'
APPLICATION_VERSION = '1.0.0'


class Limits:
    """Field and paging limits."""

    REFERENCE_CODE_MIN = 2
    REFERENCE_CODE_MAX = 20
    FULL_URL_MAX = 2048
    DESCRIPTION_MAX = 500
    BRAND_NAME_MAX = 100

    USERNAME_MIN = 3
    USERNAME_MAX = 50
    PASSWORD_MIN = 6

    SEARCH_MAX_PAGE_SIZE = 50  # larger requests are clamped
    SEARCH_MAX_PAGE = 10  # deeper pages are rejected


class Defaults:
    """Default values for optional request parameters and settings."""

    TOKEN_TTL_MINUTES = 60
    TOKEN_ALGORITHM = 'HS256'

    LIST_PAGE_SIZE = 10
    LIST_SORT_FIELD = 'id'
    LIST_SORT_DIR = 'desc'

    SEARCH_PAGE_SIZE = 20
    SEARCH_SCAN_BATCH = 500  # links read per store round trip while searching

    HEALTH_DISK_THRESHOLD_PERCENT = 90.0
    HEALTH_ALERT_AFTER_FAILURES = 3


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'

    class Secrets(StrEnum):
        # Secrets Manager name holding JSON: {"signing_key": "..."}
        TOKEN_SECRET_NAME = 'TOKEN_SECRET_NAME'  # noqa: S105

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566


# Error codes
INTERNAL_ERROR = 'INTERNAL_ERROR'
ROUTE_NOT_FOUND = 'ROUTE_NOT_FOUND'
