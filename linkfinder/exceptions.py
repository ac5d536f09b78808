"""Application-specific exceptions.

Every domain error carries a stable `error_code` (returned to API callers as
`errorCode`) and the HTTP `status_code` the Lambda layer answers with.
Configuration errors are internal and always surface as HTTP 500.

Example:
    >>> from linkfinder.exceptions import NotFoundError
    >>> raise NotFoundError('Link not found')
    Traceback (most recent call last):
        ...
    linkfinder.exceptions.NotFoundError: Link not found
"""


class LinkFinderError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'LINKFINDER_ERROR'
    status_code = 500

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    default_message = 'Application error'


class ValidationError(LinkFinderError):
    """Raised when a field is missing or malformed (user-correctable)."""

    error_code = 'VALIDATION_ERROR'
    status_code = 400
    default_message = 'Invalid request'


class DuplicateReferenceCodeError(LinkFinderError):
    """Raised when a reference code already exists (case-insensitive)."""

    error_code = 'DUPLICATE_REFERENCE_CODE'
    status_code = 409
    default_message = 'Reference code already exists'


class DuplicateIdentityError(LinkFinderError):
    """Raised when a username or email is already registered."""

    error_code = 'DUPLICATE_IDENTITY'
    status_code = 409
    default_message = 'Username or email is already taken'


class NotFoundError(LinkFinderError):
    error_code = 'NOT_FOUND'
    status_code = 404
    default_message = 'Resource not found'


class InvalidCredentialsError(LinkFinderError):
    """Raised on failed login. The message never reveals which check failed."""

    error_code = 'INVALID_CREDENTIALS'
    status_code = 401
    default_message = 'Invalid username or password'


class TokenInvalidError(LinkFinderError):
    """Raised when a session token is malformed, tampered with or expired."""

    error_code = 'TOKEN_INVALID'
    status_code = 401
    default_message = 'Invalid or expired token'


class UnauthorizedError(LinkFinderError):
    """Raised when a protected operation is called without a valid token."""

    error_code = 'UNAUTHORIZED'
    status_code = 401
    default_message = 'Authentication required'


class ForbiddenError(LinkFinderError):
    """Raised when a valid token lacks the role an operation requires."""

    error_code = 'FORBIDDEN'
    status_code = 403
    default_message = 'Access denied'


class PageLimitExceededError(LinkFinderError):
    """Raised when search pagination goes deeper than supported."""

    error_code = 'PAGE_LIMIT_EXCEEDED'
    status_code = 400
    default_message = 'Page limit exceeded for performance'


class ConfigurationError(LinkFinderError):
    """Base exception for all configuration errors."""

    error_code = 'CONFIGURATION_ERROR'
    default_message = 'Application is misconfigured'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'MISSING_ENVIRONMENT_VARIABLE'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'BAD_CONFIGURATION'
