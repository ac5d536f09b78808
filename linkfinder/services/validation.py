"""Field validation shared by the link API, bulk import and registration.

Every function either returns a normalized value or raises
`linkfinder.exceptions.ValidationError` with a user-facing message.

Example:
    >>> validate_link_request({'referenceCode': ' PI-31001 ', 'fullUrl': 'https://example.com/doc1.pdf'})
    LinkRequest(reference_code='PI-31001', full_url='https://example.com/doc1.pdf', description=None, brand_name=None, status=None)

    >>> normalize_full_url('ftp://example.com')
    Traceback (most recent call last):
        ...
    linkfinder.exceptions.ValidationError: Full URL must start with http:// or https://
"""

import re
from collections.abc import Mapping
from typing import Any, Optional

from linkfinder.constants import Limits
from linkfinder.exceptions import ValidationError
from linkfinder.models import LinkRequest, LinkStatus, RegistrationRequest


URL_SCHEMES = ('http://', 'https://')
EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+$')


def _text(value: Any, label: str) -> str:
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError(f'{label} must be a string')
    return value.strip()


def normalize_reference_code(value: Any) -> str:
    code = _text(value, 'Reference Code')
    if not code:
        raise ValidationError('Reference Code is required')
    if not Limits.REFERENCE_CODE_MIN <= len(code) <= Limits.REFERENCE_CODE_MAX:
        raise ValidationError(f'Reference Code must be between {Limits.REFERENCE_CODE_MIN} and {Limits.REFERENCE_CODE_MAX} characters')
    return code


def normalize_full_url(value: Any) -> str:
    url = _text(value, 'Full URL')
    if not url:
        raise ValidationError('Full URL is required')
    if len(url) > Limits.FULL_URL_MAX:
        raise ValidationError(f'Full URL must not exceed {Limits.FULL_URL_MAX} characters')
    if not url.startswith(URL_SCHEMES):
        raise ValidationError('Full URL must start with http:// or https://')
    return url


def normalize_optional_text(value: Any, label: str, max_length: int) -> Optional[str]:
    text = _text(value, label)
    if len(text) > max_length:
        raise ValidationError(f'{label} must not exceed {max_length} characters')
    return text or None


def normalize_status(value: Any) -> Optional[LinkStatus]:
    status = _text(value, 'Status').upper()
    if not status:
        return None
    try:
        return LinkStatus(status)
    except ValueError as e:
        allowed = ', '.join(LinkStatus)
        raise ValidationError(f'Status must be one of {allowed}') from e


def validate_link_request(payload: Mapping[str, Any]) -> LinkRequest:
    """Validate a create/update link payload (camelCase keys, as sent by API clients)."""
    return LinkRequest(
        reference_code=normalize_reference_code(payload.get('referenceCode')),
        full_url=normalize_full_url(payload.get('fullUrl')),
        description=normalize_optional_text(payload.get('description'), 'Description', Limits.DESCRIPTION_MAX),
        brand_name=normalize_optional_text(payload.get('brandName'), 'Brand Name', Limits.BRAND_NAME_MAX),
        status=normalize_status(payload.get('status')),
    )


def validate_registration(payload: Mapping[str, Any]) -> RegistrationRequest:
    username = _text(payload.get('username'), 'Username')
    if not username:
        raise ValidationError('Username is required')
    if not Limits.USERNAME_MIN <= len(username) <= Limits.USERNAME_MAX:
        raise ValidationError(f'Username must be between {Limits.USERNAME_MIN} and {Limits.USERNAME_MAX} characters')

    email = _text(payload.get('email'), 'Email')
    if not email:
        raise ValidationError('Email is required')
    if not EMAIL_PATTERN.match(email):
        raise ValidationError('Email must be a valid email address')

    # Passwords are taken verbatim, surrounding whitespace included
    password = payload.get('password')
    if password is None or password == '':
        raise ValidationError('Password is required')
    if not isinstance(password, str):
        raise ValidationError('Password must be a string')
    if len(password) < Limits.PASSWORD_MIN:
        raise ValidationError(f'Password must be at least {Limits.PASSWORD_MIN} characters')

    return RegistrationRequest(username=username, email=email, password=password)


def validate_credentials(payload: Mapping[str, Any]) -> tuple[str, str]:
    username = payload.get('username')
    password = payload.get('password')
    if not isinstance(username, str) or not username.strip():
        raise ValidationError('Username is required')
    if not isinstance(password, str) or not password:
        raise ValidationError('Password is required')
    return username.strip(), password
