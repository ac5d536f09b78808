"""Issue and validate signed session tokens.

Tokens are HS256 JWTs carrying `sub` (username), `role`, `iat` and `exp`.
There is no revocation list: expiry is the only invalidation mechanism.
Validation is pure (no I/O, no shared state).

Example:
    >>> service = TokenService(signing_key='s3cr3t', ttl_minutes=60)
    >>> issued = service.issue('alice', Role.ADMIN)
    >>> service.validate(issued.token).subject
    'alice'
"""

from datetime import datetime, timedelta, UTC

import jwt
from beartype import beartype

from linkfinder.constants import Defaults
from linkfinder.exceptions import BadConfigurationError, TokenInvalidError
from linkfinder.models import IssuedToken, Role, TokenClaims


REQUIRED_CLAIMS = ['sub', 'role', 'iat', 'exp']


class TokenService:
    def __init__(self, signing_key: str, ttl_minutes: int = Defaults.TOKEN_TTL_MINUTES, algorithm: str = Defaults.TOKEN_ALGORITHM):
        if not signing_key:
            raise BadConfigurationError('Token signing key must not be empty')
        if ttl_minutes <= 0:
            raise BadConfigurationError(f'Token TTL must be positive (given: {ttl_minutes}).')

        self._signing_key = signing_key
        self.ttl = timedelta(minutes=ttl_minutes)
        self.algorithm = algorithm

    @beartype
    def issue(self, subject: str, role: Role) -> IssuedToken:
        # JWT timestamps have second precision
        issued_at = datetime.now(UTC).replace(microsecond=0)
        claims = TokenClaims(subject=subject, role=role, issued_at=issued_at, expires_at=issued_at + self.ttl)
        payload = {
            'sub': claims.subject,
            'role': str(claims.role),
            'iat': claims.issued_at,
            'exp': claims.expires_at,
        }
        token = jwt.encode(payload, self._signing_key, algorithm=self.algorithm)
        return IssuedToken(token=token, claims=claims)

    @beartype
    def validate(self, token: str) -> TokenClaims:
        """Verify a token's signature, structure and expiry.

        A token is still valid at the exact second of its `exp` claim and
        expires once the current time is past it. PyJWT's own check treats
        `exp == now` as expired, so expiry is checked here instead.

        Raises:
            TokenInvalidError:
                If the signature does not verify, a required claim is missing or
                malformed, the role is unknown, or the token has expired.
        """
        try:
            payload = jwt.decode(
                token,
                self._signing_key,
                algorithms=[self.algorithm],
                options={'require': REQUIRED_CLAIMS, 'verify_exp': False},
            )
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError() from e

        try:
            issued_at = datetime.fromtimestamp(payload['iat'], UTC)
            expires_at = datetime.fromtimestamp(payload['exp'], UTC)
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise TokenInvalidError() from e
        if datetime.now(UTC) > expires_at:
            raise TokenInvalidError('Token has expired')

        subject = payload['sub']
        if not isinstance(subject, str) or not subject:
            raise TokenInvalidError()
        try:
            role = Role(payload['role'])
        except ValueError as e:
            raise TokenInvalidError() from e

        return TokenClaims(subject=subject, role=role, issued_at=issued_at, expires_at=expires_at)
