from dataclasses import dataclass
from datetime import datetime

from linkfinder.models.user_model import Role


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a validated session token."""

    subject: str
    role: Role
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed session token and the claims it encodes."""

    token: str
    claims: TokenClaims
