from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any, Optional


class Role(StrEnum):
    ADMIN = 'ADMIN'
    SUPER_ADMIN = 'SUPER_ADMIN'


@dataclass(frozen=True)
class UserModel:
    """Represent an operator account.

    Attributes:
        username (str):
            Unique login name (exact match).
        email (str):
            Unique email address (case-insensitive).
        password_hash (str):
            Argon2 password hash. Never serialized or logged.
        role (Role):
            ADMIN or SUPER_ADMIN. Immutable after creation.
        id (Optional[int]):
            Surrogate id assigned by the data store on insert.
        created_at (Optional[datetime]):
            Registration timestamp (UTC).
    """

    username: str
    email: str
    password_hash: str
    role: Role
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'role': str(self.role),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class RegistrationRequest:
    """Validated registration input (plain-text password, hashed by AuthService)."""

    username: str
    email: str
    password: str
