"""Credential verification, registration and admin account management.

Passwords are hashed with Argon2 (`argon2-cffi`). Login failures produce the
same error whether the username is unknown or the password is wrong, and an
unknown username still pays for one hash verification so both paths take
comparable time.
"""

import logging
from datetime import datetime, UTC
from functools import cached_property
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError
from beartype import beartype

from linkfinder.dao.base import UserBaseDAO
from linkfinder.dao.exceptions import UserAlreadyExistsError, UserNotFoundError
from linkfinder.exceptions import (
    BadConfigurationError,
    DuplicateIdentityError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
)
from linkfinder.models import IssuedToken, RegistrationRequest, Role, UserModel
from linkfinder.services.token_service import TokenService


logger = logging.getLogger(__name__)

LOGIN_SUCCEEDED = 'LOGIN_SUCCEEDED'
LOGIN_FAILED = 'LOGIN_FAILED'
USER_REGISTERED = 'USER_REGISTERED'
ADMIN_DELETED = 'ADMIN_DELETED'


class AuthService:
    """Operator accounts: login, registration and admin management.

    Args:
        user_dao (UserBaseDAO):
            Account storage.
        token_service (Optional[TokenService]):
            Signs session tokens. Only needed for `authenticate()`.
        password_hasher (Optional[PasswordHasher]):
            Argon2 hasher. Defaults to argon2-cffi's recommended parameters.
    """

    def __init__(
        self,
        user_dao: UserBaseDAO,
        token_service: Optional[TokenService] = None,
        password_hasher: Optional[PasswordHasher] = None,
    ):
        self.user_dao = user_dao
        self.token_service = token_service
        self.hasher = password_hasher or PasswordHasher()

    @cached_property
    def _dummy_hash(self) -> str:
        return self.hasher.hash('linkfinder-unknown-user')

    def _verify(self, password_hash: str, password: str) -> bool:
        try:
            return self.hasher.verify(password_hash, password)
        except (VerifyMismatchError, InvalidHashError):
            return False

    @beartype
    def authenticate(self, username: str, password: str) -> IssuedToken:
        """Verify credentials and issue a session token.

        Raises:
            InvalidCredentialsError:
                If the user does not exist or the password does not match.
                The message is identical in both cases.
        """
        if self.token_service is None:
            raise BadConfigurationError('AuthService needs a TokenService to authenticate users')

        try:
            user = self.user_dao.get_by_username(username)
        except UserNotFoundError:
            self._verify(self._dummy_hash, password)
            logger.info('Login failed.', extra={'event': LOGIN_FAILED})
            raise InvalidCredentialsError() from None

        if not self._verify(user.password_hash, password):
            logger.info('Login failed.', extra={'event': LOGIN_FAILED})
            raise InvalidCredentialsError()

        issued = self.token_service.issue(user.username, user.role)
        logger.info('Login succeeded.', extra={'event': LOGIN_SUCCEEDED, 'username': user.username, 'role': str(user.role)})
        return issued

    @beartype
    def register(self, candidate: RegistrationRequest, role: Role) -> UserModel:
        """Create an account with the role chosen by the caller.

        Raises:
            DuplicateIdentityError:
                If the username or the email (case-insensitive) is already registered.
        """
        if self.user_dao.exists_username(candidate.username):
            raise DuplicateIdentityError('Username is already taken')
        if self.user_dao.exists_email(candidate.email):
            raise DuplicateIdentityError('Email is already registered')

        user = UserModel(
            username=candidate.username,
            email=candidate.email,
            password_hash=self.hasher.hash(candidate.password),
            role=role,
            created_at=datetime.now(UTC),
        )
        try:
            user = self.user_dao.insert(user)
        except UserAlreadyExistsError as e:
            # Lost a race against a concurrent registration
            raise DuplicateIdentityError(str(e)) from e

        logger.info('User registered.', extra={'event': USER_REGISTERED, 'username': user.username, 'role': str(role)})
        return user

    @beartype
    def list_admins(self) -> list[UserModel]:
        return self.user_dao.list_by_role(Role.ADMIN)

    @beartype
    def get_admin(self, user_id: int) -> UserModel:
        try:
            return self.user_dao.get(user_id)
        except UserNotFoundError as e:
            raise NotFoundError('Admin not found') from e

    @beartype
    def delete_admin(self, user_id: int) -> None:
        """Delete an account unless it is a SUPER_ADMIN.

        Raises:
            NotFoundError:
                If the account does not exist.
            ForbiddenError:
                If the account is a SUPER_ADMIN.
        """
        user = self.get_admin(user_id)
        if user.role == Role.SUPER_ADMIN:
            raise ForbiddenError('Cannot delete SUPER_ADMIN user')

        try:
            self.user_dao.delete(user_id)
        except UserNotFoundError as e:
            raise NotFoundError('Admin not found') from e
        logger.info('Admin deleted.', extra={'event': ADMIN_DELETED, 'userId': user_id, 'username': user.username})
