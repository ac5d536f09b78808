"""Unit tests for AuthService.

Test coverage includes:
    1. Registration
       - Passwords are hashed, duplicates (username, case-insensitive email) rejected.
    2. Authentication
       - Successful login issues a token; unknown user and wrong password fail identically.
    3. Admin management
       - Listing ADMIN accounts, lookup and the SUPER_ADMIN deletion guard.
"""

from unittest.mock import MagicMock

import pytest

from linkfinder.dao.base import UserBaseDAO
from linkfinder.dao.exceptions import UserAlreadyExistsError
from linkfinder.exceptions import (
    BadConfigurationError,
    DuplicateIdentityError,
    ForbiddenError,
    InvalidCredentialsError,
    NotFoundError,
)
from linkfinder.models import RegistrationRequest, Role
from linkfinder.services import AuthService


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def service(user_dao, token_service, password_hasher):
    return AuthService(user_dao, token_service, password_hasher)


@pytest.fixture
def alice(service):
    return service.register(RegistrationRequest(username='alice', email='alice@example.com', password='secret1'), Role.ADMIN)


# -------------------------------
# 1. Registration
# -------------------------------


def test_register_hashes_password(service, alice):
    assert alice.id is not None
    assert alice.role == Role.ADMIN
    assert alice.password_hash != 'secret1'
    assert alice.password_hash.startswith('$argon2')
    assert alice.created_at is not None


def test_register_duplicate_username(service, alice):
    candidate = RegistrationRequest(username='alice', email='other@example.com', password='secret1')

    with pytest.raises(DuplicateIdentityError, match='Username is already taken'):
        service.register(candidate, Role.ADMIN)


def test_register_duplicate_email_is_case_insensitive(service, alice):
    candidate = RegistrationRequest(username='alice2', email='ALICE@example.com', password='secret1')

    with pytest.raises(DuplicateIdentityError, match='Email is already registered'):
        service.register(candidate, Role.ADMIN)


def test_register_lost_race_maps_to_duplicate(password_hasher):
    user_dao = MagicMock(spec=UserBaseDAO)
    user_dao.exists_username.return_value = False
    user_dao.exists_email.return_value = False
    user_dao.insert.side_effect = UserAlreadyExistsError("Username 'bob' is already taken.")
    service = AuthService(user_dao, password_hasher=password_hasher)

    with pytest.raises(DuplicateIdentityError):
        service.register(RegistrationRequest(username='bob', email='bob@example.com', password='secret1'), Role.ADMIN)


# -------------------------------
# 2. Authentication
# -------------------------------


def test_authenticate(service, alice, token_service):
    issued = service.authenticate('alice', 'secret1')

    claims = token_service.validate(issued.token)
    assert claims.subject == 'alice'
    assert claims.role == Role.ADMIN


@pytest.mark.parametrize('username, password', [('alice', 'wrong-password'), ('ghost', 'secret1')])
def test_authenticate_failures_are_indistinguishable(service, alice, username, password):
    with pytest.raises(InvalidCredentialsError) as exc_info:
        service.authenticate(username, password)

    assert exc_info.value.message == 'Invalid username or password'


def test_authenticate_unknown_user_still_verifies_a_hash(user_dao, token_service, password_hasher):
    hasher = MagicMock(wraps=password_hasher)
    service = AuthService(user_dao, token_service, hasher)

    with pytest.raises(InvalidCredentialsError):
        service.authenticate('ghost', 'secret1')

    hasher.verify.assert_called_once()



def test_authenticate_without_token_service(user_dao, password_hasher):
    with pytest.raises(BadConfigurationError):
        AuthService(user_dao, password_hasher=password_hasher).authenticate('alice', 'secret1')


# -------------------------------
# 3. Admin management
# -------------------------------


def test_list_admins_excludes_super_admins(service, alice):
    service.register(RegistrationRequest(username='root', email='root@example.com', password='secret1'), Role.SUPER_ADMIN)
    bob = service.register(RegistrationRequest(username='bob', email='bob@example.com', password='secret1'), Role.ADMIN)

    assert [admin.username for admin in service.list_admins()] == [bob.username, alice.username]


def test_get_admin(service, alice):
    assert service.get_admin(alice.id).username == 'alice'


def test_get_missing_admin(service):
    with pytest.raises(NotFoundError, match='Admin not found'):
        service.get_admin(404)


def test_delete_admin(service, alice, user_dao):
    service.delete_admin(alice.id)
    assert alice.id not in user_dao.users


def test_delete_super_admin_is_forbidden(service, user_dao):
    root = service.register(RegistrationRequest(username='root', email='root@example.com', password='secret1'), Role.SUPER_ADMIN)

    with pytest.raises(ForbiddenError, match='Cannot delete SUPER_ADMIN user'):
        service.delete_admin(root.id)

    assert root.id in user_dao.users
