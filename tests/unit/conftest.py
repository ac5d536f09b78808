"""Shared fixtures for unit tests.

Fixtures:
    - `signing_key`: HS256 signing key long enough for PyJWT's key length checks.
    - `token_service`: TokenService signing with `signing_key`.
    - `password_hasher`: Argon2 hasher with minimal cost parameters (fast tests).
    - `link_dao`: in-memory LinkBaseDAO with storage-level code uniqueness.
    - `user_dao`: in-memory UserBaseDAO with username/email uniqueness.
"""

import itertools
from dataclasses import replace
from typing import Optional

import pytest
from argon2 import PasswordHasher

from linkfinder.dao.base import LinkBaseDAO, UserBaseDAO
from linkfinder.dao.exceptions import LinkNotFoundError, ReferenceCodeTakenError, UserAlreadyExistsError, UserNotFoundError
from linkfinder.models import LinkModel, Role, UserModel
from linkfinder.services import TokenService


class InMemoryLinkDAO(LinkBaseDAO):
    def __init__(self):
        self.links: dict[int, LinkModel] = {}
        self.ids = itertools.count(1)

    def _owner(self, reference_code: str) -> Optional[int]:
        wanted = reference_code.lower()
        for link in self.links.values():
            if link.reference_code.lower() == wanted:
                return link.id
        return None

    def insert(self, link, **kwargs):
        if self._owner(link.reference_code) is not None:
            raise ReferenceCodeTakenError(link.reference_code)
        stored = replace(link, id=next(self.ids))
        self.links[stored.id] = stored
        return stored

    def update(self, link, **kwargs):
        if link.id not in self.links:
            raise LinkNotFoundError(link.id)
        owner = self._owner(link.reference_code)
        if owner is not None and owner != link.id:
            raise ReferenceCodeTakenError(link.reference_code)
        self.links[link.id] = link
        return link

    def delete(self, link_id, **kwargs):
        if link_id not in self.links:
            raise LinkNotFoundError(link_id)
        del self.links[link_id]

    def get(self, link_id, **kwargs):
        if link_id not in self.links:
            raise LinkNotFoundError(link_id)
        return self.links[link_id]

    def get_by_reference_code(self, reference_code, **kwargs):
        owner = self._owner(reference_code)
        if owner is None:
            raise LinkNotFoundError(reference_code)
        return self.links[owner]

    def exists_reference_code(self, reference_code, exclude_id=None, **kwargs):
        owner = self._owner(reference_code)
        return owner is not None and owner != exclude_id

    def page(self, offset, limit, sort_field='id', descending=True, **kwargs):
        ordered = sorted(self.links.values(), key=lambda link: str(getattr(link, sort_field)) if sort_field != 'id' else link.id, reverse=descending)
        return ordered[offset : offset + limit], len(self.links)


class InMemoryUserDAO(UserBaseDAO):
    def __init__(self):
        self.users: dict[int, UserModel] = {}
        self.ids = itertools.count(1)

    def insert(self, user, **kwargs):
        if self.exists_username(user.username) or self.exists_email(user.email):
            raise UserAlreadyExistsError(user.username)
        stored = replace(user, id=next(self.ids))
        self.users[stored.id] = stored
        return stored

    def get(self, user_id, **kwargs):
        if user_id not in self.users:
            raise UserNotFoundError(user_id)
        return self.users[user_id]

    def get_by_username(self, username, **kwargs):
        for user in self.users.values():
            if user.username == username:
                return user
        raise UserNotFoundError(username)

    def exists_username(self, username, **kwargs):
        return any(user.username == username for user in self.users.values())

    def exists_email(self, email, **kwargs):
        return any(user.email.lower() == email.lower() for user in self.users.values())

    def list_by_role(self, role, **kwargs):
        return [user for user in reversed(list(self.users.values())) if user.role == role]

    def delete(self, user_id, **kwargs):
        if user_id not in self.users:
            raise UserNotFoundError(user_id)
        del self.users[user_id]


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def signing_key() -> str:
    return 'unit-test-signing-key-0123456789abcdef'


@pytest.fixture
def token_service(signing_key) -> TokenService:
    return TokenService(signing_key, ttl_minutes=60)


@pytest.fixture
def password_hasher() -> PasswordHasher:
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def link_dao() -> InMemoryLinkDAO:
    return InMemoryLinkDAO()


@pytest.fixture
def user_dao() -> InMemoryUserDAO:
    return InMemoryUserDAO()


@pytest.fixture
def admin_token(token_service) -> str:
    return token_service.issue('alice', Role.ADMIN).token


@pytest.fixture
def super_admin_token(token_service) -> str:
    return token_service.issue('root', Role.SUPER_ADMIN).token
