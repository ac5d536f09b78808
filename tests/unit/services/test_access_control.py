"""Unit tests for the access policy and AccessGate.

Test coverage includes:
    1. Policy table
       - Every operation has an entry; public and protected operations.
       - Configuration flags for link updates and registration.
    2. Gate decisions
       - Public operations, missing/invalid/expired tokens, insufficient roles.
"""

import pytest
from freezegun import freeze_time

from linkfinder.exceptions import BadConfigurationError, ForbiddenError, UnauthorizedError
from linkfinder.models import Role
from linkfinder.services import AccessGate, Operation, build_policy
from linkfinder.services.access_control import ANY_ADMIN, SUPER_ADMIN_ONLY


PUBLIC = {
    Operation.LOGIN,
    Operation.REGISTER,
    Operation.REGISTER_ADMIN,
    Operation.REGISTER_SUPER_ADMIN,
    Operation.UPDATE_LINK,
    Operation.GET_LINK_BY_REFERENCE,
    Operation.SEARCH_LINKS,
    Operation.IMPORT_TEMPLATE,
    Operation.HEALTH,
    Operation.HEALTH_DETAILED,
}


@pytest.fixture
def gate(token_service):
    return AccessGate(build_policy(), token_service)


# -------------------------------
# 1. Policy table
# -------------------------------


def test_default_policy():
    policy = build_policy()

    assert set(policy) == set(Operation)
    assert {operation for operation, roles in policy.items() if roles is None} == PUBLIC
    assert policy[Operation.CREATE_LINK] == ANY_ADMIN
    assert policy[Operation.DELETE_LINK] == ANY_ADMIN
    assert policy[Operation.IMPORT_LINKS] == ANY_ADMIN
    assert policy[Operation.LIST_ADMINS] == SUPER_ADMIN_ONLY
    assert policy[Operation.DELETE_ADMIN] == SUPER_ADMIN_ONLY


def test_policy_with_protected_link_update():
    assert build_policy(protect_link_update=True)[Operation.UPDATE_LINK] == ANY_ADMIN


def test_policy_with_closed_registration():
    policy = build_policy(open_admin_registration=False)
    assert policy[Operation.REGISTER] == SUPER_ADMIN_ONLY
    assert policy[Operation.REGISTER_SUPER_ADMIN] == SUPER_ADMIN_ONLY
    assert policy[Operation.LOGIN] is None


def test_incomplete_policy_is_rejected(token_service):
    policy = build_policy()
    del policy[Operation.HEALTH]

    with pytest.raises(BadConfigurationError, match='HEALTH'):
        AccessGate(policy, token_service)


# -------------------------------
# 2. Gate decisions
# -------------------------------


@pytest.mark.parametrize('operation', sorted(PUBLIC))
def test_public_operations_need_no_token(gate, operation):
    assert gate.authorize(operation, None) is None


def test_protected_operation_without_token(gate):
    with pytest.raises(UnauthorizedError, match='Authentication required'):
        gate.authorize(Operation.CREATE_LINK, None)


def test_protected_operation_with_invalid_token(gate):
    with pytest.raises(UnauthorizedError):
        gate.authorize(Operation.CREATE_LINK, 'not-a-token')


def test_protected_operation_with_expired_token(gate, token_service):
    with freeze_time('2025-01-01 00:00:00'):
        token = token_service.issue('alice', Role.ADMIN).token

    with freeze_time('2025-01-01 02:00:00'):
        with pytest.raises(UnauthorizedError, match='Token has expired'):
            gate.authorize(Operation.CREATE_LINK, token)


def test_admin_may_manage_links(gate, admin_token):
    claims = gate.authorize(Operation.CREATE_LINK, admin_token)
    assert claims.subject == 'alice'
    assert claims.role == Role.ADMIN


@pytest.mark.parametrize('operation', [Operation.LIST_ADMINS, Operation.GET_ADMIN, Operation.DELETE_ADMIN])
def test_admin_may_not_manage_admins(gate, admin_token, operation):
    with pytest.raises(ForbiddenError, match='Access denied'):
        gate.authorize(operation, admin_token)


@pytest.mark.parametrize('operation', [Operation.LIST_ADMINS, Operation.DELETE_LINK, Operation.IMPORT_LINKS])
def test_super_admin_may_do_everything(gate, super_admin_token, operation):
    assert gate.authorize(operation, super_admin_token).role == Role.SUPER_ADMIN


def test_closed_registration_requires_super_admin(token_service, admin_token, super_admin_token):
    gate = AccessGate(build_policy(open_admin_registration=False), token_service)

    with pytest.raises(UnauthorizedError):
        gate.authorize(Operation.REGISTER_ADMIN, None)
    with pytest.raises(ForbiddenError):
        gate.authorize(Operation.REGISTER_ADMIN, admin_token)
    assert gate.authorize(Operation.REGISTER_ADMIN, super_admin_token).subject == 'root'


def test_protected_operation_without_token_service(admin_token):
    gate = AccessGate(build_policy())

    assert gate.authorize(Operation.SEARCH_LINKS, None) is None
    with pytest.raises(BadConfigurationError):
        gate.authorize(Operation.CREATE_LINK, admin_token)
