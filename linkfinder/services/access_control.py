"""Role-based access control for every API operation.

Role requirements live in one explicit table (operation -> required role set,
or None for public operations) evaluated by a single gate. The caller's
identity is always passed in explicitly as a bearer token.

Example:
    >>> gate = AccessGate(build_policy(), token_service)
    >>> gate.authorize(Operation.SEARCH_LINKS, None) is None
    True
    >>> gate.authorize(Operation.DELETE_ADMIN, admin_token)
    Traceback (most recent call last):
        ...
    linkfinder.exceptions.ForbiddenError: Access denied
"""

import logging
from enum import StrEnum
from typing import Optional

from linkfinder.exceptions import BadConfigurationError, ForbiddenError, TokenInvalidError, UnauthorizedError
from linkfinder.models import Role, TokenClaims
from linkfinder.services.token_service import TokenService


logger = logging.getLogger(__name__)


class Operation(StrEnum):
    LOGIN = 'LOGIN'
    REGISTER = 'REGISTER'
    REGISTER_ADMIN = 'REGISTER_ADMIN'
    REGISTER_SUPER_ADMIN = 'REGISTER_SUPER_ADMIN'
    LIST_ADMINS = 'LIST_ADMINS'
    GET_ADMIN = 'GET_ADMIN'
    DELETE_ADMIN = 'DELETE_ADMIN'
    LIST_LINKS = 'LIST_LINKS'
    GET_LINK = 'GET_LINK'
    CREATE_LINK = 'CREATE_LINK'
    UPDATE_LINK = 'UPDATE_LINK'
    DELETE_LINK = 'DELETE_LINK'
    GET_LINK_BY_REFERENCE = 'GET_LINK_BY_REFERENCE'
    SEARCH_LINKS = 'SEARCH_LINKS'
    IMPORT_LINKS = 'IMPORT_LINKS'
    IMPORT_TEMPLATE = 'IMPORT_TEMPLATE'
    HEALTH = 'HEALTH'
    HEALTH_DETAILED = 'HEALTH_DETAILED'


type Policy = dict[Operation, Optional[frozenset[Role]]]

ANY_ADMIN = frozenset({Role.ADMIN, Role.SUPER_ADMIN})
SUPER_ADMIN_ONLY = frozenset({Role.SUPER_ADMIN})


def build_policy(protect_link_update: bool = False, open_admin_registration: bool = True) -> Policy:
    """Build the operation -> required roles table.

    Args:
        protect_link_update (bool):
            When False (the default) link updates are public, otherwise they
            require ADMIN or SUPER_ADMIN.
        open_admin_registration (bool):
            When True (the default) anyone may register accounts, otherwise
            registration requires SUPER_ADMIN.

    Returns:
        Policy:
            Required role set per operation. None marks a public operation.
    """
    registration = None if open_admin_registration else SUPER_ADMIN_ONLY
    create_link = ANY_ADMIN

    return {
        Operation.LOGIN: None,
        Operation.REGISTER: registration,
        Operation.REGISTER_ADMIN: registration,
        Operation.REGISTER_SUPER_ADMIN: registration,
        Operation.LIST_ADMINS: SUPER_ADMIN_ONLY,
        Operation.GET_ADMIN: SUPER_ADMIN_ONLY,
        Operation.DELETE_ADMIN: SUPER_ADMIN_ONLY,
        Operation.LIST_LINKS: ANY_ADMIN,
        Operation.GET_LINK: ANY_ADMIN,
        Operation.CREATE_LINK: create_link,
        Operation.UPDATE_LINK: ANY_ADMIN if protect_link_update else None,
        Operation.DELETE_LINK: ANY_ADMIN,
        Operation.GET_LINK_BY_REFERENCE: None,
        Operation.SEARCH_LINKS: None,
        Operation.IMPORT_LINKS: create_link,  # every imported row goes through link creation
        Operation.IMPORT_TEMPLATE: None,
        Operation.HEALTH: None,
        Operation.HEALTH_DETAILED: None,
    }


class AccessGate:
    """Evaluate the access policy for one request.

    Args:
        policy (Policy):
            Operation -> required roles table, see `build_policy()`.
        token_service (Optional[TokenService]):
            Validates bearer tokens. Lambdas serving only public operations may omit it.
    """

    def __init__(self, policy: Policy, token_service: Optional[TokenService] = None):
        missing = set(Operation) - set(policy)
        if missing:
            raise BadConfigurationError(f'Access policy has no entry for: {", ".join(sorted(missing))}')

        self.token_service = token_service
        self.policy = policy

    def authorize(self, operation: Operation, token: Optional[str]) -> Optional[TokenClaims]:
        """Decide whether the bearer of `token` may perform `operation`.

        Returns:
            Optional[TokenClaims]:
                None for public operations, otherwise the caller's validated claims.

        Raises:
            UnauthorizedError:
                If the operation is protected and the token is missing or invalid.
            ForbiddenError:
                If the token is valid but its role is not in the required set.
        """
        required = self.policy[operation]
        if required is None:
            return None

        if not token:
            raise UnauthorizedError()
        if self.token_service is None:
            raise BadConfigurationError(f'Operation {operation} is protected but no TokenService is configured')
        try:
            claims = self.token_service.validate(token)
        except TokenInvalidError as e:
            logger.info('Rejected invalid token.', extra={'operation': str(operation), 'reason': e.message})
            raise UnauthorizedError(e.message) from e

        if claims.role not in required:
            logger.info(
                'Rejected insufficient role.',
                extra={'operation': str(operation), 'username': claims.subject, 'role': str(claims.role)},
            )
            raise ForbiddenError()
        return claims
