import logging
from typing import Optional

from linkfinder.types import LambdaEvent, LambdaContext, LambdaResponse
from linkfinder.dao.redis import UserRedisDAO
from linkfinder.models import Role, TokenClaims
from linkfinder.services import AccessGate, AuthService, Operation, TokenService, build_policy
from linkfinder.services.validation import validate_credentials, validate_registration
from linkfinder.utils import AppSettings, app_prefix, load_config, load_signing_key
from linkfinder.utils.events import json_body
from linkfinder.utils.helpers import guarantee_500_response
from linkfinder.utils.responses import response_200, response_201
from linkfinder.utils.routing import Routes, dispatch


logger = logging.getLogger(__name__)


def login(service: AuthService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    username, password = validate_credentials(json_body(event))
    issued = service.authenticate(username, password)
    return response_200(
        {
            'token': issued.token,
            'type': 'Bearer',
            'username': issued.claims.subject,
            'role': str(issued.claims.role),
            'expiresAt': issued.claims.expires_at.isoformat(),
        }
    )


def _register(service: AuthService, event: LambdaEvent, role: Role) -> LambdaResponse:
    candidate = validate_registration(json_body(event))
    user = service.register(candidate, role)
    return response_201(
        {
            'message': f'{role} registered successfully',
            'username': user.username,
            'role': str(user.role),
        }
    )


def register(service: AuthService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    return _register(service, event, Role.ADMIN)


def register_admin(service: AuthService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    return _register(service, event, Role.ADMIN)


def register_super_admin(service: AuthService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    return _register(service, event, Role.SUPER_ADMIN)


# The endpoint alone decides the role of a new account
ROUTES: Routes = {
    ('POST', '/auth/login'): (Operation.LOGIN, login),
    ('POST', '/auth/register'): (Operation.REGISTER, register),
    ('POST', '/auth/register-admin'): (Operation.REGISTER_ADMIN, register_admin),
    ('POST', '/auth/register-super-admin'): (Operation.REGISTER_SUPER_ADMIN, register_super_admin),
}


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle API Gateway requests for login and registration

    This Lambda handler follows this procedure:
    - Step 0: Load application config and settings
    - Step 1: Build the token service and access gate
    - Step 2: Connect the auth service to the data store
    - Step 3: Dispatch the request through the routing table

    Routes:
        POST /auth/login                    {username, password} -> {token, type, username, role, expiresAt}
        POST /auth/register                 {username, email, password} -> ADMIN account
        POST /auth/register-admin           {username, email, password} -> ADMIN account
        POST /auth/register-super-admin     {username, email, password} -> SUPER_ADMIN account

    Registration is public unless `access.open_admin_registration` is false,
    in which case it requires a SUPER_ADMIN token.

    HTTP responses:
        200: login succeeded
        201: account registered
        400: validation error
        401: invalid credentials (or missing token when registration is closed)
        403: insufficient role (registration closed)
        409: username or email already registered
        500: internal server error (with correlation id)
    """
    # 0- Load application config and settings
    app_config = load_config('authenticate')
    settings = AppSettings.from_config(app_config)
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Build the token service and access gate
    token_service = TokenService(load_signing_key(), settings.token_ttl_minutes)
    policy = build_policy(settings.protect_link_update, settings.open_admin_registration)
    gate = AccessGate(policy, token_service)

    # 2- Connect the auth service to the data store
    auth_service = AuthService(UserRedisDAO(**redis_config, prefix=app_prefix()), token_service)

    # 3- Dispatch the request
    return dispatch(event, ROUTES, gate, auth_service)
