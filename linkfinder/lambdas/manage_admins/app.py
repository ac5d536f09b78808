import logging
from typing import Optional

from linkfinder.types import LambdaEvent, LambdaContext, LambdaResponse
from linkfinder.dao.redis import UserRedisDAO
from linkfinder.models import TokenClaims
from linkfinder.services import AccessGate, AuthService, Operation, TokenService, build_policy
from linkfinder.utils import AppSettings, app_prefix, load_config, load_signing_key
from linkfinder.utils.events import int_path_parameter
from linkfinder.utils.helpers import guarantee_500_response
from linkfinder.utils.responses import response_200
from linkfinder.utils.routing import Routes, dispatch


logger = logging.getLogger(__name__)


def list_admins(service: AuthService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    return response_200([admin.to_dict() for admin in service.list_admins()])


def get_admin(service: AuthService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    admin = service.get_admin(int_path_parameter(event, 'id'))
    return response_200(admin.to_dict())


def delete_admin(service: AuthService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    service.delete_admin(int_path_parameter(event, 'id'))
    return response_200({'message': 'Admin deleted successfully'})


ROUTES: Routes = {
    ('GET', '/auth/admins'): (Operation.LIST_ADMINS, list_admins),
    ('GET', '/auth/admins/{id}'): (Operation.GET_ADMIN, get_admin),
    ('DELETE', '/auth/admins/{id}'): (Operation.DELETE_ADMIN, delete_admin),
}


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle API Gateway requests managing admin accounts (SUPER_ADMIN only)

    Routes:
        GET    /auth/admins         ADMIN accounts, newest first
        GET    /auth/admins/{id}    single account
        DELETE /auth/admins/{id}    delete account (SUPER_ADMIN accounts cannot be deleted)

    HTTP responses:
        200: account JSON, list of accounts or confirmation message
        400: malformed id
        401: missing or invalid token
        403: insufficient role, or target is a SUPER_ADMIN
        404: admin not found
        500: internal server error (with correlation id)
    """
    # 0- Load application config and settings
    app_config = load_config('manage_admins')
    settings = AppSettings.from_config(app_config)
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Build the access gate
    policy = build_policy(settings.protect_link_update, settings.open_admin_registration)
    gate = AccessGate(policy, TokenService(load_signing_key(), settings.token_ttl_minutes))

    # 2- Connect the auth service to the data store
    auth_service = AuthService(UserRedisDAO(**redis_config, prefix=app_prefix()))

    # 3- Dispatch the request
    return dispatch(event, ROUTES, gate, auth_service)
