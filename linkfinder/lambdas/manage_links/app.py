import logging
from typing import Optional

from linkfinder.types import LambdaEvent, LambdaContext, LambdaResponse
from linkfinder.constants import Defaults
from linkfinder.dao.redis import LinkRedisDAO
from linkfinder.models import LinkModel, TokenClaims
from linkfinder.services import AccessGate, LinkService, Operation, TokenService, build_policy
from linkfinder.services.validation import validate_link_request
from linkfinder.utils import AppSettings, app_prefix, load_config, load_signing_key
from linkfinder.utils.events import int_path_parameter, int_query_parameter, json_body, query_parameter
from linkfinder.utils.helpers import guarantee_500_response
from linkfinder.utils.responses import response_200, response_201
from linkfinder.utils.routing import Routes, dispatch


logger = logging.getLogger(__name__)


def list_links(service: LinkService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    page = service.list_all(
        page=int_query_parameter(event, 'page', default=0),
        size=int_query_parameter(event, 'size', default=Defaults.LIST_PAGE_SIZE),
        sort_field=query_parameter(event, 'sortBy') or Defaults.LIST_SORT_FIELD,
        sort_dir=query_parameter(event, 'sortDir') or Defaults.LIST_SORT_DIR,
    )
    return response_200(page.to_dict(LinkModel.to_dict))


def get_link(service: LinkService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    link = service.get(int_path_parameter(event, 'id'))
    return response_200(link.to_dict())


def create_link(service: LinkService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    request = validate_link_request(json_body(event))
    link = service.create(request, created_by=claims.subject if claims else None)
    return response_201(link.to_dict())


def update_link(service: LinkService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    link_id = int_path_parameter(event, 'id')
    request = validate_link_request(json_body(event))
    link = service.update(link_id, request)
    return response_200(link.to_dict())


def delete_link(service: LinkService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    service.delete(int_path_parameter(event, 'id'))
    return response_200({'message': 'Link deleted successfully'})


ROUTES: Routes = {
    ('GET', '/links'): (Operation.LIST_LINKS, list_links),
    ('GET', '/links/{id}'): (Operation.GET_LINK, get_link),
    ('POST', '/links'): (Operation.CREATE_LINK, create_link),
    ('PUT', '/links/{id}'): (Operation.UPDATE_LINK, update_link),
    ('DELETE', '/links/{id}'): (Operation.DELETE_LINK, delete_link),
}


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle API Gateway requests managing links

    This Lambda handler follows this procedure:
    - Step 0: Load application config and settings
    - Step 1: Build the access gate (token validation + role policy)
    - Step 2: Connect the link service to the data store
    - Step 3: Dispatch the request through the routing table

    Routes:
        GET    /links           (ADMIN, SUPER_ADMIN)  paginated listing (page, size, sortBy, sortDir)
        GET    /links/{id}      (ADMIN, SUPER_ADMIN)  single link
        POST   /links           (ADMIN, SUPER_ADMIN)  create link, 201
        PUT    /links/{id}      (public unless access.protect_link_update)  replace link fields
        DELETE /links/{id}      (ADMIN, SUPER_ADMIN)  hard delete

    HTTP responses:
        200/201: link JSON, page JSON or confirmation message
        400: validation error
        401: missing or invalid token
        403: insufficient role
        404: link not found
        409: duplicate reference code
        500: internal server error (with correlation id)

    Example:
        >>> event = {'httpMethod': 'GET', 'resource': '/links', 'headers': {'Authorization': 'Bearer ...'}}
        >>> lambda_handler(event, None)['statusCode']
        200
    """
    # 0- Load application config and settings
    app_config = load_config('manage_links')
    settings = AppSettings.from_config(app_config)
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Build the access gate
    policy = build_policy(settings.protect_link_update, settings.open_admin_registration)
    gate = AccessGate(policy, TokenService(load_signing_key(), settings.token_ttl_minutes))

    # 2- Connect the link service to the data store
    link_service = LinkService(LinkRedisDAO(**redis_config, prefix=app_prefix()))

    # 3- Dispatch the request
    return dispatch(event, ROUTES, gate, link_service)
