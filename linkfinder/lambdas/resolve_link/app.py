import logging
from typing import Optional

from linkfinder.types import LambdaEvent, LambdaContext, LambdaResponse
from linkfinder.constants import Defaults
from linkfinder.dao.redis import LinkRedisDAO
from linkfinder.exceptions import NotFoundError, ValidationError
from linkfinder.models import LinkModel, TokenClaims
from linkfinder.services import AccessGate, LinkService, Operation, SearchService, build_policy
from linkfinder.utils import AppSettings, app_prefix, load_config
from linkfinder.utils.events import int_query_parameter, path_parameter, query_parameter
from linkfinder.utils.helpers import guarantee_500_response
from linkfinder.utils.responses import response_200, response_error
from linkfinder.utils.routing import Routes, dispatch
from linkfinder.lambdas.resolve_link.constants import REFERENCE_NOT_FOUND, REFERENCE_RESOLVED


logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = 'Sorry, this reference code is not available in our database.'
NOT_FOUND_HINT = 'Please verify the code or contact the admin to add this link.'


class LinkResolver:
    """Read-only link services exposed to the public."""

    def __init__(self, link_service: LinkService, search_service: SearchService):
        self.links = link_service
        self.search = search_service

    def resolve(self, reference_code: str) -> LinkModel:
        try:
            link = self.links.get_by_reference_code(reference_code)
        except NotFoundError:
            logger.info('Reference code not found.', extra={'event': REFERENCE_NOT_FOUND, 'referenceCode': reference_code})
            raise NotFoundError(NOT_FOUND_MESSAGE) from None

        logger.info('Reference code resolved.', extra={'event': REFERENCE_RESOLVED, 'referenceCode': reference_code, 'linkId': link.id})
        return link


def _not_found(error: NotFoundError, reference_code: str) -> LambdaResponse:
    return response_error(error, hint=NOT_FOUND_HINT, referenceCode=reference_code)


def get_by_reference(service: LinkResolver, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    reference_code = path_parameter(event, 'referenceCode')
    try:
        link = service.resolve(reference_code)
    except NotFoundError as error:
        return _not_found(error, reference_code)
    return response_200(link.to_dict())


def get_public_link(service: LinkResolver, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    reference_code = path_parameter(event, 'referenceCode')
    try:
        link = service.resolve(reference_code)
    except NotFoundError as error:
        return _not_found(error, reference_code)
    return response_200(
        {
            'referenceCode': link.reference_code,
            'fullUrl': link.full_url,
            'description': link.description,
            'brandName': link.brand_name,
            'status': str(link.status),
        }
    )


def search_links(service: LinkResolver, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    term = query_parameter(event, 'q')
    if term is None:
        raise ValidationError("Missing 'q' search parameter")

    page = service.search.search(
        term,
        page=int_query_parameter(event, 'page', default=0),
        size=int_query_parameter(event, 'size', default=Defaults.SEARCH_PAGE_SIZE),
    )
    return response_200(page.to_dict(LinkModel.to_dict))


ROUTES: Routes = {
    ('GET', '/links/reference/{referenceCode}'): (Operation.GET_LINK_BY_REFERENCE, get_by_reference),
    ('GET', '/public/link/{referenceCode}'): (Operation.GET_LINK_BY_REFERENCE, get_public_link),
    ('GET', '/links/search'): (Operation.SEARCH_LINKS, search_links),
}


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle public API Gateway requests resolving and searching links

    This Lambda handler follows this procedure:
    - Step 0: Load application config and settings
    - Step 1: Build the access gate (every route here is public, no token service needed)
    - Step 2: Connect the link and search services to the data store
    - Step 3: Dispatch the request through the routing table

    Routes:
        GET /links/reference/{referenceCode}    full link record (case-insensitive lookup)
        GET /public/link/{referenceCode}        public projection of the link
        GET /links/search?q=&page=&size=        substring search, size clamped to 50, page <= 10

    HTTP responses:
        200: link JSON or page JSON
        400: missing search term, bad paging or page limit exceeded
        404: reference code not available (message + hint)
        500: internal server error (with correlation id)
    """
    # 0- Load application config and settings
    app_config = load_config('resolve_link')
    settings = AppSettings.from_config(app_config)
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Build the access gate
    gate = AccessGate(build_policy(settings.protect_link_update, settings.open_admin_registration))

    # 2- Connect services to the data store
    link_dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
    resolver = LinkResolver(LinkService(link_dao), SearchService(link_dao))

    # 3- Dispatch the request
    return dispatch(event, ROUTES, gate, resolver)
