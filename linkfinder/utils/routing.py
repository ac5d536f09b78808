"""Request dispatch shared by the Lambda handlers.

Each handler declares an explicit routing table:

    ROUTES = {
        ('GET', '/links'): (Operation.LIST_LINKS, list_links),
        ('POST', '/links'): (Operation.CREATE_LINK, create_link),
    }

where every action has the signature `action(service, event, claims) -> response`.
`dispatch()` looks up the route, runs the access gate with the request's bearer
token and translates domain errors into their HTTP responses. Errors with a
5xx status (e.g. configuration errors) are re-raised for `guarantee_500_response`.
"""

import logging
from collections.abc import Callable
from typing import Any, Optional

from linkfinder.types import LambdaEvent, LambdaResponse
from linkfinder.constants import ROUTE_NOT_FOUND
from linkfinder.exceptions import LinkFinderError
from linkfinder.models import TokenClaims
from linkfinder.services.access_control import AccessGate, Operation
from linkfinder.utils.events import bearer_token, route_key
from linkfinder.utils.responses import response_error, response_404_route


logger = logging.getLogger(__name__)

type Action = Callable[[Any, LambdaEvent, Optional[TokenClaims]], LambdaResponse]
type Routes = dict[tuple[str, str], tuple[Operation, Action]]


def dispatch(event: LambdaEvent, routes: Routes, gate: AccessGate, service: Any) -> LambdaResponse:
    method, resource = route_key(event)
    route = routes.get((method, resource))
    if route is None:
        logger.info('No route for request. Responding with 404.', extra={'event': ROUTE_NOT_FOUND, 'method': method, 'resource': resource})
        return response_404_route(method, resource)

    operation, action = route
    try:
        claims = gate.authorize(operation, bearer_token(event))
        return action(service, event, claims)
    except LinkFinderError as error:
        if error.status_code >= 500:
            raise
        logger.info(
            'Request rejected. Responding with %s.',
            error.status_code,
            extra={'event': error.error_code, 'operation': str(operation), 'reason': error.message},
        )
        return response_error(error)
