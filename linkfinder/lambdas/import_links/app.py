import logging
from typing import Optional

from linkfinder.types import LambdaEvent, LambdaContext, LambdaResponse
from linkfinder.dao.redis import LinkRedisDAO
from linkfinder.exceptions import ValidationError
from linkfinder.models import TokenClaims
from linkfinder.services import AccessGate, BulkImportService, LinkService, Operation, TokenService, build_policy
from linkfinder.utils import AppSettings, app_prefix, load_config, load_signing_key
from linkfinder.utils.events import binary_body, header
from linkfinder.utils.helpers import guarantee_500_response
from linkfinder.utils.responses import response_200
from linkfinder.utils.routing import Routes, dispatch
from linkfinder.lambdas.import_links.constants import ACCEPTED_CONTENT_TYPES, IMPORT_REQUESTED


logger = logging.getLogger(__name__)


def upload(service: BulkImportService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    content_type = (header(event, 'Content-Type') or '').split(';')[0].strip().lower()
    if content_type not in ACCEPTED_CONTENT_TYPES:
        raise ValidationError('Please upload a valid Excel (.xlsx) or CSV file')

    content = binary_body(event)
    if not content:
        raise ValidationError('Please select a file to upload')

    created_by = claims.subject if claims else None
    logger.info('Bulk import requested.', extra={'event': IMPORT_REQUESTED, 'contentType': content_type, 'bytes': len(content), 'username': created_by})

    report = service.import_document(content, created_by=created_by)
    body = report.to_dict()
    body['message'] = f'Imported {report.saved} of {report.parsed} rows'
    return response_200(body)


def template(service: BulkImportService, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    return response_200(service.template())


ROUTES: Routes = {
    ('POST', '/excel/upload'): (Operation.IMPORT_LINKS, upload),
    ('GET', '/excel/template'): (Operation.IMPORT_TEMPLATE, template),
}


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle API Gateway requests importing links from spreadsheets

    The upload body is the raw file (base64-encoded by API Gateway for binary
    media types). Column A holds the reference code, column B the full URL,
    row 1 is a header.

    Routes:
        POST /excel/upload      (ADMIN, SUPER_ADMIN)  import an .xlsx or .csv file
        GET  /excel/template    (public)              expected columns and sample rows

    HTTP responses:
        200: {message, totalRows, savedRows, skippedRows, rejectedRows, errors, data}
        400: bad content type, unreadable file, or no data rows
        401: missing or invalid token
        403: insufficient role
        500: internal server error (with correlation id)
    """
    # 0- Load application config and settings
    app_config = load_config('import_links')
    settings = AppSettings.from_config(app_config)
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Build the access gate
    policy = build_policy(settings.protect_link_update, settings.open_admin_registration)
    gate = AccessGate(policy, TokenService(load_signing_key(), settings.token_ttl_minutes))

    # 2- Connect the import pipeline to the data store
    import_service = BulkImportService(LinkService(LinkRedisDAO(**redis_config, prefix=app_prefix())))

    # 3- Dispatch the request
    return dispatch(event, ROUTES, gate, import_service)
