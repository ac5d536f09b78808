from linkfinder.services.token_service import TokenService
from linkfinder.services.auth_service import AuthService
from linkfinder.services.access_control import AccessGate, Operation, build_policy
from linkfinder.services.link_service import LinkService
from linkfinder.services.search_service import SearchService
from linkfinder.services.bulk_import_service import BulkImportService
from linkfinder.services.health_service import HealthMonitor, HealthState


__all__ = [
    'TokenService',
    'AuthService',
    'AccessGate',
    'Operation',
    'build_policy',
    'LinkService',
    'SearchService',
    'BulkImportService',
    'HealthMonitor',
    'HealthState',
]
