import json
import logging
from collections.abc import Callable
from datetime import datetime, UTC
from typing import Any, Optional

from linkfinder.types import LambdaEvent, LambdaContext, LambdaResponse
from linkfinder.constants import APPLICATION_NAME, APPLICATION_VERSION
from linkfinder.dao.exceptions import DataStoreError
from linkfinder.dao.redis import LinkRedisDAO
from linkfinder.models import TokenClaims
from linkfinder.services import AccessGate, HealthMonitor, Operation, build_policy
from linkfinder.utils import AppSettings, app_prefix, load_config
from linkfinder.utils.helpers import guarantee_500_response
from linkfinder.utils.responses import response_200
from linkfinder.utils.routing import Routes, dispatch
from linkfinder.lambdas.health_check.constants import SCHEDULED_CHECK, SCHEDULED_EVENT_SOURCE


logger = logging.getLogger(__name__)

# Survives across warm invocations of the same container
monitor: Optional[HealthMonitor] = None


def datastore_ping(redis_config: dict[str, Any]) -> Callable[[], bool]:
    """Return a ping function that keeps one DAO (and its connection pool) for its lifetime.

    Building the DAO is retried on the next ping until it succeeds.
    """
    dao: Optional[LinkRedisDAO] = None

    def ping() -> bool:
        nonlocal dao
        if dao is None:
            try:
                dao = LinkRedisDAO(**redis_config, prefix=app_prefix())  # connects and PINGs
            except DataStoreError:
                logger.warning('Data store ping failed.', exc_info=True)
                return False
            return True

        if not dao.ping(raise_error=False):
            logger.warning('Data store ping failed.')
            return False
        return True

    return ping


def health_monitor(redis_config: dict[str, Any]) -> HealthMonitor:
    global monitor
    if monitor is None:
        monitor = HealthMonitor(datastore_ping(redis_config))
    return monitor


def health(service: HealthMonitor, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    return response_200(
        {
            'status': 'UP',
            'timestamp': datetime.now(UTC).isoformat(),
            'application': APPLICATION_NAME,
            'version': APPLICATION_VERSION,
        }
    )


def health_detailed(service: HealthMonitor, event: LambdaEvent, claims: Optional[TokenClaims]) -> LambdaResponse:
    state = service.state if service.state.checked_at else service.check()
    return response_200(
        {
            'status': 'UP',
            'timestamp': datetime.now(UTC).isoformat(),
            'application': APPLICATION_NAME,
            'version': APPLICATION_VERSION,
            'systemHealth': state.to_dict(),
        }
    )


ROUTES: Routes = {
    ('GET', '/health'): (Operation.HEALTH, health),
    ('GET', '/health/detailed'): (Operation.HEALTH_DETAILED, health_detailed),
}


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse | str:
    """Serve health endpoints and run scheduled health checks.

    Scheduled (EventBridge) invocations refresh the monitor's state and return
    a diagnostic JSON string (NOT a valid HTTP response):
        {"status": "UP" | "DOWN", "datastore": ..., "consecutiveFailures": ..., ...}

    Routes:
        GET /health             liveness: status, timestamp, application, version
        GET /health/detailed    liveness plus the monitor's latest state
    """
    # 0- Load application config and settings
    app_config = load_config('health_check')
    settings = AppSettings.from_config(app_config)
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    health_state_monitor = health_monitor(redis_config)

    # 1- Scheduled invocations only refresh the health state
    if event.get('source') == SCHEDULED_EVENT_SOURCE:
        state = health_state_monitor.check()
        logger.info('Scheduled health check completed.', extra={'event': SCHEDULED_CHECK, 'status': state.status})
        return json.dumps(state.to_dict())

    # 2- Dispatch HTTP requests (all public)
    gate = AccessGate(build_policy(settings.protect_link_update, settings.open_admin_registration))
    return dispatch(event, ROUTES, gate, health_state_monitor)
