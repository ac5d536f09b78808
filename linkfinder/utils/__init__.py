from linkfinder.utils.config import app_env, app_name, app_prefix, load_config, load_signing_key, AppSettings
from linkfinder.utils.helpers import require_environment, guarantee_500_response, correlation_id
from linkfinder.utils.logging import initialize_logging
from linkfinder.utils.runtime import running_locally


__all__ = [
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'load_signing_key',
    'AppSettings',
    'require_environment',
    'guarantee_500_response',
    'correlation_id',
    'initialize_logging',
    'running_locally',
]
