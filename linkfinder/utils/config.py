"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to access
configuration data stored in **AWS AppConfig** and secrets stored in
**AWS Secrets Manager**. Each environment (`APP_ENV`) has a dedicated AppConfig
*Environment* within the shared AppConfig *Application* identified by `APP_NAME`.

The configuration JSON follows this structure:

    {
        "build": 7,
        "active_backend": "redis",
        "settings": {
            "auth": {"token_ttl_minutes": 60},
            "access": {"protect_link_update": false, "open_admin_registration": true}
        },
        "configs": {
            "manage_links": {
                "redis": { ... }
            },
            "resolve_link": {
                "redis": { ... }
            }
        }
    }

Each Lambda loads its own backend section (e.g., `"manage_links"`) plus the
shared `settings` block.

Typical usage inside a Lambda handler:
    >>> from linkfinder.utils.config import load_config, AppSettings
    >>> app_config = load_config('manage_links')
    >>> app_config['redis']['host']
    'redis.internal'
    >>> AppSettings.from_config(app_config).token_ttl_minutes
    60
"""

import os
import json
import urllib.parse
import urllib.request
import logging
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.client import BaseClient

from linkfinder.types import AppConfig, LambdaConfiguration
from linkfinder.constants import ENV, Defaults
from linkfinder.exceptions import BadConfigurationError
from linkfinder.utils.helpers import require_environment
from linkfinder.utils.runtime import aws_client_kwargs, running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'linkfinder'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'linkfinder:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


@dataclass(frozen=True)
class AppSettings:
    """Application settings shared by every Lambda.

    Attributes:
        token_ttl_minutes (int):
            Lifetime of issued session tokens. Expiry is the only way a token
            stops being valid, so keep it short.
        protect_link_update (bool):
            Require an ADMIN or SUPER_ADMIN token for link updates.
        open_admin_registration (bool):
            Allow registration without a token. When False, registering any
            account requires a SUPER_ADMIN token.
    """

    token_ttl_minutes: int = Defaults.TOKEN_TTL_MINUTES
    protect_link_update: bool = False
    open_admin_registration: bool = True

    @classmethod
    def from_config(cls, app_config: AppConfig) -> 'AppSettings':
        settings = app_config.get('settings') or {}
        auth = settings.get('auth') or {}
        access = settings.get('access') or {}

        try:
            ttl = int(auth.get('token_ttl_minutes', Defaults.TOKEN_TTL_MINUTES))
        except (TypeError, ValueError) as e:
            raise BadConfigurationError(f"Invalid token TTL: {auth.get('token_ttl_minutes')!r}") from e
        if ttl <= 0:
            raise BadConfigurationError(f'Token TTL must be positive (given: {ttl}).')

        return cls(
            token_ttl_minutes=ttl,
            protect_link_update=_flag(access, 'protect_link_update', False),
            open_admin_registration=_flag(access, 'open_admin_registration', True),
        )


def _flag(section: dict[str, Any], name: str, default: bool) -> bool:
    value = section.get(name, default)
    if not isinstance(value, bool):
        raise BadConfigurationError(f'Setting {name!r} must be a JSON boolean (given: {value!r}).')
    return value


# The local agent is only ever reached inside the SAM/docker-compose network
LOCAL_AGENT_HOSTS = frozenset({'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'})
LOCAL_AGENT_PORT = 2772


def _local_agent_url() -> str | None:
    """Return APPCONFIG_AGENT_URL if it points at a local AppConfig agent.

    Raises:
        BadConfigurationError:
            If the URL is set but not an http(s) URL on a local agent host and port.
    """
    url = os.getenv(ENV.AppConfig.AGENT_URL)
    if not url:
        return None

    parts = urllib.parse.urlparse(url)
    if parts.scheme not in {'http', 'https'} or parts.hostname not in LOCAL_AGENT_HOSTS or parts.port not in {LOCAL_AGENT_PORT, None}:
        raise BadConfigurationError(f'APPCONFIG_AGENT_URL must point at a local AppConfig agent (given: {url}).')
    return url.rstrip('/')


def _fetch_from_agent(agent_url: str) -> AppConfig:  # pragma: no cover
    profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
    url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'
    logger.debug('Fetching AppConfig from local agent.', extra={'agentUrl': url})
    with urllib.request.urlopen(url, timeout=5) as response:  # noqa: S310
        return json.load(response)


@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def _fetch_from_appconfig() -> AppConfig:
    appconfig = boto3.client('appconfigdata')
    session = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )
    latest = appconfig.get_latest_configuration(ConfigurationToken=session['InitialConfigurationToken'])
    return json.loads(latest['Configuration'].read().decode('utf-8'))


def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load one Lambda's configuration

    Under SAM local with APPCONFIG_AGENT_URL set, the document comes from the
    local AppConfig agent. Everywhere else it comes from AWS AppConfig through
    an `appconfigdata` session (APPCONFIG_APP_ID, APPCONFIG_ENV_ID and
    APPCONFIG_PROFILE_ID must be set).

    Args:
        lambda_name (str):
            Section of `configs` to return, e.g. "manage_links".

    Returns:
        dict: {"<active backend>": {...}, "settings": {...}}

    Raises:
        MissingEnvironmentVariableError:
            If an AppConfig identifier is not set.
        BadConfigurationError:
            If the document has no section for `lambda_name`, or the agent URL is unsafe.
    """
    agent_url = _local_agent_url() if running_locally() else None
    document = _fetch_from_agent(agent_url) if agent_url else _fetch_from_appconfig()

    try:
        backend = document['active_backend']
        data = {backend: document['configs'][lambda_name][backend]}
    except KeyError as e:
        raise BadConfigurationError(f"AppConfig document has no '{lambda_name}' configuration ({e}).") from e
    data['settings'] = document.get('settings') or {}

    logger.debug('Loaded AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build'), 'source': 'agent' if agent_url else 'appconfig'})
    return data


@require_environment(ENV.Secrets.TOKEN_SECRET_NAME)
def load_signing_key(secrets_client: BaseClient | None = None) -> str:
    """Read the session token signing key from Secrets Manager.

    The secret named by `TOKEN_SECRET_NAME` must hold JSON: {"signing_key": "..."}.
    When running locally the LocalStack endpoint is used.

    Raises:
        MissingEnvironmentVariableError:
            If `TOKEN_SECRET_NAME` is not set.
        BadConfigurationError:
            If the secret is not valid JSON or has no non-empty `signing_key`.
    """
    secret_name = os.environ[ENV.Secrets.TOKEN_SECRET_NAME]
    sm = secrets_client or boto3.client('secretsmanager', **aws_client_kwargs())

    try:
        raw = sm.get_secret_value(SecretId=secret_name).get('SecretString')
        payload = json.loads(raw or '{}')
    except json.JSONDecodeError as e:
        raise BadConfigurationError('Invalid JSON in token signing secret payload') from e

    signing_key = payload.get('signing_key')
    if not signing_key:
        raise BadConfigurationError('Token signing secret must contain a non-empty "signing_key" field')
    return signing_key
