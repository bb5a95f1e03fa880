"""Lambda configuration from AWS AppConfig

All lambdas of one deployment (`APP_NAME` + `APP_ENV`) read a single AppConfig
JSON document. The document names the active store backend and holds one
section per lambda:

    {
        "build": 7,
        "active_backend": "redis",
        "configs": {
            "create_url":   {"redis": {"host": "...", "port": 6379, "db": 0, "password": "..."}},
            "redirect_url": {"redis": {"host": "...", "port": 6379, "db": 0, "password": "..."}}
        }
    }

`load_config(name)` returns only that lambda's active backend section, and
`redis_config()` turns it into URLRecordRedisDAO keyword arguments:

    >>> config = load_config('redirect_url')
    >>> config
    {'redis': {'host': 'redis.internal', 'port': 6379, 'db': 0}}
    >>> redis_config(config)
    {'redis_host': 'redis.internal', 'redis_port': 6379, 'redis_db': 0}
"""

import os
import json
import urllib.parse
import urllib.request
import logging
from typing import Any

import boto3

from quotashortener.types import LambdaConfiguration
from quotashortener.constants import ENV
from quotashortener.utils.helpers import require_environment
from quotashortener.utils.runtime import running_locally
from quotashortener.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)

LOCAL_AGENT_HOSTS = frozenset({'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'})
LOCAL_AGENT_PORTS = frozenset({2772, None})
DEFAULT_PROFILE_NAME = 'backend-config'


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
        >>> os.environ['APP_NAME'] = 'quotashortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'quotashortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def redis_config(config: LambdaConfiguration) -> dict:
    """Turn a lambda's `redis` config section into DAO keyword arguments

    Raises:
        BadConfigurationError: if the config has no `redis` section
    """
    try:
        section = config['redis']
    except KeyError as e:
        raise BadConfigurationError("Missing 'redis' section in lambda configuration.") from e
    return {f'redis_{k}': v for k, v in section.items()}


def lambda_section(document: dict[str, Any], lambda_name: str) -> LambdaConfiguration:
    """Pick the active backend's settings for one lambda out of the AppConfig document

    Raises:
        BadConfigurationError: if the document has no such section
    """
    try:
        backend = document['active_backend']
        return {backend: document['configs'][lambda_name][backend]}
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"AppConfig document has no '{lambda_name}' configuration ({e}).") from e


def local_agent_url() -> str | None:
    """Return the local AppConfig agent URL when running under SAM, else None

    Raises:
        BadConfigurationError: if APPCONFIG_AGENT_URL points anywhere but a local agent
    """
    url = os.getenv(ENV.AppConfig.AGENT_URL)
    if not url or not running_locally():
        return None

    components = urllib.parse.urlparse(url)
    if components.scheme not in {'http', 'https'}:
        raise BadConfigurationError(f'Bad scheme {url}')
    if components.hostname not in LOCAL_AGENT_HOSTS:
        raise BadConfigurationError(f'Bad host {url}')
    if components.port not in LOCAL_AGENT_PORTS:
        raise BadConfigurationError(f'Bad port {url}')
    return url.rstrip('/')


def _fetch_from_agent(agent_url: str) -> dict[str, Any]:
    profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, DEFAULT_PROFILE_NAME)
    url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'
    with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
        return json.load(r)


@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def _fetch_from_appconfig() -> dict[str, Any]:
    appconfig = boto3.client('appconfigdata')

    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    return json.loads(response['Configuration'].read().decode('utf-8'))


def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load one lambda's configuration section from AppConfig

    Under SAM local with APPCONFIG_AGENT_URL set, the document comes from the
    local AppConfig agent. Otherwise it's pulled from AWS AppConfig via boto3.

    Raises:
        MissingEnvironmentVariableError: if the AppConfig identifiers aren't set
        BadConfigurationError: on a bad agent URL or a document without this lambda's section
        botocore.exceptions.ClientError: if AWS AppConfig rejects the request
    """
    agent_url = local_agent_url()
    source = 'local AppConfig agent' if agent_url else 'AWS AppConfig'

    logger.debug('Loading lambda configuration.', extra={'lambdaName': lambda_name, 'source': source})
    document = _fetch_from_agent(agent_url) if agent_url else _fetch_from_appconfig()
    config = lambda_section(document, lambda_name)

    logger.debug('Loaded lambda configuration.', extra={'lambdaName': lambda_name, 'source': source, 'build': document.get('build')})
    return config
