from quotashortener.utils.config import app_env, app_name, app_prefix, load_config, redis_config
from quotashortener.utils.helpers import (
    parse_form_body,
    utc_now,
    to_rfc3339,
    from_rfc3339,
    duration_to_nanoseconds,
    nanoseconds_to_duration,
    require_environment,
    guarantee_500_response,
)
from quotashortener.utils.tokens import generate_token, generate_unique_token
from quotashortener.utils.logging import initialize_logging


__all__ = [
    'generate_token',
    'generate_unique_token',
    'app_env',
    'app_name',
    'app_prefix',
    'load_config',
    'redis_config',
    'utc_now',
    'to_rfc3339',
    'from_rfc3339',
    'duration_to_nanoseconds',
    'nanoseconds_to_duration',
    'require_environment',
    'guarantee_500_response',
    'parse_form_body',
    'initialize_logging',
]
