from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Default short URL TTL duration when max_age is omitted (1 hour in seconds)
    ONE_HOUR = 3_600
    # Upper bound for a short URL TTL duration (1 year in seconds)
    ONE_YEAR = 31_536_000  # 60 * 60 * 24 * 365


class Limits:
    """Access limit defaults."""

    UNLIMITED = -1  # Sentinel for max_access / max_per_hour
    MIN_AGE = 1  # Shortest accepted max_age (seconds)
    MAX_AGE = TTL.ONE_YEAR  # Longest accepted max_age (seconds)
    DEFAULT_AGE = TTL.ONE_HOUR


class Token:
    """Short URL token format."""

    LENGTH = 8


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
