"""Helper utilities for AWS lambda functions and record timestamps.

Functions:
    utc_now() -> datetime
        Return the current timezone-aware UTC time (default clock)
    to_rfc3339(value: datetime) -> str
        Render a datetime as an RFC3339 string at whole-second precision
    from_rfc3339(value: str) -> datetime
        Parse an RFC3339 string into a timezone-aware UTC datetime
    duration_to_nanoseconds(value: timedelta) -> int
        Encode a duration as an integer number of nanoseconds
    nanoseconds_to_duration(value: int) -> timedelta
        Decode an integer number of nanoseconds into a duration
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(func) -> Callable
        Decorator: Turn unexpected handler exceptions into a logged 500 response
    parse_form_body(event: dict) -> dict[str, str]
        Decode an API Gateway event's form-encoded request body

Example:
    >>> from quotashortener.utils.helpers import to_rfc3339, from_rfc3339
    >>> to_rfc3339(datetime(2025, 10, 15, 12, 0, 0, 513, tzinfo=UTC))
    '2025-10-15T12:00:00Z'
    >>> from_rfc3339('2025-10-15T14:00:00+02:00')
    datetime.datetime(2025, 10, 15, 12, 0, tzinfo=datetime.timezone.utc)
"""

import os
import json
import base64
import binascii
import logging
import functools
import urllib.parse
from typing import Any
from datetime import datetime, timedelta, UTC
from collections.abc import Callable

from quotashortener.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from quotashortener.exceptions import MissingEnvironmentVariableError


logger = logging.getLogger(__name__)

NANOSECONDS_PER_MICROSECOND = 1_000


def utc_now() -> datetime:
    return datetime.now(UTC)


def to_rfc3339(value: datetime) -> str:
    """Render a datetime as an RFC3339 string at whole-second precision

    Naive datetimes are assumed to be in UTC. UTC is rendered with a 'Z' suffix.

    Args:
        value (datetime): timestamp to render

    Returns:
        str: RFC3339 timestamp, e.g. '2025-10-15T12:00:00Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec='seconds').replace('+00:00', 'Z')


def from_rfc3339(value: str) -> datetime:
    """Parse an RFC3339 string into a timezone-aware UTC datetime

    Args:
        value (str): RFC3339 timestamp, e.g. '2025-10-15T12:00:00Z'

    Returns:
        datetime: timestamp normalized to UTC

    Raises:
        ValueError: if the string isn't a valid RFC3339 timestamp with an offset
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        raise ValueError(f'Timestamp {value!r} is missing a UTC offset.')
    return parsed.astimezone(UTC)


def duration_to_nanoseconds(value: timedelta) -> int:
    return (value // timedelta(microseconds=1)) * NANOSECONDS_PER_MICROSECOND


def nanoseconds_to_duration(value: int) -> timedelta:
    return timedelta(microseconds=value // NANOSECONDS_PER_MICROSECOND)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(func: Callable) -> Callable:
    """Decorator: respond with 500 when a lambda handler raises unexpectedly

    The exception is logged with its traceback and never propagates to the
    Lambda runtime, so API Gateway always receives a well-formed response.
    """

    @functools.wraps(func)
    def wrapper(event, context, *args, **kwargs):
        try:
            return func(event, context, *args, **kwargs)
        except Exception as error:
            logger.exception(
                'Unhandled exception in lambda handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR, 'error': error.__class__.__name__},
            )
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps({'message': 'Internal Server Error'}),
            }

    return wrapper


def parse_form_body(event: dict[str, Any]) -> dict[str, str]:
    """Decode an API Gateway event's form-encoded (application/x-www-form-urlencoded) body

    Blank values are kept, so `max_age=` is reported as an empty string rather
    than being dropped. When a field is repeated, its first value wins.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        dict[str, str]: form fields

    Raises:
        ValueError: if a base64-encoded body can't be decoded

    Example:
        >>> parse_form_body({'body': 'long_url=https%3A%2F%2Fexample.com&max_access=10'})
        {'long_url': 'https://example.com', 'max_access': '10'}
    """
    body = event.get('body') or ''
    if event.get('isBase64Encoded'):
        try:
            body = base64.b64decode(body, validate=True).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValueError('Request body is not valid base64-encoded UTF-8.') from e

    fields = urllib.parse.parse_qs(body, keep_blank_values=True)
    return {name: values[0] for name, values in fields.items()}
