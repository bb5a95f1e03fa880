import re
import logging

from quotashortener.types import LambdaEvent, LambdaContext, LambdaResponse
from quotashortener.constants import Limits
from quotashortener.exceptions import ConfigurationError, ValidationError
from quotashortener.dao.redis import URLRecordRedisDAO
from quotashortener.dao.exceptions import DataStoreError
from quotashortener.services import create_url_record, validate_max_age
from quotashortener.utils import load_config, redis_config, app_prefix, parse_form_body
from quotashortener.utils.helpers import guarantee_500_response
from quotashortener.lambdas.responses import response_200, response_400, response_500
from quotashortener.lambdas.create_url.constants import (
    INVALID_FORM_BODY,
    INVALID_PARAMETER,
    RECORD_CREATED,
    DATA_STORE_UNAVAILABLE,
    CONFIGURATION_ERROR,
)


logger = logging.getLogger(__name__)

# ASCII digits only; form integers are signed 64-bit
INTEGER_PATTERN = re.compile(r'[+-]?[0-9]+')
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1


def int_param(form: dict[str, str], name: str, default: int) -> int:
    """Read an optional integer form field

    Absent fields fall back to `default`. Present fields (even empty ones)
    must be a plain base-10 integer (ASCII digits) within the signed
    64-bit range.

    Raises:
        ValidationError: if the field is present but isn't an integer
    """
    raw = form.get(name)
    if raw is None:
        return default
    try:
        value = int(raw) if INTEGER_PATTERN.fullmatch(raw) else None
    except ValueError:  # beyond the interpreter's int string-conversion limit
        value = None
    if value is None or not INT64_MIN <= value <= INT64_MAX:
        raise ValidationError(f'Invalid {name} parameter')
    return value


def parse_create_params(form: dict[str, str]) -> dict:
    """Validate the /create form fields and convert them to create_url_record() arguments

    Raises:
        ValidationError: on the first missing or invalid field
    """
    long_url = form.get('long_url', '')
    if not long_url:
        raise ValidationError('Missing long_url parameter')

    return {
        'long_url': long_url,
        'max_access': int_param(form, 'max_access', Limits.UNLIMITED),
        'max_per_hour': int_param(form, 'max_per_hour', Limits.UNLIMITED),
        'max_age': validate_max_age(int_param(form, 'max_age', Limits.DEFAULT_AGE)),
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to create short URLs

    This Lambda handler follows this procedure to create short URLs:
    - Step 1: Decode the form-encoded request body
    - Step 2: Validate long_url, max_access, max_per_hour and max_age
    - Step 3: Generate a unique token and store the URL record (via DAO)
    - Step 4: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            token: newly generated 8 character token
        400: Bad client request
            message: missing or invalid form field
        500: Internal server error
            message: server experienced an internal error

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'body': 'long_url=https%3A%2F%2Fexample.com&max_access=10'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])
        {'token': 'aZ3kP9qL'}
    """
    # 1- Decode the form-encoded request body
    try:
        form = parse_form_body(event)
    except ValueError:
        logger.info('Request body could not be decoded. Responding with 400.', extra={'event': INVALID_FORM_BODY})
        return response_400('Invalid request body')

    # 2- Validate request parameters
    try:
        params = parse_create_params(form)
    except ValidationError as error:
        logger.info(
            'Invalid create request. Responding with 400.',
            extra={'event': INVALID_PARAMETER, 'reason': str(error)},
        )
        return response_400(str(error))

    # 3- Store a new URL record under a unique token
    try:
        app_config = load_config('create_url')
        dao = URLRecordRedisDAO(**redis_config(app_config), prefix=app_prefix())
        record = create_url_record(dao, **params)
    except ConfigurationError:
        logger.exception('Failed to load configuration for create URL function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()
    except DataStoreError:
        logger.exception('Record store is unavailable. Responding with 500.', extra={'event': DATA_STORE_UNAVAILABLE})
        return response_500()

    # 4- Return the token to the user
    logger.info(
        'Created short URL. Responding with 200.',
        extra={
            'token': record.token,
            'event': RECORD_CREATED,
            'max_access': record.max_access,
            'max_per_hour': record.max_per_hour,
            'max_age': params['max_age'],
        },
    )
    return response_200({'token': record.token})
