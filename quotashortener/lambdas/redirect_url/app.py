import logging
from concurrent.futures import ThreadPoolExecutor

from quotashortener.types import LambdaEvent, LambdaContext, LambdaResponse
from quotashortener.exceptions import ConfigurationError
from quotashortener.policy import AccessOutcome
from quotashortener.dao.redis import URLRecordRedisDAO
from quotashortener.dao.writer import BackgroundRecordWriter
from quotashortener.dao.exceptions import DataStoreError, RecordSerializationError
from quotashortener.services import resolve_url_record
from quotashortener.utils import load_config, redis_config, app_prefix
from quotashortener.utils.helpers import guarantee_500_response
from quotashortener.lambdas.responses import response_307, response_400, response_404, response_500
from quotashortener.lambdas.redirect_url.constants import (
    MISSING_TOKEN,
    RECORD_NOT_FOUND,
    MALFORMED_RECORD,
    MAX_ACCESS_REACHED,
    MAX_PER_HOUR_REACHED,
    REDIRECT_SUCCESS,
    DATA_STORE_UNAVAILABLE,
    CONFIGURATION_ERROR,
)


logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = 'Error finding your short URL. It may have expired or never existed.'

# Shared by warm invocations of the same execution environment
RECORD_WRITE_EXECUTOR = ThreadPoolExecutor(max_workers=4, thread_name_prefix='record-writer')


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract token from request path
    - Step 2: Load the URL record and evaluate its access limits
    - Step 3: Schedule the updated record write (doesn't block the response)
    - Step 4: Redirect client to long URL

    HTTP responses:
        307: Successful redirect
            headers:
                Location: long URL destination
        400: Bad client request
            message: missing token, max access reached or max access per hour reached
        404: Not found
            message: short URL expired or never existed
        500: Internal server error
            message: server experienced an internal error

    NOTE: two concurrent redirects of the same token may both be allowed and
          store the same incremented counters (lost update). The store offers
          no atomic read-modify-write here; limits are best-effort under load.

    Args:
        event (LambdaEvent):
            API Gateway event payload containing the token path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'token': 'aZ3kP9qL'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        307
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 1- Extract token from request's path
    token = (event.get('pathParameters') or {}).get('token')
    if not token:
        logger.info('Missing "token" in path. Responding with 400.', extra={'event': MISSING_TOKEN})
        return response_400('Missing token parameter')

    # 2- Load the URL record and apply its access policy
    try:
        app_config = load_config('redirect_url')
        dao = URLRecordRedisDAO(**redis_config(app_config), prefix=app_prefix())
        writer = BackgroundRecordWriter(dao, executor=RECORD_WRITE_EXECUTOR)
        resolution = resolve_url_record(dao, token, writer=writer)
    except ConfigurationError:
        logger.exception('Failed to load configuration for redirect URL function. Responding with 500.', extra={'event': CONFIGURATION_ERROR})
        return response_500()
    except DataStoreError:
        logger.exception('Record store is unavailable. Responding with 500.', extra={'token': token, 'event': DATA_STORE_UNAVAILABLE})
        return response_500()
    except RecordSerializationError:
        logger.exception('Stored URL record is malformed. Responding with 400.', extra={'token': token, 'event': MALFORMED_RECORD})
        return response_400('Error parsing record')

    if resolution.outcome is AccessOutcome.NOT_FOUND:
        logger.info('URL record not found. Responding with 404.', extra={'token': token, 'event': RECORD_NOT_FOUND})
        return response_404(NOT_FOUND_MESSAGE)
    if resolution.outcome is AccessOutcome.MAX_ACCESS_REACHED:
        logger.info('Max access reached, record deleted. Responding with 400.', extra={'token': token, 'event': MAX_ACCESS_REACHED})
        return response_400('Max access reached')
    if resolution.outcome is AccessOutcome.MAX_PER_HOUR_REACHED:
        logger.info('Max access per hour reached. Responding with 400.', extra={'token': token, 'event': MAX_PER_HOUR_REACHED})
        return response_400('Max access per hour reached')

    # 3/4- The record write runs in the background; redirect right away
    logger.info(
        'Redirecting client to long URL. Responding with 307.',
        extra={
            'token': token,
            'event': REDIRECT_SUCCESS,
            'current_access_count': resolution.record.current_access_count,
        },
    )
    return response_307(location=resolution.target)
