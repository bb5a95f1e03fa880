"""Unit tests for the redirect_url AWS Lambda handler.

Test coverage includes:

1. Successful redirects
   - Ensures the Lambda responds with 307 and the long URL in `Location`.
   - Ensures the updated record is written in the background.

2. Access limits
   - Ensures max_access is enforced (one extra access is served) and the
     record is deleted once the cap is passed.
   - Ensures max_per_hour is enforced and resets after an hour.

3. Missing records
   - Ensures a missing token path parameter returns HTTP 400.
   - Ensures unknown and expired tokens return HTTP 404.

4. Infrastructure errors
   - Ensures malformed records return HTTP 400 and store/config failures HTTP 500.
   - Ensures failing background writes don't affect the redirect response.
"""

import json
import logging
from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch
from freezegun import freeze_time

from quotashortener.types import LambdaEvent, LambdaContext, LambdaConfiguration
from quotashortener.lambdas.redirect_url import app
from quotashortener.models import URLRecord
from quotashortener.dao.base import URLRecordBaseDAO
from quotashortener.dao.memory import URLRecordMemoryDAO
from quotashortener.dao.writer import BackgroundRecordWriter
from quotashortener.dao.exceptions import DataStoreError, RecordSerializationError
from quotashortener.exceptions import MissingEnvironmentVariableError
from quotashortener.utils.helpers import utc_now


TOKEN = 'aZ3kP9qL'
LONG_URL = 'https://example.com/blog/chuck-norris-is-awesome'
NOT_FOUND = {'message': 'Error finding your short URL. It may have expired or never existed.'}


@pytest.fixture
def redirect_event() -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/{token}',
        'requestContext': {'resourcePath': '/{token}', 'httpMethod': 'GET', 'domainName': 'testhost:1000', 'stage': 'test'},
        'pathParameters': {'token': TOKEN},
        'httpMethod': 'GET',
        'path': f'/{TOKEN}',
    })


@pytest.fixture
def bad_request_400() -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/{token}',
        'requestContext': {'resourcePath': '/{token}', 'httpMethod': 'GET'},
        'pathParameters': {'invalid': 'path'},
        'httpMethod': 'GET',
        'path': f'/{TOKEN}',
    })


class TestRedirectUrlHandler:

    @pytest.fixture
    def context(self) -> LambdaContext:
        return cast(LambdaContext, {'function_name': 'redirect_url'})

    @pytest.fixture
    def config(self) -> LambdaConfiguration:
        return cast(LambdaConfiguration, {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}})

    @pytest.fixture
    def dao(self) -> URLRecordMemoryDAO:
        return URLRecordMemoryDAO()

    @pytest.fixture(autouse=True)
    def setup(
        self,
        monkeypatch: MonkeyPatch,
        context: LambdaContext,
        config: LambdaConfiguration,
        dao: URLRecordMemoryDAO,
    ):
        # Patch Lambda dependencies. Each invocation gets a private writer so
        # tests can wait for its background writes.
        self.writers = []

        def writer_factory(dao, executor=None):
            writer = BackgroundRecordWriter(dao)
            self.writers.append(writer)
            return writer

        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
        monkeypatch.setattr(app, 'URLRecordRedisDAO', lambda *a, **kw: self.dao)
        monkeypatch.setattr(app, 'BackgroundRecordWriter', writer_factory)

        self.context = context
        self.config = config
        self.dao = dao
        yield
        self.flush()

    def flush(self) -> None:
        for writer in self.writers:
            writer.shutdown(wait=True)
        self.writers.clear()

    def redirect(self, event: LambdaEvent) -> dict:
        response = app.lambda_handler(event, self.context)
        self.flush()
        return response

    def store(self, **limits) -> URLRecord:
        params = {'max_access': -1, 'max_per_hour': -1, 'max_age': 3600} | limits
        record = URLRecord.new(token=TOKEN, long_url=LONG_URL, now=utc_now(), **params)
        self.dao.save(record)
        return record

    # -------------------------------
    # 1. Successful redirects
    # -------------------------------

    @freeze_time('2025-10-15 12:00:00')
    def test_lambda_handler(self, redirect_event: LambdaEvent) -> None:
        self.store()

        response = self.redirect(redirect_event)

        assert response['statusCode'] == 307
        assert response['headers']['Location'] == LONG_URL
        assert response['body'] == ''

        record = self.dao.get(TOKEN)
        assert record.current_access_count == 1
        assert record.last_accessed_at == utc_now()

    def test_lambda_handler_counts_every_redirect(self, redirect_event: LambdaEvent) -> None:
        self.store()

        statuses = [self.redirect(redirect_event)['statusCode'] for _ in range(5)]

        assert statuses == [307] * 5
        assert self.dao.get(TOKEN).current_access_count == 5

    def test_lambda_handler_uses_shared_executor(self, monkeypatch: MonkeyPatch, redirect_event: LambdaEvent) -> None:
        writer_cls = MagicMock(spec=BackgroundRecordWriter)
        monkeypatch.setattr(app, 'BackgroundRecordWriter', writer_cls)
        self.store()

        response = app.lambda_handler(redirect_event, self.context)

        assert response['statusCode'] == 307
        writer_cls.assert_called_once_with(self.dao, executor=app.RECORD_WRITE_EXECUTOR)
        writer_cls.return_value.save.assert_called_once()

    # -------------------------------
    # 2. Access limits
    # -------------------------------

    def test_lambda_handler_with_max_access(self, redirect_event: LambdaEvent) -> None:
        self.store(max_access=2)

        responses = [self.redirect(redirect_event) for _ in range(5)]

        assert [r['statusCode'] for r in responses] == [307, 307, 307, 400, 404]
        assert json.loads(responses[3]['body']) == {'message': 'Max access reached'}
        assert json.loads(responses[4]['body']) == NOT_FOUND
        assert not self.dao.exists(TOKEN)

    def test_lambda_handler_with_max_per_hour(self, redirect_event: LambdaEvent) -> None:
        with freeze_time('2025-10-15 12:00:00') as frozen:
            self.store(max_per_hour=2, max_age=7200)

            responses = [self.redirect(redirect_event) for _ in range(3)]

            assert [r['statusCode'] for r in responses] == [307, 307, 400]
            assert json.loads(responses[2]['body']) == {'message': 'Max access per hour reached'}
            assert self.dao.get(TOKEN).hourly_access_count == 2
            assert self.dao.get(TOKEN).current_access_count == 2

            frozen.tick(3600)
            response = self.redirect(redirect_event)

            assert response['statusCode'] == 307
            record = self.dao.get(TOKEN)
            assert record.hourly_access_count == 1
            assert record.current_access_count == 3
            assert record.last_hourly_reset_at == utc_now()

    # -------------------------------
    # 3. Missing records
    # -------------------------------

    def test_lambda_handler_with_invalid_path_parameters(self, bad_request_400: LambdaEvent) -> None:
        response = app.lambda_handler(bad_request_400, self.context)

        assert response['statusCode'] == 400
        assert json.loads(response['body']) == {'message': 'Missing token parameter'}

    def test_lambda_handler_without_path_parameters(self, bad_request_400: LambdaEvent) -> None:
        bad_request_400['pathParameters'] = None

        response = app.lambda_handler(bad_request_400, self.context)

        assert response['statusCode'] == 400

    def test_lambda_handler_with_unknown_token(self, redirect_event: LambdaEvent) -> None:
        response = self.redirect(redirect_event)

        assert response['statusCode'] == 404
        assert json.loads(response['body']) == NOT_FOUND
        assert len(self.dao) == 0

    def test_lambda_handler_with_expired_token(self, redirect_event: LambdaEvent) -> None:
        with freeze_time('2025-10-15 12:00:00') as frozen:
            self.store(max_age=60)
            assert self.redirect(redirect_event)['statusCode'] == 307

            frozen.tick(60)
            response = self.redirect(redirect_event)

        assert response['statusCode'] == 404
        assert json.loads(response['body']) == NOT_FOUND

    # -------------------------------
    # 4. Infrastructure errors
    # -------------------------------

    def test_lambda_handler_with_malformed_record(self, monkeypatch: MonkeyPatch, redirect_event: LambdaEvent) -> None:
        broken_dao = MagicMock(spec=URLRecordBaseDAO)
        broken_dao.get.side_effect = RecordSerializationError("Malformed URL record 'aZ3kP9qL'.")
        monkeypatch.setattr(app, 'URLRecordRedisDAO', lambda *a, **kw: broken_dao)

        response = app.lambda_handler(redirect_event, self.context)

        assert response['statusCode'] == 400
        assert json.loads(response['body']) == {'message': 'Error parsing record'}
        broken_dao.save.assert_not_called()

    def test_lambda_handler_with_unavailable_store(self, monkeypatch: MonkeyPatch, redirect_event: LambdaEvent) -> None:
        broken_dao = MagicMock(spec=URLRecordBaseDAO)
        broken_dao.get.side_effect = DataStoreError("Can't connect to Redis at redis.test:6379/0.")
        monkeypatch.setattr(app, 'URLRecordRedisDAO', lambda *a, **kw: broken_dao)

        response = app.lambda_handler(redirect_event, self.context)

        assert response['statusCode'] == 500
        assert json.loads(response['body']) == {'message': 'Internal Server Error'}

    def test_lambda_handler_with_missing_configuration(self, monkeypatch: MonkeyPatch, redirect_event: LambdaEvent) -> None:
        def failing_config(*a, **kw):
            raise MissingEnvironmentVariableError("Missing required environment variables: 'APPCONFIG_APP_ID'")

        monkeypatch.setattr(app, 'load_config', failing_config)

        response = app.lambda_handler(redirect_event, self.context)

        assert response['statusCode'] == 500

    def test_lambda_handler_with_failing_write(self, monkeypatch: MonkeyPatch, redirect_event: LambdaEvent, caplog) -> None:
        self.store()
        monkeypatch.setattr(self.dao, 'save', MagicMock(side_effect=DataStoreError("Can't connect to Redis at redis.test:6379/0.")))

        with caplog.at_level(logging.ERROR, logger='quotashortener.dao.writer'):
            response = self.redirect(redirect_event)

        assert response['statusCode'] == 307
        assert response['headers']['Location'] == LONG_URL
        assert [r.event for r in caplog.records] == ['RECORD_WRITE_FAILED']
        assert caplog.records[0].token == TOKEN
