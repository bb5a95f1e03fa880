"""Create and resolve short URL records.

These two operations tie the record store, the token generator and the
access policy together. They take every collaborator explicitly (DAO, writer,
clock) so they can run against Redis in the lambdas and against the in-memory
store in tests.

Functions:
    create_url_record(dao, *, long_url, ...) -> URLRecord
        Validate input, pick a unique token and store a fresh record.
    resolve_url_record(dao, token, *, writer, ...) -> Resolution
        Load a record, apply the access policy and carry out its decision.
"""

import logging
from concurrent.futures import Future
from dataclasses import dataclass

from quotashortener.types import Clock
from quotashortener.constants import Limits, Token
from quotashortener.exceptions import ValidationError
from quotashortener.models import URLRecord
from quotashortener.policy import AccessOutcome, evaluate_access
from quotashortener.dao.base import URLRecordBaseDAO
from quotashortener.dao.exceptions import URLRecordNotFoundError
from quotashortener.dao.writer import BackgroundRecordWriter
from quotashortener.utils.helpers import utc_now
from quotashortener.utils.tokens import generate_unique_token


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Result of resolving a token.

    Attributes:
        outcome (AccessOutcome):
            Access policy outcome.
        record (URLRecord | None):
            Updated record for ALLOWED outcomes, otherwise None.
        pending_write (Future | None):
            Background write of the updated record for ALLOWED outcomes.
    """

    outcome: AccessOutcome
    record: URLRecord | None = None
    pending_write: Future | None = None

    @property
    def target(self) -> str | None:
        return self.record.long_url if self.record is not None else None


def validate_max_age(max_age: int) -> int:
    if not Limits.MIN_AGE <= max_age <= Limits.MAX_AGE:
        raise ValidationError('Invalid max_age parameter')
    return max_age


def create_url_record(
    dao: URLRecordBaseDAO,
    *,
    long_url: str,
    max_access: int = Limits.UNLIMITED,
    max_per_hour: int = Limits.UNLIMITED,
    max_age: int = Limits.DEFAULT_AGE,
    clock: Clock = utc_now,
    token_length: int = Token.LENGTH,
) -> URLRecord:
    """Create and store a new short URL record.

    Args:
        dao (URLRecordBaseDAO): record store
        long_url (str): destination URL, must be non-empty
        max_access (int): total access cap, -1 for unlimited
        max_per_hour (int): hourly access cap, -1 for unlimited
        max_age (int): record TTL in seconds, within [1, 31536000]
        clock (Clock): source of the creation time
        token_length (int): length of the generated token

    Returns:
        URLRecord: the stored record

    Raises:
        ValidationError: if long_url is empty or max_age is out of range (nothing is stored)
        DataStoreError: if the store can't be reached
    """
    if not long_url:
        raise ValidationError('Missing long_url parameter')
    validate_max_age(max_age)

    token = generate_unique_token(dao, token_length)
    record = URLRecord.new(
        token=token,
        long_url=long_url,
        now=clock(),
        max_access=max_access,
        max_per_hour=max_per_hour,
        max_age=max_age,
    )
    dao.save(record)
    return record


def resolve_url_record(
    dao: URLRecordBaseDAO,
    token: str,
    *,
    writer: BackgroundRecordWriter,
    clock: Clock = utc_now,
) -> Resolution:
    """Resolve a token into a redirect target, enforcing the record's limits.

    A record over its total access cap is deleted right away. An allowed access
    hands the updated record to the background writer and returns without
    waiting for it; the write's Future is exposed on the Resolution.

    Raises:
        RecordSerializationError: if the stored record can't be decoded
        DataStoreError: if the store can't be reached
    """
    try:
        record = dao.get(token)
    except URLRecordNotFoundError:
        record = None

    decision = evaluate_access(record, clock())

    if decision.delete_record:
        dao.delete(token)
        logger.debug('Deleted URL record after reaching max access.', extra={'token': token})

    if not decision.allowed:
        return Resolution(decision.outcome)

    pending_write = writer.save(decision.record)
    return Resolution(decision.outcome, decision.record, pending_write)
