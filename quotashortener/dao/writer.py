"""Background write-back of URL records.

A successful redirect responds before its updated record reaches the store.
BackgroundRecordWriter runs each save() on a thread pool and returns the
Future, so callers (and tests) can wait for completion or inspect failures.
Every completed write is logged; failed writes are logged at ERROR level
with the exception attached.

NOTE: a process crash between submitting a write and its completion drops
      that access from the counters. On Lambda, a write still pending when the
      handler returns resumes on the next warm invocation, or is dropped if
      the execution environment is reclaimed. Counting is best-effort.

Example:
    >>> writer = BackgroundRecordWriter(dao)
    >>> future = writer.save(record)
    >>> future.result(timeout=1)
    <URLRecordRedisDAO>
    >>> writer.shutdown()
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from quotashortener.models import URLRecord
from quotashortener.dao.base import URLRecordBaseDAO


logger = logging.getLogger(__name__)

RECORD_WRITE_SUCCESS = 'RECORD_WRITE_SUCCESS'
RECORD_WRITE_FAILED = 'RECORD_WRITE_FAILED'


class BackgroundRecordWriter:
    """Persist URL records asynchronously through a DAO.

    Args:
        dao (URLRecordBaseDAO):
            Store the records are written to.
        executor (ThreadPoolExecutor | None):
            Shared executor to submit writes to. If None, the writer owns a
            private executor with `max_workers` threads.
        max_workers (int):
            Size of the private executor. Ignored when `executor` is given.
    """

    def __init__(self, dao: URLRecordBaseDAO, executor: ThreadPoolExecutor | None = None, max_workers: int = 4):
        self.dao = dao
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='record-writer')

    def save(self, record: URLRecord) -> Future:
        future = self._executor.submit(self.dao.save, record)
        future.add_done_callback(lambda f: self._log_outcome(record.token, f))
        return future

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting writes; with wait=True, block until pending writes finish.

        A shared executor passed in by the caller is left running.
        """
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    @staticmethod
    def _log_outcome(token: str, future: Future) -> None:
        if future.cancelled():
            logger.warning('URL record write was cancelled.', extra={'token': token, 'event': RECORD_WRITE_FAILED})
            return

        error = future.exception()
        if error is not None:
            logger.error(
                'Failed to persist URL record after redirect.',
                exc_info=(type(error), error, error.__traceback__),
                extra={'token': token, 'event': RECORD_WRITE_FAILED, 'error': error.__class__.__name__},
            )
        else:
            logger.debug('Persisted URL record after redirect.', extra={'token': token, 'event': RECORD_WRITE_SUCCESS})
