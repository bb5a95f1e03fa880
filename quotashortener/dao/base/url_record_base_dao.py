"""Abstract base class for URLRecord data access objects (DAOs).

This class establishes a consistent contract for all URLRecord DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis or in-process memory).

Responsibilities:
    - Provide an interface for saving, retrieving and deleting URLRecord objects.
    - Standardize error handling across multiple data store implementations.
    - Enforce refresh-on-write expiry: every save() restarts the record's TTL
      at `record.age_duration` from the moment of the write.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from quotashortener.models import URLRecord
        >>> from quotashortener.dao.redis import URLRecordRedisDAO

        >>> dao = URLRecordRedisDAO(...)
        >>> dao.save(record)
        <URLRecordRedisDAO>

        >>> dao.get('aZ3kP9qL').long_url
        'https://example.com/blog/article-123'

NOTE:
    There is no transactional guarantee between get() and save(). Two concurrent
    redirects of the same token may both read the same counters and the later
    save() wins, dropping one increment. Callers accept this lost update.
"""

from abc import ABC, abstractmethod

from quotashortener.models import URLRecord


class URLRecordBaseDAO(ABC):
    """Interface for URLRecord data access objects (DAOs).

    Methods:
        get(token: str, **kwargs) -> URLRecord:
            Retrieve a live URLRecord by token.
            Raises URLRecordNotFoundError if it doesn't exist or has expired.
            Raises RecordSerializationError if the stored payload is malformed.
            Raises DataStoreError on connection or read failure.

        exists(token: str, **kwargs) -> bool:
            Check whether a live URLRecord exists for the token.
            Raises DataStoreError on connection or read failure.

        save(record: URLRecord, **kwargs) -> URLRecordBaseDAO:
            Unconditionally write a URLRecord with TTL = record.age_duration.
            Raises DataStoreError on connection or write failure.

        delete(token: str, **kwargs) -> bool:
            Delete a URLRecord. Returns True if a record was removed.
            Raises DataStoreError on connection or write failure.
    """

    @abstractmethod
    def get(self, token: str, **kwargs) -> URLRecord:
        """Retrieve a URLRecord from the data store by its token.

        Args:
            token (str):
                The token of the URLRecord to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            URLRecord: The stored record.

        Raises:
            URLRecordNotFoundError:
                If no live URLRecord with the given token exists.

            RecordSerializationError:
                If the stored payload can't be decoded.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def exists(self, token: str, **kwargs) -> bool:
        pass

    @abstractmethod
    def save(self, record: URLRecord, **kwargs) -> 'URLRecordBaseDAO':
        """Write a URLRecord to the data store, replacing any previous value.

        The record's TTL restarts at `record.age_duration` on every call.

        Args:
            record (URLRecord):
                The URLRecord instance to be written.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            URLRecordBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete(self, token: str, **kwargs) -> bool:
        pass
