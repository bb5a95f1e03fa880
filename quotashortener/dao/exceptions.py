"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    URLRecordNotFoundError:
        Raised when a URLRecord is not found in the data store (missing or expired).

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

    RecordSerializationError:
        Raised when a URLRecord can't be encoded to or decoded from its stored form.

Example:
    >>> from quotashortener.dao.exceptions import URLRecordNotFoundError
    >>> raise URLRecordNotFoundError("URL record with token 'aZ3kP9qL' not found.")
    Traceback (most recent call last):
        ...
    quotashortener.dao.exceptions.URLRecordNotFoundError: URL record with token 'aZ3kP9qL' not found.
"""


class DAOError(Exception):
    """Generic base class for DAO-related exceptions."""

    pass


class URLRecordNotFoundError(DAOError):
    """Exception raised when a URLRecord is not found in the data store."""

    pass


class DataStoreError(DAOError):
    """Exception raised when there is an error in the data store.

    e.g. connection issues, timeouts, OOM, etc.
    """

    pass


class RecordSerializationError(DAOError):
    """Exception raised when a stored URLRecord payload is malformed."""

    pass
