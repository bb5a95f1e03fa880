"""Short URL token generation utility

This module provides helpers for generating random, fixed-length, base62
tokens used as short URL identifiers and as record store keys.

Functions:
    generate_token(length=8) -> str:
        Generate a random base62 token of exactly `length` characters.
    generate_unique_token(dao, length=8) -> str:
        Generate tokens until one isn't used by a live record in the store.

Example:
    >>> from quotashortener.utils import generate_token
    >>> generate_token()
    'q3ZrT0bA'
"""

import random
import string
import logging
from typing import TYPE_CHECKING

from quotashortener.constants import Token

if TYPE_CHECKING:
    from quotashortener.dao.base import URLRecordBaseDAO


logger = logging.getLogger(__name__)

ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def generate_token(length: int = Token.LENGTH) -> str:
    """Generate a uniformly random base62 token.

    Every position is drawn independently from ALPHABET. The token isn't
    cryptographically secure; it's an identifier, not a secret.

    Args:
        length (int, optional):
            Exact length of the resulting token. Defaults to 8.

    Returns:
        str: random token, e.g. 'q3ZrT0bA'

    Raises:
        TypeError: if length isn't an integer
        ValueError: if length isn't positive
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Token length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Token length must be a positive integer (given value: {length}).')

    return ''.join(random.choices(ALPHABET, k=length))  # noqa: S311


def generate_unique_token(dao: 'URLRecordBaseDAO', length: int = Token.LENGTH) -> str:
    """Generate a token which isn't used by any live record.

    Retries until a free token is found. With 62^8 possible tokens a collision
    is practically never hit, so there is no retry bound.

    Args:
        dao (URLRecordBaseDAO):
            Record store used for the collision check.
        length (int, optional):
            Exact length of the resulting token. Defaults to 8.

    Returns:
        str: token with no live record in the store

    Raises:
        DataStoreError:
            If the store can't be reached. The error is propagated immediately
            and the lookup is not retried.
    """
    while True:
        token = generate_token(length)
        if not dao.exists(token):
            return token
        logger.debug('Token collision, generating a new token.', extra={'token': token})
