"""Exceptions raised by the query side.

Every failure carries a :class:`ErrorKind` so that a transport boundary can
log the full detail internally while only acting on the kind.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of query failures."""

    INVALID_QUERY = "invalid_query"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    UNREGISTERED_VARIANT = "unregistered_variant"
    CANCELLED = "cancelled"


class PostQueryError(Exception):
    """Base class for query failures.

    Attributes:
        kind: The failure kind.
    """

    kind: ErrorKind


class InvalidQueryError(PostQueryError):
    """Raised when a query is missing a required parameter or is malformed."""

    kind = ErrorKind.INVALID_QUERY


class StorageUnavailableError(PostQueryError):
    """Raised when the read store cannot be reached or fails."""

    kind = ErrorKind.STORAGE_UNAVAILABLE


class UnregisteredQueryError(PostQueryError):
    """Raised when no handler is registered for a query variant.

    This is a configuration defect. It is normally raised while building the
    dispatch table, before any query is served.
    """

    kind = ErrorKind.UNREGISTERED_VARIANT


class QueryCancelledError(PostQueryError):
    """Raised when a query's deadline expires while it is in flight."""

    kind = ErrorKind.CANCELLED


class DuplicateHandlerError(ValueError):
    """Raised when a second handler is registered for the same query variant."""

    pass
