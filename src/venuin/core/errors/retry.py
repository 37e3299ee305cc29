"""Classification of failures that a caller may retry.

Isolation and authorization failures are never transient. Only failures of
the pooled connection itself qualify, and the retry must run on a freshly
acquired connection: the failed one is invalidated by SQLAlchemy and its
transaction state is unknown.
"""

from sqlalchemy.exc import DBAPIError, InterfaceError

from venuin.core.errors.exceptions import AppException


def is_retryable(exc: BaseException) -> bool:
    """Return True if ``exc`` is a connection-level failure.

    Args:
        exc: The exception raised by a unit of work

    Returns:
        True for invalidated connections and transport errors, False otherwise
    """
    if isinstance(exc, AppException):
        return False
    if isinstance(exc, DBAPIError):
        return bool(exc.connection_invalidated) or isinstance(exc, InterfaceError)
    return isinstance(exc, (ConnectionError, TimeoutError))
