"""Classification of vector store connectivity failures.

The Qdrant client does not report an unreachable server consistently: the HTTP
transport error is sometimes raised directly, sometimes wrapped in
``ResponseHandlingException``, and a few paths only leave a recognisable
message. The checks below accept either the error type name or the message, and
every caller that needs the distinction goes through this module.

The matched names and substrings follow what ``qdrant-client`` and ``httpx``
raise today; ``tests/test_store_errors.py`` pins them.
"""

from typing import NoReturn

from qdrant_client.http.exceptions import ResponseHandlingException

from .config import config
from .exceptions import StoreUnavailableError

logger = config.get_logger(__name__)

CONNECTION_ERROR_TYPES = frozenset({"ConnectError", "ConnectTimeout"})
CONNECTION_ERROR_MESSAGES = (
    "failed to connect",
    "connection refused",
    "all connection attempts failed",
)


def is_store_unavailable(error: BaseException | None) -> bool:
    """Check whether an error means the vector store could not be reached.

    Read timeouts and server-side errors are not included; they are generic
    failures.

    Args:
        error: The exception to classify.

    Returns:
        True if the error is a store connectivity failure.
    """
    if error is None:
        return False
    if isinstance(error, StoreUnavailableError):
        return True
    if isinstance(error, ResponseHandlingException) and is_store_unavailable(
        error.source
    ):
        return True
    if type(error).__name__ in CONNECTION_ERROR_TYPES:
        return True

    message = str(error).lower()
    return any(fragment in message for fragment in CONNECTION_ERROR_MESSAGES)


def raise_for_store_error(error: BaseException, operation: str) -> NoReturn:
    """Re-raise a store failure, distinguishing connectivity problems.

    Args:
        error: The exception caught around a store operation.
        operation: Name of the failed operation, kept in the error details.

    Raises:
        StoreUnavailableError: If the error is a connectivity failure.
        BaseException: The original error otherwise.
    """
    if isinstance(error, StoreUnavailableError):
        raise error

    if is_store_unavailable(error):
        logger.error("Vector store unreachable during %s: %s", operation, error)
        msg = f'Failed to perform "{operation}": {error}'
        raise StoreUnavailableError(msg, operation=operation) from error

    raise error
