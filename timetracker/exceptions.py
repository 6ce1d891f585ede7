"""Service-level error types."""
import logging
from contextlib import contextmanager
from typing import Iterator

from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Generic service failure carrying a single user-facing message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """Raised when an operation targets a record that does not exist."""


class ValidationError(ServiceError):
    """
    Raised when a write payload fails validation.

    Carries a summary message plus a mapping of field name to message. Several
    fields may fail at once.
    """

    def __init__(self, message: str, field_errors: dict[str, str]):
        super().__init__(message)
        self.field_errors = dict(field_errors)


@contextmanager
def persistence_errors(message: str) -> Iterator[None]:
    """
    Translate database driver failures into a ServiceError.

    Args:
        message: Generic message exposed to the caller

    Raises:
        ServiceError: If the wrapped block raised a PyMongoError
    """
    try:
        yield
    except PyMongoError as e:
        logger.error("%s: %s", message, e)
        raise ServiceError(message) from e
