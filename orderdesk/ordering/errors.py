# orderdesk/ordering/errors.py
from __future__ import annotations

import enum
import functools
from typing import Callable, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    DRIVER_NOT_FOUND = "DRIVER_NOT_FOUND"
    DRIVER_BUSY = "DRIVER_BUSY"
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    CONFLICT = "CONFLICT"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"


class OrderError(Exception):
    """Business-rule failure raised by the services and rendered as an envelope."""

    kind = ErrorKind.CONFLICT
    default_message = "Request could not be completed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class ValidationFailed(OrderError):
    kind = ErrorKind.VALIDATION
    default_message = "Required parameters are missing"


class NotFound(OrderError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Order wasn't found"


class DriverNotFound(OrderError):
    kind = ErrorKind.DRIVER_NOT_FOUND
    default_message = "Driver wasn't found"


class DriverBusy(OrderError):
    kind = ErrorKind.DRIVER_BUSY
    default_message = "Driver is already on a delivery"


class ProductNotFound(OrderError):
    kind = ErrorKind.PRODUCT_NOT_FOUND
    default_message = "Product wasn't found"


class Conflict(OrderError):
    kind = ErrorKind.CONFLICT


class UpstreamFailure(OrderError):
    kind = ErrorKind.UPSTREAM_FAILURE
    default_message = "Storage is unavailable"


def guard_upstream(fn: Callable[..., T]) -> Callable[..., T]:
    """Storage and image store failures leave the service as UpstreamFailure."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Upstream failure", operation=fn.__name__, error=str(e))
            raise UpstreamFailure(str(e)) from e

    return wrapper
