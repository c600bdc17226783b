"""Typed application errors.

Services and engines raise these instead of building HTTP responses. Each
error carries an ``ErrorKind``; ``shared.helpers.exception_handler`` is the
only place that turns a kind into a transport status code.
"""
from enum import Enum
from typing import Optional

from shared.utils.app_status_code import AppStatusCode


class ErrorKind(str, Enum):
    validation = "validation"
    not_found = "not_found"
    forbidden = "forbidden"
    conflict = "conflict"
    upstream = "upstream"
    partial_batch = "partial_batch"


class AppError(Exception):
    kind: ErrorKind = ErrorKind.validation
    status_code: str = AppStatusCode.OPERATION_FAILED

    def __init__(self, message: str, status_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    """Missing or invalid required input."""
    kind = ErrorKind.validation
    status_code = AppStatusCode.INVALID_INPUT


class NotFoundError(AppError):
    """Menu item, recipe, ingredient or restaurant lookup miss."""
    kind = ErrorKind.not_found
    status_code = AppStatusCode.RESOURCE_NOT_FOUND


class ForbiddenError(AppError):
    kind = ErrorKind.forbidden
    status_code = AppStatusCode.AUTHENTICATION_ACCESS_DENIED


class ConflictError(AppError):
    """Duplicate ingredient in a recipe and similar uniqueness clashes."""
    kind = ErrorKind.conflict
    status_code = AppStatusCode.DUPLICATE_ENTRY


class UpstreamError(AppError):
    """A POS vendor call failed."""
    kind = ErrorKind.upstream
    status_code = AppStatusCode.POS_UPSTREAM_FAILED

    def __init__(self, message: str, vendor: Optional[str] = None, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.vendor = vendor
        self.upstream_status = upstream_status


class PartialBatchError(AppError):
    """One item inside a batch failed; recorded per item, never aborts the batch."""
    kind = ErrorKind.partial_batch

    def __init__(self, item_name: str, cause: Exception):
        super().__init__(str(cause))
        self.item_name = item_name
        self.cause = cause
