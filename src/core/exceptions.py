"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the service."""

    # Not found errors
    TASK_NOT_FOUND = "TASK_NOT_FOUND"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_TIMEZONE = "INVALID_TIMEZONE"
    INVALID_INSTANT = "INVALID_INSTANT"

    # Ordering / rollover
    ORDER_GAP_EXHAUSTED = "ORDER_GAP_EXHAUSTED"
    ROLLOVER_NOT_ADJACENT = "ROLLOVER_NOT_ADJACENT"

    # Server errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppException):
    """A field value breaks a task invariant."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details=details,
        )


class InvalidTimezoneError(AppException):
    """Timezone identifier is not known to the tz database."""

    def __init__(self, timezone_name: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_TIMEZONE,
            message=f"Unsupported timezone identifier: {timezone_name}",
            details={"timezone": timezone_name},
        )


class InvalidInstantError(AppException):
    """Instant is naive, malformed or outside the supported range."""

    def __init__(self, value: object, reason: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_INSTANT,
            message=f"Invalid instant {value!r}: {reason}",
            details={"value": str(value), "reason": reason},
        )


class TaskNotFoundError(AppException):
    """Task not found."""

    def __init__(self, task_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TASK_NOT_FOUND,
            message=f"Task not found: {task_id}",
            details={"task_id": task_id},
        )


class OrderGapExhaustedError(AppException):
    """No integer display order fits between two neighbours.

    Callers handle this by renumbering the affected day bucket.
    """

    def __init__(self, prev: int, next: int) -> None:
        self.prev = prev
        self.next = next
        super().__init__(
            error_code=ErrorCode.ORDER_GAP_EXHAUSTED,
            message=f"No display order left between {prev} and {next}",
            details={"prev": prev, "next": next},
        )


class RolloverNotAdjacentError(AppException):
    """Destination day is not the civil day after the source day."""

    def __init__(self, from_key: str, to_key: str) -> None:
        super().__init__(
            error_code=ErrorCode.ROLLOVER_NOT_ADJACENT,
            message=f"Rollover from {from_key} to {to_key} does not target the next day",
            details={"from_key": from_key, "to_key": to_key},
        )
