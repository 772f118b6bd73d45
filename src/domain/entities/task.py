"""Task domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import StrEnum
from uuid import UUID, uuid4

from core.exceptions import ValidationError


class TaskStatus(StrEnum):
    """Completion state of a task."""

    INCOMPLETE = "incomplete"
    COMPLETE = "complete"


class TaskCategory(StrEnum):
    """Closed set of task labels."""

    ROO_VET = "Roo Vet"
    ROO_CODE = "Roo Code"
    PERSONAL = "Personal"


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_status(value: TaskStatus | str) -> TaskStatus:
    try:
        return TaskStatus(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown task status: {value}", {"field": "status"}) from exc


def parse_category(value: TaskCategory | str) -> TaskCategory:
    try:
        return TaskCategory(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown task category: {value}", {"field": "category"}) from exc


@dataclass
class Task:
    """Domain entity for a task assigned to a civil day by its due instant."""

    user_id: UUID
    title: str
    due_date: datetime
    category: TaskCategory
    display_order: int
    id: UUID = field(default_factory=uuid4)
    status: TaskStatus = TaskStatus.INCOMPLETE
    is_priority: bool = False
    is_rolled_over: bool = False
    completed_at: datetime | None = None
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """Coerce enum fields and reject states that break the task invariants."""
        if not self.title or not self.title.strip():
            raise ValidationError("Task title must not be empty", {"field": "title"})
        self.status = parse_status(self.status)
        self.category = parse_category(self.category)
        if self.due_date.tzinfo is None:
            raise ValidationError("due_date must be timezone-aware", {"field": "due_date"})
        if (self.completed_at is not None) != (self.status == TaskStatus.COMPLETE):
            raise ValidationError(
                "completed_at must be set exactly when the task is complete",
                {"field": "completed_at"},
            )

    @property
    def is_complete(self) -> bool:
        return self.status == TaskStatus.COMPLETE

    def complete(self) -> None:
        """Mark the task as complete, keeping an existing completion instant."""
        self.status = TaskStatus.COMPLETE
        if self.completed_at is None:
            self.completed_at = utc_now()

    def reopen(self) -> None:
        """Mark the task as incomplete."""
        self.status = TaskStatus.INCOMPLETE
        self.completed_at = None

    def set_status(self, status: TaskStatus | str, at: datetime | None = None) -> None:
        """Apply a status transition, maintaining completed_at."""
        if parse_status(status) == TaskStatus.COMPLETE:
            if at is not None:
                self.completed_at = at
            self.complete()
        else:
            self.reopen()

    def reschedule(self, due_date: datetime, is_rolled_over: bool = False) -> None:
        """Manual move to another instant. Clears the rollover flag by default."""
        if due_date.tzinfo is None:
            raise ValidationError("due_date must be timezone-aware", {"field": "due_date"})
        self.due_date = due_date
        self.is_rolled_over = is_rolled_over


@dataclass(frozen=True)
class TaskPlacement:
    """Update instruction for a task's day assignment and position.

    Only ``due_date``, ``display_order`` and ``is_rolled_over`` are written;
    the rest of the task is left alone.
    """

    task_id: UUID
    due_date: datetime
    display_order: int
    is_rolled_over: bool
