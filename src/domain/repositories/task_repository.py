"""Task repository protocol."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from domain.entities.task import Task, TaskPlacement, TaskStatus


class ITaskRepository(Protocol):
    """Repository interface for Task entities."""

    async def get(self, id: UUID) -> Task | None:
        """Get a task by ID."""
        ...

    async def list_for_user(
        self,
        user_id: UUID,
        status: TaskStatus | None = None,
        skip: int = 0,
        take: int = 100,
    ) -> list[Task]:
        """Get a page of a user's tasks ordered by due date, then display order."""
        ...

    async def list_in_range(
        self,
        start: datetime,
        end: datetime,
        user_id: UUID | None = None,
        status: TaskStatus | None = None,
    ) -> list[Task]:
        """Get tasks due within ``[start, end]`` in display order.

        ``user_id=None`` spans all users.
        """
        ...

    async def create(self, task: Task) -> Task:
        """Create a new task."""
        ...

    async def update(self, task: Task) -> Task:
        """Update an existing task."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a task and return success status."""
        ...

    async def bulk_reschedule(self, placements: list[TaskPlacement]) -> int:
        """Write due date, display order and rollover flag by task id.

        Returns the number of tasks updated.
        """
        ...
