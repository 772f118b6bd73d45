"""SQLAlchemy implementation of Task repository."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import TaskNotFoundError
from domain.entities.task import Task, TaskPlacement, TaskStatus
from infrastructure.database.models import TaskModel


class SQLAlchemyTaskRepository:
    """SQLAlchemy implementation of ITaskRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Task | None:
        """Get a task by ID."""
        stmt = select(TaskModel).where(TaskModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_for_user(
        self,
        user_id: UUID,
        status: TaskStatus | None = None,
        skip: int = 0,
        take: int = 100,
    ) -> list[Task]:
        """Get a page of a user's tasks ordered by due date, then display order."""
        stmt = select(TaskModel).where(TaskModel.user_id == user_id)
        if status is not None:
            stmt = stmt.where(TaskModel.status == status.value)
        stmt = (
            stmt.order_by(TaskModel.due_date, TaskModel.display_order, TaskModel.created_at)
            .offset(skip)
            .limit(take)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def list_in_range(
        self,
        start: datetime,
        end: datetime,
        user_id: UUID | None = None,
        status: TaskStatus | None = None,
    ) -> list[Task]:
        """Get tasks due within ``[start, end]`` in display order."""
        stmt = select(TaskModel).where(TaskModel.due_date >= start, TaskModel.due_date <= end)
        if user_id is not None:
            stmt = stmt.where(TaskModel.user_id == user_id)
        if status is not None:
            stmt = stmt.where(TaskModel.status == status.value)
        stmt = stmt.order_by(TaskModel.display_order, TaskModel.created_at, TaskModel.id)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, task: Task) -> Task:
        """Create a new task."""
        model = self._to_model(task)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, task: Task) -> Task:
        """Update an existing task."""
        stmt = select(TaskModel).where(TaskModel.id == task.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise TaskNotFoundError(str(task.id))

        # Update fields
        model.title = task.title
        model.status = task.status.value
        model.due_date = task.due_date
        model.category = task.category.value
        model.is_priority = task.is_priority
        model.display_order = task.display_order
        model.is_rolled_over = task.is_rolled_over
        model.completed_at = task.completed_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a task."""
        stmt = select(TaskModel).where(TaskModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def bulk_reschedule(self, placements: list[TaskPlacement]) -> int:
        """Write placements by task id.

        A placement whose task no longer exists raises, leaving the rollback
        of the earlier writes to the unit of work.
        """
        updated = 0
        for placement in placements:
            stmt = (
                update(TaskModel)
                .where(TaskModel.id == placement.task_id)
                .values(
                    due_date=placement.due_date,
                    display_order=placement.display_order,
                    is_rolled_over=placement.is_rolled_over,
                )
            )
            result = await self._session.execute(stmt)
            if result.rowcount == 0:  # type: ignore[attr-defined]
                raise TaskNotFoundError(str(placement.task_id))
            updated += result.rowcount  # type: ignore[attr-defined]
        await self._session.flush()
        return updated

    def _to_entity(self, model: TaskModel) -> Task:
        """Convert ORM model to domain entity."""
        return Task(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            status=TaskStatus(model.status),
            due_date=model.due_date,
            category=model.category,  # type: ignore[arg-type]
            is_priority=model.is_priority,
            display_order=model.display_order,
            is_rolled_over=model.is_rolled_over,
            completed_at=model.completed_at,
            created_at=model.created_at,
        )

    def _to_model(self, entity: Task) -> TaskModel:
        """Convert domain entity to ORM model."""
        return TaskModel(
            id=entity.id,
            user_id=entity.user_id,
            title=entity.title,
            status=entity.status.value,
            due_date=entity.due_date,
            category=entity.category.value,
            is_priority=entity.is_priority,
            display_order=entity.display_order,
            is_rolled_over=entity.is_rolled_over,
            completed_at=entity.completed_at,
            created_at=entity.created_at,
        )
