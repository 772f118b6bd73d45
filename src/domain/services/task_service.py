"""Task service layer with business logic."""

from collections.abc import Callable
from datetime import date, datetime, timedelta
from uuid import UUID

import structlog

from core.exceptions import OrderGapExhaustedError, TaskNotFoundError, ValidationError
from domain.entities.task import (
    Task,
    TaskCategory,
    TaskPlacement,
    TaskStatus,
    parse_category,
    parse_status,
    utc_now,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.scheduling.bucketing import DayBucketer, display_sort_key
from domain.scheduling.civil_day import CivilCalendar
from domain.scheduling.ordering import OrderAllocator

logger = structlog.get_logger()


class TaskService:
    """Service layer for Task business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        calendar: CivilCalendar,
        allocator: OrderAllocator | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._calendar = calendar
        self._allocator = allocator or OrderAllocator()
        self._bucketer = DayBucketer(calendar)

    # --- Reads ---

    async def get_by_id(self, task_id: UUID, user_id: UUID) -> Task:
        """Get a specific task, ensuring user ownership."""
        async with self._uow_factory() as uow:
            return await self._get_owned(uow, task_id, user_id)

    async def list_for_user(
        self,
        user_id: UUID,
        status: TaskStatus | str | None = None,
        skip: int = 0,
        take: int = 100,
    ) -> list[Task]:
        """Get a page of a user's tasks, earliest due first."""
        parsed = parse_status(status) if status is not None else None
        async with self._uow_factory() as uow:
            return await uow.tasks.list_for_user(  # type: ignore[no-any-return]
                user_id, status=parsed, skip=skip, take=take
            )

    async def get_for_day(self, user_id: UUID, day: str | date | datetime) -> list[Task]:
        """Get a user's tasks on one civil day in display order."""
        start, end = self._calendar.day_range(day)
        async with self._uow_factory() as uow:
            tasks = await uow.tasks.list_in_range(start, end, user_id=user_id)
        return sorted(tasks, key=display_sort_key)

    async def get_days(
        self, user_id: UUID, start: datetime, days: int = 7
    ) -> dict[str, list[Task]]:
        """Get a user's tasks for consecutive civil days, keyed by day.

        Used for the weekly view; days without tasks map to empty lists.
        """
        if days < 1:
            raise ValidationError("days must be at least 1", {"days": days})
        first = self._calendar.local_date(start)
        range_start = self._calendar.start_of_date(first)
        range_end = self._calendar.end_of_date(first + timedelta(days=days - 1))
        async with self._uow_factory() as uow:
            tasks = await uow.tasks.list_in_range(range_start, range_end, user_id=user_id)
        return self._bucketer.span(tasks, start, days)

    # --- Writes ---

    async def create(
        self,
        user_id: UUID,
        title: str,
        due_date: datetime,
        category: TaskCategory | str,
        status: TaskStatus | str = TaskStatus.INCOMPLETE,
        is_priority: bool = False,
        display_order: int | None = None,
        completed_at: datetime | None = None,
    ) -> Task:
        """Create a new task.

        Without an explicit ``display_order`` the task is appended to its day.
        """
        due_date = self._calendar.to_utc(due_date)
        async with self._uow_factory() as uow:
            if display_order is None:
                siblings = await uow.tasks.list_in_range(
                    *self._calendar.day_range(due_date), user_id=user_id
                )
                display_order = self._allocator.append([t.display_order for t in siblings])

            status = parse_status(status)
            if status == TaskStatus.COMPLETE and completed_at is None:
                completed_at = utc_now()

            task = Task(
                user_id=user_id,
                title=title,
                due_date=due_date,
                category=parse_category(category),
                status=status,
                is_priority=is_priority,
                display_order=display_order,
                completed_at=completed_at,
            )

            created = await uow.tasks.create(task)
            await uow.commit()

            return created  # type: ignore[no-any-return]

    async def update(
        self,
        task_id: UUID,
        user_id: UUID,
        title: str | None = None,
        category: TaskCategory | str | None = None,
        is_priority: bool | None = None,
        status: TaskStatus | str | None = None,
        completed_at: datetime | None = None,
        due_date: datetime | None = None,
        display_order: int | None = None,
    ) -> Task:
        """Update an existing task (partial update).

        A status change to complete stamps ``completed_at`` unless one is
        supplied; a change to incomplete clears it. A new ``due_date`` counts
        as a manual move and clears the rollover flag.
        """
        async with self._uow_factory() as uow:
            task = await self._get_owned(uow, task_id, user_id)

            if title is not None:
                if not title.strip():
                    raise ValidationError("Task title must not be empty", {"field": "title"})
                task.title = title
            if category is not None:
                task.category = parse_category(category)
            if is_priority is not None:
                task.is_priority = is_priority
            if display_order is not None:
                task.display_order = display_order
            if due_date is not None:
                task.reschedule(self._calendar.to_utc(due_date))

            if status is not None:
                task.set_status(status, at=completed_at)
            elif completed_at is not None and task.is_complete:
                task.completed_at = completed_at
            elif completed_at is not None:
                raise ValidationError(
                    "completed_at can only be set on a complete task",
                    {"field": "completed_at"},
                )

            updated = await uow.tasks.update(task)
            await uow.commit()

            return updated  # type: ignore[no-any-return]

    async def delete(self, task_id: UUID, user_id: UUID) -> bool:
        """Delete a task owned by the user."""
        async with self._uow_factory() as uow:
            await self._get_owned(uow, task_id, user_id)
            deleted = await uow.tasks.delete(task_id)
            await uow.commit()

            return deleted  # type: ignore[no-any-return]

    async def move(
        self,
        task_id: UUID,
        user_id: UUID,
        due_date: datetime,
        is_rolled_over: bool = False,
        index: int | None = None,
    ) -> Task:
        """Manually move a task to another instant.

        The rollover flag is cleared unless ``is_rolled_over`` says otherwise.
        With ``index`` the task is also positioned among the destination
        day's tasks; without it the display order is kept.
        """
        due_date = self._calendar.to_utc(due_date)
        async with self._uow_factory() as uow:
            task = await self._get_owned(uow, task_id, user_id)
            task.reschedule(due_date, is_rolled_over=is_rolled_over)

            if index is not None:
                task.display_order = await self._order_for_index(uow, task, index)

            updated = await uow.tasks.update(task)
            await uow.commit()

            return updated  # type: ignore[no-any-return]

    async def reorder(
        self,
        task_id: UUID,
        user_id: UUID,
        display_order: int | None = None,
        index: int | None = None,
    ) -> Task:
        """Reorder a task within its day.

        Either sets ``display_order`` verbatim or places the task at
        ``index`` among the other tasks of the day. A full gap triggers a
        renumbering pass over the day before placing the task.
        """
        if (display_order is None) == (index is None):
            raise ValidationError("Provide exactly one of display_order or index")

        async with self._uow_factory() as uow:
            task = await self._get_owned(uow, task_id, user_id)
            if display_order is not None:
                task.display_order = display_order
            else:
                task.display_order = await self._order_for_index(uow, task, index or 0)

            updated = await uow.tasks.update(task)
            await uow.commit()

            return updated  # type: ignore[no-any-return]

    async def _order_for_index(self, uow: IUnitOfWork, task: Task, index: int) -> int:
        """Display order placing ``task`` at ``index`` of its day's other tasks."""
        start, end = self._calendar.day_range(task.due_date)
        day_tasks = await uow.tasks.list_in_range(start, end, user_id=task.user_id)
        siblings = sorted((t for t in day_tasks if t.id != task.id), key=display_sort_key)
        orders = [t.display_order for t in siblings]

        try:
            return self._allocator.for_index(orders, index)
        except OrderGapExhaustedError as exc:
            renumbered = self._allocator.renumber(len(siblings))
            await uow.tasks.bulk_reschedule(
                [
                    TaskPlacement(
                        task_id=sibling.id,
                        due_date=sibling.due_date,
                        display_order=order,
                        is_rolled_over=sibling.is_rolled_over,
                    )
                    for sibling, order in zip(siblings, renumbered)
                ]
            )
            logger.info(
                "day_bucket_renumbered",
                user_id=str(task.user_id),
                day_key=self._calendar.day_key(task.due_date),
                task_count=len(siblings),
                prev=exc.prev,
                next=exc.next,
            )
            return self._allocator.for_index(renumbered, index)

    async def _get_owned(self, uow: IUnitOfWork, task_id: UUID, user_id: UUID) -> Task:
        """Load a task, reporting other users' tasks as not found."""
        task = await uow.tasks.get(task_id)
        if not task or task.user_id != user_id:
            raise TaskNotFoundError(str(task_id))
        return task  # type: ignore[no-any-return]
