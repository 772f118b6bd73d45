"""Rollover of incomplete tasks from one civil day to another."""

from collections import defaultdict
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

import structlog

from core.exceptions import RolloverNotAdjacentError
from domain.entities.task import Task, TaskPlacement, TaskStatus
from domain.repositories.unit_of_work import IUnitOfWork
from domain.scheduling.civil_day import CivilCalendar
from domain.scheduling.ordering import OrderAllocator

logger = structlog.get_logger()


@dataclass
class RolloverResult:
    """Outcome of one rollover call."""

    from_key: str
    to_key: str
    placements: list[TaskPlacement] = field(default_factory=list)

    @property
    def moved_count(self) -> int:
        return len(self.placements)


def plan_rollover(
    selected: Sequence[Task],
    destination: Sequence[Task],
    to_instant: datetime,
    allocator: OrderAllocator,
) -> list[TaskPlacement]:
    """Compute placements moving ``selected`` onto the destination day.

    Each owner's moved tasks are appended after that owner's existing
    destination tasks, one gap apart, keeping the order they were read in.
    Completed tasks in ``selected`` are skipped.

    Args:
        selected: Source-day tasks in display order.
        destination: Tasks already on the destination day, any status.
        to_instant: New due instant for every moved task.
        allocator: Supplies the gap and the append rule.
    """
    moving = [task for task in selected if task.status == TaskStatus.INCOMPLETE]
    moving_ids = {task.id for task in moving}

    existing_orders: dict[UUID, list[int]] = defaultdict(list)
    for task in destination:
        # Same-day rollovers see the moving tasks on both sides
        if task.id not in moving_ids:
            existing_orders[task.user_id].append(task.display_order)

    by_owner: dict[UUID, list[Task]] = defaultdict(list)
    for task in moving:
        by_owner[task.user_id].append(task)

    placements: list[TaskPlacement] = []
    for owner_id, tasks in by_owner.items():
        base = allocator.append(existing_orders.get(owner_id, []))
        orders = allocator.sequence(base, len(tasks))
        placements.extend(
            TaskPlacement(
                task_id=task.id,
                due_date=to_instant,
                display_order=order,
                is_rolled_over=True,
            )
            for task, order in zip(tasks, orders)
        )
    return placements


class RolloverService:
    """Carries incomplete tasks forward from a source day to a destination day."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        calendar: CivilCalendar,
        allocator: OrderAllocator | None = None,
        require_adjacent: bool = False,
    ) -> None:
        self._uow_factory = uow_factory
        self._calendar = calendar
        self._allocator = allocator or OrderAllocator()
        self._require_adjacent = require_adjacent

    async def preview(self, from_instant: datetime, user_id: UUID | None = None) -> list[Task]:
        """Incomplete tasks a rollover from ``from_instant``'s day would move."""
        start, end = self._calendar.day_range(from_instant)
        async with self._uow_factory() as uow:
            return await uow.tasks.list_in_range(  # type: ignore[no-any-return]
                start, end, user_id=user_id, status=TaskStatus.INCOMPLETE
            )

    async def roll_over(
        self,
        from_instant: datetime,
        to_instant: datetime,
        user_id: UUID | None = None,
        require_adjacent: bool | None = None,
    ) -> RolloverResult:
        """Move incomplete tasks of ``from_instant``'s day to ``to_instant``.

        Moved tasks get ``due_date = to_instant``, ``is_rolled_over = True``
        and display orders after the destination day's existing tasks. Reads
        and writes share one unit of work, so a failed write rolls back the
        whole batch.

        Args:
            from_instant: Any instant on the source civil day.
            to_instant: Due instant given to moved tasks.
            user_id: Restrict to one owner; ``None`` rolls over every user.
            require_adjacent: Reject destinations other than the next civil
                day. Defaults to the service setting.

        Raises:
            InvalidInstantError: Either instant is naive or out of range.
            RolloverNotAdjacentError: Adjacency required and not met.
        """
        from_key = self._calendar.day_key(from_instant)
        to_key = self._calendar.day_key(to_instant)
        to_instant = self._calendar.to_utc(to_instant)

        day_span = self._calendar.days_between(from_instant, to_instant)
        if day_span != 1:
            strict = self._require_adjacent if require_adjacent is None else require_adjacent
            if strict:
                raise RolloverNotAdjacentError(from_key, to_key)
            logger.warning(
                "rollover_non_adjacent_days",
                from_key=from_key,
                to_key=to_key,
                day_span=day_span,
            )

        result = RolloverResult(from_key=from_key, to_key=to_key)

        async with self._uow_factory() as uow:
            source_start, source_end = self._calendar.day_range(from_key)
            selected = await uow.tasks.list_in_range(
                source_start, source_end, user_id=user_id, status=TaskStatus.INCOMPLETE
            )
            if not selected:
                logger.info(
                    "rollover_nothing_to_move",
                    from_key=from_key,
                    to_key=to_key,
                    user_id=str(user_id) if user_id else None,
                )
                return result

            dest_start, dest_end = self._calendar.day_range(to_key)
            destination = await uow.tasks.list_in_range(dest_start, dest_end, user_id=user_id)

            result.placements = plan_rollover(selected, destination, to_instant, self._allocator)
            if result.placements:
                await uow.tasks.bulk_reschedule(result.placements)
                await uow.commit()

        logger.info(
            "rollover_completed",
            from_key=from_key,
            to_key=to_key,
            moved_count=result.moved_count,
            user_id=str(user_id) if user_id else None,
        )
        return result

    async def roll_over_day(
        self,
        now: datetime,
        user_id: UUID | None = None,
        require_adjacent: bool | None = None,
    ) -> RolloverResult:
        """Nightly rollover: yesterday's incomplete tasks onto today.

        Moved tasks are due at the first instant of ``now``'s civil day.
        """
        yesterday = self._calendar.shift_days(now, -1)
        today = self._calendar.start_of_day(now)
        return await self.roll_over(
            yesterday, today, user_id=user_id, require_adjacent=require_adjacent
        )
