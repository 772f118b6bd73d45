"""Group tasks into civil-day buckets for display."""

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime, timedelta

from domain.entities.task import Task
from domain.scheduling.civil_day import CivilCalendar


def display_sort_key(task: Task) -> tuple[int, datetime, str]:
    """Order within a day: display order, then creation, then id."""
    return (task.display_order, task.created_at, str(task.id))


class DayBucketer:
    """Partition tasks by the civil day of their due instant."""

    def __init__(self, calendar: CivilCalendar) -> None:
        self._calendar = calendar

    def bucket(self, tasks: Iterable[Task]) -> dict[str, list[Task]]:
        """Map day key -> tasks of that day in display order.

        Keys come out in ascending day order.
        """
        groups: dict[str, list[Task]] = defaultdict(list)
        for task in tasks:
            groups[self._calendar.day_key(task.due_date)].append(task)
        return {key: sorted(groups[key], key=display_sort_key) for key in sorted(groups)}

    def span(self, tasks: Iterable[Task], start: datetime, days: int = 7) -> dict[str, list[Task]]:
        """Buckets for ``days`` consecutive civil days from ``start``.

        Every day in the span gets a key, empty or not. Tasks outside the
        span are left out.
        """
        first = self._calendar.local_date(start)
        keys = [(first + timedelta(days=offset)).isoformat() for offset in range(days)]
        buckets = self.bucket(tasks)
        return {key: buckets.get(key, []) for key in keys}
