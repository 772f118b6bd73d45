"""Gap-based display order allocation.

Orders are sparse integers. New tasks take a value at the end, at the start
or halfway between two neighbours, so siblings are never rewritten on a
normal insert. Only repeated midpoint inserts exhaust a gap; that case is
reported with ``OrderGapExhaustedError`` and the caller renumbers the day.
"""

from collections.abc import Sequence

from core.exceptions import OrderGapExhaustedError, ValidationError

DEFAULT_GAP = 10


class OrderAllocator:
    """Compute display orders for inserts into a day bucket."""

    def __init__(self, gap: int = DEFAULT_GAP) -> None:
        if gap < 2:
            raise ValidationError("Order gap must be at least 2", {"gap": gap})
        self.gap = gap

    def append(self, existing: Sequence[int]) -> int:
        """Order after every existing value."""
        if not existing:
            return self.gap
        return max(existing) + self.gap

    def prepend(self, existing: Sequence[int]) -> int:
        """Order before every existing value.

        Halves the current minimum while it is positive; otherwise steps a
        full gap below it (orders are signed). An empty bucket starts at the
        same value ``append`` would use.
        """
        if not existing:
            return self.gap
        lowest = min(existing)
        if lowest > 0:
            return lowest // 2
        return lowest - self.gap

    def between(self, prev: int, next: int) -> int:
        """Midpoint of two neighbours.

        Raises:
            OrderGapExhaustedError: No integer lies strictly between them.
            ValidationError: ``prev`` sorts after ``next``.
        """
        if prev > next:
            raise ValidationError(
                "Previous order must not exceed the next one",
                {"prev": prev, "next": next},
            )
        value = (prev + next) // 2
        if not prev < value < next:
            raise OrderGapExhaustedError(prev, next)
        return value

    def for_index(self, existing: Sequence[int], index: int) -> int:
        """Order for a task inserted at ``index`` of an ascending sequence."""
        if index <= 0:
            return self.prepend(existing)
        if index >= len(existing):
            return self.append(existing)
        return self.between(existing[index - 1], existing[index])

    def renumber(self, count: int) -> list[int]:
        """Evenly spaced orders for a full renumbering pass."""
        return [self.gap * (i + 1) for i in range(count)]

    def sequence(self, base: int, count: int) -> list[int]:
        """``count`` orders starting at ``base`` one gap apart."""
        return [base + i * self.gap for i in range(count)]
