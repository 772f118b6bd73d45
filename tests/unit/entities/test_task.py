"""Unit tests for the Task entity."""

from datetime import datetime
from uuid import UUID

import pytest

from core.exceptions import ValidationError
from domain.entities.task import Task, TaskCategory, TaskStatus
from tests.unit.conftest import make_task, utc

DUE = utc(2025, 6, 15, 18, 0)


class TestTaskConstruction:
    def test_defaults(self, user_id: UUID) -> None:
        """Test new tasks start incomplete and not rolled over."""
        task = make_task(user_id, DUE)

        assert task.status == TaskStatus.INCOMPLETE
        assert task.completed_at is None
        assert task.is_rolled_over is False
        assert task.is_priority is False
        assert task.created_at.tzinfo is not None

    def test_coerces_enum_strings(self, user_id: UUID) -> None:
        task = Task(
            user_id=user_id,
            title="Vet visit",
            due_date=DUE,
            category="Roo Vet",  # type: ignore[arg-type]
            display_order=10,
            status="complete",  # type: ignore[arg-type]
            completed_at=DUE,
        )

        assert task.category == TaskCategory.ROO_VET
        assert task.status == TaskStatus.COMPLETE

    @pytest.mark.parametrize("title", ["", "   "])
    def test_rejects_empty_title(self, user_id: UUID, title: str) -> None:
        with pytest.raises(ValidationError):
            make_task(user_id, DUE, title=title)

    def test_rejects_unknown_category(self, user_id: UUID) -> None:
        with pytest.raises(ValidationError):
            make_task(user_id, DUE, category="Work")

    def test_rejects_naive_due_date(self, user_id: UUID) -> None:
        with pytest.raises(ValidationError):
            make_task(user_id, datetime(2025, 6, 15, 18, 0))

    def test_rejects_complete_without_timestamp(self, user_id: UUID) -> None:
        """Test completed_at must accompany the complete status."""
        with pytest.raises(ValidationError):
            make_task(user_id, DUE, status=TaskStatus.COMPLETE)

    def test_rejects_timestamp_on_incomplete(self, user_id: UUID) -> None:
        with pytest.raises(ValidationError):
            make_task(user_id, DUE, completed_at=DUE)


class TestTaskTransitions:
    def test_complete_stamps_time(self, user_id: UUID) -> None:
        task = make_task(user_id, DUE)

        task.complete()

        assert task.is_complete
        assert task.completed_at is not None

    def test_complete_keeps_existing_stamp(self, user_id: UUID) -> None:
        """Test completing twice does not move completed_at."""
        task = make_task(user_id, DUE, status=TaskStatus.COMPLETE, completed_at=DUE)

        task.complete()

        assert task.completed_at == DUE

    def test_reopen_clears_stamp(self, user_id: UUID) -> None:
        task = make_task(user_id, DUE, status=TaskStatus.COMPLETE, completed_at=DUE)

        task.reopen()

        assert task.status == TaskStatus.INCOMPLETE
        assert task.completed_at is None

    def test_set_status_with_explicit_time(self, user_id: UUID) -> None:
        task = make_task(user_id, DUE)
        done_at = utc(2025, 6, 15, 20, 0)

        task.set_status("complete", at=done_at)

        assert task.completed_at == done_at

    def test_set_status_unknown(self, user_id: UUID) -> None:
        task = make_task(user_id, DUE)

        with pytest.raises(ValidationError):
            task.set_status("archived")

    def test_reschedule_clears_rollover_flag(self, user_id: UUID) -> None:
        """Test a manual move drops is_rolled_over unless asked to keep it."""
        task = make_task(user_id, DUE, is_rolled_over=True)
        new_due = utc(2025, 6, 20, 18, 0)

        task.reschedule(new_due)

        assert task.due_date == new_due
        assert task.is_rolled_over is False

    def test_reschedule_can_keep_flag(self, user_id: UUID) -> None:
        task = make_task(user_id, DUE)

        task.reschedule(utc(2025, 6, 20, 18, 0), is_rolled_over=True)

        assert task.is_rolled_over is True

    def test_reschedule_rejects_naive(self, user_id: UUID) -> None:
        task = make_task(user_id, DUE)

        with pytest.raises(ValidationError):
            task.reschedule(datetime(2025, 6, 20, 18, 0))
