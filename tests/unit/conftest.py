"""Shared fixtures for unit tests."""

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from domain.entities.task import Task, TaskCategory
from domain.scheduling.ordering import OrderAllocator


class FakeUnitOfWork:
    """Fake Unit of Work with a task repository mock for unit testing."""

    def __init__(self) -> None:
        self.tasks = AsyncMock()
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


def make_task(
    user_id: UUID,
    due_date: datetime,
    display_order: int = 10,
    title: str = "Task",
    **kwargs: Any,
) -> Task:
    """Build a task with test defaults."""
    kwargs.setdefault("category", TaskCategory.PERSONAL)
    return Task(
        user_id=user_id,
        title=title,
        due_date=due_date,
        display_order=display_order,
        **kwargs,
    )


def utc(*args: int) -> datetime:
    """Aware UTC datetime shorthand."""
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def user_id() -> UUID:
    """A random user ID."""
    return uuid4()


@pytest.fixture
def other_user_id() -> UUID:
    """A random user ID distinct from user_id."""
    return uuid4()


@pytest.fixture
def allocator() -> OrderAllocator:
    return OrderAllocator()
