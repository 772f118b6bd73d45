"""Dependency factories wiring services to the database."""

from functools import lru_cache
from typing import Callable

from core.config import settings
from domain.scheduling.civil_day import CivilCalendar
from domain.scheduling.ordering import OrderAllocator
from domain.services.rollover_service import RolloverService
from domain.services.task_service import TaskService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_civil_calendar() -> CivilCalendar:
    """Get the calendar for the configured civil timezone."""
    return CivilCalendar(settings.civil_timezone)


@lru_cache
def get_order_allocator() -> OrderAllocator:
    """Get the display order allocator."""
    return OrderAllocator(settings.order_gap)


@lru_cache
def get_task_service() -> TaskService:
    """Get Task service instance."""
    return TaskService(
        get_uow_factory(),
        calendar=get_civil_calendar(),
        allocator=get_order_allocator(),
    )


@lru_cache
def get_rollover_service() -> RolloverService:
    """Get Rollover service instance."""
    return RolloverService(
        get_uow_factory(),
        calendar=get_civil_calendar(),
        allocator=get_order_allocator(),
        require_adjacent=settings.rollover_require_adjacent,
    )
