"""Nightly rollover worker entry point."""

import asyncio
import sys
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import structlog

from core.config import settings
from core.logging import setup_logging
from domain.scheduling.civil_day import CivilCalendar
from domain.services.rollover_service import RolloverResult, RolloverService

logger = structlog.get_logger()

Clock = Callable[[], datetime]
Sleep = Callable[[float], Awaitable[None]]


def utc_clock() -> datetime:
    return datetime.now(timezone.utc)


def next_run_at(calendar: CivilCalendar, now: datetime, offset_minutes: int) -> datetime:
    """Next instant ``offset_minutes`` past a civil midnight, strictly after ``now``."""
    offset = timedelta(minutes=offset_minutes)
    run_at = calendar.start_of_day(now) + offset
    if run_at > now:
        return run_at
    return calendar.next_midnight(now) + offset


async def run_rollover_once(
    service: RolloverService,
    clock: Clock = utc_clock,
    now: datetime | None = None,
) -> RolloverResult:
    """Roll yesterday's incomplete tasks onto today for every user.

    ``now`` pins the run to a scheduled instant; otherwise the clock is read.
    """
    structlog.contextvars.bind_contextvars(run_id=str(uuid4()))
    try:
        return await service.roll_over_day(now if now is not None else clock())
    finally:
        structlog.contextvars.unbind_contextvars("run_id")


async def rollover_loop(
    service: RolloverService,
    calendar: CivilCalendar,
    offset_minutes: int,
    clock: Clock = utc_clock,
    sleep: Sleep = asyncio.sleep,
    max_runs: int | None = None,
) -> None:
    """Sleep until shortly after each civil midnight and run the rollover.

    A failed run is logged and the loop waits for the next night.
    """
    runs = 0
    while max_runs is None or runs < max_runs:
        now = clock()
        run_at = next_run_at(calendar, now, offset_minutes)
        delay = (run_at - now).total_seconds()
        logger.info(
            "rollover_scheduled",
            run_at=run_at.isoformat(),
            delay_seconds=round(delay, 1),
        )
        await sleep(delay)
        try:
            await run_rollover_once(service, clock, now=run_at)
        except Exception:
            logger.exception("nightly_rollover_failed")
        runs += 1


async def main(argv: list[str]) -> None:
    """Run the worker; ``--once`` performs a single rollover and exits."""
    from infrastructure.database.session import engine
    from infrastructure.dependencies import get_civil_calendar, get_rollover_service

    setup_logging()
    service = get_rollover_service()
    logger.info(
        "worker_started",
        app=settings.app_name,
        civil_timezone=settings.civil_timezone,
        environment=settings.app_env,
    )

    try:
        if "--once" in argv:
            result = await run_rollover_once(service)
            logger.info(
                "rollover_run_finished",
                from_key=result.from_key,
                to_key=result.to_key,
                moved_count=result.moved_count,
            )
        elif settings.rollover_enabled:
            await rollover_loop(
                service,
                get_civil_calendar(),
                offset_minutes=settings.rollover_run_offset_minutes,
            )
        else:
            logger.info("rollover_disabled")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
