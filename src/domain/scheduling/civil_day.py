"""Civil calendar arithmetic for a single configured timezone.

Every task belongs to the civil day its due instant falls on in the
configured zone. Offsets come from the IANA database through ``zoneinfo``,
so days on which the zone changes offset are 23 or 25 hours long.

Boundaries are returned as aware UTC datetimes. Python subtracts two aware
datetimes sharing a tzinfo by wall clock, so handing out zone-local values
would make a 23-hour day look like 24 hours to callers.
"""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.exceptions import InvalidInstantError, InvalidTimezoneError

MIN_SUPPORTED_YEAR = 1900
MAX_SUPPORTED_YEAR = 2200

# Smallest step between two datetimes
RESOLUTION = timedelta(microseconds=1)


def parse_day_key(key: str) -> date:
    """Parse a ``YYYY-MM-DD`` day key."""
    try:
        parsed = datetime.strptime(key, "%Y-%m-%d").date()
    except (TypeError, ValueError) as exc:
        raise InvalidInstantError(key, "day key must be formatted YYYY-MM-DD") from exc
    if parsed.isoformat() != key:
        raise InvalidInstantError(key, "day key must be formatted YYYY-MM-DD")
    _check_year(parsed, key)
    return parsed


def _check_year(day: date, original: object) -> None:
    if not MIN_SUPPORTED_YEAR <= day.year <= MAX_SUPPORTED_YEAR:
        raise InvalidInstantError(
            original,
            f"outside supported years {MIN_SUPPORTED_YEAR}-{MAX_SUPPORTED_YEAR}",
        )


class CivilCalendar:
    """Day boundaries and day keys in one civil timezone."""

    def __init__(self, timezone_name: str) -> None:
        try:
            self._tz = ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
            raise InvalidTimezoneError(str(timezone_name)) from exc
        self._name = timezone_name

    @property
    def timezone_name(self) -> str:
        return self._name

    @property
    def tzinfo(self) -> ZoneInfo:
        return self._tz

    def __repr__(self) -> str:
        return f"CivilCalendar({self._name!r})"

    # --- Instants ---

    def to_utc(self, instant: datetime) -> datetime:
        """Validate an instant and convert it to UTC.

        The supported year range applies to the instant's civil date.
        """
        if not isinstance(instant, datetime):
            raise InvalidInstantError(instant, "expected a datetime")
        if instant.tzinfo is None or instant.utcoffset() is None:
            raise InvalidInstantError(instant, "naive datetimes carry no instant")
        utc = instant.astimezone(timezone.utc)
        _check_year(utc.astimezone(self._tz).date(), instant)
        return utc

    def normalize(self, instant: datetime) -> datetime:
        """Project an instant onto civil wall-clock time.

        Going through UTC first matters for values already tagged with this
        zone: ``astimezone`` is a no-op when the tzinfo matches, which would
        keep wall times that never happened (the spring-forward gap). Such a
        value resolves to the post-transition wall time, e.g. 02:30 on a Los
        Angeles spring-forward date becomes 03:30 PDT.
        """
        return self.to_utc(instant).astimezone(self._tz)

    def local_date(self, instant: datetime) -> date:
        return self.normalize(instant).date()

    def day_key(self, instant: datetime) -> str:
        """Civil ``YYYY-MM-DD`` key of the day ``instant`` falls on."""
        return self.local_date(instant).isoformat()

    # --- Day boundaries ---

    def start_of_date(self, day: date) -> datetime:
        """First instant of a civil date, in UTC.

        Wall midnight is resolved with fold=0, which picks the first
        occurrence when midnight repeats and the pre-transition offset when
        midnight is skipped. The latter lands on the first wall time that
        exists that day.
        """
        _check_year(day, day)
        return self._first_instant(day)

    def end_of_date(self, day: date) -> datetime:
        """Last representable instant of a civil date, in UTC."""
        _check_year(day, day)
        return self._first_instant(day + timedelta(days=1)) - RESOLUTION

    def _first_instant(self, day: date) -> datetime:
        wall = datetime.combine(day, time.min, tzinfo=self._tz)
        return wall.astimezone(timezone.utc)

    def start_of_day(self, instant: datetime) -> datetime:
        return self.start_of_date(self.local_date(instant))

    def end_of_day(self, instant: datetime) -> datetime:
        return self.end_of_date(self.local_date(instant))

    def day_range(self, day: str | date | datetime) -> tuple[datetime, datetime]:
        """Inclusive ``(start, end)`` instants for a day key, date or instant.

        ``day_key(x) == k`` exactly when ``start <= x <= end`` for
        ``day_range(k)``.
        """
        if isinstance(day, datetime):
            local = self.local_date(day)
        elif isinstance(day, date):
            local = day
        else:
            local = parse_day_key(day)
        return self.start_of_date(local), self.end_of_date(local)

    # --- Day arithmetic ---

    def shift_days(self, instant: datetime, days: int) -> datetime:
        """Start of the civil date ``days`` away from the one ``instant`` is on."""
        return self.start_of_date(self.local_date(instant) + timedelta(days=days))

    def next_midnight(self, instant: datetime) -> datetime:
        return self.shift_days(instant, 1)

    def days_between(self, earlier: datetime, later: datetime) -> int:
        """Number of civil dates from ``earlier`` to ``later``."""
        return (self.local_date(later) - self.local_date(earlier)).days
