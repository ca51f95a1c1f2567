"""Calendar systems and day-granularity normalization, no UI dependencies."""

from __future__ import annotations

import calendar as _cal
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

import jdatetime

logger = logging.getLogger(__name__)


class InvalidDateError(ValueError):
    """Raised when a value cannot be expressed as a day of a calendar system."""


@dataclass(frozen=True, order=True)
class CalendarDay:
    """A (year, month, day) triple in some calendar system, no time of day."""

    year: int
    month: int
    day: int

    def month_start(self) -> "CalendarDay":
        return CalendarDay(self.year, self.month, 1)

    def month_key(self) -> tuple[int, int]:
        return self.year, self.month

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


class Ordering(Enum):
    BEFORE = -1
    SAME = 0
    AFTER = 1


class CalendarSystem:
    """Day/month rules of one calendar.

    Subclasses provide ``decompose``, ``is_valid``, ``days_in_month``,
    ``weekday``, ``to_native`` and ``month_name``.  Weekday numbers follow
    the stdlib ``calendar`` convention: 0 is Monday, 6 is Sunday.
    """

    identifier = "abstract"
    weekend_days: tuple[int, ...] = (5, 6)
    first_weekday = 0

    def decompose(self, value) -> tuple[int, int, int]:
        raise NotImplementedError

    def is_valid(self, year: int, month: int, day: int) -> bool:
        raise NotImplementedError

    def days_in_month(self, year: int, month: int) -> int:
        raise NotImplementedError

    def weekday(self, day: CalendarDay) -> int:
        raise NotImplementedError

    def to_native(self, day: CalendarDay):
        raise NotImplementedError

    def month_name(self, month: int) -> str:
        raise NotImplementedError

    def months_in_year(self, year: int) -> int:
        return 12

    def weekday_abbrs(self) -> list[str]:
        """Seven short weekday labels, starting at ``first_weekday``."""
        return [_cal.day_abbr[(self.first_weekday + i) % 7] for i in range(7)]

    def next_month(self, day: CalendarDay) -> CalendarDay:
        """Return the first day of the month after ``day``'s month."""
        if day.month >= self.months_in_year(day.year):
            return CalendarDay(day.year + 1, 1, 1)
        return CalendarDay(day.year, day.month + 1, 1)

    def prev_month(self, day: CalendarDay) -> CalendarDay:
        """Return the first day of the month before ``day``'s month."""
        if day.month == 1:
            return CalendarDay(day.year - 1, self.months_in_year(day.year - 1), 1)
        return CalendarDay(day.year, day.month - 1, 1)


@dataclass(frozen=True)
class GregorianCalendar(CalendarSystem):
    """Proleptic Gregorian calendar backed by ``datetime`` and ``calendar``."""

    first_weekday: int = 0
    identifier = "gregorian"

    def decompose(self, value) -> tuple[int, int, int]:
        # datetime is a date subclass; its time fields are simply dropped
        if isinstance(value, date):
            return value.year, value.month, value.day
        if isinstance(value, jdatetime.date):
            g = value.togregorian()
            return g.year, g.month, g.day
        raise InvalidDateError(f"Not a date value: {value!r}")

    def is_valid(self, year: int, month: int, day: int) -> bool:
        try:
            date(year, month, day)
        except (ValueError, TypeError, OverflowError):
            return False
        return True

    def days_in_month(self, year: int, month: int) -> int:
        return _cal.monthrange(year, month)[1]

    def weekday(self, day: CalendarDay) -> int:
        return _cal.weekday(day.year, day.month, day.day)

    def to_native(self, day: CalendarDay) -> date:
        return date(day.year, day.month, day.day)

    def month_name(self, month: int) -> str:
        return _cal.month_name[month]


@dataclass(frozen=True)
class PersianCalendar(CalendarSystem):
    """Solar Hijri (Jalali) calendar backed by ``jdatetime``.

    Weeks traditionally start on Saturday, hence the default of 5.
    """

    first_weekday: int = 5
    identifier = "persian"
    weekend_days = (4,)

    def decompose(self, value) -> tuple[int, int, int]:
        if isinstance(value, jdatetime.date):
            return value.year, value.month, value.day
        if isinstance(value, date):
            if isinstance(value, datetime):
                value = value.date()
            try:
                j = jdatetime.date.fromgregorian(date=value)
            except (ValueError, OverflowError) as e:
                raise InvalidDateError(f"{value!r} is outside the Persian calendar") from e
            return j.year, j.month, j.day
        raise InvalidDateError(f"Not a date value: {value!r}")

    def is_valid(self, year: int, month: int, day: int) -> bool:
        try:
            jdatetime.date(year, month, day)
        except (ValueError, TypeError, OverflowError):
            return False
        return True

    def days_in_month(self, year: int, month: int) -> int:
        if month <= 6:
            return 31
        if month <= 11:
            return 30
        return 30 if self.is_valid(year, 12, 30) else 29

    def weekday(self, day: CalendarDay) -> int:
        return self.to_native(day).togregorian().weekday()

    def to_native(self, day: CalendarDay) -> jdatetime.date:
        return jdatetime.date(day.year, day.month, day.day)

    def month_name(self, month: int) -> str:
        return jdatetime.date.j_months_en[month - 1]


_CALENDARS = {
    "gregorian": GregorianCalendar,
    "persian": PersianCalendar,
}


def calendar_by_name(name: str, first_weekday: int | None = None) -> CalendarSystem:
    """Return a calendar system by its identifier."""
    try:
        factory = _CALENDARS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown calendar system: {name!r}") from None
    if first_weekday is None:
        return factory()
    if not 0 <= first_weekday <= 6:
        raise ValueError(f"first_weekday must be 0..6, got {first_weekday}")
    return factory(first_weekday=first_weekday)


def normalize(value, calendar: CalendarSystem) -> CalendarDay:
    """Truncate ``value`` to a ``CalendarDay`` of ``calendar``.

    Time-of-day is always rounded down.  Aware datetimes keep their own
    wall-clock date; no time zone conversion happens here.
    """
    if isinstance(value, CalendarDay):
        y, m, d = value.year, value.month, value.day
    else:
        y, m, d = calendar.decompose(value)
    if not calendar.is_valid(y, m, d):
        logger.debug(f"Rejected {value!r} for {calendar.identifier} calendar")
        raise InvalidDateError(
            f"{y:04d}-{m:02d}-{d:02d} is not a valid {calendar.identifier} date")
    return CalendarDay(y, m, d)


def compare_by_day(a, b, calendar: CalendarSystem) -> Ordering:
    """Compare two dates on their (year, month, day) triple only."""
    da = normalize(a, calendar)
    db = normalize(b, calendar)
    if da < db:
        return Ordering.BEFORE
    if da > db:
        return Ordering.AFTER
    return Ordering.SAME
