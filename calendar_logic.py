"""Pure month/week/day grid calculations, no UI dependencies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator

from calendar_system import CalendarDay, CalendarSystem, normalize

logger = logging.getLogger(__name__)

DayPredicate = Callable[[CalendarDay], bool]


@dataclass(frozen=True)
class DayCell:
    """One slot of a week row; ``date`` is None for padding."""

    date: CalendarDay | None
    is_selectable: bool = False
    is_selected: bool = False

    @property
    def is_padding(self) -> bool:
        return self.date is None


WeekRow = tuple[DayCell, ...]

_PADDING = DayCell(None)


@dataclass(frozen=True)
class MonthShape:
    """Selection-independent layout of one month: rows of 7 day slots."""

    month_start: CalendarDay
    slots: tuple[tuple[CalendarDay | None, ...], ...]


@dataclass(frozen=True)
class GridShape:
    calendar: CalendarSystem
    months: tuple[MonthShape, ...]


@dataclass(frozen=True)
class MonthDescriptor:
    month_start: CalendarDay
    weeks: tuple[WeekRow, ...]

    def days(self) -> Iterator[CalendarDay]:
        """Yield the month's days in ascending order, skipping padding."""
        for week in self.weeks:
            for cell in week:
                if cell.date is not None:
                    yield cell.date

    def cell_for(self, day: CalendarDay) -> DayCell | None:
        for week in self.weeks:
            for cell in week:
                if cell.date == day:
                    return cell
        return None


@dataclass(frozen=True)
class CalendarGridModel:
    """Ordered, contiguous months from the first to the last bounding month."""

    calendar: CalendarSystem
    months: tuple[MonthDescriptor, ...] = ()

    def __len__(self) -> int:
        return len(self.months)

    def __iter__(self) -> Iterator[MonthDescriptor]:
        return iter(self.months)

    def __getitem__(self, index: int) -> MonthDescriptor:
        return self.months[index]

    @property
    def is_empty(self) -> bool:
        return not self.months

    @property
    def first_month(self) -> CalendarDay | None:
        return self.months[0].month_start if self.months else None

    @property
    def last_month(self) -> CalendarDay | None:
        return self.months[-1].month_start if self.months else None

    def find_cell(self, day: CalendarDay) -> DayCell | None:
        for month in self.months:
            if month.month_start.month_key() == day.month_key():
                return month.cell_for(day)
        return None


def month_slots(month_start: CalendarDay,
                calendar: CalendarSystem) -> tuple[tuple[CalendarDay | None, ...], ...]:
    """Return week rows for one month, padded with None to full weeks.

    The first column is the calendar's ``first_weekday``.
    """
    lead = (calendar.weekday(month_start) - calendar.first_weekday) % 7
    n_days = calendar.days_in_month(month_start.year, month_start.month)

    flat: list[CalendarDay | None] = [None] * lead
    flat.extend(CalendarDay(month_start.year, month_start.month, d)
                for d in range(1, n_days + 1))
    # Pad the final week
    flat.extend([None] * (-len(flat) % 7))
    return tuple(tuple(flat[i:i + 7]) for i in range(0, len(flat), 7))


def build_shape(first_date, last_date, calendar: CalendarSystem) -> GridShape:
    """Compute the month sequence between two dates, inclusive by month.

    An inverted range yields an empty shape rather than an error.
    """
    first = normalize(first_date, calendar).month_start()
    last = normalize(last_date, calendar).month_start()

    months: list[MonthShape] = []
    current = first
    while current <= last:
        months.append(MonthShape(current, month_slots(current, calendar)))
        current = calendar.next_month(current)
    return GridShape(calendar, tuple(months))


def apply_flags(shape: GridShape,
                is_selectable: DayPredicate | None = None,
                is_selected: DayPredicate | None = None) -> CalendarGridModel:
    """Turn a shape into a model by evaluating the per-day predicates."""
    months: list[MonthDescriptor] = []
    for m in shape.months:
        weeks: list[WeekRow] = []
        for row in m.slots:
            cells: list[DayCell] = []
            for d in row:
                if d is None:
                    cells.append(_PADDING)
                else:
                    cells.append(DayCell(
                        d,
                        is_selectable(d) if is_selectable else True,
                        is_selected(d) if is_selected else False,
                    ))
            weeks.append(tuple(cells))
        months.append(MonthDescriptor(m.month_start, tuple(weeks)))
    return CalendarGridModel(shape.calendar, tuple(months))


def build(first_date, last_date, calendar: CalendarSystem,
          is_selectable: DayPredicate | None = None,
          is_selected: DayPredicate | None = None) -> CalendarGridModel:
    """Build the full grid model: shape first, then cell flags."""
    return apply_flags(build_shape(first_date, last_date, calendar),
                       is_selectable, is_selected)


class GridCache:
    """Keeps the last grid shape so selection changes only re-flag cells."""

    __slots__ = ("_key", "_shape")

    def __init__(self) -> None:
        self._key: tuple | None = None
        self._shape: GridShape | None = None

    def shape(self, first_date, last_date, calendar: CalendarSystem) -> GridShape:
        first = normalize(first_date, calendar).month_start()
        last = normalize(last_date, calendar).month_start()
        key = (first, last, calendar)
        if self._shape is None or key != self._key:
            self._shape = build_shape(first, last, calendar)
            self._key = key
            logger.debug(f"Rebuilt grid shape {first}..{last} "
                         f"({len(self._shape.months)} months, {calendar.identifier})")
        return self._shape

    def model(self, first_date, last_date, calendar: CalendarSystem,
              is_selectable: DayPredicate | None = None,
              is_selected: DayPredicate | None = None) -> CalendarGridModel:
        return apply_flags(self.shape(first_date, last_date, calendar),
                           is_selectable, is_selected)

    def invalidate(self) -> None:
        self._key = None
        self._shape = None
