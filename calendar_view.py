"""Scrolling calendar surface: date range, selection and scroll-to-date."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Protocol

from calendar_logic import CalendarGridModel, GridCache, MonthDescriptor
from calendar_system import CalendarDay, CalendarSystem, GregorianCalendar, normalize
from scroll import LayoutMetrics, month_index, month_offset, visible_month
from selection import (
    SelectabilityPolicy,
    SelectionMode,
    SelectionState,
    SelectionStateManager,
    SelectResult,
)

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """What the view needs from whatever draws it."""

    def reload(self, model: CalendarGridModel) -> None: ...

    def scroll_to(self, offset: int, animated: bool) -> None: ...


class CalendarView:
    """A scrolling month calendar between ``first_date`` and ``last_date``.

    Dates may be given as ``datetime.date``/``datetime``, native dates of the
    calendar system, or ``CalendarDay``; only the day is kept.  The grid shape
    is rebuilt when the range or calendar changes; selection changes only
    recompute cell flags.
    """

    def __init__(
        self,
        first_date=None,
        last_date=None,
        *,
        calendar: CalendarSystem | None = None,
        selection_mode: SelectionMode = SelectionMode.SINGLE,
        first_selectable_date=None,
        should_select: Callable[[CalendarDay], bool] | None = None,
        on_select_date: Callable[[CalendarDay], None] | None = None,
        on_select_dates: Callable[[tuple[CalendarDay, ...]], None] | None = None,
        renderer: Renderer | None = None,
        layout: LayoutMetrics | None = None,
    ) -> None:
        self._calendar: CalendarSystem = calendar or GregorianCalendar()
        self._first = self._day_or_none(first_date)
        self._last = self._day_or_none(last_date)
        self._first_selectable = self._day_or_none(first_selectable_date)
        self.layout = layout or LayoutMetrics()
        self.renderer = renderer

        self._cache = GridCache()
        self._model: CalendarGridModel | None = None

        self._selection = SelectionStateManager(
            selection_mode,
            should_select=should_select,
            on_select_single=on_select_date,
            on_select_multiple=on_select_dates,
        )
        self._update_policy()
        self._selection.add_listener(self._on_selection_changed)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _day_or_none(self, value) -> CalendarDay | None:
        return None if value is None else normalize(value, self._calendar)

    def _update_policy(self) -> None:
        start = end = None
        if self._first is not None and self._last is not None:
            start = self._first.month_start()
            end = CalendarDay(self._last.year, self._last.month,
                              self._calendar.days_in_month(self._last.year, self._last.month))
        self._selection.policy = SelectabilityPolicy(self._first_selectable, start, end)

    def _invalidate(self) -> None:
        self._model = None
        if self.renderer is not None:
            self.renderer.reload(self.model)

    def _on_selection_changed(self, _state: SelectionState) -> None:
        self._invalidate()

    # ------------------------------------------------------------------
    # Date setup
    # ------------------------------------------------------------------
    @property
    def first_date(self) -> CalendarDay | None:
        return self._first

    @first_date.setter
    def first_date(self, value) -> None:
        self._first = self._day_or_none(value)
        self._update_policy()
        self._invalidate()

    @property
    def last_date(self) -> CalendarDay | None:
        return self._last

    @last_date.setter
    def last_date(self, value) -> None:
        self._last = self._day_or_none(value)
        self._update_policy()
        self._invalidate()

    @property
    def first_selectable_date(self) -> CalendarDay | None:
        return self._first_selectable

    @first_selectable_date.setter
    def first_selectable_date(self, value) -> None:
        self._first_selectable = self._day_or_none(value)
        self._update_policy()
        self._invalidate()

    @property
    def calendar(self) -> CalendarSystem:
        return self._calendar

    @calendar.setter
    def calendar(self, calendar: CalendarSystem) -> None:
        """Switch calendar systems, re-expressing stored days in the new one."""
        old = self._calendar
        if calendar == old:
            return

        def convert(day: CalendarDay | None) -> CalendarDay | None:
            return None if day is None else normalize(old.to_native(day), calendar)

        # Convert everything before touching state; a failure leaves the view as it was
        first = convert(self._first)
        last = convert(self._last)
        first_selectable = convert(self._first_selectable)
        single = convert(self._selection.current_single())
        multiple = [convert(d) for d in self._selection.current_multiple()]

        self._first = first
        self._last = last
        self._first_selectable = first_selectable
        self._calendar = calendar
        self._update_policy()
        logger.info(f"Calendar changed {old.identifier} -> {calendar.identifier}")
        if self._selection.mode is SelectionMode.SINGLE:
            self._selection.replace_single(single)
        else:
            self._selection.replace_multiple(multiple)
        self._invalidate()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    @property
    def selection_mode(self) -> SelectionMode:
        return self._selection.mode

    @selection_mode.setter
    def selection_mode(self, mode: SelectionMode) -> None:
        self._selection.set_mode(mode)

    @property
    def selection(self) -> SelectionStateManager:
        return self._selection

    @property
    def should_select(self) -> Callable[[CalendarDay], bool] | None:
        return self._selection.should_select

    @should_select.setter
    def should_select(self, hook: Callable[[CalendarDay], bool] | None) -> None:
        self._selection.should_select = hook
        self._invalidate()

    @property
    def selected_date(self) -> CalendarDay | None:
        """The selected day in single mode; always None in multiple mode."""
        return self._selection.current_single()

    @selected_date.setter
    def selected_date(self, value) -> None:
        day = self._day_or_none(value)
        if self._selection.replace_single(day) and day is not None:
            self.scroll_to_date(day)

    @property
    def selected_dates(self) -> tuple[CalendarDay, ...]:
        """Selected days in ascending order; always empty in single mode."""
        return self._selection.current_multiple()

    @selected_dates.setter
    def selected_dates(self, values: Iterable) -> None:
        self._selection.replace_multiple(normalize(v, self._calendar) for v in values)

    def select(self, value) -> SelectResult:
        """Handle a tap on a day."""
        return self._selection.try_select(normalize(value, self._calendar))

    def deselect(self, value) -> bool:
        return self._selection.deselect(normalize(value, self._calendar))

    def clear_selection(self) -> None:
        self._selection.clear()

    # ------------------------------------------------------------------
    # Grid model
    # ------------------------------------------------------------------
    @property
    def model(self) -> CalendarGridModel:
        if self._model is None:
            if self._first is None or self._last is None:
                self._model = CalendarGridModel(self._calendar)
            else:
                self._model = self._cache.model(
                    self._first, self._last, self._calendar,
                    self._selection.is_selectable, self._selection.is_selected,
                )
        return self._model

    # ------------------------------------------------------------------
    # Scrolling
    # ------------------------------------------------------------------
    def scroll_to_date(self, value, animated: bool = False) -> bool:
        """Scroll so ``value``'s month is at the top; False if out of range."""
        model = self.model
        index = month_index(value, model)
        if index is None:
            logger.debug(f"scroll_to_date: {value!r} is outside the calendar range")
            return False
        if self.renderer is not None:
            self.renderer.scroll_to(month_offset(index, model, self.layout), animated)
        return True

    def visible_month(self, offset: float) -> MonthDescriptor | None:
        return visible_month(offset, self.model, self.layout)
