"""Single/multiple day selection state with a selectability boundary."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Union

from calendar_system import CalendarDay

logger = logging.getLogger(__name__)


class SelectionMode(Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"


@dataclass(frozen=True)
class SingleSelection:
    day: CalendarDay | None = None

    mode = SelectionMode.SINGLE

    def contains(self, day: CalendarDay) -> bool:
        return self.day == day

    def sorted_days(self) -> tuple[CalendarDay, ...]:
        return (self.day,) if self.day is not None else ()


@dataclass(frozen=True)
class MultipleSelection:
    days: frozenset[CalendarDay] = field(default_factory=frozenset)

    mode = SelectionMode.MULTIPLE

    def contains(self, day: CalendarDay) -> bool:
        return day in self.days

    def sorted_days(self) -> tuple[CalendarDay, ...]:
        return tuple(sorted(self.days))


SelectionState = Union[SingleSelection, MultipleSelection]


def empty_state(mode: SelectionMode) -> SelectionState:
    if mode is SelectionMode.MULTIPLE:
        return MultipleSelection()
    return SingleSelection()


@dataclass(frozen=True)
class SelectabilityPolicy:
    """Range boundary for selection.

    ``first_selectable`` only takes effect when it lies inside
    ``[range_start, range_end]``; otherwise every day is selectable.
    """

    first_selectable: CalendarDay | None = None
    range_start: CalendarDay | None = None
    range_end: CalendarDay | None = None

    @property
    def effective_boundary(self) -> CalendarDay | None:
        fs = self.first_selectable
        if fs is None or self.range_start is None or self.range_end is None:
            return None
        if self.range_start <= fs <= self.range_end:
            return fs
        return None

    def permits(self, day: CalendarDay) -> bool:
        boundary = self.effective_boundary
        return boundary is None or day >= boundary


class RejectReason(Enum):
    BEFORE_FIRST_SELECTABLE = "before_first_selectable"
    DECLINED = "declined"


@dataclass(frozen=True)
class AppliedSelection:
    day: CalendarDay
    state: SelectionState
    changed: bool = True

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    day: CalendarDay
    reason: RejectReason

    def __bool__(self) -> bool:
        return False


SelectResult = Union[AppliedSelection, Rejected]
StateListener = Callable[[SelectionState], None]


class SelectionStateManager:
    """Owns the current ``SelectionState`` and the selection callbacks.

    State objects are immutable; every change installs a new one before any
    callback runs, so a handler that queries the manager sees the final state.
    """

    def __init__(
        self,
        mode: SelectionMode = SelectionMode.SINGLE,
        policy: SelectabilityPolicy | None = None,
        should_select: Callable[[CalendarDay], bool] | None = None,
        on_select_single: Callable[[CalendarDay], None] | None = None,
        on_select_multiple: Callable[[tuple[CalendarDay, ...]], None] | None = None,
    ) -> None:
        self._state: SelectionState = empty_state(SelectionMode(mode))
        self.policy = policy or SelectabilityPolicy()
        self.should_select = should_select
        self.on_select_single = on_select_single
        self.on_select_multiple = on_select_multiple
        self._listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------
    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def mode(self) -> SelectionMode:
        return self._state.mode

    def current_single(self) -> CalendarDay | None:
        if isinstance(self._state, SingleSelection):
            return self._state.day
        return None

    def current_multiple(self) -> tuple[CalendarDay, ...]:
        if isinstance(self._state, MultipleSelection):
            return self._state.sorted_days()
        return ()

    def is_selected(self, day: CalendarDay) -> bool:
        return self._state.contains(day)

    # ------------------------------------------------------------------
    # Listeners (renderer side)
    # ------------------------------------------------------------------
    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        self._listeners.remove(listener)

    def _install(self, state: SelectionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    # ------------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------------
    def set_mode(self, mode: SelectionMode) -> None:
        """Switch modes, clearing the selection.  Raises ValueError for unknown modes."""
        mode = SelectionMode(mode)
        if mode is self._state.mode:
            return
        logger.info(f"Selection mode {self._state.mode.value} -> {mode.value}, "
                    "clearing selection")
        self._install(empty_state(mode))

    # ------------------------------------------------------------------
    # Selectability
    # ------------------------------------------------------------------
    def is_selectable(self, day: CalendarDay) -> bool:
        return self._check(day) is None

    def _check(self, day: CalendarDay) -> RejectReason | None:
        if not self.policy.permits(day):
            return RejectReason.BEFORE_FIRST_SELECTABLE
        if self.should_select is not None and not self.should_select(day):
            return RejectReason.DECLINED
        return None

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------
    def try_select(self, day: CalendarDay) -> SelectResult:
        """Select ``day`` if the boundary and the ``should_select`` hook allow it.

        Multiple mode only ever adds; re-selecting a selected day is an
        unchanged success and fires no callback.
        """
        reason = self._check(day)
        if reason is not None:
            logger.debug(f"Rejected selection of {day}: {reason.value}")
            return Rejected(day, reason)

        state = self._state
        if isinstance(state, SingleSelection):
            new_state = SingleSelection(day)
            self._install(new_state)
            if self.on_select_single is not None:
                self.on_select_single(day)
            return AppliedSelection(day, new_state)

        if day in state.days:
            return AppliedSelection(day, state, changed=False)
        new_state = MultipleSelection(state.days | {day})
        self._install(new_state)
        if self.on_select_multiple is not None:
            self.on_select_multiple(new_state.sorted_days())
        return AppliedSelection(day, new_state)

    def deselect(self, day: CalendarDay) -> bool:
        """Remove ``day`` from the selection; return whether it was selected."""
        state = self._state
        if not state.contains(day):
            return False
        if isinstance(state, SingleSelection):
            self._install(SingleSelection())
        else:
            self._install(MultipleSelection(state.days - {day}))
        return True

    def clear(self) -> None:
        if self._state.sorted_days():
            self._install(empty_state(self._state.mode))

    # ------------------------------------------------------------------
    # Programmatic writes (selected_date / selected_dates properties)
    # ------------------------------------------------------------------
    def replace_single(self, day: CalendarDay | None) -> bool:
        """Set the single selection directly; ignored in multiple mode."""
        if not isinstance(self._state, SingleSelection):
            logger.debug("Ignoring single-date write in multiple mode")
            return False
        self._install(SingleSelection(day))
        return True

    def replace_multiple(self, days: Iterable[CalendarDay]) -> bool:
        """Set the multiple selection directly; ignored in single mode."""
        if not isinstance(self._state, MultipleSelection):
            logger.debug("Ignoring multi-date write in single mode")
            return False
        self._install(MultipleSelection(frozenset(days)))
        return True
