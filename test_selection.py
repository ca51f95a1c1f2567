"""Tests for the selection state manager."""

import pytest

from calendar_system import CalendarDay
from selection import (
    AppliedSelection,
    MultipleSelection,
    Rejected,
    RejectReason,
    SelectabilityPolicy,
    SelectionMode,
    SelectionStateManager,
    SingleSelection,
)

JAN_20 = CalendarDay(2024, 1, 20)
FEB_1 = CalendarDay(2024, 2, 1)
FEB_10 = CalendarDay(2024, 2, 10)
FEB_20 = CalendarDay(2024, 2, 20)

Q1_POLICY = SelectabilityPolicy(FEB_1, CalendarDay(2024, 1, 1), CalendarDay(2024, 3, 31))


class Recorder:

    def __init__(self):
        self.calls = []

    def __call__(self, value):
        self.calls.append(value)


class TestSingleMode:

    def test_latest_selection_wins(self):
        mgr = SelectionStateManager(SelectionMode.SINGLE)
        mgr.try_select(FEB_10)
        mgr.try_select(FEB_20)
        assert mgr.current_single() == FEB_20
        assert mgr.current_multiple() == ()

    def test_notifies_with_day(self):
        sink = Recorder()
        mgr = SelectionStateManager(on_select_single=sink)
        result = mgr.try_select(FEB_10)
        assert isinstance(result, AppliedSelection)
        assert result.state == SingleSelection(FEB_10)
        assert sink.calls == [FEB_10]

    def test_multiple_sink_not_used(self):
        sink = Recorder()
        mgr = SelectionStateManager(on_select_multiple=sink)
        mgr.try_select(FEB_10)
        assert sink.calls == []


class TestMultipleMode:

    def test_accumulates_in_order(self):
        mgr = SelectionStateManager(SelectionMode.MULTIPLE)
        mgr.try_select(FEB_20)
        mgr.try_select(FEB_10)
        assert mgr.current_multiple() == (FEB_10, FEB_20)
        assert mgr.current_single() is None

    def test_notifies_with_sorted_days(self):
        sink = Recorder()
        mgr = SelectionStateManager(SelectionMode.MULTIPLE, on_select_multiple=sink)
        mgr.try_select(FEB_20)
        mgr.try_select(FEB_10)
        assert sink.calls == [(FEB_20,), (FEB_10, FEB_20)]

    def test_reselect_is_noop_addition(self):
        sink = Recorder()
        mgr = SelectionStateManager(SelectionMode.MULTIPLE, on_select_multiple=sink)
        mgr.try_select(FEB_10)
        result = mgr.try_select(FEB_10)
        assert result
        assert result.changed is False
        assert mgr.current_multiple() == (FEB_10,)
        assert len(sink.calls) == 1

    def test_explicit_deselect(self):
        mgr = SelectionStateManager(SelectionMode.MULTIPLE)
        mgr.try_select(FEB_10)
        mgr.try_select(FEB_20)
        assert mgr.deselect(FEB_10) is True
        assert mgr.deselect(FEB_10) is False
        assert mgr.current_multiple() == (FEB_20,)


class TestModeSwitch:

    def test_single_to_multiple_clears(self):
        mgr = SelectionStateManager(SelectionMode.SINGLE)
        mgr.try_select(FEB_10)
        mgr.set_mode(SelectionMode.MULTIPLE)
        assert mgr.current_multiple() == ()
        assert mgr.current_single() is None
        assert mgr.state == MultipleSelection()

    def test_multiple_to_single_clears(self):
        mgr = SelectionStateManager(SelectionMode.MULTIPLE)
        mgr.try_select(FEB_10)
        mgr.set_mode(SelectionMode.SINGLE)
        assert mgr.state == SingleSelection()

    def test_same_mode_keeps_selection(self):
        mgr = SelectionStateManager(SelectionMode.SINGLE)
        mgr.try_select(FEB_10)
        mgr.set_mode(SelectionMode.SINGLE)
        assert mgr.current_single() == FEB_10

    def test_mode_given_by_value(self):
        mgr = SelectionStateManager("multiple")
        assert mgr.mode is SelectionMode.MULTIPLE
        mgr.set_mode("single")
        assert mgr.mode is SelectionMode.SINGLE

    def test_unknown_mode_raises_and_keeps_state(self):
        mgr = SelectionStateManager(SelectionMode.SINGLE)
        mgr.try_select(FEB_10)
        with pytest.raises(ValueError):
            mgr.set_mode("bogus")
        assert mgr.mode is SelectionMode.SINGLE
        assert mgr.current_single() == FEB_10

    def test_unknown_mode_in_constructor_raises(self):
        with pytest.raises(ValueError):
            SelectionStateManager("bogus")


class TestSelectability:

    def test_before_first_selectable_is_rejected(self):
        sink = Recorder()
        mgr = SelectionStateManager(policy=Q1_POLICY, on_select_single=sink)
        mgr.try_select(FEB_10)
        before = mgr.state
        result = mgr.try_select(JAN_20)
        assert isinstance(result, Rejected)
        assert not result
        assert result.reason is RejectReason.BEFORE_FIRST_SELECTABLE
        assert mgr.state is before
        assert sink.calls == [FEB_10]

    def test_boundary_day_itself_is_selectable(self):
        mgr = SelectionStateManager(policy=Q1_POLICY)
        assert mgr.try_select(FEB_1)

    @pytest.mark.parametrize("first_selectable", [
        CalendarDay(2023, 12, 31), CalendarDay(2024, 4, 1),
    ])
    def test_boundary_outside_range_is_ignored(self, first_selectable):
        policy = SelectabilityPolicy(first_selectable, CalendarDay(2024, 1, 1),
                                     CalendarDay(2024, 3, 31))
        assert policy.effective_boundary is None
        mgr = SelectionStateManager(policy=policy)
        assert mgr.try_select(JAN_20)

    def test_no_range_means_no_boundary(self):
        assert SelectabilityPolicy(FEB_1).permits(JAN_20)

    def test_should_select_hook_declines(self):
        mgr = SelectionStateManager(SelectionMode.MULTIPLE,
                                    should_select=lambda d: d.day != 20)
        result = mgr.try_select(FEB_20)
        assert result.reason is RejectReason.DECLINED
        assert mgr.current_multiple() == ()
        assert mgr.try_select(FEB_10)

    def test_hook_not_consulted_before_boundary(self):
        asked = Recorder()

        def hook(day):
            asked(day)
            return True

        mgr = SelectionStateManager(policy=Q1_POLICY, should_select=hook)
        mgr.try_select(JAN_20)
        assert asked.calls == []

    def test_is_selectable_matches_try_select(self):
        mgr = SelectionStateManager(policy=Q1_POLICY, should_select=lambda d: d.day % 2 == 0)
        assert not mgr.is_selectable(JAN_20)
        assert not mgr.is_selectable(CalendarDay(2024, 2, 11))
        assert mgr.is_selectable(FEB_10)


class TestNotificationOrdering:

    def test_callback_sees_committed_state(self):
        seen = []
        mgr = SelectionStateManager(SelectionMode.MULTIPLE)
        mgr.on_select_multiple = lambda days: seen.append(mgr.current_multiple())
        mgr.try_select(FEB_10)
        assert seen == [(FEB_10,)]

    def test_listeners_run_on_every_change(self):
        states = Recorder()
        mgr = SelectionStateManager()
        mgr.add_listener(states)
        mgr.try_select(FEB_10)
        mgr.deselect(FEB_10)
        mgr.set_mode(SelectionMode.MULTIPLE)
        assert states.calls == [SingleSelection(FEB_10), SingleSelection(), MultipleSelection()]
        mgr.remove_listener(states)
        mgr.try_select(FEB_20)
        assert len(states.calls) == 3

    def test_rejection_fires_nothing(self):
        states = Recorder()
        mgr = SelectionStateManager(policy=Q1_POLICY)
        mgr.add_listener(states)
        mgr.try_select(JAN_20)
        assert states.calls == []


class TestProgrammaticWrites:

    def test_replace_single_ignored_in_multiple_mode(self):
        mgr = SelectionStateManager(SelectionMode.MULTIPLE)
        assert mgr.replace_single(FEB_10) is False
        assert mgr.current_single() is None

    def test_replace_multiple_ignored_in_single_mode(self):
        mgr = SelectionStateManager(SelectionMode.SINGLE)
        assert mgr.replace_multiple([FEB_10]) is False
        assert mgr.current_multiple() == ()

    def test_replace_bypasses_delegate(self):
        sink = Recorder()
        mgr = SelectionStateManager(SelectionMode.MULTIPLE, policy=Q1_POLICY,
                                    on_select_multiple=sink)
        assert mgr.replace_multiple([FEB_20, JAN_20])
        assert mgr.current_multiple() == (JAN_20, FEB_20)
        assert sink.calls == []

    def test_clear(self):
        mgr = SelectionStateManager()
        mgr.try_select(FEB_10)
        mgr.clear()
        assert mgr.current_single() is None
