"""Index arithmetic between dates, months and scroll offsets."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from itertools import accumulate

from calendar_logic import CalendarGridModel, MonthDescriptor
from calendar_system import normalize


@dataclass(frozen=True)
class LayoutMetrics:
    """Pixel geometry supplied by a renderer.

    A month occupies its header (title plus weekday labels), one row per
    week and a gap below it.
    """

    row_height: int = 28
    header_height: int = 48
    month_spacing: int = 0

    def month_height(self, month: MonthDescriptor) -> int:
        return self.header_height + len(month.weeks) * self.row_height + self.month_spacing


def month_index(day, model: CalendarGridModel) -> int | None:
    """Zero-based position of ``day``'s month in ``model``, or None if outside."""
    if model.is_empty:
        return None
    key = normalize(day, model.calendar).month_key()
    keys = [m.month_start.month_key() for m in model.months]
    i = bisect_left(keys, key)
    if i < len(keys) and keys[i] == key:
        return i
    return None


def clamp_index(index: int, model: CalendarGridModel) -> int | None:
    if model.is_empty:
        return None
    return max(0, min(index, len(model) - 1))


def month_offsets(model: CalendarGridModel, metrics: LayoutMetrics) -> list[int]:
    """Top offset of every month, in model order."""
    heights = [metrics.month_height(m) for m in model.months]
    return [0] + list(accumulate(heights))[:-1] if heights else []


def month_offset(index: int, model: CalendarGridModel, metrics: LayoutMetrics) -> int:
    return month_offsets(model, metrics)[index]


def content_height(model: CalendarGridModel, metrics: LayoutMetrics) -> int:
    return sum(metrics.month_height(m) for m in model.months)


def visible_month(offset: float, model: CalendarGridModel,
                  metrics: LayoutMetrics) -> MonthDescriptor | None:
    """Month whose band contains ``offset``; clamps to the first/last month."""
    if model.is_empty:
        return None
    tops = month_offsets(model, metrics)
    i = bisect_right(tops, offset) - 1
    return model.months[max(0, i)]
