"""JSON-based settings persistence for the scrolling calendar."""

import json
import os
from datetime import date

from calendar_system import CalendarSystem, calendar_by_name, normalize
from scroll import LayoutMetrics
from selection import SelectionMode

_SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".scrolling-calendar-settings.json")

_DEFAULTS = {
    "calendar": "gregorian",
    "first_weekday": None,
    "selection_mode": "single",
    "months_before": 1,
    "months_after": 12,
    "first_selectable": None,
    "row_height": 28,
    "header_height": 48,
    "log_level": "WARNING",
}

_INT_KEYS = ("months_before", "months_after", "row_height", "header_height")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_settings(path: str | None = None) -> dict:
    """Load settings from disk, returning defaults for missing keys."""
    settings = dict(_DEFAULTS)
    try:
        with open(path or _SETTINGS_PATH, "r", encoding="utf-8") as f:
            stored = json.load(f)
        if not isinstance(stored, dict):
            return settings
        if stored.get("calendar") in ("gregorian", "persian"):
            settings["calendar"] = stored["calendar"]
        if stored.get("selection_mode") in ("single", "multiple"):
            settings["selection_mode"] = stored["selection_mode"]
        fw = stored.get("first_weekday")
        if isinstance(fw, int) and not isinstance(fw, bool) and 0 <= fw <= 6:
            settings["first_weekday"] = fw
        for key in _INT_KEYS:
            value = stored.get(key)
            if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
                settings[key] = value
        if isinstance(stored.get("first_selectable"), str):
            try:
                date.fromisoformat(stored["first_selectable"])
            except ValueError:
                pass
            else:
                settings["first_selectable"] = stored["first_selectable"]
        level = stored.get("log_level")
        if isinstance(level, str) and level.upper() in _LOG_LEVELS:
            settings["log_level"] = level.upper()
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        pass
    return settings


def save_settings(settings: dict, path: str | None = None) -> None:
    """Persist settings to disk."""
    with open(path or _SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)


# ------------------------------------------------------------------
# Derived configuration
# ------------------------------------------------------------------
def calendar_from_settings(settings: dict) -> CalendarSystem:
    return calendar_by_name(settings["calendar"], settings["first_weekday"])


def selection_mode_from_settings(settings: dict) -> SelectionMode:
    return SelectionMode(settings["selection_mode"])


def layout_from_settings(settings: dict) -> LayoutMetrics:
    return LayoutMetrics(row_height=settings["row_height"],
                         header_height=settings["header_height"])


def date_range_from_settings(settings: dict, today: date):
    """Return (first, last) CalendarDays around ``today``'s month."""
    calendar = calendar_from_settings(settings)
    current = normalize(today, calendar).month_start()
    first = current
    for _ in range(settings["months_before"]):
        first = calendar.prev_month(first)
    last = current
    for _ in range(settings["months_after"]):
        last = calendar.next_month(last)
    return first, last


def first_selectable_from_settings(settings: dict):
    """Return the configured first selectable date, or None."""
    value = settings["first_selectable"]
    return date.fromisoformat(value) if value else None
