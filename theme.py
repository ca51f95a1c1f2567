"""Colours and per-cell styling shared by the tkinter and Pillow renderers."""

from calendar_logic import DayCell

# Colours
ACCENT = "#0078D4"
SEL_BG = "#B3D7F2"
HEADER_BG = "#F3F3F3"
GRID_BG = "white"
WN_FG = "#888888"
DISABLED_FG = "#BBBBBB"
WEEKEND_FG = "#CC0000"
TEXT_FG = "#333333"


def day_colors(cell: DayCell, is_today: bool = False,
               is_weekend: bool = False) -> tuple[str, str]:
    """Return (background, foreground) for a day cell."""
    if cell.date is None:
        return GRID_BG, GRID_BG
    if cell.is_selected:
        return SEL_BG, "black"
    if not cell.is_selectable:
        return GRID_BG, DISABLED_FG
    if is_today:
        return ACCENT, "white"
    if is_weekend:
        return GRID_BG, WEEKEND_FG
    return GRID_BG, "black"
