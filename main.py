"""Entry point: opens the scrolling calendar window from saved settings."""

import logging
from datetime import date

from calendar_window import CalendarWindow
from settings import (
    calendar_from_settings,
    date_range_from_settings,
    first_selectable_from_settings,
    layout_from_settings,
    load_settings,
    selection_mode_from_settings,
)


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings["log_level"], logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    today = date.today()
    first, last = date_range_from_settings(settings, today)
    cal_win = CalendarWindow(
        first, last,
        calendar=calendar_from_settings(settings),
        selection_mode=selection_mode_from_settings(settings),
        first_selectable_date=first_selectable_from_settings(settings),
        layout=layout_from_settings(settings),
    )
    cal_win.view.scroll_to_date(today)

    cal_win.root.mainloop()


if __name__ == "__main__":
    main()
