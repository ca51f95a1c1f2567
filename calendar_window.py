"""Scrolling month calendar window (tkinter) driven by ``CalendarView``."""

from datetime import date
from tkinter import font as tkfont
import tkinter as tk

from calendar_logic import CalendarGridModel
from calendar_system import CalendarSystem, normalize
from calendar_view import CalendarView
from scroll import LayoutMetrics, content_height, month_offsets
from selection import SelectionMode
from theme import ACCENT, GRID_BG, HEADER_BG, TEXT_FG, WEEKEND_FG, day_colors

WINDOW_WIDTH = 7 * 40
VIEWPORT_HEIGHT = 420
ANIMATION_STEPS = 8


class CalendarWindow:
    """A vertically scrolling list of months, one canvas for all of them."""

    def __init__(self, first_date, last_date, *,
                 calendar: CalendarSystem | None = None,
                 selection_mode: SelectionMode = SelectionMode.SINGLE,
                 first_selectable_date=None,
                 layout: LayoutMetrics | None = None,
                 should_select=None) -> None:
        self.root = tk.Tk()
        self.root.title("Calendar")
        self.root.configure(bg=GRID_BG)
        self._setup_fonts()

        self._model: CalendarGridModel | None = None
        self._offsets: list[int] = []
        self._total_height = 0
        self._anim_after_id: str | None = None

        self._build_shell()

        self.view = CalendarView(
            first_date, last_date,
            calendar=calendar,
            selection_mode=selection_mode,
            first_selectable_date=first_selectable_date,
            should_select=should_select,
            layout=layout,
        )
        self.view.renderer = self
        self.reload(self.view.model)

        self.root.bind("<Escape>", self._on_escape)

    # ------------------------------------------------------------------
    # Fonts
    # ------------------------------------------------------------------
    def _setup_fonts(self) -> None:
        families = tkfont.families(self.root)
        base = "Segoe UI" if "Segoe UI" in families else "TkDefaultFont"
        self.font_normal = tkfont.Font(family=base, size=9)
        self.font_bold = tkfont.Font(family=base, size=9, weight="bold")
        self.font_header = tkfont.Font(family=base, size=10, weight="bold")
        self.font_nav = tkfont.Font(family=base, size=12, weight="bold")

    # ------------------------------------------------------------------
    # Build shell (once): nav bar, scrolling canvas, footer
    # ------------------------------------------------------------------
    def _build_shell(self) -> None:
        outer = tk.Frame(self.root, bg=GRID_BG)
        outer.pack(fill="both", expand=True, padx=6, pady=4)

        # Navigation row: ◀  Today  ▶
        nav = tk.Frame(outer, bg=GRID_BG)
        nav.pack(fill="x", pady=(0, 2))

        btn_prev = tk.Label(
            nav, text="◀", font=self.font_nav, bg=GRID_BG, cursor="hand2"
        )
        btn_prev.pack(side="left", padx=6)
        btn_prev.bind("<Button-1>", lambda _e: self._navigate(-1))

        btn_next = tk.Label(
            nav, text="▶", font=self.font_nav, bg=GRID_BG, cursor="hand2"
        )
        btn_next.pack(side="right", padx=6)
        btn_next.bind("<Button-1>", lambda _e: self._navigate(1))

        btn_today = tk.Label(
            nav, text="Today", font=self.font_bold, bg=GRID_BG, fg=ACCENT,
            cursor="hand2",
        )
        btn_today.pack(side="top")
        btn_today.bind("<Button-1>", lambda _e: self._go_today())

        body = tk.Frame(outer, bg=GRID_BG)
        body.pack(fill="both", expand=True)
        self.canvas = tk.Canvas(
            body, width=WINDOW_WIDTH, height=VIEWPORT_HEIGHT,
            bg=GRID_BG, highlightthickness=0, borderwidth=0,
        )
        scrollbar = tk.Scrollbar(body, orient="vertical", command=self.canvas.yview)
        self.canvas.configure(yscrollcommand=scrollbar.set)
        self.canvas.pack(side="left", fill="both", expand=True)
        scrollbar.pack(side="right", fill="y")
        self.canvas.bind("<ButtonPress-1>", self._on_press)
        self.canvas.bind("<MouseWheel>", self._on_wheel)

        self._footer_label = tk.Label(
            outer, text="", font=self.font_normal, bg=GRID_BG, fg="#555555",
        )
        self._footer_label.pack(pady=(4, 0))

    # ------------------------------------------------------------------
    # Renderer interface
    # ------------------------------------------------------------------
    def reload(self, model: CalendarGridModel) -> None:
        """Redraw every month from the model."""
        self._model = model
        layout = self.view.layout
        self._offsets = month_offsets(model, layout)
        self._total_height = content_height(model, layout)

        self.canvas.delete("all")
        today = normalize(date.today(), model.calendar)
        for month, top in zip(model, self._offsets):
            self._draw_month(month, top, layout, today)
        self.canvas.configure(scrollregion=(0, 0, WINDOW_WIDTH, max(1, self._total_height)))
        self._footer_label.configure(text=self._footer_text())

    def scroll_to(self, offset: int, animated: bool) -> None:
        if self._total_height <= 0:
            return
        target = offset / self._total_height
        if self._anim_after_id is not None:
            self.root.after_cancel(self._anim_after_id)
            self._anim_after_id = None
        if not animated:
            self.canvas.yview_moveto(target)
            return
        start = self.canvas.yview()[0]
        self._animate(start, target, 1)

    def _animate(self, start: float, target: float, step: int) -> None:
        frac = start + (target - start) * step / ANIMATION_STEPS
        self.canvas.yview_moveto(frac)
        if step < ANIMATION_STEPS:
            self._anim_after_id = self.root.after(
                15, self._animate, start, target, step + 1)
        else:
            self._anim_after_id = None

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def _draw_month(self, month, top: int, layout: LayoutMetrics, today) -> None:
        calendar = self._model.calendar
        cell_w = WINDOW_WIDTH / 7
        title_h = layout.header_height // 2
        start = month.month_start

        self.canvas.create_rectangle(
            0, top, WINDOW_WIDTH, top + title_h, fill=HEADER_BG, outline="")
        self.canvas.create_text(
            WINDOW_WIDTH // 2, top + title_h // 2,
            text=f"{calendar.month_name(start.month)} {start.year}",
            fill=TEXT_FG, font=self.font_header,
        )
        for col, abbr in enumerate(calendar.weekday_abbrs()):
            weekday = (calendar.first_weekday + col) % 7
            fg = WEEKEND_FG if weekday in calendar.weekend_days else TEXT_FG
            self.canvas.create_text(
                (col + 0.5) * cell_w, top + title_h + (layout.header_height - title_h) // 2,
                text=abbr, fill=fg, font=self.font_bold,
            )

        for r, week in enumerate(month.weeks):
            y0 = top + layout.header_height + r * layout.row_height
            for c, cell in enumerate(week):
                if cell.date is None:
                    continue
                is_today = cell.date == today
                is_weekend = calendar.weekday(cell.date) in calendar.weekend_days
                bg, fg = day_colors(cell, is_today, is_weekend)
                self.canvas.create_rectangle(
                    c * cell_w, y0, (c + 1) * cell_w, y0 + layout.row_height,
                    fill=bg, outline="",
                )
                self.canvas.create_text(
                    (c + 0.5) * cell_w, y0 + layout.row_height // 2,
                    text=str(cell.date.day), fill=fg,
                    font=self.font_bold if is_today else self.font_normal,
                )

    # ------------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------------
    def cell_at(self, x: float, y: float):
        """Return the DayCell under canvas coordinates, or None."""
        if self._model is None or self._model.is_empty:
            return None
        layout = self.view.layout
        month = self.view.visible_month(y)
        top = self._offsets[self._model.months.index(month)]
        row = int((y - top - layout.header_height) // layout.row_height)
        col = int(x // (WINDOW_WIDTH / 7))
        if y - top < layout.header_height or not 0 <= row < len(month.weeks):
            return None
        if not 0 <= col < 7:
            return None
        return month.weeks[row][col]

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def _on_press(self, event: tk.Event) -> None:
        cell = self.cell_at(self.canvas.canvasx(event.x), self.canvas.canvasy(event.y))
        if cell is None or cell.date is None:
            return
        if cell.is_selected and self.view.selection_mode is SelectionMode.MULTIPLE:
            self.view.deselect(cell.date)
        else:
            self.view.select(cell.date)

    def _on_wheel(self, event: tk.Event) -> None:
        self.canvas.yview_scroll(-1 if event.delta > 0 else 1, "units")

    def _on_escape(self, _event: tk.Event) -> None:
        self.view.clear_selection()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def _top_month_index(self) -> int | None:
        if self._model is None or self._model.is_empty:
            return None
        offset = self.canvas.yview()[0] * self._total_height
        return self._model.months.index(self.view.visible_month(offset))

    def _navigate(self, direction: int) -> None:
        index = self._top_month_index()
        if index is None:
            return
        index = max(0, min(index + direction, len(self._model) - 1))
        self.view.scroll_to_date(self._model[index].month_start, animated=True)

    def _go_today(self) -> None:
        self.view.scroll_to_date(date.today(), animated=True)

    # ------------------------------------------------------------------
    # Footer text
    # ------------------------------------------------------------------
    def _footer_text(self) -> str:
        today_str = f"Today: {date.today().strftime('%d.%m.%Y')}"
        if self.view.selection_mode is SelectionMode.SINGLE:
            day = self.view.selected_date
            if day is None:
                return today_str
            return f"Selected: {day}     {today_str}"
        days = self.view.selected_dates
        if not days:
            return today_str
        return f"{len(days)} day{'s' if len(days) != 1 else ''} selected     {today_str}"
