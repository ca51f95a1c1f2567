"""Render the calendar grid model to a PIL Image (headless renderer)."""

from __future__ import annotations

from datetime import date

from PIL import Image, ImageDraw, ImageFont

from calendar_logic import CalendarGridModel, MonthDescriptor
from calendar_system import CalendarDay, CalendarSystem, normalize
from scroll import LayoutMetrics, content_height
from theme import GRID_BG, HEADER_BG, TEXT_FG, WEEKEND_FG, day_colors

WIDTH = 7 * 36


def _load_font(size: int) -> ImageFont.ImageFont:
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size)
    except OSError:
        return ImageFont.load_default()


def _centered_text(draw: ImageDraw.ImageDraw, box: tuple[float, float, float, float],
                   text: str, fill: str, font) -> None:
    # Centre the visible pixels, compensating for font metric offsets
    bbox = draw.textbbox((0, 0), text, font=font)
    x = box[0] + (box[2] - box[0] - (bbox[2] - bbox[0])) / 2 - bbox[0]
    y = box[1] + (box[3] - box[1] - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((x, y), text, fill=fill, font=font)


def _draw_month(draw: ImageDraw.ImageDraw, top: int, month: MonthDescriptor,
                calendar: CalendarSystem, metrics: LayoutMetrics,
                today: CalendarDay | None, width: int) -> None:
    cell_w = width / 7
    title_h = metrics.header_height // 2
    font = _load_font(max(8, metrics.row_height // 2))

    draw.rectangle((0, top, width - 1, top + title_h - 1), fill=HEADER_BG)
    start = month.month_start
    _centered_text(draw, (0, top, width, top + title_h),
                   f"{calendar.month_name(start.month)} {start.year}", TEXT_FG, font)

    for col, abbr in enumerate(calendar.weekday_abbrs()):
        weekday = (calendar.first_weekday + col) % 7
        fg = WEEKEND_FG if weekday in calendar.weekend_days else TEXT_FG
        _centered_text(draw, (col * cell_w, top + title_h,
                              (col + 1) * cell_w, top + metrics.header_height),
                       abbr, fg, font)

    for r, week in enumerate(month.weeks):
        y0 = top + metrics.header_height + r * metrics.row_height
        for c, cell in enumerate(week):
            if cell.date is None:
                continue
            is_weekend = calendar.weekday(cell.date) in calendar.weekend_days
            bg, fg = day_colors(cell, cell.date == today, is_weekend)
            box = (c * cell_w, y0, (c + 1) * cell_w, y0 + metrics.row_height)
            draw.rectangle((box[0], box[1], box[2] - 1, box[3] - 1), fill=bg)
            _centered_text(draw, box, str(cell.date.day), fg, font)


def render_month(month: MonthDescriptor, calendar: CalendarSystem,
                 metrics: LayoutMetrics | None = None, today=None,
                 width: int = WIDTH) -> Image.Image:
    """Return an RGB image of a single month."""
    metrics = metrics or LayoutMetrics()
    img = Image.new("RGB", (width, metrics.month_height(month)), GRID_BG)
    today_day = normalize(today, calendar) if today is not None else None
    _draw_month(ImageDraw.Draw(img), 0, month, calendar, metrics, today_day, width)
    return img


def render_model(model: CalendarGridModel, metrics: LayoutMetrics | None = None,
                 today=None, width: int = WIDTH) -> Image.Image:
    """Stack every month vertically; y offsets match ``scroll`` offsets."""
    metrics = metrics or LayoutMetrics()
    img = Image.new("RGB", (width, max(1, content_height(model, metrics))), GRID_BG)
    draw = ImageDraw.Draw(img)
    today_day = normalize(today, model.calendar) if today is not None else None
    top = 0
    for month in model:
        _draw_month(draw, top, month, model.calendar, metrics, today_day, width)
        top += metrics.month_height(month)
    return img


class SnapshotRenderer:
    """Renderer that keeps the latest image instead of drawing on screen."""

    def __init__(self, metrics: LayoutMetrics | None = None, width: int = WIDTH,
                 today: date | None = None) -> None:
        self.metrics = metrics or LayoutMetrics()
        self.width = width
        self.today = today
        self.image: Image.Image | None = None
        self.offset = 0
        self.reloads = 0

    def reload(self, model: CalendarGridModel) -> None:
        self.image = render_model(model, self.metrics, self.today, self.width)
        self.reloads += 1

    def scroll_to(self, offset: int, animated: bool) -> None:
        self.offset = offset

    def visible_region(self, height: int) -> Image.Image | None:
        """Crop of the current image as seen through a viewport of ``height``."""
        if self.image is None:
            return None
        return self.image.crop((0, self.offset, self.width, self.offset + height))
