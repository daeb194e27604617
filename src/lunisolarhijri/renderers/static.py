"""Matplotlib static PNG renderer."""

import calendar
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

from lunisolarhijri.calendar_view import entries_in_month
from lunisolarhijri.i18n import t
from lunisolarhijri.models import CalendarView
from lunisolarhijri.renderers.plotly_calendar import cell_position

_ROOT = Path(__file__).parent.parent.parent.parent


def render_static_month(
    view: CalendarView, year: int, month: int, lang: str = "en", chart_size: int = 10
) -> Figure:
    """Render one Gregorian month of a CalendarView as a static matplotlib image.

    Args:
        view: Assembled calendar.
        year: Gregorian year.
        month: Gregorian month (1-12).
        lang: Language code for weekday headers.
        chart_size: Output image width in inches.

    Returns:
        matplotlib Figure object.
    """
    weeks = np.array(calendar.monthcalendar(year, month))
    n_rows = weeks.shape[0]

    fig, ax = plt.subplots(figsize=(chart_size, chart_size * (n_rows + 1) / 8))
    fig.patch.set_facecolor("black")
    ax.set_facecolor("black")

    for (row, col), day in np.ndenumerate(weeks):
        ax.add_patch(
            Rectangle((col, -row - 1), 1, 1, fill=False, edgecolor="#334466", linewidth=0.8)
        )
        if day:
            ax.text(col + 0.06, -row - 0.1, str(day), color="#aaaaaa", fontsize=9, va="top")

    for col, name in enumerate(t("weekdays", lang).split(",")):
        ax.text(col + 0.5, 0.2, name, color="#aaaaaa", fontsize=10, ha="center")

    stacked: dict[tuple[int, int], int] = {}
    for entry in entries_in_month(view, year, month):
        col, row = cell_position(entry, year, month)
        slot = stacked.get((col, row), 0)
        stacked[(col, row)] = slot + 1
        y = -row - 0.45 - 0.22 * slot
        ax.scatter([col + 0.12], [y], s=40, color=_mpl_color(entry.background_color), zorder=2)
        if not entry.label.is_pre_hijri:
            ax.text(col + 0.2, y, entry.hijri_date, color="white", fontsize=6, va="center")

    ax.set_xlim(0, 7)
    ax.set_ylim(-n_rows, 0.6)
    ax.set_title(f"{year:04d}-{month:02d}", color="white")
    ax.axis("off")

    return fig


def _mpl_color(css: str) -> str | tuple[float, float, float]:
    """Translate "rgb(r, g, b)" CSS colours, which matplotlib does not accept."""
    if css.startswith("rgb("):
        r, g, b = (int(v) / 255 for v in css[4:-1].split(","))
        return (r, g, b)
    return css


def save_static_month(
    view: CalendarView,
    year: int,
    month: int,
    output_path: Path | None = None,
    lang: str = "en",
) -> Path:
    """Save one month of a CalendarView as a PNG file.

    Args:
        view: Assembled calendar.
        year: Gregorian year.
        month: Gregorian month (1-12).
        output_path: Destination path. Auto-generated under results/ if None.
        lang: Language code for weekday headers.

    Returns:
        Path to the saved file.
    """
    if output_path is None:
        output_path = _ROOT / "results" / f"{year:04d}_{month:02d}.png"

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = render_static_month(view, year, month, lang=lang)
    fig.savefig(output_path, facecolor="black")
    plt.close(fig)
    return output_path
