"""Plotly month-grid calendar renderer.

Weeks run top to bottom, Monday first. Each moon-phase entry is a coloured
marker in its day cell; hovering shows the Hijri and Gregorian dates.
"""

import calendar

import plotly.graph_objects as go

from lunisolarhijri.calendar_view import entries_in_month
from lunisolarhijri.i18n import t
from lunisolarhijri.models import CalendarEntry, CalendarView

_BG = "#0d1b35"
_CELL_LINE = "#334466"
_DAY_COLOR = "#aaaaaa"


def cell_position(entry: CalendarEntry, year: int, month: int) -> tuple[int, int]:
    """(column, row) of the entry's day cell; row 0 is the first week."""
    if (entry.start.year, entry.start.month) != (year, month):
        raise ValueError(f"{entry.gregorian_date} is not in {year:04d}-{month:02d}")
    day = entry.start.day
    for row, week in enumerate(calendar.monthcalendar(year, month)):
        if day in week:
            return week.index(day), row
    raise ValueError(f"day {day} missing from {year:04d}-{month:02d}")


def _hover(entry: CalendarEntry, lang: str) -> str:
    lines = [f"<b>{entry.title}</b>"]
    lines.append(f"{t('gregorian_prefix', lang)}: {entry.gregorian_date}")
    if entry.eclipse:
        lines.append(entry.eclipse)
    return "<br>".join(lines)


def render_month_chart(
    view: CalendarView, year: int, month: int, lang: str = "en"
) -> go.Figure:
    """Render one Gregorian month of a CalendarView as a Plotly grid.

    Args:
        view: Assembled calendar.
        year: Gregorian year.
        month: Gregorian month (1-12).
        lang: Language code for weekday headers and hover text.

    Returns:
        Plotly Figure object.
    """
    weeks = calendar.monthcalendar(year, month)
    n_rows = len(weeks)

    shapes = []
    annotations = []
    for row, week in enumerate(weeks):
        for col, day in enumerate(week):
            shapes.append(
                dict(
                    type="rect",
                    x0=col,
                    x1=col + 1,
                    y0=-row - 1,
                    y1=-row,
                    line=dict(color=_CELL_LINE, width=1),
                    fillcolor="rgba(0,0,0,0)",
                )
            )
            if day:
                annotations.append(
                    dict(
                        x=col + 0.08,
                        y=-row - 0.1,
                        text=str(day),
                        showarrow=False,
                        xanchor="left",
                        yanchor="top",
                        font=dict(color=_DAY_COLOR, size=11),
                    )
                )

    for col, name in enumerate(t("weekdays", lang).split(",")):
        annotations.append(
            dict(
                x=col + 0.5,
                y=0.25,
                text=name,
                showarrow=False,
                font=dict(color=_DAY_COLOR, size=12),
            )
        )

    # Several entries on one day stack downwards inside the cell
    stacked: dict[tuple[int, int], int] = {}
    by_phase: dict[str, list[CalendarEntry]] = {}
    positions: dict[int, tuple[float, float]] = {}
    for entry in entries_in_month(view, year, month):
        col, row = cell_position(entry, year, month)
        slot = stacked.get((col, row), 0)
        stacked[(col, row)] = slot + 1
        positions[id(entry)] = (col + 0.2, -row - 0.45 - 0.22 * slot)
        by_phase.setdefault(entry.phase, []).append(entry)

    traces = []
    for phase, entries in by_phase.items():
        xs = [positions[id(e)][0] for e in entries]
        ys = [positions[id(e)][1] for e in entries]
        traces.append(
            go.Scatter(
                x=xs,
                y=ys,
                mode="markers+text",
                marker=dict(
                    size=12,
                    color=entries[0].background_color,
                    line=dict(width=0),
                ),
                text=[e.hijri_date if not e.label.is_pre_hijri else "" for e in entries],
                textposition="middle right",
                textfont=dict(color="#e8e8e8", size=10),
                hovertext=[_hover(e, lang) for e in entries],
                hoverinfo="text",
                name=entries[0].title.split(" - ")[0],
            )
        )

    fig = go.Figure(data=traces)
    fig.update_layout(
        title=dict(text=f"{year:04d}-{month:02d}", font=dict(color="#e8e8e8")),
        paper_bgcolor=_BG,
        plot_bgcolor=_BG,
        showlegend=bool(traces),
        legend=dict(font=dict(color="#e8e8e8"), orientation="h"),
        margin=dict(l=10, r=10, t=60, b=10),
        shapes=shapes,
        annotations=annotations,
        xaxis=dict(visible=False, range=[0, 7], fixedrange=True),
        yaxis=dict(visible=False, range=[-n_rows, 0.5], fixedrange=True),
    )
    return fig
