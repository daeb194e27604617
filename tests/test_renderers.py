from datetime import datetime

import pytest
from pytz import utc

from lunisolarhijri.calendar_view import build_calendar
from lunisolarhijri.models import MoonPhase, MoonPhaseEvent
from lunisolarhijri.renderers.plotly_calendar import cell_position, render_month_chart
from lunisolarhijri.renderers.static import _mpl_color, save_static_month

MARCH_2024 = [
    MoonPhaseEvent(datetime(2024, 3, 3, 15, 23, tzinfo=utc), MoonPhase.LAST_QUARTER),
    MoonPhaseEvent(datetime(2024, 3, 10, 9, 0, tzinfo=utc), MoonPhase.NEW_MOON),
    MoonPhaseEvent(datetime(2024, 3, 17, 4, 10, tzinfo=utc), MoonPhase.FIRST_QUARTER),
    MoonPhaseEvent(datetime(2024, 3, 25, 7, 0, tzinfo=utc), MoonPhase.FULL_MOON, "Penumbral Lunar Eclipse"),
]


@pytest.fixture
def march_view():
    return build_calendar(MARCH_2024)


def test_cell_position(march_view):
    full_moon = march_view.entries[-1]
    assert cell_position(full_moon, 2024, 3) == (0, 4)
    with pytest.raises(ValueError):
        cell_position(full_moon, 2024, 4)


def test_render_month_chart(march_view):
    fig = render_month_chart(march_view, 2024, 3)
    assert len(fig.data) == 4
    assert len(fig.layout.shapes) == 5 * 7
    names = {trace.name for trace in fig.data}
    assert names == {"Last Quarter", "New Moon", "First Quarter", "Full Moon"}
    full = next(trace for trace in fig.data if trace.name == "Full Moon")
    assert "Penumbral Lunar Eclipse" in full.hovertext[0]


def test_render_empty_month(march_view):
    fig = render_month_chart(march_view, 2024, 4)
    assert len(fig.data) == 0
    assert fig.layout.showlegend is False


def test_save_static_month(tmp_path, march_view):
    out = save_static_month(march_view, 2024, 3, output_path=tmp_path / "march.png")
    assert out.exists()
    assert out.stat().st_size > 0


def test_mpl_color():
    assert _mpl_color("rgb(0, 231, 255)") == (0.0, 231 / 255, 1.0)
    assert _mpl_color("#FFFF00") == "#FFFF00"
