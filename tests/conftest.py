import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest  # noqa: E402

PHASE_CSV = """phase,datetime,eclipse
New Moon,0600-01-01 00:00:00,
Full Moon,622-07-16 00:00:00,
Last Quarter,0622-07-23 10:15:00,
New Moon,0622-07-30 18:40:00,Annular Solar Eclipse
First Quarter,0622-08-07 02:02:00,
Full Moon,0622-08-15 00:00:00,Partial Lunar Eclipse
"""


@pytest.fixture
def phase_csv() -> str:
    return PHASE_CSV


@pytest.fixture
def phase_csv_path(tmp_path, phase_csv):
    path = tmp_path / "phases.csv"
    path.write_text(phase_csv, encoding="utf-8")
    return path
