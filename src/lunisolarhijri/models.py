"""Data model definitions — explicit boundaries between source, estimator, and render layers."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class MoonPhase(str, Enum):
    """The four principal lunar phases. Values are the phase table labels."""

    NEW_MOON = "New Moon"
    FIRST_QUARTER = "First Quarter"
    FULL_MOON = "Full Moon"
    LAST_QUARTER = "Last Quarter"

    @classmethod
    def parse(cls, label: str) -> "MoonPhase | str":
        """Return the matching MoonPhase, or the stripped label itself if unknown."""
        label = label.strip()
        try:
            return cls(label)
        except ValueError:
            return label


@dataclass(frozen=True)
class MoonPhaseEvent:
    """One row of astronomical data. Input to the estimator."""

    timestamp: datetime  # UTC datetime (with tzinfo=utc)
    phase: MoonPhase | str  # Unknown table labels are kept verbatim
    eclipse: str | None = None  # Eclipse note from the table, if any


@dataclass
class EstimatorState:
    """Mutable counters owned by a single LunisolarEstimator."""

    hijri_year: int | None = None  # None until the first event at/after the epoch
    hijri_month: int = 1  # 1..12
    hijri_day: int = 1  # 1..nominal month length
    is_odd_month: bool = True  # Odd month → 30 days, even → 29
    accumulated_drift: float = 0.0  # Solar-minus-lunar excess, in days
    last_full_moon: datetime | None = None  # Day-count anchor

    @property
    def month_length(self) -> int:
        return 30 if self.is_odd_month else 29


@dataclass(frozen=True)
class HijriLabel:
    """Estimated Hijri date for one event."""

    year: int | None  # None → Pre-Hijri
    month: int
    day: int

    @property
    def is_pre_hijri(self) -> bool:
        return self.year is None


@dataclass(frozen=True)
class CalendarEntry:
    """A single calendar cell entry. The sole unit renderers consume."""

    title: str  # "Full Moon - Hijri: 1445 Ramadan 14"
    start: datetime  # Original UTC timestamp
    hijri_date: str  # Formatted Hijri date or "Pre-Hijri"
    gregorian_date: str  # "YYYY-MM-DD"
    phase: str  # Phase table label
    background_color: str
    text_color: str
    label: HijriLabel
    eclipse: str | None = None
    all_day: bool = True


@dataclass(frozen=True)
class CalendarView:
    """Fully assembled calendar. Input to renderers."""

    entries: tuple[CalendarEntry, ...]
    earliest: datetime | None  # Initial date for the calendar view
