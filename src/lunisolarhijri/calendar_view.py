"""Calendar assembly. Pairs each event with its Hijri label as a display entry."""

from collections.abc import Iterable
from datetime import datetime

from lunisolarhijri.estimator import LunisolarEstimator
from lunisolarhijri.i18n import hijri_month_name, phase_name, t
from lunisolarhijri.models import (
    CalendarEntry,
    CalendarView,
    HijriLabel,
    MoonPhase,
    MoonPhaseEvent,
)

PHASE_COLORS: dict[str, str] = {
    MoonPhase.NEW_MOON.value: "rgb(0, 231, 255)",
    MoonPhase.FIRST_QUARTER.value: "#66CCFF",
    MoonPhase.FULL_MOON.value: "#FFFF00",
    MoonPhase.LAST_QUARTER.value: "#FF9933",
}
UNKNOWN_PHASE_COLOR = "gray"

# Light backgrounds get dark text
_DARK_TEXT_PHASES = {MoonPhase.NEW_MOON.value, MoonPhase.FULL_MOON.value}


def _phase_label(event: MoonPhaseEvent) -> str:
    phase = event.phase
    return phase.value if isinstance(phase, MoonPhase) else str(phase)


def _iso_date(instant: datetime) -> str:
    # strftime("%Y") does not zero-pad years before 1000 on every platform
    return f"{instant.year:04d}-{instant.month:02d}-{instant.day:02d}"


def format_hijri_date(label: HijriLabel, lang: str = "en") -> str:
    """Render a label as "<year> <month name> <day>", or the Pre-Hijri marker."""
    if label.is_pre_hijri:
        return t("pre_hijri", lang)
    return f"{label.year} {hijri_month_name(label.month, lang)} {label.day}"


def make_entry(event: MoonPhaseEvent, label: HijriLabel, lang: str = "en") -> CalendarEntry:
    """Build the display entry for one labelled event."""
    phase = _phase_label(event)
    hijri_date = format_hijri_date(label, lang)
    shown_phase = phase_name(phase, lang)
    title = (
        shown_phase
        if label.is_pre_hijri
        else f"{shown_phase} - {t('hijri_prefix', lang)}: {hijri_date}"
    )
    return CalendarEntry(
        title=title,
        start=event.timestamp,
        hijri_date=hijri_date,
        gregorian_date=_iso_date(event.timestamp),
        phase=phase,
        background_color=PHASE_COLORS.get(phase, UNKNOWN_PHASE_COLOR),
        text_color="black" if phase in _DARK_TEXT_PHASES else "white",
        label=label,
        eclipse=event.eclipse,
    )


def build_calendar(events: Iterable[MoonPhaseEvent], lang: str = "en") -> CalendarView:
    """Label every event with a fresh estimator and assemble the calendar view.

    Args:
        events: Moon-phase events in timestamp order.
        lang: Language code ('en' or 'ar') for titles and month names.

    Returns:
        CalendarView with one entry per event and the earliest timestamp seen.
    """
    estimator = LunisolarEstimator()
    entries: list[CalendarEntry] = []
    earliest: datetime | None = None
    for event in events:
        label = estimator.advance(event)
        entries.append(make_entry(event, label, lang))
        if earliest is None or event.timestamp < earliest:
            earliest = event.timestamp
    return CalendarView(entries=tuple(entries), earliest=earliest)


def entries_in_month(view: CalendarView, year: int, month: int) -> tuple[CalendarEntry, ...]:
    """Entries whose Gregorian (UTC) date falls in the given month."""
    return tuple(
        e for e in view.entries if e.start.year == year and e.start.month == month
    )
