"""Lunisolar Hijri date estimator.

Walks a chronologically ordered stream of moon-phase events and assigns each an
approximate Hijri (year, month, day). Months alternate between 30 and 29 days,
days advance by whole days counted from the most recent full moon, and a drift
accumulator inserts a leap month once twelve-month years have fallen a full
lunar year behind the solar year.

The estimate is a heuristic. It does not follow any official Hijri authority.
"""

import dataclasses
import logging
import math
from collections.abc import Iterable
from datetime import datetime, timedelta

from pytz import utc

from lunisolarhijri.models import EstimatorState, HijriLabel, MoonPhase, MoonPhaseEvent

logger = logging.getLogger(__name__)

HIJRI_EPOCH_YEAR = 622
HIJRI_EPOCH_DATE = datetime(HIJRI_EPOCH_YEAR, 7, 16, tzinfo=utc)
SOLAR_YEAR_DAYS = 365.2422
LUNAR_YEAR_DAYS = 354.36707  # 12 nominal synodic months
MONTHS_PER_YEAR = 12

_SOLAR_TO_LUNAR = SOLAR_YEAR_DAYS / LUNAR_YEAR_DAYS
_YEARLY_DRIFT = SOLAR_YEAR_DAYS - LUNAR_YEAR_DAYS
_ONE_DAY = timedelta(days=1)


def as_utc(instant: datetime) -> datetime:
    """Naive datetimes are taken to be UTC already."""
    if instant.tzinfo is None:
        return utc.localize(instant)
    return instant.astimezone(utc)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Whole days from start to end, truncated toward zero."""
    return int((as_utc(end) - as_utc(start)) / _ONE_DAY)


def gregorian_year(instant: datetime) -> int:
    """Proleptic Gregorian year field of the UTC instant."""
    return as_utc(instant).year


def lunar_years_since_epoch(solar_years: float) -> int:
    """Convert elapsed solar years to a 1-based Hijri year number."""
    return math.floor(solar_years * _SOLAR_TO_LUNAR) + 1


class LunisolarEstimator:
    """Streaming Hijri estimator. Feed events in timestamp order via advance()."""

    def __init__(self, state: EstimatorState | None = None) -> None:
        # Copy so a caller-supplied state is never shared between estimators
        self._state = dataclasses.replace(state) if state is not None else EstimatorState()

    @property
    def state(self) -> EstimatorState:
        """Snapshot of the current counters."""
        return dataclasses.replace(self._state)

    def advance(self, event: MoonPhaseEvent) -> HijriLabel:
        """Process one event and return its label.

        Events before the epoch only produce a Pre-Hijri label while no Hijri
        year has been established; they never touch the counters.
        """
        state = self._state
        timestamp = as_utc(event.timestamp)

        if state.hijri_year is None and timestamp < HIJRI_EPOCH_DATE:
            return HijriLabel(year=None, month=state.hijri_month, day=state.hijri_day)

        if state.hijri_year is None:
            elapsed_days = (timestamp - HIJRI_EPOCH_DATE) / _ONE_DAY
            state.hijri_year = lunar_years_since_epoch(elapsed_days / SOLAR_YEAR_DAYS)
            logger.debug("Seeded Hijri year %d at %s", state.hijri_year, timestamp)

        if state.last_full_moon is not None:
            state.hijri_day += whole_days_between(state.last_full_moon, timestamp)
            self._normalize()

        # Re-anchoring the year on every full moon overrides the incremental
        # count from _normalize(). Visible year jumps are expected.
        if event.phase == MoonPhase.FULL_MOON:
            state.last_full_moon = timestamp
            state.hijri_year = lunar_years_since_epoch(
                gregorian_year(timestamp) - HIJRI_EPOCH_YEAR
            )

        return HijriLabel(
            year=state.hijri_year, month=state.hijri_month, day=state.hijri_day
        )

    def _normalize(self) -> None:
        """Carry day overflow into months and years until none remains."""
        state = self._state
        while state.hijri_day > state.month_length:
            state.hijri_day -= state.month_length
            state.hijri_month += 1
            state.is_odd_month = not state.is_odd_month

            if state.hijri_month > MONTHS_PER_YEAR:
                state.hijri_month = 1
                assert state.hijri_year is not None
                state.hijri_year += 1
                state.accumulated_drift += _YEARLY_DRIFT
                if state.accumulated_drift >= LUNAR_YEAR_DAYS:
                    state.hijri_month += 1
                    state.accumulated_drift -= LUNAR_YEAR_DAYS
                    logger.debug("Inserted leap month in Hijri year %d", state.hijri_year)

    def process(self, events: Iterable[MoonPhaseEvent]) -> list[HijriLabel]:
        """Advance through every event, returning one label per event in order."""
        return [self.advance(event) for event in events]


def process(events: Iterable[MoonPhaseEvent]) -> list[HijriLabel]:
    """Label an ordered event sequence with a freshly constructed estimator."""
    return LunisolarEstimator().process(events)
