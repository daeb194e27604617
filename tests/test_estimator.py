from datetime import datetime, timedelta
from itertools import cycle

import pytest
from pytz import utc

from lunisolarhijri.estimator import (
    HIJRI_EPOCH_DATE,
    LUNAR_YEAR_DAYS,
    SOLAR_YEAR_DAYS,
    LunisolarEstimator,
    gregorian_year,
    lunar_years_since_epoch,
    process,
    whole_days_between,
)
from lunisolarhijri.models import EstimatorState, HijriLabel, MoonPhase, MoonPhaseEvent

SYNODIC_QUARTER = timedelta(days=29.530588 / 4)
PHASE_ORDER = (
    MoonPhase.NEW_MOON,
    MoonPhase.FIRST_QUARTER,
    MoonPhase.FULL_MOON,
    MoonPhase.LAST_QUARTER,
)


def _event(when: datetime, phase=MoonPhase.NEW_MOON) -> MoonPhaseEvent:
    return MoonPhaseEvent(timestamp=when, phase=phase)


def _synthetic_events(start: datetime, count: int) -> list[MoonPhaseEvent]:
    phases = cycle(PHASE_ORDER)
    return [_event(start + SYNODIC_QUARTER * i, next(phases)) for i in range(count)]


def test_empty_input_yields_empty_output():
    assert process([]) == []


def test_pre_epoch_event_is_pre_hijri():
    estimator = LunisolarEstimator()
    label = estimator.advance(_event(datetime(600, 1, 1, tzinfo=utc)))
    assert label.is_pre_hijri
    assert label.year is None
    assert estimator.state == EstimatorState()


def test_full_moon_at_epoch_seeds_first_day():
    estimator = LunisolarEstimator()
    label = estimator.advance(_event(HIJRI_EPOCH_DATE, MoonPhase.FULL_MOON))
    assert label == HijriLabel(year=1, month=1, day=1)
    assert not label.is_pre_hijri
    assert estimator.state.last_full_moon == HIJRI_EPOCH_DATE


def test_thirty_days_between_full_moons_rolls_odd_month():
    estimator = LunisolarEstimator()
    estimator.advance(_event(HIJRI_EPOCH_DATE, MoonPhase.FULL_MOON))
    label = estimator.advance(_event(HIJRI_EPOCH_DATE + timedelta(days=30), MoonPhase.FULL_MOON))
    assert (label.month, label.day) == (2, 1)
    assert estimator.state.is_odd_month is False


def test_twelve_rollovers_advance_year_without_leap_month():
    anchor = datetime(700, 1, 1, tzinfo=utc)
    state = EstimatorState(hijri_year=10, last_full_moon=anchor)
    estimator = LunisolarEstimator(state)
    label = estimator.advance(_event(anchor + timedelta(days=354)))
    assert label == HijriLabel(year=11, month=1, day=1)
    assert estimator.state.accumulated_drift == pytest.approx(SOLAR_YEAR_DAYS - LUNAR_YEAR_DAYS)


def test_drift_crossing_inserts_leap_month():
    anchor = datetime(700, 1, 1, tzinfo=utc)
    state = EstimatorState(
        hijri_year=10,
        hijri_month=12,
        is_odd_month=False,
        accumulated_drift=350.0,
        last_full_moon=anchor,
    )
    estimator = LunisolarEstimator(state)
    label = estimator.advance(_event(anchor + timedelta(days=29)))
    assert label == HijriLabel(year=11, month=2, day=1)
    expected = 350.0 + (SOLAR_YEAR_DAYS - LUNAR_YEAR_DAYS) - LUNAR_YEAR_DAYS
    assert estimator.state.accumulated_drift == pytest.approx(expected)


def test_unknown_phase_does_not_anchor():
    estimator = LunisolarEstimator()
    estimator.advance(_event(HIJRI_EPOCH_DATE, "Blue Moon"))
    label = estimator.advance(_event(HIJRI_EPOCH_DATE + timedelta(days=3), "Blue Moon"))
    assert estimator.state.last_full_moon is None
    assert (label.year, label.month, label.day) == (1, 1, 1)


def test_labels_match_input_length_and_bounds():
    events = _synthetic_events(datetime(620, 1, 3, 5, 0, tzinfo=utc), 4 * 12 * 40)
    estimator = LunisolarEstimator()
    labels = []
    for event in events:
        label = estimator.advance(event)
        labels.append(label)
        if not label.is_pre_hijri:
            assert 1 <= label.month <= 12
            assert 1 <= label.day <= estimator.state.month_length
    assert len(labels) == len(events)
    assert labels == process(events)


def test_pre_epoch_prefix_leaves_counters_untouched():
    events = _synthetic_events(datetime(621, 1, 1, tzinfo=utc), 40)
    estimator = LunisolarEstimator()
    for event in events:
        if event.timestamp >= HIJRI_EPOCH_DATE:
            break
        assert estimator.advance(event).is_pre_hijri
        assert estimator.state == EstimatorState()


def test_year_never_decreases_across_full_moons():
    # Only the year is monotonic. Re-anchoring the year at each full moon can
    # undo a month-12 rollover, so (year, month) may wrap back to month 1 with
    # the same year.
    events = _synthetic_events(datetime(622, 8, 1, tzinfo=utc), 4 * 12 * 60)
    labels = process(events)
    years = [
        label.year
        for event, label in zip(events, labels)
        if event.phase == MoonPhase.FULL_MOON
    ]
    assert years == sorted(years)
    assert years[0] == 1


def test_fresh_estimators_are_deterministic():
    events = _synthetic_events(datetime(1990, 1, 1, tzinfo=utc), 200)
    assert process(events) == process(events)


def test_seed_after_epoch_uses_elapsed_solar_years():
    when = HIJRI_EPOCH_DATE + timedelta(days=SOLAR_YEAR_DAYS * 100)
    label = LunisolarEstimator().advance(_event(when))
    assert label.year == 104


def test_whole_days_truncates_and_accepts_naive():
    start = datetime(2024, 1, 1, 12, 0, tzinfo=utc)
    assert whole_days_between(start, start + timedelta(days=1, hours=23)) == 1
    assert whole_days_between(datetime(2024, 1, 1), datetime(2024, 1, 3)) == 2


def test_gregorian_year_and_lunar_years():
    assert gregorian_year(datetime(1999, 12, 31, 23, 59)) == 1999
    assert lunar_years_since_epoch(0) == 1
    assert lunar_years_since_epoch(100) == 104


def test_seed_state_is_copied_per_estimator():
    shared = EstimatorState()
    first = LunisolarEstimator(shared)
    second = LunisolarEstimator(shared)
    first.advance(_event(HIJRI_EPOCH_DATE, MoonPhase.FULL_MOON))
    assert first.state.hijri_year == 1
    assert second.state == EstimatorState()
    assert shared == EstimatorState()
