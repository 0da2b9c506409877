"""
Live maintenance status, urgency ordering and next-due computation.
Pure functions; schedules are plain namespaces.
"""
from datetime import date, timedelta
from types import SimpleNamespace

import pytest
from rigasset.business.maintenance.status_engine import (
    LiveStatus,
    alert_type,
    compute_next_due_date,
    derive_live_status,
    sort_by_urgency,
    urgency_rank,
)

TODAY = date(2025, 1, 15)


def schedule(offset_days, status='Scheduled', alert_days=14, pm_id='PM'):
    return SimpleNamespace(
        pm_id=pm_id,
        status=status,
        next_due_date=TODAY + timedelta(days=offset_days),
        alert_days=alert_days,
    )


@pytest.mark.parametrize('offset, alert_days, expected', [
    (-1, 14, LiveStatus.OVERDUE),
    (-30, 0, LiveStatus.OVERDUE),
    (0, 14, LiveStatus.DUE_SOON),
    (14, 14, LiveStatus.DUE_SOON),
    (15, 14, LiveStatus.SCHEDULED),
    (0, 0, LiveStatus.DUE_SOON),
    (1, 0, LiveStatus.SCHEDULED),
])
def test_derived_status_from_dates(offset, alert_days, expected):
    result = derive_live_status(schedule(offset, alert_days=alert_days), TODAY)
    assert result.live_status is expected
    assert result.days_until_due == offset


@pytest.mark.parametrize('stored', ['Completed', 'Cancelled', 'In Progress'])
def test_stored_status_wins_over_dates(stored):
    result = derive_live_status(schedule(-10, status=stored), TODAY)
    assert result.live_status.value == stored
    assert result.days_until_due == -10


def test_due_today_with_fourteen_day_window_is_due_soon():
    result = derive_live_status(schedule(0, alert_days=14), TODAY)
    assert result.live_status is LiveStatus.DUE_SOON
    assert result.days_until_due == 0


def test_missing_alert_window_uses_default():
    s = schedule(10)
    s.alert_days = None
    assert derive_live_status(s, TODAY).live_status is LiveStatus.DUE_SOON


def test_urgency_rank():
    assert urgency_rank(schedule(-3), TODAY) == 1
    assert urgency_rank(schedule(-3, status='In Progress'), TODAY) == 1
    assert urgency_rank(schedule(5), TODAY) == 2
    assert urgency_rank(schedule(40), TODAY) == 3
    assert urgency_rank(schedule(-3, status='Completed'), TODAY) == 3
    assert urgency_rank(schedule(5, status='Cancelled'), TODAY) == 3


def test_sort_by_urgency_mixed_list():
    rows = [
        schedule(60, pm_id='later'),
        schedule(-40, status='Completed', pm_id='done-long-ago'),
        schedule(3, pm_id='soon-3'),
        schedule(-2, pm_id='overdue-2'),
        schedule(1, status='In Progress', pm_id='in-progress-soon'),
        schedule(-9, pm_id='overdue-9'),
        schedule(20, pm_id='next-month'),
    ]
    ordered = [s.pm_id for s in sort_by_urgency(rows, TODAY)]
    assert ordered == [
        'overdue-9', 'overdue-2',
        'in-progress-soon', 'soon-3',
        'done-long-ago', 'next-month', 'later',
    ]


def test_alert_type_only_for_active_schedules_in_window():
    assert alert_type(schedule(-1), TODAY) is LiveStatus.OVERDUE
    assert alert_type(schedule(7), TODAY) is LiveStatus.DUE_SOON
    assert alert_type(schedule(30), TODAY) is None
    assert alert_type(schedule(-1, status='Cancelled'), TODAY) is None


def test_next_due_from_frequency():
    assert compute_next_due_date(date(2025, 1, 19), 30) == date(2025, 2, 18)


def test_next_due_crosses_leap_day():
    assert compute_next_due_date(date(2024, 2, 15), 30) == date(2024, 3, 16)


def test_explicit_next_due_wins():
    assert compute_next_due_date(date(2025, 1, 19), 30, date(2025, 3, 1)) == date(2025, 3, 1)
