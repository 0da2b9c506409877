"""
Maintenance status engine

Derives the live status of a schedule from its stored status, its next due
date, its alert window and today's date, and orders schedules by urgency.
Nothing here touches the database; "today" is always passed in.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional
from rigasset.data.maintenance.maintenance_schedule import MaintenanceSchedule


class LiveStatus(str, Enum):
    SCHEDULED = 'Scheduled'
    IN_PROGRESS = 'In Progress'
    COMPLETED = 'Completed'
    CANCELLED = 'Cancelled'
    OVERDUE = 'Overdue'
    DUE_SOON = 'Due Soon'


# Stored statuses that win over any date-derived status
PRESERVED_STATUSES = frozenset({
    MaintenanceSchedule.COMPLETED,
    MaintenanceSchedule.CANCELLED,
    MaintenanceSchedule.IN_PROGRESS,
})

# Stored statuses excluded from urgency ranking and alerts
INACTIVE_STATUSES = frozenset({
    MaintenanceSchedule.COMPLETED,
    MaintenanceSchedule.CANCELLED,
})

RANK_OVERDUE = 1
RANK_DUE_SOON = 2
RANK_OTHER = 3


class LiveStatusResult(NamedTuple):
    live_status: LiveStatus
    days_until_due: int


def _alert_days(schedule) -> int:
    if schedule.alert_days is None:
        return MaintenanceSchedule.DEFAULT_ALERT_DAYS
    return schedule.alert_days


def days_until_due(schedule, today: date) -> int:
    """Calendar days from ``today`` to the due date; negative when overdue"""
    return (schedule.next_due_date - today).days


def is_overdue(schedule, today: date) -> bool:
    return schedule.next_due_date < today


def is_within_alert_window(schedule, today: date) -> bool:
    """Due on or before ``today + alert_days`` (includes overdue)"""
    return schedule.next_due_date <= today + timedelta(days=_alert_days(schedule))


def derive_live_status(schedule, today: date) -> LiveStatusResult:
    """
    Live status with precedence: preserved stored status, then Overdue,
    then Due Soon, then Scheduled.
    """
    remaining = days_until_due(schedule, today)
    if schedule.status in PRESERVED_STATUSES:
        return LiveStatusResult(LiveStatus(schedule.status), remaining)
    if is_overdue(schedule, today):
        return LiveStatusResult(LiveStatus.OVERDUE, remaining)
    if is_within_alert_window(schedule, today):
        return LiveStatusResult(LiveStatus.DUE_SOON, remaining)
    return LiveStatusResult(LiveStatus.SCHEDULED, remaining)


def urgency_rank(schedule, today: date) -> int:
    if schedule.status in INACTIVE_STATUSES:
        return RANK_OTHER
    if is_overdue(schedule, today):
        return RANK_OVERDUE
    if is_within_alert_window(schedule, today):
        return RANK_DUE_SOON
    return RANK_OTHER


def sort_by_urgency(schedules: Iterable, today: date) -> List:
    """Rank ascending, then next due date ascending"""
    return sorted(schedules, key=lambda s: (urgency_rank(s, today), s.next_due_date))


def alert_type(schedule, today: date) -> Optional[LiveStatus]:
    """Overdue or Due Soon for an active schedule inside its window, else None"""
    rank = urgency_rank(schedule, today)
    if rank == RANK_OVERDUE:
        return LiveStatus.OVERDUE
    if rank == RANK_DUE_SOON:
        return LiveStatus.DUE_SOON
    return None


def compute_next_due_date(completion_date: date, frequency_days: int,
                          explicit_next_due: Optional[date] = None) -> date:
    if explicit_next_due is not None:
        return explicit_next_due
    return completion_date + timedelta(days=frequency_days)
