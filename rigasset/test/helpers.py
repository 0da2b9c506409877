"""Shared test data helpers"""
from datetime import date

from rigasset import db
from rigasset.data.maintenance.maintenance_schedule import MaintenanceSchedule

TODAY = date(2025, 1, 15)


def make_schedule(pm_id, asset_id, next_due_date, **fields):
    """Insert and commit a maintenance schedule; needs an app context"""
    data = {
        'task_name': f'Task {pm_id}',
        'task_type': 'Inspection',
        'frequency_days': 30,
        'alert_days': 14,
        'priority': 'Normal',
        'status': MaintenanceSchedule.SCHEDULED,
    }
    data.update(fields)
    schedule = MaintenanceSchedule(pm_id=pm_id, asset_id=asset_id, next_due_date=next_due_date, **data)
    db.session.add(schedule)
    db.session.commit()
    return schedule.id
