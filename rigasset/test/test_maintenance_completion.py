"""
Completing maintenance tasks and managing schedules
"""
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from rigasset import db
from rigasset.business.core.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from rigasset.business.core.persistence import SqlPersistence
from rigasset.business.maintenance.completion import CompletionDetails, MaintenanceCompletion
from rigasset.business.maintenance.schedule_manager import ScheduleManager
from rigasset.data.maintenance.maintenance_log import MaintenanceLog
from rigasset.data.maintenance.maintenance_schedule import MaintenanceSchedule
from rigasset.test.helpers import make_schedule


@pytest.fixture()
def pump_schedule(ctx, seed):
    schedule_id = make_schedule(
        'PM-005', seed.asset_ids['AST-004'], date(2025, 1, 19),
        task_name='Mud Pump Liner Inspection', frequency_days=30, alert_days=7,
        last_done_date=date(2024, 12, 20),
    )
    return db.session.get(MaintenanceSchedule, schedule_id)


def logs_for(schedule_id):
    return db.session.execute(
        select(MaintenanceLog).where(MaintenanceLog.schedule_id == schedule_id)
    ).scalars().all()


def test_completion_rolls_schedule_forward(pump_schedule):
    details = CompletionDetails(actual_hours=Decimal('3.5'), actual_cost=Decimal('750'), work_notes='Liners at 9% wear')
    schedule, log = MaintenanceCompletion().complete_task(
        pump_schedule, date(2025, 1, 19), 'Ahmed Khalid', details=details
    )

    assert schedule.last_done_date == date(2025, 1, 19)
    assert schedule.next_due_date == date(2025, 2, 18)
    assert schedule.status == 'Scheduled'

    assert log.completion_date == date(2025, 1, 19)
    assert log.completed_by == 'Ahmed Khalid'
    assert log.next_due_date == date(2025, 2, 18)
    assert log.actual_hours == Decimal('3.5')
    assert len(logs_for(schedule.id)) == 1


def test_explicit_next_due_date(pump_schedule):
    schedule, log = MaintenanceCompletion().complete_task(
        pump_schedule, date(2025, 1, 19), 'Ahmed Khalid', next_due_date=date(2025, 3, 1)
    )
    assert schedule.next_due_date == date(2025, 3, 1)
    assert log.next_due_date == date(2025, 3, 1)


@pytest.mark.parametrize('stored', ['In Progress', 'Completed', 'Cancelled'])
def test_completion_resets_stored_status(ctx, seed, stored):
    schedule_id = make_schedule('PM-X', seed.asset_ids['AST-009'], date(2025, 1, 10), status=stored)
    schedule = db.session.get(MaintenanceSchedule, schedule_id)

    MaintenanceCompletion().complete_task(schedule, date(2025, 1, 12), 'Crew B')

    assert db.session.get(MaintenanceSchedule, schedule_id).status == 'Scheduled'


@pytest.mark.parametrize('completion_date, completed_by', [
    (None, 'Ahmed Khalid'),
    (date(2025, 1, 19), None),
    (date(2025, 1, 19), '  '),
])
def test_completion_requires_date_and_completer(pump_schedule, completion_date, completed_by):
    with pytest.raises(ValidationError) as exc:
        MaintenanceCompletion().complete_task(pump_schedule, completion_date, completed_by)
    assert exc.value.message == 'completionDate and completedBy are required'
    assert logs_for(pump_schedule.id) == []
    assert pump_schedule.next_due_date == date(2025, 1, 19)


def test_next_due_before_completion_is_rejected(pump_schedule):
    with pytest.raises(ValidationError):
        MaintenanceCompletion().complete_task(
            pump_schedule, date(2025, 1, 19), 'Ahmed Khalid', next_due_date=date(2025, 1, 1)
        )
    assert logs_for(pump_schedule.id) == []


def test_negative_cost_is_rejected(pump_schedule):
    with pytest.raises(ValidationError):
        MaintenanceCompletion().complete_task(
            pump_schedule, date(2025, 1, 19), 'Ahmed Khalid', details=CompletionDetails(actual_cost=Decimal('-1'))
        )


def test_schedule_update_failure_discards_log(pump_schedule):
    class FailingUpdate(SqlPersistence):
        def update_maintenance_schedule(self, schedule, fields):
            raise SQLAlchemyError('disk full')

    with pytest.raises(PersistenceError):
        MaintenanceCompletion(FailingUpdate()).complete_task(pump_schedule, date(2025, 1, 19), 'Ahmed Khalid')

    db.session.expire_all()
    assert logs_for(pump_schedule.id) == []
    schedule = db.session.get(MaintenanceSchedule, pump_schedule.id)
    assert schedule.next_due_date == date(2025, 1, 19)
    assert schedule.last_done_date == date(2024, 12, 20)


# Schedule management

def test_create_schedule_by_asset_code(ctx, seed):
    schedule = ScheduleManager().create_schedule({
        'pm_id': 'PM-100',
        'asset_ref': 'AST-009',
        'task_name': 'Rotary Table Lubrication',
        'task_type': 'Lubrication',
        'frequency_days': 60,
        'next_due_date': date(2025, 3, 1),
    }, actor_id=seed.user_ids['Admin'])

    assert schedule.asset_id == seed.asset_ids['AST-009']
    assert schedule.alert_days == 14
    assert schedule.priority == 'Normal'
    assert schedule.status == 'Scheduled'
    assert schedule.created_by_id == seed.user_ids['Admin']


def test_create_schedule_rejects_duplicates_and_bad_values(ctx, seed):
    fields = {
        'pm_id': 'PM-100', 'asset_ref': 'AST-009', 'task_name': 'Lube',
        'task_type': 'Lubrication', 'frequency_days': 60, 'next_due_date': date(2025, 3, 1),
    }
    ScheduleManager().create_schedule(fields)

    with pytest.raises(ConflictError):
        ScheduleManager().create_schedule(fields)
    with pytest.raises(ValidationError):
        ScheduleManager().create_schedule(dict(fields, pm_id='PM-101', frequency_days=0))
    with pytest.raises(ValidationError):
        ScheduleManager().create_schedule(dict(fields, pm_id='PM-102', task_type='Painting'))
    with pytest.raises(NotFoundError):
        ScheduleManager().create_schedule(dict(fields, pm_id='PM-103', asset_ref='AST-404'))


def test_update_schedule_is_partial(pump_schedule):
    schedule = ScheduleManager().update_schedule('PM-005', {'technician': 'Omar Hassan', 'status': 'In Progress'})

    assert schedule.technician == 'Omar Hassan'
    assert schedule.status == 'In Progress'
    assert schedule.task_name == 'Mud Pump Liner Inspection'
    assert schedule.frequency_days == 30


def test_update_schedule_keeps_date_order(pump_schedule):
    with pytest.raises(ValidationError):
        ScheduleManager().update_schedule('PM-005', {'next_due_date': date(2024, 12, 1)})


def test_delete_schedule_removes_logs(pump_schedule):
    schedule_id = pump_schedule.id
    MaintenanceCompletion().complete_task(pump_schedule, date(2025, 1, 19), 'Ahmed Khalid')

    assert ScheduleManager().delete_schedule(schedule_id) == 'PM-005'
    assert db.session.get(MaintenanceSchedule, schedule_id) is None
    assert logs_for(schedule_id) == []
