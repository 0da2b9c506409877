"""
Create, update and delete maintenance schedules
"""

from typing import Optional
from rigasset.business.core.errors import ConflictError, ValidationError
from rigasset.business.core.persistence import SqlPersistence
from rigasset.business.core.unit_of_work import atomic
from rigasset.data.maintenance.maintenance_schedule import MaintenanceSchedule
from rigasset.logger import get_logger

logger = get_logger("rigasset.domain.maintenance")

EDITABLE_FIELDS = (
    'task_name', 'task_type', 'priority', 'frequency_days', 'last_done_date',
    'next_due_date', 'alert_days', 'technician', 'estimated_hours',
    'estimated_cost', 'work_order_no', 'status', 'notes',
)


class ScheduleManager:

    def __init__(self, persistence=None):
        self.persistence = persistence or SqlPersistence()

    def create_schedule(self, fields: dict, actor_id: Optional[int] = None) -> MaintenanceSchedule:
        """
        Raises:
            ValidationError: Missing required field or out-of-range value
            NotFoundError: Asset reference does not resolve
            ConflictError: PM code already used
        """
        for key, label in (('pm_id', 'pmId'), ('task_name', 'taskName'), ('task_type', 'taskType'),
                           ('next_due_date', 'nextDueDate'), ('frequency_days', 'frequencyDays')):
            value = fields.get(key)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(f"{label} is required")
        if fields.get('asset_ref') in (None, ''):
            raise ValidationError('assetId is required')

        data = {key: fields[key] for key in EDITABLE_FIELDS if fields.get(key) is not None}
        data.setdefault('priority', 'Normal')
        data.setdefault('alert_days', MaintenanceSchedule.DEFAULT_ALERT_DAYS)
        data.setdefault('status', MaintenanceSchedule.SCHEDULED)
        self._validate(data)

        pm_id = fields['pm_id'].strip()
        asset = self.persistence.find_asset_by_ref(fields['asset_ref'])
        if self.persistence.schedule_code_exists(pm_id):
            raise ConflictError(f"Schedule {pm_id} already exists")

        schedule = MaintenanceSchedule.from_dict(dict(data, pm_id=pm_id, asset_id=asset.id), user_id=actor_id)
        with atomic(self.persistence.session):
            self.persistence.save_schedule(schedule)
        logger.info(f"Schedule {pm_id} created for asset {asset.asset_code}")
        return schedule

    def update_schedule(self, ref, fields: dict, actor_id: Optional[int] = None) -> MaintenanceSchedule:
        """Partial update; fields that are None keep their stored value"""
        schedule = self.persistence.find_schedule_by_ref(ref)
        changes = {key: fields[key] for key in EDITABLE_FIELDS if fields.get(key) is not None}

        merged = {key: getattr(schedule, key) for key in EDITABLE_FIELDS}
        merged.update(changes)
        self._validate(merged)

        if actor_id is not None:
            changes['updated_by_id'] = actor_id
        with atomic(self.persistence.session):
            self.persistence.update_maintenance_schedule(schedule, changes)
        logger.info(f"Schedule {schedule.pm_id} updated: {sorted(changes)}")
        return schedule

    def delete_schedule(self, ref) -> str:
        schedule = self.persistence.find_schedule_by_ref(ref)
        pm_id = schedule.pm_id
        with atomic(self.persistence.session):
            self.persistence.delete_schedule(schedule)
        logger.info(f"Schedule {pm_id} deleted")
        return pm_id

    @staticmethod
    def _validate(data: dict) -> None:
        if data.get('task_type') is not None and data['task_type'] not in MaintenanceSchedule.TASK_TYPES:
            raise ValidationError(f"taskType must be one of: {', '.join(MaintenanceSchedule.TASK_TYPES)}")
        if data.get('priority') is not None and data['priority'] not in MaintenanceSchedule.PRIORITIES:
            raise ValidationError(f"priority must be one of: {', '.join(MaintenanceSchedule.PRIORITIES)}")
        if data.get('status') is not None and data['status'] not in MaintenanceSchedule.STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(MaintenanceSchedule.STATUSES)}")
        if data.get('frequency_days') is not None and data['frequency_days'] < 1:
            raise ValidationError('frequencyDays must be at least 1')
        if data.get('alert_days') is not None and data['alert_days'] < 0:
            raise ValidationError('alertDays cannot be negative')
        last_done, next_due = data.get('last_done_date'), data.get('next_due_date')
        if last_done is not None and next_due is not None and next_due < last_done:
            raise ValidationError('nextDueDate cannot be before lastDoneDate')
