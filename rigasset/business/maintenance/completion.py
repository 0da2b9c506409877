"""
Recording a completed maintenance task
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple
from rigasset.business.core.errors import ValidationError
from rigasset.business.core.persistence import SqlPersistence
from rigasset.business.core.unit_of_work import atomic
from rigasset.business.maintenance.status_engine import compute_next_due_date
from rigasset.data.maintenance.maintenance_log import MaintenanceLog
from rigasset.data.maintenance.maintenance_schedule import MaintenanceSchedule
from rigasset.logger import get_logger

logger = get_logger("rigasset.domain.maintenance")


@dataclass
class CompletionDetails:
    actual_hours: Optional[Decimal] = None
    actual_cost: Optional[Decimal] = None
    parts_used: Optional[str] = None
    work_notes: Optional[str] = None
    completed_by_user_id: Optional[int] = None


class MaintenanceCompletion:

    def __init__(self, persistence=None):
        self.persistence = persistence or SqlPersistence()

    def complete_task(self, schedule: MaintenanceSchedule, completion_date: Optional[date],
                      completed_by: Optional[str], details: CompletionDetails = None,
                      next_due_date: Optional[date] = None) -> Tuple[MaintenanceSchedule, MaintenanceLog]:
        """
        Log a completion and roll the schedule forward.

        The log insert and the schedule update (last done, next due, status
        back to Scheduled) commit together or not at all. The stored status
        is reset whatever it was before.

        Raises:
            ValidationError: Completion date or completer missing, negative
                hours or cost, or an explicit next due date before the
                completion date
        """
        if completion_date is None or completed_by is None or not str(completed_by).strip():
            raise ValidationError('completionDate and completedBy are required')
        details = details or CompletionDetails()
        for label, value in (('actualHours', details.actual_hours), ('actualCost', details.actual_cost)):
            if value is not None and value < 0:
                raise ValidationError(f"{label} cannot be negative")
        if next_due_date is not None and next_due_date < completion_date:
            raise ValidationError('nextDueDate cannot be before completionDate')

        computed_next_due = compute_next_due_date(completion_date, schedule.frequency_days, next_due_date)

        with atomic(self.persistence.session):
            log = self.persistence.append_maintenance_log({
                'schedule_id': schedule.id,
                'completion_date': completion_date,
                'completed_by': str(completed_by).strip(),
                'completed_by_user_id': details.completed_by_user_id,
                'actual_hours': details.actual_hours,
                'actual_cost': details.actual_cost,
                'parts_used': details.parts_used,
                'work_notes': details.work_notes,
                'next_due_date': computed_next_due,
            })
            self.persistence.update_maintenance_schedule(schedule, {
                'last_done_date': completion_date,
                'next_due_date': computed_next_due,
                'status': MaintenanceSchedule.SCHEDULED,
            })

        logger.info(f"Schedule {schedule.pm_id} completed on {completion_date}; next due {computed_next_due}")
        return schedule, log
