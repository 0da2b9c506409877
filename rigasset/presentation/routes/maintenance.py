"""
Maintenance API
"""

from flask import Blueprint, jsonify, request
from flask_login import current_user
from rigasset.auth import role_required
from rigasset.business.core.clock import get_clock
from rigasset.business.core.persistence import SqlPersistence
from rigasset.business.maintenance.completion import CompletionDetails, MaintenanceCompletion
from rigasset.business.maintenance.schedule_manager import ScheduleManager
from rigasset.data.core.user import Role
from rigasset.logger import get_logger
from rigasset.presentation.routes.payload import json_body, parse_date, parse_decimal, parse_int, text
from rigasset.services.maintenance.maintenance_query_service import MaintenanceQueryService
from rigasset.utils.logging_sanitizer import sanitize_dict

logger = get_logger("rigasset.api.maintenance")

maintenance_bp = Blueprint('maintenance', __name__)


def _schedule_fields(data: dict) -> dict:
    return {
        'pm_id': text(data, 'pmId'),
        'asset_ref': data.get('assetId'),
        'task_name': text(data, 'taskName'),
        'task_type': text(data, 'taskType'),
        'priority': text(data, 'priority'),
        'frequency_days': parse_int(data, 'frequencyDays'),
        'last_done_date': parse_date(data, 'lastDoneDate'),
        'next_due_date': parse_date(data, 'nextDueDate'),
        'alert_days': parse_int(data, 'alertDays'),
        'technician': text(data, 'technician'),
        'estimated_hours': parse_decimal(data, 'estimatedHours'),
        'estimated_cost': parse_decimal(data, 'estimatedCost'),
        'work_order_no': text(data, 'workOrderNo'),
        'status': text(data, 'status'),
        'notes': text(data, 'notes'),
    }


@maintenance_bp.get('')
@role_required()
def list_schedules():
    rows = MaintenanceQueryService.list_schedules(
        get_clock().today(),
        asset=request.args.get('asset'),
        rig=request.args.get('rig'),
        status=request.args.get('status'),
        priority=request.args.get('priority'),
        task_type=request.args.get('type'),
        search=request.args.get('search'),
    )
    return jsonify({'data': rows, 'total': len(rows)})


@maintenance_bp.get('/alerts')
@role_required()
def alerts():
    return jsonify(MaintenanceQueryService.alerts(get_clock().today()))


@maintenance_bp.get('/by-rig')
@role_required()
def by_rig():
    return jsonify(MaintenanceQueryService.by_rig(get_clock().today()))


@maintenance_bp.get('/<ref>')
@role_required()
def get_schedule(ref):
    return jsonify(MaintenanceQueryService.get_schedule(ref, get_clock().today()))


@maintenance_bp.get('/<ref>/logs')
@role_required()
def get_logs(ref):
    return jsonify(MaintenanceQueryService.get_logs(ref))


@maintenance_bp.post('')
@role_required(*Role.WRITERS)
def create_schedule():
    data = json_body()
    logger.debug(f"Schedule creation from {current_user.username}: {sanitize_dict(data)}")
    schedule = ScheduleManager().create_schedule(_schedule_fields(data), actor_id=current_user.id)
    return jsonify(MaintenanceQueryService.get_schedule(schedule.id, get_clock().today())), 201


@maintenance_bp.put('/<ref>')
@role_required(*Role.WRITERS)
def update_schedule(ref):
    data = json_body()
    schedule = ScheduleManager().update_schedule(ref, _schedule_fields(data), actor_id=current_user.id)
    return jsonify(MaintenanceQueryService.get_schedule(schedule.id, get_clock().today()))


@maintenance_bp.post('/<ref>/complete')
@role_required(*Role.WRITERS)
def complete_schedule(ref):
    data = json_body()
    persistence = SqlPersistence()
    schedule = persistence.find_schedule_by_ref(ref)
    details = CompletionDetails(
        actual_hours=parse_decimal(data, 'actualHours'),
        actual_cost=parse_decimal(data, 'actualCost'),
        parts_used=text(data, 'partsUsed'),
        work_notes=text(data, 'workNotes'),
        completed_by_user_id=current_user.id,
    )
    schedule, log = MaintenanceCompletion(persistence).complete_task(
        schedule,
        parse_date(data, 'completionDate'),
        text(data, 'completedBy'),
        details=details,
        next_due_date=parse_date(data, 'nextDueDate'),
    )
    today = get_clock().today()
    return jsonify({
        'schedule': MaintenanceQueryService.get_schedule(schedule.id, today),
        'log': log.to_dict(),
    })


@maintenance_bp.delete('/<ref>')
@role_required(Role.ADMIN, Role.ASSET_MANAGER)
def delete_schedule(ref):
    pm_id = ScheduleManager().delete_schedule(ref)
    return jsonify({'message': f"Schedule {pm_id} deleted"})
