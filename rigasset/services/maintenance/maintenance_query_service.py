"""
Maintenance Query Service
Read-side queries for maintenance schedules. Rows are passed through the
status engine so every schedule carries its live status for ``today``.
"""

from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy import func, or_, select
from rigasset import db
from rigasset.business.core.errors import NotFoundError
from rigasset.business.core.persistence import resolve_ref
from rigasset.business.maintenance.status_engine import (
    LiveStatus,
    alert_type,
    derive_live_status,
    sort_by_urgency,
)
from rigasset.data.core.asset import Asset
from rigasset.data.core.rig import Rig
from rigasset.data.maintenance.maintenance_log import MaintenanceLog
from rigasset.data.maintenance.maintenance_schedule import MaintenanceSchedule


class MaintenanceQueryService:

    @staticmethod
    def _serialize(schedule: MaintenanceSchedule, today: date, asset: Asset = None,
                   rig: Rig = None, log_count: Optional[int] = None) -> Dict[str, Any]:
        data = schedule.to_dict()
        live = derive_live_status(schedule, today)
        data['live_status'] = live.live_status.value
        data['days_until_due'] = live.days_until_due
        data['asset_name'] = asset.name if asset else None
        data['asset_code'] = asset.asset_code if asset else None
        data['rig_name'] = rig.name if rig else None
        if log_count is not None:
            data['log_count'] = log_count
        return data

    @classmethod
    def _rows(cls, stmt):
        log_counts = (
            select(MaintenanceLog.schedule_id, func.count(MaintenanceLog.id).label('log_count'))
            .group_by(MaintenanceLog.schedule_id)
            .subquery()
        )
        stmt = (
            stmt.add_columns(Asset, Rig, func.coalesce(log_counts.c.log_count, 0))
            .outerjoin(Asset, Asset.id == MaintenanceSchedule.asset_id)
            .outerjoin(Rig, Rig.id == Asset.rig_id)
            .outerjoin(log_counts, log_counts.c.schedule_id == MaintenanceSchedule.id)
        )
        return db.session.execute(stmt).all()

    @classmethod
    def list_schedules(cls, today: date, asset: Optional[str] = None, rig: Optional[str] = None,
                       status: Optional[str] = None, priority: Optional[str] = None,
                       task_type: Optional[str] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Schedules in urgency order.

        ``status`` filters on the live status for Overdue and Due Soon and
        on the stored status otherwise.
        """
        stmt = select(MaintenanceSchedule)
        if asset:
            asset_obj = resolve_ref(db.session, Asset, Asset.asset_code, asset)
            if asset_obj is None:
                return []
            stmt = stmt.where(MaintenanceSchedule.asset_id == asset_obj.id)
        if rig:
            stmt = stmt.where(Rig.name == rig)
        if priority:
            stmt = stmt.where(MaintenanceSchedule.priority == priority)
        if task_type:
            stmt = stmt.where(MaintenanceSchedule.task_type == task_type)
        if search:
            like = f"%{search.lower()}%"
            stmt = stmt.where(or_(
                func.lower(MaintenanceSchedule.task_name).like(like),
                func.lower(Asset.name).like(like),
                func.lower(MaintenanceSchedule.technician).like(like),
            ))
        if status and status not in (LiveStatus.OVERDUE.value, LiveStatus.DUE_SOON.value):
            stmt = stmt.where(MaintenanceSchedule.status == status)

        rows = cls._rows(stmt)
        if status in (LiveStatus.OVERDUE.value, LiveStatus.DUE_SOON.value):
            rows = [row for row in rows if alert_type(row[0], today) == LiveStatus(status)]

        extras = {row[0].id: row for row in rows}
        ordered = sort_by_urgency([row[0] for row in rows], today)
        return [
            cls._serialize(s, today, asset=extras[s.id][1], rig=extras[s.id][2], log_count=extras[s.id][3])
            for s in ordered
        ]

    @classmethod
    def alerts(cls, today: date) -> Dict[str, Any]:
        """Active schedules inside their alert window, earliest due first"""
        stmt = select(MaintenanceSchedule).where(
            MaintenanceSchedule.status.notin_([MaintenanceSchedule.COMPLETED, MaintenanceSchedule.CANCELLED])
        )
        alerts = []
        for schedule, asset, rig, _ in cls._rows(stmt):
            kind = alert_type(schedule, today)
            if kind is None:
                continue
            data = cls._serialize(schedule, today, asset=asset, rig=rig)
            data['alert_type'] = kind.value
            alerts.append(data)
        alerts.sort(key=lambda a: a['next_due_date'])
        overdue = sum(1 for a in alerts if a['alert_type'] == LiveStatus.OVERDUE.value)
        return {'alerts': alerts, 'overdue': overdue}

    @classmethod
    def by_rig(cls, today: date) -> List[Dict[str, Any]]:
        """Per-rig task counts, ordered by rig code"""
        summary = {}
        for rig in db.session.execute(select(Rig).order_by(Rig.rig_code)).scalars():
            summary[rig.id] = {
                'rig_id': rig.id,
                'rig_code': rig.rig_code,
                'rig_name': rig.name,
                'rig_status': rig.status,
                'total_tasks': 0,
                'overdue': 0,
                'due_soon': 0,
                'completed': 0,
            }

        stmt = select(MaintenanceSchedule, Asset.rig_id).join(Asset, Asset.id == MaintenanceSchedule.asset_id)
        for schedule, rig_id in db.session.execute(stmt):
            entry = summary.get(rig_id)
            if entry is None:
                continue
            entry['total_tasks'] += 1
            kind = alert_type(schedule, today)
            if kind is LiveStatus.OVERDUE:
                entry['overdue'] += 1
            elif kind is LiveStatus.DUE_SOON:
                entry['due_soon'] += 1
            if schedule.status == MaintenanceSchedule.COMPLETED:
                entry['completed'] += 1
        return list(summary.values())

    @classmethod
    def get_schedule(cls, ref, today: date) -> Dict[str, Any]:
        schedule = cls._find(ref)
        asset = schedule.asset
        data = cls._serialize(schedule, today, asset=asset, rig=asset.rig if asset else None)
        data['logs'] = cls.get_logs(schedule.id)
        return data

    @classmethod
    def get_logs(cls, ref) -> List[Dict[str, Any]]:
        schedule = cls._find(ref)
        stmt = (
            select(MaintenanceLog)
            .where(MaintenanceLog.schedule_id == schedule.id)
            .order_by(MaintenanceLog.completion_date.desc(), MaintenanceLog.id.desc())
        )
        return [log.to_dict() for log in db.session.execute(stmt).scalars()]

    @staticmethod
    def _find(ref) -> MaintenanceSchedule:
        schedule = resolve_ref(db.session, MaintenanceSchedule, MaintenanceSchedule.pm_id, ref)
        if schedule is None:
            raise NotFoundError('Schedule not found')
        return schedule
