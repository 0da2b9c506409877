"""
Dashboard Service
Headline counts for assets, rigs, maintenance and transfers. Maintenance
counts use the live status for ``today``, not the stored status.
"""

from collections import Counter
from datetime import date
from typing import Any, Dict
from sqlalchemy import func, select
from rigasset import db
from rigasset.business.maintenance.status_engine import LiveStatus, alert_type, derive_live_status
from rigasset.business.transfers.state_machine import TransferStatus
from rigasset.data.core.asset import Asset
from rigasset.data.core.rig import Rig
from rigasset.data.maintenance.maintenance_schedule import MaintenanceSchedule
from rigasset.data.transfers.transfer import Transfer
from rigasset.services.core.notification_service import NotificationService
from rigasset.services.maintenance.maintenance_query_service import MaintenanceQueryService

ASSET_STATUSES = ('Active', 'Maintenance', 'Contracted', 'Inactive', 'Standby')
RIG_STATUSES = ('Active', 'Maintenance', 'Standby')
UPCOMING_LIMIT = 10


def _status_counts(model, statuses) -> Dict[str, int]:
    counts = dict(db.session.execute(select(model.status, func.count(model.id)).group_by(model.status)).all())
    summary = {'total': sum(counts.values())}
    for status in statuses:
        summary[status.lower()] = counts.get(status, 0)
    return summary


class DashboardService:

    @classmethod
    def maintenance_counts(cls, today: date) -> Dict[str, int]:
        counts = Counter()
        for schedule in db.session.execute(select(MaintenanceSchedule)).scalars():
            counts['total'] += 1
            kind = alert_type(schedule, today)
            if kind is LiveStatus.OVERDUE:
                counts['overdue'] += 1
            elif kind is LiveStatus.DUE_SOON:
                counts['due_soon'] += 1
            live = derive_live_status(schedule, today).live_status
            if live is LiveStatus.COMPLETED:
                counts['completed'] += 1
            elif live is LiveStatus.IN_PROGRESS:
                counts['in_progress'] += 1
            elif live is LiveStatus.SCHEDULED:
                counts['scheduled'] += 1
        return {key: counts[key] for key in ('total', 'overdue', 'due_soon', 'completed', 'in_progress', 'scheduled')}

    @classmethod
    def transfer_counts(cls) -> Dict[str, int]:
        counts = dict(db.session.execute(
            select(Transfer.status, func.count(Transfer.id)).group_by(Transfer.status)
        ).all())
        return {
            'total': sum(counts.values()),
            'pending': counts.get(TransferStatus.PENDING.value, 0),
            'ops_approved': counts.get(TransferStatus.OPS_APPROVED.value, 0),
            'completed': counts.get(TransferStatus.COMPLETED.value, 0),
            'rejected': counts.get(TransferStatus.REJECTED.value, 0),
            'on_hold': counts.get(TransferStatus.ON_HOLD.value, 0),
        }

    @classmethod
    def by_rig(cls, today: date):
        """Per-rig asset count plus overdue and due-soon maintenance"""
        asset_counts = dict(db.session.execute(
            select(Asset.rig_id, func.count(Asset.id)).group_by(Asset.rig_id)
        ).all())
        return [
            {
                'rig_id': row['rig_id'],
                'rig_code': row['rig_code'],
                'rig_name': row['rig_name'],
                'rig_status': row['rig_status'],
                'asset_count': asset_counts.get(row['rig_id'], 0),
                'overdue_pm': row['overdue'],
                'due_soon_pm': row['due_soon'],
            }
            for row in MaintenanceQueryService.by_rig(today)
        ]

    @classmethod
    def summary(cls, user_id: int, today: date) -> Dict[str, Any]:
        return {
            'assets': _status_counts(Asset, ASSET_STATUSES),
            'rigs': _status_counts(Rig, RIG_STATUSES),
            'maintenance': cls.maintenance_counts(today),
            'transfers': cls.transfer_counts(),
            'unreadNotifications': NotificationService.unread_count(user_id),
            'byRig': cls.by_rig(today),
            'upcomingMaintenance': MaintenanceQueryService.alerts(today)['alerts'][:UPCOMING_LIMIT],
            'generatedFor': today.isoformat(),
        }
