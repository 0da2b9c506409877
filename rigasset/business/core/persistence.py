"""
Persistence layer for the RigAsset core

SqlPersistence implements the narrow contract the workflow and the
maintenance engine depend on, on top of the Flask-SQLAlchemy session.
Nothing here commits: writes join whatever unit of work is open and are
made durable by ``atomic()``.

Every lookup resolves a reference by surrogate id first and by human code
second, so "12" finds the row with id 12 before a row coded "12".
"""

from datetime import datetime
from typing import Iterable, Optional
from sqlalchemy import delete, select, update
from rigasset import db
from rigasset.business.core.errors import NotFoundError
from rigasset.data.core.asset import Asset
from rigasset.data.core.asset_history import AssetHistory
from rigasset.data.core.company import Company
from rigasset.data.core.rig import Rig
from rigasset.data.maintenance.maintenance_log import MaintenanceLog
from rigasset.data.maintenance.maintenance_schedule import MaintenanceSchedule
from rigasset.data.transfers.transfer import Transfer
from rigasset.logger import get_logger

logger = get_logger("rigasset.domain.persistence")


def resolve_ref(session, model, code_column, ref):
    """
    Find one ``model`` row by id, then by human code.

    Returns None when ``ref`` is empty or matches nothing.
    """
    if ref is None or isinstance(ref, bool):
        return None
    ref_text = str(ref).strip()
    if not ref_text:
        return None

    if ref_text.isdigit():
        found = session.get(model, int(ref_text))
        if found is not None:
            return found

    return session.execute(
        select(model).where(code_column == ref_text)
    ).scalar_one_or_none()


class SqlPersistence:
    """Persistence contract backed by the SQLAlchemy session"""

    def __init__(self, session=None):
        self.session = session or db.session

    # Lookups

    def find_asset_by_ref(self, ref) -> Asset:
        asset = resolve_ref(self.session, Asset, Asset.asset_code, ref)
        if asset is None:
            raise NotFoundError('Asset not found')
        return asset

    def find_transfer_by_ref(self, ref) -> Transfer:
        transfer = resolve_ref(self.session, Transfer, Transfer.transfer_id, ref)
        if transfer is None:
            raise NotFoundError('Transfer not found')
        return transfer

    def find_schedule_by_ref(self, ref) -> MaintenanceSchedule:
        schedule = resolve_ref(self.session, MaintenanceSchedule, MaintenanceSchedule.pm_id, ref)
        if schedule is None:
            raise NotFoundError('Schedule not found')
        return schedule

    def find_rig_by_ref(self, ref) -> Optional[Rig]:
        return resolve_ref(self.session, Rig, Rig.rig_code, ref)

    def find_company_by_ref(self, ref) -> Optional[Company]:
        return resolve_ref(self.session, Company, Company.company_code, ref)

    def transfer_code_exists(self, code: str) -> bool:
        stmt = select(Transfer.id).where(Transfer.transfer_id == code)
        return self.session.execute(stmt).first() is not None

    def schedule_code_exists(self, code: str) -> bool:
        stmt = select(MaintenanceSchedule.id).where(MaintenanceSchedule.pm_id == code)
        return self.session.execute(stmt).first() is not None

    def current_transfer_status(self, transfer_id: int) -> Optional[str]:
        """Status as stored right now, or None if the row is gone"""
        stmt = select(Transfer.status).where(Transfer.id == transfer_id)
        return self.session.execute(stmt).scalar_one_or_none()

    # Transfers

    def save_transfer(self, transfer: Transfer) -> Transfer:
        self.session.add(transfer)
        self.session.flush()
        return transfer

    def transition_transfer(self, transfer: Transfer, expected_status: str, values: dict) -> bool:
        """
        Conditionally update ``transfer`` if its stored status is still
        ``expected_status``.

        Returns:
            bool: True when the row was updated; False when another
            decision got there first (nothing is written in that case)
        """
        stmt = (
            update(Transfer)
            .where(Transfer.id == transfer.id, Transfer.status == expected_status)
            .values(updated_at=datetime.utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        if result.rowcount != 1:
            logger.debug(f"Conditional update of transfer {transfer.id} matched no row (expected {expected_status})")
            return False
        self.session.refresh(transfer)
        return True

    def delete_transfer(self, transfer: Transfer, allowed_statuses: Iterable[str]) -> bool:
        """Delete ``transfer`` only while its status is one of ``allowed_statuses``"""
        stmt = (
            delete(Transfer)
            .where(Transfer.id == transfer.id, Transfer.status.in_(list(allowed_statuses)))
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        if result.rowcount != 1:
            return False
        self.session.expunge(transfer)
        return True

    # Assets

    def update_asset_location(self, asset_id: int, fields: dict) -> None:
        stmt = (
            update(Asset)
            .where(Asset.id == asset_id)
            .values(updated_at=datetime.utcnow(), **fields)
            .execution_options(synchronize_session='fetch')
        )
        result = self.session.execute(stmt)
        if result.rowcount != 1:
            raise NotFoundError('Asset not found')

    def append_asset_history(self, entry: dict) -> AssetHistory:
        history = AssetHistory.from_dict(entry)
        self.session.add(history)
        self.session.flush()
        return history

    # Maintenance

    def save_schedule(self, schedule: MaintenanceSchedule) -> MaintenanceSchedule:
        self.session.add(schedule)
        self.session.flush()
        return schedule

    def delete_schedule(self, schedule: MaintenanceSchedule) -> None:
        """Delete the schedule and its completion logs"""
        self.session.execute(
            delete(MaintenanceLog)
            .where(MaintenanceLog.schedule_id == schedule.id)
            .execution_options(synchronize_session=False)
        )
        self.session.delete(schedule)
        self.session.flush()

    def append_maintenance_log(self, entry: dict) -> MaintenanceLog:
        log = MaintenanceLog.from_dict(entry)
        self.session.add(log)
        self.session.flush()
        return log

    def update_maintenance_schedule(self, schedule: MaintenanceSchedule, fields: dict) -> MaintenanceSchedule:
        for key, value in fields.items():
            setattr(schedule, key, value)
        self.session.flush()
        return schedule
