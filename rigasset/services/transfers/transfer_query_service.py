"""
Transfer Query Service
Read-side queries for transfers, joined with display names for the API.
"""

from typing import Any, Dict, List, Optional
from sqlalchemy import func, or_, select
from sqlalchemy.orm import aliased
from rigasset import db
from rigasset.business.core.errors import NotFoundError
from rigasset.business.core.persistence import resolve_ref
from rigasset.business.transfers.state_machine import TransferStateMachine, TransferStatus
from rigasset.data.core.asset import Asset
from rigasset.data.core.company import Company
from rigasset.data.core.rig import Rig
from rigasset.data.core.user import User
from rigasset.data.transfers.transfer import Transfer


class TransferQueryService:
    """Lists and details of transfers, newest request first"""

    @classmethod
    def _base_query(cls):
        asset_rig = aliased(Rig)
        dest_rig = aliased(Rig)
        dest_company = aliased(Company)
        requester = aliased(User)
        ops_user = aliased(User)
        mgr_user = aliased(User)

        stmt = (
            select(
                Transfer,
                Asset.name.label('asset_name'),
                Asset.asset_code.label('asset_code'),
                asset_rig.name.label('rig_name'),
                dest_rig.name.label('dest_rig_name'),
                dest_company.name.label('dest_company_name'),
                requester.full_name.label('requested_by_name'),
                ops_user.full_name.label('ops_approver_name'),
                mgr_user.full_name.label('mgr_approver_name'),
            )
            .outerjoin(Asset, Asset.id == Transfer.asset_id)
            .outerjoin(asset_rig, asset_rig.id == Asset.rig_id)
            .outerjoin(dest_rig, dest_rig.id == Transfer.dest_rig_id)
            .outerjoin(dest_company, dest_company.id == Transfer.dest_company_id)
            .outerjoin(requester, requester.id == Transfer.requested_by)
            .outerjoin(ops_user, ops_user.id == Transfer.ops_approved_by)
            .outerjoin(mgr_user, mgr_user.id == Transfer.mgr_approved_by)
        )
        return stmt

    @staticmethod
    def _serialize(row) -> Dict[str, Any]:
        transfer = row[0]
        data = transfer.to_dict()
        for key in ('asset_name', 'asset_code', 'rig_name', 'dest_rig_name', 'dest_company_name',
                    'requested_by_name', 'ops_approver_name', 'mgr_approver_name'):
            data[key] = getattr(row, key)
        allowed = TransferStateMachine.get_allowed_actions(TransferStatus(transfer.status))
        data['allowed_actions'] = {stage.value: [a.value for a in actions] for stage, actions in allowed.items()}
        data['cancellable'] = TransferStateMachine.can_cancel(transfer.status)
        return data

    @classmethod
    def list_transfers(cls, status: Optional[str] = None, priority: Optional[str] = None,
                       asset: Optional[str] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Args:
            status: Exact stored status
            priority: Exact priority
            asset: Asset id or asset code
            search: Case-insensitive match on transfer code, asset name or destination
        """
        stmt = cls._base_query()
        if status:
            stmt = stmt.where(Transfer.status == status)
        if priority:
            stmt = stmt.where(Transfer.priority == priority)
        if asset:
            asset_obj = resolve_ref(db.session, Asset, Asset.asset_code, asset)
            if asset_obj is None:
                return []
            stmt = stmt.where(Transfer.asset_id == asset_obj.id)
        if search:
            like = f"%{search.lower()}%"
            stmt = stmt.where(or_(
                func.lower(Transfer.transfer_id).like(like),
                func.lower(Asset.name).like(like),
                func.lower(Transfer.destination).like(like),
            ))
        stmt = stmt.order_by(Transfer.request_date.desc(), Transfer.transfer_id.desc())
        return [cls._serialize(row) for row in db.session.execute(stmt)]

    @classmethod
    def get_transfer(cls, ref) -> Dict[str, Any]:
        transfer = resolve_ref(db.session, Transfer, Transfer.transfer_id, ref)
        if transfer is None:
            raise NotFoundError('Transfer not found')
        row = db.session.execute(cls._base_query().where(Transfer.id == transfer.id)).one()
        return cls._serialize(row)
