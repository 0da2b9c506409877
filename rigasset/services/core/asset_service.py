"""
Asset Service
Asset detail with rig and company names, and the asset's audit history.
"""

from typing import Any, Dict, List
from sqlalchemy import select
from rigasset import db
from rigasset.business.core.errors import NotFoundError
from rigasset.business.core.persistence import resolve_ref
from rigasset.data.core.asset import Asset
from rigasset.data.core.asset_history import AssetHistory
from rigasset.data.core.user import User


class AssetService:

    HISTORY_LIMIT = 50

    @staticmethod
    def _find(ref) -> Asset:
        asset = resolve_ref(db.session, Asset, Asset.asset_code, ref)
        if asset is None:
            raise NotFoundError('Asset not found')
        return asset

    @classmethod
    def get_asset(cls, ref) -> Dict[str, Any]:
        asset = cls._find(ref)
        data = asset.to_dict()
        data['rig_name'] = asset.rig.name if asset.rig else None
        data['rig_code'] = asset.rig.rig_code if asset.rig else None
        data['company_name'] = asset.company.name if asset.company else None
        data['company_code'] = asset.company.company_code if asset.company else None
        return data

    @classmethod
    def history(cls, ref, limit: int = HISTORY_LIMIT) -> List[Dict[str, Any]]:
        """Newest entries first, each with the name of the user who made the change"""
        asset = cls._find(ref)
        stmt = (
            select(AssetHistory, User.full_name)
            .outerjoin(User, User.id == AssetHistory.changed_by)
            .where(AssetHistory.asset_id == asset.id)
            .order_by(AssetHistory.created_at.desc(), AssetHistory.id.desc())
            .limit(limit)
        )
        rows = []
        for entry, changed_by_name in db.session.execute(stmt):
            data = entry.to_dict()
            data['changed_by_name'] = changed_by_name
            rows.append(data)
        return rows
