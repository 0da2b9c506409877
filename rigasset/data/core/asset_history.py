from rigasset import db
from datetime import datetime
from rigasset.business.core.data_insertion_mixin import DataInsertionMixin


class AssetHistory(db.Model, DataInsertionMixin):
    """
    Append-only audit trail for an asset.

    Rows are written on asset creation, update and transfer completion and
    are never updated afterwards.
    """
    __tablename__ = 'asset_history'

    id = db.Column(db.Integer, primary_key=True)
    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id', ondelete='CASCADE'), nullable=False, index=True)
    action = db.Column(db.String(100), nullable=False)
    changed_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    old_values = db.Column(db.JSON, nullable=True)
    new_values = db.Column(db.JSON, nullable=True)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<AssetHistory {self.id}: Asset {self.asset_id} {self.action}>'
