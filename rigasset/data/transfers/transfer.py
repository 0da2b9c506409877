from rigasset.data.core.user_created_base import UserCreatedBase
from rigasset import db


class Transfer(UserCreatedBase):
    """
    A request to relocate one asset, decided in two ordered stages.

    Status, stage field names and enumeration values are persisted exactly
    as listed here. Mutate only through TransferWorkflow.
    """
    __tablename__ = 'transfers'

    PRIORITIES = ('Critical', 'High', 'Normal', 'Low')
    TRANSFER_TYPES = (
        'Field to Field',
        'Field to Warehouse',
        'Warehouse to Field',
        'Rig to Rig',
        'For Maintenance',
        'For Inspection',
        'Return to Owner',
    )
    DEFAULT_TRANSFER_TYPE = 'Field to Field'

    transfer_id = db.Column(db.String(30), unique=True, nullable=False)
    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id', ondelete='CASCADE'), nullable=False, index=True)
    current_location = db.Column(db.String(255), nullable=True)
    destination = db.Column(db.String(255), nullable=False)
    dest_rig_id = db.Column(db.Integer, db.ForeignKey('rigs.id', ondelete='SET NULL'), nullable=True)
    dest_company_id = db.Column(db.Integer, db.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True)
    priority = db.Column(db.String(20), nullable=False, default='Normal')
    transfer_type = db.Column(db.String(30), nullable=False, default=DEFAULT_TRANSFER_TYPE)
    reason = db.Column(db.Text, nullable=False)
    instructions = db.Column(db.Text, nullable=True)
    requested_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    request_date = db.Column(db.Date, nullable=False)
    required_date = db.Column(db.Date, nullable=True)
    status = db.Column(db.String(20), nullable=False, default='Pending', index=True)

    # Stage 1 - Operations Manager
    ops_approved_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    ops_action = db.Column(db.String(10), nullable=True)
    ops_date = db.Column(db.Date, nullable=True)
    ops_comment = db.Column(db.Text, nullable=True)

    # Stage 2 - Asset Manager
    mgr_approved_by = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    mgr_action = db.Column(db.String(10), nullable=True)
    mgr_date = db.Column(db.Date, nullable=True)
    mgr_comment = db.Column(db.Text, nullable=True)

    # Relationships (no backrefs)
    asset = db.relationship('Asset', foreign_keys=[asset_id])
    dest_rig = db.relationship('Rig', foreign_keys=[dest_rig_id])
    dest_company = db.relationship('Company', foreign_keys=[dest_company_id])
    requester = db.relationship('User', foreign_keys=[requested_by])
    ops_approver = db.relationship('User', foreign_keys=[ops_approved_by])
    mgr_approver = db.relationship('User', foreign_keys=[mgr_approved_by])

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('Pending','OpsApproved','Completed','Rejected','OnHold')",
            name='chk_transfers_status',
        ),
        db.CheckConstraint("priority IN ('Critical','High','Normal','Low')", name='chk_transfers_priority'),
        db.CheckConstraint("ops_action IS NULL OR ops_action IN ('approve','reject','hold')", name='chk_transfers_ops_action'),
        db.CheckConstraint("mgr_action IS NULL OR mgr_action IN ('approve','reject','hold')", name='chk_transfers_mgr_action'),
        db.CheckConstraint("required_date IS NULL OR required_date >= request_date", name='chk_transfers_dates'),
    )

    def __repr__(self):
        return f'<Transfer {self.transfer_id} ({self.status})>'
