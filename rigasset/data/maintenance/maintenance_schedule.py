from rigasset.data.core.user_created_base import UserCreatedBase
from rigasset import db


class MaintenanceSchedule(UserCreatedBase):
    """
    Recurring upkeep task bound to one asset.

    ``status`` is the stored lifecycle flag. The user-visible urgency is
    derived at read time by the status engine and never written back.
    """
    __tablename__ = 'maintenance_schedules'

    SCHEDULED = 'Scheduled'
    IN_PROGRESS = 'In Progress'
    COMPLETED = 'Completed'
    CANCELLED = 'Cancelled'
    STATUSES = (SCHEDULED, IN_PROGRESS, COMPLETED, CANCELLED)

    TASK_TYPES = (
        'Oil Change', 'Inspection', 'Calibration', 'Overhaul',
        'Filter Replacement', 'Lubrication', 'Pressure Test',
        'Electrical Check', 'Safety Check', 'General Service',
    )
    PRIORITIES = ('Critical', 'High', 'Normal', 'Low')
    DEFAULT_FREQUENCY_DAYS = 30
    DEFAULT_ALERT_DAYS = 14

    pm_id = db.Column(db.String(30), unique=True, nullable=False)
    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id', ondelete='CASCADE'), nullable=False, index=True)
    task_name = db.Column(db.String(200), nullable=False)
    task_type = db.Column(db.String(50), nullable=False)
    priority = db.Column(db.String(20), nullable=False, default='Normal')
    frequency_days = db.Column(db.Integer, nullable=False, default=DEFAULT_FREQUENCY_DAYS)
    last_done_date = db.Column(db.Date, nullable=True)
    next_due_date = db.Column(db.Date, nullable=False, index=True)
    alert_days = db.Column(db.Integer, nullable=False, default=DEFAULT_ALERT_DAYS)
    technician = db.Column(db.String(120), nullable=True)
    estimated_hours = db.Column(db.Numeric(6, 2), nullable=True)
    estimated_cost = db.Column(db.Numeric(18, 2), nullable=True)
    # Optional reference to an external CMMS / ERP work order
    work_order_no = db.Column(db.String(50), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=SCHEDULED)
    notes = db.Column(db.Text, nullable=True)

    # Relationships (no backrefs)
    asset = db.relationship('Asset', foreign_keys=[asset_id])
    logs = db.relationship(
        'MaintenanceLog',
        order_by='MaintenanceLog.completion_date.desc()',
        lazy='dynamic',
        cascade='all, delete-orphan',
        passive_deletes=True,
    )

    __table_args__ = (
        db.CheckConstraint('frequency_days > 0', name='chk_maint_frequency'),
        db.CheckConstraint('alert_days >= 0', name='chk_maint_alert_days'),
        db.CheckConstraint(
            "status IN ('Scheduled','In Progress','Completed','Cancelled')",
            name='chk_maint_status',
        ),
        db.CheckConstraint(
            'last_done_date IS NULL OR next_due_date >= last_done_date',
            name='chk_maint_dates',
        ),
    )

    def __repr__(self):
        return f'<MaintenanceSchedule {self.pm_id} {self.task_name} ({self.status})>'
