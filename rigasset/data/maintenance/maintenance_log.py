from rigasset import db
from datetime import datetime
from rigasset.business.core.data_insertion_mixin import DataInsertionMixin


class MaintenanceLog(db.Model, DataInsertionMixin):
    """Immutable completion record, one per completion event."""
    __tablename__ = 'maintenance_logs'

    id = db.Column(db.Integer, primary_key=True)
    schedule_id = db.Column(
        db.Integer,
        db.ForeignKey('maintenance_schedules.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    completion_date = db.Column(db.Date, nullable=False)
    # Free-text technician name
    completed_by = db.Column(db.String(120), nullable=False)
    completed_by_user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    actual_hours = db.Column(db.Numeric(6, 2), nullable=True)
    actual_cost = db.Column(db.Numeric(18, 2), nullable=True)
    parts_used = db.Column(db.Text, nullable=True)
    work_notes = db.Column(db.Text, nullable=True)
    next_due_date = db.Column(db.Date, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint('actual_hours IS NULL OR actual_hours >= 0', name='chk_maint_log_hours'),
        db.CheckConstraint('actual_cost IS NULL OR actual_cost >= 0', name='chk_maint_log_cost'),
    )

    def __repr__(self):
        return f'<MaintenanceLog {self.id}: schedule {self.schedule_id} on {self.completion_date}>'
