from rigasset import db
from datetime import datetime
from rigasset.business.core.data_insertion_mixin import DataInsertionMixin


class Notification(db.Model, DataInsertionMixin):
    __tablename__ = 'notifications'

    TYPES = ('info', 'success', 'warning', 'error')
    ENTITY_TYPES = ('asset', 'maintenance', 'transfer', 'contract', 'certificate', 'work_order')

    id = db.Column(db.Integer, primary_key=True)
    # NULL = broadcast notification visible to all users
    user_id = db.Column(db.Integer, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=True, index=True)
    type = db.Column(db.String(20), nullable=False, default='info')
    icon = db.Column(db.String(50), nullable=False, default='bell')
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    entity_type = db.Column(db.String(30), nullable=True)
    entity_id = db.Column(db.Integer, nullable=True)
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint("type IN ('info','success','warning','error')", name='chk_notifications_type'),
    )

    @property
    def is_broadcast(self):
        return self.user_id is None

    def __repr__(self):
        target = 'broadcast' if self.is_broadcast else f'user {self.user_id}'
        return f'<Notification {self.id}: {self.title} ({target})>'
