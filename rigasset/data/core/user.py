from rigasset import db
from flask_login import UserMixin
from datetime import datetime
from rigasset.business.core.data_insertion_mixin import DataInsertionMixin


class Role:
    """Role names as stored on users.role"""
    ADMIN = 'Admin'
    ASSET_MANAGER = 'Asset Manager'
    OPERATIONS_MANAGER = 'Operations Manager'
    EDITOR = 'Editor'
    VIEWER = 'Viewer'

    ALL = (ADMIN, ASSET_MANAGER, OPERATIONS_MANAGER, EDITOR, VIEWER)
    WRITERS = (ADMIN, ASSET_MANAGER, OPERATIONS_MANAGER, EDITOR)


class User(UserMixin, DataInsertionMixin, db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    full_name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    role = db.Column(db.String(50), nullable=False, default=Role.VIEWER)
    department = db.Column(db.String(100), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='Active')
    # Issued outside this service; only looked up here
    api_token = db.Column(db.String(128), unique=True, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint(
            "role IN ('Admin','Asset Manager','Operations Manager','Editor','Viewer')",
            name='chk_users_role',
        ),
    )

    @property
    def is_active(self):
        return self.status == 'Active'

    def has_role(self, *roles):
        return self.role in roles

    def __repr__(self):
        return f'<User {self.username} ({self.role})>'
