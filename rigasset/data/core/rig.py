from rigasset.data.core.user_created_base import UserCreatedBase
from rigasset import db


class Rig(UserCreatedBase):
    __tablename__ = 'rigs'

    rig_code = db.Column(db.String(20), unique=True, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    rig_type = db.Column(db.String(50), nullable=True)
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True)
    location = db.Column(db.String(255), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='Active')

    # Relationships (no backrefs)
    company = db.relationship('Company', foreign_keys=[company_id])

    def __repr__(self):
        return f'<Rig {self.rig_code} {self.name}>'
