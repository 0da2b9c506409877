from rigasset.data.core.user_created_base import UserCreatedBase
from rigasset import db


class Asset(UserCreatedBase):
    __tablename__ = 'assets'

    CATEGORIES = (
        'Drilling Equipment', 'Power Generation', 'Transportation',
        'Safety Equipment', 'Communication', 'Other',
    )

    asset_code = db.Column(db.String(30), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(50), nullable=False, default='Other')
    company_id = db.Column(db.Integer, db.ForeignKey('companies.id', ondelete='SET NULL'), nullable=True)
    rig_id = db.Column(db.Integer, db.ForeignKey('rigs.id', ondelete='SET NULL'), nullable=True)
    location = db.Column(db.String(255), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='Active')
    serial_number = db.Column(db.String(100), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    # Relationships (no backrefs)
    company = db.relationship('Company', foreign_keys=[company_id])
    rig = db.relationship('Rig', foreign_keys=[rig_id])

    def __repr__(self):
        return f'<Asset {self.asset_code} {self.name}>'
