from rigasset.data.core.user_created_base import UserCreatedBase
from rigasset import db


class Company(UserCreatedBase):
    __tablename__ = 'companies'

    company_code = db.Column(db.String(20), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    company_type = db.Column(db.String(50), nullable=True)
    country = db.Column(db.String(100), nullable=True)
    status = db.Column(db.String(20), nullable=False, default='Active')

    def __repr__(self):
        return f'<Company {self.company_code} {self.name}>'
