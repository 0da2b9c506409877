"""
Pytest configuration and fixtures for the RigAsset test suite
"""
import os

# File logging off before the rigasset logger is first configured
os.environ.setdefault('LOG_FILE', '')

from types import SimpleNamespace

import pytest
from rigasset import create_app
from rigasset import db as _db
from rigasset.business.core.clock import FixedClock
from rigasset.data.core.asset import Asset
from rigasset.data.core.company import Company
from rigasset.data.core.rig import Rig
from rigasset.data.core.user import Role, User
from rigasset.test.helpers import TODAY

USERS = {
    Role.ADMIN: ('admin', 'Ahmad Mohammed'),
    Role.ASSET_MANAGER: ('sara', 'Sara Al-Rashid'),
    Role.OPERATIONS_MANAGER: ('james', 'James Miller'),
    Role.EDITOR: ('layla', 'Layla Hassan'),
    Role.VIEWER: ('david', 'David Chen'),
}


@pytest.fixture()
def clock():
    return FixedClock(TODAY)


@pytest.fixture()
def app(clock):
    """Flask app on a private in-memory database"""
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret-key',
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'RATELIMIT_ENABLED': False,
        'CLOCK': clock,
    })
    with app.app_context():
        _db.create_all()

    yield app

    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def ctx(app):
    """Application context for tests that call the core directly"""
    with app.app_context():
        yield app
        _db.session.remove()


@pytest.fixture()
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture()
def seed(app):
    """
    Users for every role (plus an inactive Operations Manager), two
    companies, Rig 2 and Rig 5, and one asset on each rig.
    """
    with app.app_context():
        users = {}
        for role, (username, full_name) in USERS.items():
            user = User(username=username, full_name=full_name, email=f'{username}@rigasset.com',
                        role=role, api_token=f'token-{username}')
            _db.session.add(user)
            users[role] = user
        retired = User(username='omar', full_name='Omar Retired', email='omar@rigasset.com',
                       role=Role.OPERATIONS_MANAGER, status='Inactive', api_token='token-omar')
        _db.session.add(retired)

        adc = Company(company_code='CMP001', name='Arabian Drilling Company', status='Active')
        pat = Company(company_code='CMP003', name='Patterson-UTI Energy', status='Active')
        _db.session.add_all([adc, pat])
        _db.session.flush()

        rig2 = Rig(rig_code='RIG02', name='Rig 2', company_id=adc.id, location='Ghawar Field – Block B')
        rig5 = Rig(rig_code='RIG05', name='Rig 5', company_id=pat.id, location='DJ Basin, CO')
        _db.session.add_all([rig2, rig5])
        _db.session.flush()

        pumps = Asset(asset_code='AST-004', name='Mud Pumps (3x)', category='Drilling Equipment',
                      company_id=adc.id, rig_id=rig2.id, location='Ghawar Field – Block B', status='Active')
        table = Asset(asset_code='AST-009', name='Rotary Table 37.5"', category='Drilling Equipment',
                      company_id=pat.id, rig_id=rig5.id, location='DJ Basin, CO', status='Active')
        _db.session.add_all([pumps, table])
        _db.session.commit()

        return SimpleNamespace(
            user_ids={role: user.id for role, user in users.items()},
            retired_id=retired.id,
            company_ids={'CMP001': adc.id, 'CMP003': pat.id},
            rig_ids={'RIG02': rig2.id, 'RIG05': rig5.id},
            asset_ids={'AST-004': pumps.id, 'AST-009': table.id},
        )


@pytest.fixture()
def auth_headers(seed):
    """auth_headers(role) -> Authorization header for that role's seeded user"""
    def _headers(role=Role.ADMIN):
        username = USERS[role][0]
        return {'Authorization': f'Bearer token-{username}'}
    return _headers

