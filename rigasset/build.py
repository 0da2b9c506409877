#!/usr/bin/env python3
"""
Database build for RigAsset
Creates tables and loads the demo reference data from data/build_data.json
"""

import json
import os
from datetime import date
from pathlib import Path
from rigasset import db
from rigasset.logger import get_logger

logger = get_logger("rigasset.build")

BUILD_DATA_FILE = Path(__file__).parent / 'data' / 'build_data.json'


def build_models():
    """Create every table registered on ``db``"""
    logger.info("Creating database tables")
    db.create_all()


def _parse_dates(record, *keys):
    for key in keys:
        if record.get(key):
            record[key] = date.fromisoformat(record[key])
    return record


def insert_build_data(data_file=BUILD_DATA_FILE):
    """
    Idempotently insert users, companies, rigs, assets and maintenance
    schedules. Rows whose unique code already exists are left untouched.

    Returns:
        dict: count of newly created rows per section
    """
    from rigasset.data.core.asset import Asset
    from rigasset.data.core.company import Company
    from rigasset.data.core.rig import Rig
    from rigasset.data.core.user import User
    from rigasset.data.maintenance.maintenance_schedule import MaintenanceSchedule

    with open(data_file, 'r', encoding='utf-8') as f:
        build_data = json.load(f)

    created = {}
    try:
        admin_token = os.environ.get('ADMIN_API_TOKEN')
        created['Users'] = 0
        for user_data in build_data.get('Users', []):
            record = dict(user_data)
            if record['username'] == 'admin' and admin_token:
                record['api_token'] = admin_token
            _, was_created = User.find_or_create_from_dict(record, lookup_fields=['username'])
            created['Users'] += int(was_created)
        db.session.flush()

        companies = {}
        created['Companies'] = 0
        for company_data in build_data.get('Companies', []):
            company, was_created = Company.find_or_create_from_dict(company_data, lookup_fields=['company_code'])
            companies[company.company_code] = company
            created['Companies'] += int(was_created)
        db.session.flush()

        rigs = {}
        created['Rigs'] = 0
        for rig_data in build_data.get('Rigs', []):
            record = dict(rig_data)
            record['company_id'] = companies[record.pop('company')].id
            rig, was_created = Rig.find_or_create_from_dict(record, lookup_fields=['rig_code'])
            rigs[rig.rig_code] = rig
            created['Rigs'] += int(was_created)
        db.session.flush()

        assets = {}
        created['Assets'] = 0
        for asset_data in build_data.get('Assets', []):
            record = dict(asset_data)
            record['company_id'] = companies[record.pop('company')].id
            record['rig_id'] = rigs[record.pop('rig')].id
            asset, was_created = Asset.find_or_create_from_dict(record, lookup_fields=['asset_code'])
            assets[asset.asset_code] = asset
            created['Assets'] += int(was_created)
        db.session.flush()

        created['Maintenance_Schedules'] = 0
        for schedule_data in build_data.get('Maintenance_Schedules', []):
            record = _parse_dates(dict(schedule_data), 'last_done_date', 'next_due_date')
            record['asset_id'] = assets[record.pop('asset')].id
            _, was_created = MaintenanceSchedule.find_or_create_from_dict(record, lookup_fields=['pm_id'])
            created['Maintenance_Schedules'] += int(was_created)

        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error(f"Build data insertion failed: {e}")
        raise

    logger.info(f"Build data inserted: {created}")
    return created


def build_database(app, with_data=True):
    """Create tables and, unless disabled, load the demo data"""
    with app.app_context():
        logger.info(f"Starting database build (data={'yes' if with_data else 'no'})")
        build_models()
        if with_data:
            insert_build_data()
        logger.info("Database build completed successfully")
