"""
Maintenance API endpoints
"""
from datetime import date

import pytest
from rigasset import db
from rigasset.data.core.user import Role
from rigasset.data.maintenance.maintenance_schedule import MaintenanceSchedule
from rigasset.test.helpers import make_schedule


@pytest.fixture()
def schedules(app, seed):
    """Overdue and due-soon tasks on Rig 2, a far-off task on Rig 5, a finished one on Rig 5"""
    with app.app_context():
        make_schedule('PM-001', seed.asset_ids['AST-004'], date(2025, 1, 10), task_name='Pump Valve Inspection')
        make_schedule('PM-002', seed.asset_ids['AST-004'], date(2025, 1, 19), alert_days=7,
                      task_name='Liner Replacement', priority='High')
        make_schedule('PM-003', seed.asset_ids['AST-009'], date(2025, 3, 1), task_type='Lubrication',
                      task_name='Rotary Table Greasing')
        make_schedule('PM-004', seed.asset_ids['AST-009'], date(2024, 12, 1),
                      status=MaintenanceSchedule.COMPLETED, task_name='Old Calibration')


def test_list_in_urgency_order(client, auth_headers, schedules):
    body = client.get('/api/maintenance', headers=auth_headers(Role.VIEWER)).get_json()
    assert body['total'] == 4
    assert [(s['pm_id'], s['live_status']) for s in body['data']] == [
        ('PM-001', 'Overdue'),
        ('PM-002', 'Due Soon'),
        ('PM-004', 'Completed'),
        ('PM-003', 'Scheduled'),
    ]
    first = body['data'][0]
    assert first['days_until_due'] == -5
    assert first['asset_code'] == 'AST-004'
    assert first['rig_name'] == 'Rig 2'
    assert first['log_count'] == 0


def test_list_filters(client, auth_headers, schedules):
    headers = auth_headers(Role.VIEWER)

    def codes(query):
        return [s['pm_id'] for s in client.get(f'/api/maintenance?{query}', headers=headers).get_json()['data']]

    assert codes('status=Overdue') == ['PM-001']
    assert codes('status=Due%20Soon') == ['PM-002']
    assert codes('status=Completed') == ['PM-004']
    assert codes('rig=Rig%205') == ['PM-004', 'PM-003']
    assert codes('asset=AST-009&type=Lubrication') == ['PM-003']
    assert codes('priority=High') == ['PM-002']
    assert codes('search=liner') == ['PM-002']


def test_alerts(client, auth_headers, schedules):
    body = client.get('/api/maintenance/alerts', headers=auth_headers(Role.VIEWER)).get_json()
    assert [(a['pm_id'], a['alert_type']) for a in body['alerts']] == [('PM-001', 'Overdue'), ('PM-002', 'Due Soon')]
    assert body['overdue'] == 1


def test_by_rig(client, auth_headers, schedules):
    body = client.get('/api/maintenance/by-rig', headers=auth_headers(Role.VIEWER)).get_json()
    summary = {row['rig_code']: row for row in body}
    assert summary['RIG02']['total_tasks'] == 2
    assert summary['RIG02']['overdue'] == 1
    assert summary['RIG02']['due_soon'] == 1
    assert summary['RIG05']['total_tasks'] == 2
    assert summary['RIG05']['completed'] == 1
    assert summary['RIG05']['overdue'] == 0


def test_create_schedule(client, auth_headers, seed):
    response = client.post('/api/maintenance', json={
        'pmId': 'PM-100',
        'assetId': 'AST-009',
        'taskName': 'Rotary Table Bearing Check',
        'taskType': 'Inspection',
        'frequencyDays': 14,
        'nextDueDate': '2025-01-20',
        'estimatedHours': 2.5,
    }, headers=auth_headers(Role.EDITOR))
    assert response.status_code == 201
    body = response.get_json()
    assert body['pm_id'] == 'PM-100'
    assert body['asset_code'] == 'AST-009'
    assert body['rig_name'] == 'Rig 5'
    assert body['alert_days'] == 14
    assert body['priority'] == 'Normal'
    assert body['live_status'] == 'Due Soon'
    assert body['estimated_hours'] == 2.5
    assert body['logs'] == []


@pytest.mark.parametrize('overrides, status', [
    ({'taskName': None}, 400),
    ({'taskType': 'Painting'}, 400),
    ({'frequencyDays': 'weekly'}, 400),
    ({'assetId': 'AST-404'}, 404),
    ({'pmId': 'PM-001'}, 409),
])
def test_create_schedule_errors(client, auth_headers, schedules, overrides, status):
    body = {
        'pmId': 'PM-200', 'assetId': 'AST-004', 'taskName': 'Check', 'taskType': 'Inspection',
        'frequencyDays': 30, 'nextDueDate': '2025-02-01',
    }
    body.update(overrides)
    response = client.post('/api/maintenance', json=body, headers=auth_headers(Role.EDITOR))
    assert response.status_code == status


def test_viewer_cannot_create(client, auth_headers, seed):
    response = client.post('/api/maintenance', json={'pmId': 'PM-300'}, headers=auth_headers(Role.VIEWER))
    assert response.status_code == 403


def test_update_schedule(client, auth_headers, schedules):
    response = client.put('/api/maintenance/PM-001', json={'status': 'In Progress', 'technician': 'Ahmed Khalid'},
                          headers=auth_headers(Role.EDITOR))
    assert response.status_code == 200
    body = response.get_json()
    assert body['status'] == 'In Progress'
    assert body['live_status'] == 'In Progress'
    assert body['technician'] == 'Ahmed Khalid'
    assert body['task_name'] == 'Pump Valve Inspection'


def test_complete_and_logs(app, client, auth_headers, schedules):
    response = client.post('/api/maintenance/PM-001/complete', json={
        'completionDate': '2025-01-15',
        'completedBy': 'Ahmed Khalid',
        'actualHours': '4',
        'workNotes': 'Replaced two valve seats',
    }, headers=auth_headers(Role.EDITOR))
    assert response.status_code == 200
    body = response.get_json()
    assert body['schedule']['last_done_date'] == '2025-01-15'
    assert body['schedule']['next_due_date'] == '2025-02-14'
    assert body['schedule']['live_status'] == 'Scheduled'
    assert len(body['schedule']['logs']) == 1
    assert body['log']['completed_by'] == 'Ahmed Khalid'
    assert body['log']['actual_hours'] == 4.0

    logs = client.get('/api/maintenance/PM-001/logs', headers=auth_headers(Role.VIEWER)).get_json()
    assert [log['work_notes'] for log in logs] == ['Replaced two valve seats']


def test_complete_requires_date_and_person(client, auth_headers, schedules):
    response = client.post('/api/maintenance/PM-001/complete', json={'completedBy': 'Ahmed Khalid'},
                           headers=auth_headers(Role.EDITOR))
    assert response.status_code == 400
    assert response.get_json() == {'error': 'completionDate and completedBy are required'}


def test_delete_permissions(app, client, auth_headers, schedules):
    response = client.delete('/api/maintenance/PM-003', headers=auth_headers(Role.EDITOR))
    assert response.status_code == 403

    response = client.delete('/api/maintenance/PM-003', headers=auth_headers(Role.ASSET_MANAGER))
    assert response.status_code == 200
    assert response.get_json() == {'message': 'Schedule PM-003 deleted'}

    with app.app_context():
        assert db.session.query(MaintenanceSchedule).filter_by(pm_id='PM-003').first() is None

    response = client.get('/api/maintenance/PM-003', headers=auth_headers(Role.VIEWER))
    assert response.status_code == 404
