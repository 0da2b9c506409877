"""
Notification inbox endpoints, fed by the transfer workflow
"""
import pytest
from rigasset.data.core.user import Role


@pytest.fixture()
def completed_transfer(client, auth_headers, seed):
    """Submit, ops-approve and finally approve one transfer"""
    client.post('/api/transfers', json={
        'transferId': 'TR-2025-010', 'assetId': 'AST-004', 'destination': 'DJ Basin, CO',
        'destRigId': 'RIG05', 'reason': 'Rig 5 spud', 'priority': 'Normal',
    }, headers=auth_headers(Role.EDITOR))
    client.post('/api/transfers/TR-2025-010/approve-ops', json={'action': 'approve', 'comment': 'ok'},
                headers=auth_headers(Role.OPERATIONS_MANAGER))
    client.post('/api/transfers/TR-2025-010/approve-mgr', json={'action': 'approve', 'comment': 'ok'},
                headers=auth_headers(Role.ASSET_MANAGER))


def inbox(client, headers, query=''):
    return client.get(f'/api/notifications{query}', headers=headers).get_json()


def test_inbox_per_role(client, auth_headers, completed_transfer):
    ops = inbox(client, auth_headers(Role.OPERATIONS_MANAGER))
    assert [n['title'] for n in ops['notifications']] == ['Transfer Completed', 'New Transfer Request']
    assert ops['unreadCount'] == 2

    manager = inbox(client, auth_headers(Role.ASSET_MANAGER))
    assert [n['title'] for n in manager['notifications']] == ['Transfer Completed', 'Transfer Awaiting Final Approval']

    viewer = inbox(client, auth_headers(Role.VIEWER))
    assert [n['title'] for n in viewer['notifications']] == ['Transfer Completed']
    assert viewer['notifications'][0]['user_id'] is None
    assert viewer['notifications'][0]['type'] == 'success'


def test_mark_read_and_unread_filter(client, auth_headers, completed_transfer):
    headers = auth_headers(Role.OPERATIONS_MANAGER)
    request_note = inbox(client, headers)['notifications'][1]

    response = client.put(f"/api/notifications/{request_note['id']}/read", headers=headers)
    assert response.status_code == 200

    unread = inbox(client, headers, '?unread=true')
    assert [n['title'] for n in unread['notifications']] == ['Transfer Completed']
    assert unread['unreadCount'] == 1


def test_cannot_touch_someone_elses_notification(client, auth_headers, completed_transfer):
    request_note = inbox(client, auth_headers(Role.OPERATIONS_MANAGER))['notifications'][1]
    viewer = auth_headers(Role.VIEWER)
    assert client.put(f"/api/notifications/{request_note['id']}/read", headers=viewer).status_code == 404
    assert client.delete(f"/api/notifications/{request_note['id']}", headers=viewer).status_code == 404


def test_read_all_then_clear(client, auth_headers, completed_transfer):
    headers = auth_headers(Role.ASSET_MANAGER)
    assert client.put('/api/notifications/read-all', headers=headers).status_code == 200
    assert inbox(client, headers)['unreadCount'] == 0

    response = client.delete('/api/notifications', headers=headers)
    assert response.get_json() == {'message': '2 read notifications cleared'}
    assert inbox(client, headers)['notifications'] == []


def test_delete_one(client, auth_headers, completed_transfer):
    headers = auth_headers(Role.EDITOR)
    note = inbox(client, headers)['notifications'][0]
    assert client.delete(f"/api/notifications/{note['id']}", headers=headers).status_code == 200
    assert inbox(client, headers)['notifications'] == []


def test_limit(client, auth_headers, completed_transfer):
    body = inbox(client, auth_headers(Role.OPERATIONS_MANAGER), '?limit=1')
    assert len(body['notifications']) == 1
    assert body['unreadCount'] == 2
