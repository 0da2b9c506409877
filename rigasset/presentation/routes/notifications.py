"""
Notification inbox API
"""

from flask import Blueprint, jsonify, request
from flask_login import current_user
from rigasset.auth import role_required
from rigasset.presentation.routes.payload import query_flag
from rigasset.services.core.notification_service import NotificationService

notifications_bp = Blueprint('notifications', __name__)


@notifications_bp.get('')
@role_required()
def inbox():
    limit = request.args.get('limit', 50, type=int)
    return jsonify(NotificationService.inbox(current_user.id, unread_only=query_flag('unread'), limit=limit))


@notifications_bp.put('/read-all')
@role_required()
def read_all():
    NotificationService.mark_all_read(current_user.id)
    return jsonify({'message': 'All notifications marked as read'})


@notifications_bp.put('/<int:notification_id>/read')
@role_required()
def read_one(notification_id):
    NotificationService.mark_read(current_user.id, notification_id)
    return jsonify({'message': 'Notification marked as read'})


@notifications_bp.delete('/<int:notification_id>')
@role_required()
def delete_one(notification_id):
    NotificationService.delete(current_user.id, notification_id)
    return jsonify({'message': 'Notification deleted'})


@notifications_bp.delete('')
@role_required()
def clear_read():
    cleared = NotificationService.clear_read(current_user.id)
    return jsonify({'message': f"{cleared} read notifications cleared"})
