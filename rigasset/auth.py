"""
Caller identity for the API

Requests authenticate with ``Authorization: Bearer <api_token>``. Tokens
are issued elsewhere; this module only resolves them to an active user
through Flask-Login and guards routes by role.
"""

from functools import wraps
from flask import jsonify, request
from flask_login import current_user
from rigasset.logger import get_logger

logger = get_logger("rigasset.auth")


def _bearer_token(req):
    header = req.headers.get('Authorization', '')
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def register_request_loader(login_manager):
    """Attach the token loader and the JSON 401 response to ``login_manager``"""
    from rigasset.data.core.user import User

    @login_manager.request_loader
    def load_user_from_request(req):
        token = _bearer_token(req)
        if token is None:
            return None
        user = User.query.filter_by(api_token=token).first()
        if user is None or not user.is_active:
            logger.warning(f"Rejected token for {req.method} {req.path}")
            return None
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        if _bearer_token(request) is None:
            return jsonify({'error': 'Access token required'}), 401
        return jsonify({'error': 'Account not found or inactive'}), 401


def role_required(*roles):
    """
    Require an authenticated caller; when ``roles`` are given, the caller's
    role must be one of them.
    """
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            from rigasset import login_manager

            if not current_user.is_authenticated:
                return login_manager.unauthorized()
            if roles and not current_user.has_role(*roles):
                logger.warning(
                    f"User {current_user.username} ({current_user.role}) denied {request.method} {request.path}"
                )
                return jsonify({
                    'error': f"Access denied. Required role: {' or '.join(roles)}",
                    'yourRole': current_user.role,
                }), 403
            return view(*args, **kwargs)
        return wrapped
    return decorator
