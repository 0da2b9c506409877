"""
Dashboard API
"""

from flask import Blueprint, jsonify
from flask_login import current_user
from rigasset.auth import role_required
from rigasset.business.core.clock import get_clock
from rigasset.services.core.dashboard_service import DashboardService

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.get('')
@role_required()
def dashboard():
    return jsonify(DashboardService.summary(current_user.id, get_clock().today()))
