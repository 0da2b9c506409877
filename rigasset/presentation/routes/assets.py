"""
Asset read API: detail and audit history
"""

from flask import Blueprint, jsonify, request
from rigasset.auth import role_required
from rigasset.services.core.asset_service import AssetService

assets_bp = Blueprint('assets', __name__)


@assets_bp.get('/<ref>')
@role_required()
def get_asset(ref):
    return jsonify(AssetService.get_asset(ref))


@assets_bp.get('/<ref>/history')
@role_required()
def asset_history(ref):
    limit = request.args.get('limit', AssetService.HISTORY_LIMIT, type=int)
    return jsonify(AssetService.history(ref, limit=limit))
