"""
Transfer API
"""

from flask import Blueprint, jsonify, request
from flask_login import current_user
from rigasset.auth import role_required
from rigasset.business.transfers.workflow import TransferDraft, TransferWorkflow
from rigasset.data.core.user import Role
from rigasset.data.transfers.transfer import Transfer
from rigasset.logger import get_logger
from rigasset.presentation.routes.payload import json_body, parse_date, text
from rigasset.services.transfers.transfer_query_service import TransferQueryService
from rigasset.utils.logging_sanitizer import sanitize_dict

logger = get_logger("rigasset.api.transfers")

transfers_bp = Blueprint('transfers', __name__)


@transfers_bp.get('')
@role_required()
def list_transfers():
    rows = TransferQueryService.list_transfers(
        status=request.args.get('status'),
        priority=request.args.get('priority'),
        asset=request.args.get('asset'),
        search=request.args.get('search'),
    )
    return jsonify({'data': rows, 'total': len(rows)})


@transfers_bp.get('/<ref>')
@role_required()
def get_transfer(ref):
    return jsonify(TransferQueryService.get_transfer(ref))


@transfers_bp.post('')
@role_required(*Role.WRITERS)
def submit_transfer():
    data = json_body()
    logger.debug(f"Transfer submission from {current_user.username}: {sanitize_dict(data)}")

    draft = TransferDraft(
        transfer_id=text(data, 'transferId'),
        asset_ref=data.get('assetId'),
        destination=text(data, 'destination'),
        reason=text(data, 'reason'),
        priority=data.get('priority'),
        transfer_type=data.get('transferType') or Transfer.DEFAULT_TRANSFER_TYPE,
        dest_rig_ref=data.get('destRigId'),
        dest_company_ref=data.get('destCompanyId'),
        instructions=text(data, 'instructions'),
        request_date=parse_date(data, 'requestDate'),
        required_date=parse_date(data, 'requiredDate'),
    )
    transfer = TransferWorkflow().submit(draft, actor_id=current_user.id)
    return jsonify(TransferQueryService.get_transfer(transfer.id)), 201


@transfers_bp.post('/<ref>/approve-ops')
@role_required(Role.ADMIN, Role.OPERATIONS_MANAGER)
def approve_ops(ref):
    data = json_body()
    transfer = TransferWorkflow().approve_ops(ref, data.get('action'), data.get('comment'), actor_id=current_user.id)
    return jsonify(TransferQueryService.get_transfer(transfer.id))


@transfers_bp.post('/<ref>/approve-mgr')
@role_required(Role.ADMIN, Role.ASSET_MANAGER)
def approve_mgr(ref):
    data = json_body()
    transfer = TransferWorkflow().approve_mgr(ref, data.get('action'), data.get('comment'), actor_id=current_user.id)
    return jsonify(TransferQueryService.get_transfer(transfer.id))


@transfers_bp.delete('/<ref>')
@role_required(*Role.WRITERS)
def cancel_transfer(ref):
    code = TransferWorkflow().cancel(ref, actor_id=current_user.id)
    return jsonify({'message': f"Transfer {code} cancelled"})
