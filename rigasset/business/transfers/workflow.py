"""
Transfer approval workflow

Drives a transfer from submission through the Operations Manager stage
and the Asset Manager stage. Allowed moves come from TransferStateMachine;
every status write is a conditional update keyed on the status the
decision was made against, so a decision based on a stale read fails with
ConflictError instead of overwriting a newer one.

The final approval (status change, asset relocation, history entry and
completion broadcast) is one unit of work. Submission and stage-1
notifications are sent after their change has committed and never undo it.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional
from sqlalchemy.exc import IntegrityError
from rigasset.business.core.clock import Clock, get_clock
from rigasset.business.core.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from rigasset.business.core.notifications import NotificationEmitter
from rigasset.business.core.persistence import SqlPersistence
from rigasset.business.core.role_directory import SqlRoleDirectory
from rigasset.business.core.unit_of_work import atomic
from rigasset.business.transfers.narrator import TransferNarrator
from rigasset.business.transfers.relocation import RelocationApplier
from rigasset.business.transfers.state_machine import (
    ApprovalAction,
    ApprovalStage,
    TransferStateMachine,
    TransferStatus,
)
from rigasset.data.core.user import Role
from rigasset.data.transfers.transfer import Transfer
from rigasset.logger import get_logger

logger = get_logger("rigasset.domain.transfers")


@dataclass
class TransferDraft:
    """Fields a requester supplies when submitting a transfer"""
    transfer_id: str
    asset_ref: object
    destination: str
    reason: str
    priority: str
    transfer_type: str = Transfer.DEFAULT_TRANSFER_TYPE
    dest_rig_ref: object = None
    dest_company_ref: object = None
    instructions: Optional[str] = None
    request_date: Optional[date] = None
    required_date: Optional[date] = None


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class TransferWorkflow:
    """
    Two-stage approval of asset transfers.

    Collaborators are injected; omitted ones default to the SQL-backed
    implementations and the clock registered on the running app.
    """

    def __init__(self, persistence=None, notifier: NotificationEmitter = None,
                 clock: Clock = None, relocation: RelocationApplier = None):
        self.persistence = persistence or SqlPersistence()
        self.session = self.persistence.session
        self.notifier = notifier or NotificationEmitter(SqlRoleDirectory(self.session), self.session)
        self.clock = clock or get_clock()
        self.relocation = relocation or RelocationApplier(self.persistence)

    # Submission

    def submit(self, draft: TransferDraft, actor_id: Optional[int] = None) -> Transfer:
        """
        Create a Pending transfer and notify Operations Managers.

        Raises:
            ValidationError: Missing or malformed field
            NotFoundError: Asset reference does not resolve
            ConflictError: Transfer code already used
        """
        self._validate_draft(draft)
        request_date = draft.request_date or self.clock.today()
        if draft.required_date is not None and draft.required_date < request_date:
            raise ValidationError('Required date cannot be before the request date')

        asset = self.persistence.find_asset_by_ref(draft.asset_ref)
        dest_rig_id = self._resolve_optional(draft.dest_rig_ref, self.persistence.find_rig_by_ref, 'Destination rig')
        dest_company_id = self._resolve_optional(
            draft.dest_company_ref, self.persistence.find_company_by_ref, 'Destination company'
        )

        code = draft.transfer_id.strip()
        if self.persistence.transfer_code_exists(code):
            raise ConflictError(f"Transfer {code} already exists")

        transfer = Transfer(
            transfer_id=code,
            asset_id=asset.id,
            current_location=asset.location,
            destination=draft.destination.strip(),
            dest_rig_id=dest_rig_id,
            dest_company_id=dest_company_id,
            priority=draft.priority,
            transfer_type=draft.transfer_type,
            reason=draft.reason.strip(),
            instructions=draft.instructions or None,
            requested_by=actor_id,
            request_date=request_date,
            required_date=draft.required_date,
            status=TransferStateMachine.INITIAL.value,
            created_by_id=actor_id,
            updated_by_id=actor_id,
        )

        try:
            with atomic(self.session):
                self.persistence.save_transfer(transfer)
        except PersistenceError as e:
            # A concurrent submission took the code between the check and the insert
            if isinstance(e.__cause__, IntegrityError) and self.persistence.transfer_code_exists(code):
                raise ConflictError(f"Transfer {code} already exists") from e
            raise
        logger.info(f"Transfer {code} submitted for asset {asset.asset_code} by user {actor_id}")

        with self.notifier.detached() as notifier:
            notifier.notify_role(Role.OPERATIONS_MANAGER, TransferNarrator.submitted(transfer))

        return transfer

    # Decisions

    def approve_ops(self, ref, action, comment, actor_id: Optional[int] = None) -> Transfer:
        """
        Stage 1 decision. Approval notifies Admins and Asset Managers once
        the decision has committed.
        """
        action, comment = self._validate_decision(action, comment)
        transfer = self.persistence.find_transfer_by_ref(ref)
        target = TransferStateMachine.next_status(ApprovalStage.OPERATIONS, transfer.status, action)

        with atomic(self.session):
            self._transition(transfer, ApprovalStage.OPERATIONS, target, {
                'ops_approved_by': actor_id,
                'ops_action': action.value,
                'ops_date': self.clock.today(),
                'ops_comment': comment,
            }, actor_id)
        logger.info(f"Transfer {transfer.transfer_id} {action.value} at ops stage -> {target.value}")

        if action is ApprovalAction.APPROVE:
            with self.notifier.detached() as notifier:
                notifier.notify_roles(
                    [Role.ADMIN, Role.ASSET_MANAGER],
                    TransferNarrator.awaiting_final_approval(transfer),
                )

        return transfer

    def approve_mgr(self, ref, action, comment, actor_id: Optional[int] = None) -> Transfer:
        """
        Stage 2 decision. Approval relocates the asset, records its history
        and broadcasts completion in the same unit of work as the status
        change.
        """
        action, comment = self._validate_decision(action, comment)
        transfer = self.persistence.find_transfer_by_ref(ref)
        target = TransferStateMachine.next_status(ApprovalStage.ASSET_MANAGER, transfer.status, action)

        with atomic(self.session):
            self._transition(transfer, ApprovalStage.ASSET_MANAGER, target, {
                'mgr_approved_by': actor_id,
                'mgr_action': action.value,
                'mgr_date': self.clock.today(),
                'mgr_comment': comment,
            }, actor_id)

            if action is ApprovalAction.APPROVE:
                self.relocation.apply(
                    transfer.asset_id,
                    transfer.destination,
                    rig_id=transfer.dest_rig_id,
                    company_id=transfer.dest_company_id,
                    actor_id=actor_id,
                    transfer_code=transfer.transfer_id,
                )
                self.notifier.notify_broadcast(TransferNarrator.completed(transfer))

        logger.info(f"Transfer {transfer.transfer_id} {action.value} at manager stage -> {target.value}")
        return transfer

    def cancel(self, ref, actor_id: Optional[int] = None) -> str:
        """
        Delete a Pending or OnHold transfer.

        Returns:
            str: the cancelled transfer's code
        """
        transfer = self.persistence.find_transfer_by_ref(ref)
        code = transfer.transfer_id
        if not TransferStateMachine.can_cancel(transfer.status):
            raise ConflictError(f"Transfer {code} is not cancellable (currently: {transfer.status})")

        allowed = [status.value for status in TransferStateMachine.CANCELLABLE_STATES]
        with atomic(self.session):
            if not self.persistence.delete_transfer(transfer, allowed):
                current = self.persistence.current_transfer_status(transfer.id)
                if current is None:
                    raise NotFoundError('Transfer not found')
                raise ConflictError(f"Transfer {code} is not cancellable (currently: {current})")
        logger.info(f"Transfer {code} cancelled by user {actor_id}")
        return code

    # Helpers

    def _transition(self, transfer: Transfer, stage: ApprovalStage, target: TransferStatus,
                    stage_fields: dict, actor_id: Optional[int]) -> None:
        expected = TransferStateMachine.REQUIRED_STATUS[stage].value
        values = dict(stage_fields, status=target.value, updated_by_id=actor_id)
        if not self.persistence.transition_transfer(transfer, expected, values):
            current = self.persistence.current_transfer_status(transfer.id)
            if current is None:
                raise NotFoundError('Transfer not found')
            raise ConflictError(TransferStateMachine.conflict_message(stage, current))

    @staticmethod
    def _validate_decision(action, comment):
        action = ApprovalAction.parse(action)
        if _blank(comment) or not isinstance(comment, str):
            raise ValidationError('Decision comment is required')
        return action, comment.strip()

    @staticmethod
    def _validate_draft(draft: TransferDraft) -> None:
        if _blank(draft.transfer_id):
            raise ValidationError('Transfer ID is required')
        if _blank(draft.asset_ref):
            raise ValidationError('Asset is required')
        if _blank(draft.destination):
            raise ValidationError('Destination is required')
        if _blank(draft.reason):
            raise ValidationError('Reason is required')
        if _blank(draft.priority):
            raise ValidationError('Priority is required')
        if draft.priority not in Transfer.PRIORITIES:
            raise ValidationError(f"Priority must be one of: {', '.join(Transfer.PRIORITIES)}")
        if draft.transfer_type not in Transfer.TRANSFER_TYPES:
            raise ValidationError(f"Transfer type must be one of: {', '.join(Transfer.TRANSFER_TYPES)}")

    @staticmethod
    def _resolve_optional(ref, finder, label: str) -> Optional[int]:
        if _blank(ref):
            return None
        found = finder(ref)
        if found is None:
            raise ValidationError(f"{label} not found")
        return found.id
