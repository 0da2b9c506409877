"""
State machine for the transfer approval lifecycle

Encodes valid transitions as an explicit table keyed on
(stage, current status, action). Keeps "what is allowed" separate from
"how persistence occurs".
"""

from enum import Enum
from typing import Dict, FrozenSet, Tuple
from rigasset.business.core.errors import ConflictError, ValidationError


class TransferStatus(str, Enum):
    """Persisted values of transfers.status"""
    PENDING = 'Pending'
    OPS_APPROVED = 'OpsApproved'
    COMPLETED = 'Completed'
    REJECTED = 'Rejected'
    ON_HOLD = 'OnHold'


class ApprovalAction(str, Enum):
    APPROVE = 'approve'
    REJECT = 'reject'
    HOLD = 'hold'

    @classmethod
    def parse(cls, value) -> 'ApprovalAction':
        try:
            return cls(value)
        except ValueError:
            raise ValidationError('action must be approve, reject, or hold') from None


class ApprovalStage(str, Enum):
    OPERATIONS = 'ops'
    ASSET_MANAGER = 'mgr'


class TransferStateMachine:
    """
    State machine for Transfer.status.

    Pending is the initial state. Each approval stage may leave exactly one
    state. Completed and Rejected are terminal; OnHold has no outgoing
    decision and may only be cancelled.
    """

    INITIAL = TransferStatus.PENDING

    TERMINAL_STATES: FrozenSet[TransferStatus] = frozenset({
        TransferStatus.COMPLETED,
        TransferStatus.REJECTED,
    })

    CANCELLABLE_STATES: FrozenSet[TransferStatus] = frozenset({
        TransferStatus.PENDING,
        TransferStatus.ON_HOLD,
    })

    # Stage guard: the only status a stage may be decided from
    REQUIRED_STATUS: Dict[ApprovalStage, TransferStatus] = {
        ApprovalStage.OPERATIONS: TransferStatus.PENDING,
        ApprovalStage.ASSET_MANAGER: TransferStatus.OPS_APPROVED,
    }

    TRANSITIONS: Dict[Tuple[ApprovalStage, TransferStatus, ApprovalAction], TransferStatus] = {
        (ApprovalStage.OPERATIONS, TransferStatus.PENDING, ApprovalAction.APPROVE): TransferStatus.OPS_APPROVED,
        (ApprovalStage.OPERATIONS, TransferStatus.PENDING, ApprovalAction.REJECT): TransferStatus.REJECTED,
        (ApprovalStage.OPERATIONS, TransferStatus.PENDING, ApprovalAction.HOLD): TransferStatus.ON_HOLD,
        (ApprovalStage.ASSET_MANAGER, TransferStatus.OPS_APPROVED, ApprovalAction.APPROVE): TransferStatus.COMPLETED,
        (ApprovalStage.ASSET_MANAGER, TransferStatus.OPS_APPROVED, ApprovalAction.REJECT): TransferStatus.REJECTED,
        (ApprovalStage.ASSET_MANAGER, TransferStatus.OPS_APPROVED, ApprovalAction.HOLD): TransferStatus.ON_HOLD,
    }

    @classmethod
    def next_status(cls, stage: ApprovalStage, current: TransferStatus, action: ApprovalAction) -> TransferStatus:
        """
        Resolve the target status for a decision.

        Raises:
            ConflictError: If the stage cannot be decided from ``current``
        """
        current = TransferStatus(current)
        target = cls.TRANSITIONS.get((stage, current, action))
        if target is None:
            raise ConflictError(cls.conflict_message(stage, current))
        return target

    @classmethod
    def conflict_message(cls, stage: ApprovalStage, current: TransferStatus) -> str:
        current = TransferStatus(current)
        if stage is ApprovalStage.OPERATIONS:
            return f"Transfer is already {current.value}"
        required = cls.REQUIRED_STATUS[stage].value
        return f"Transfer must be {required} first (currently: {current.value})"

    @classmethod
    def can_cancel(cls, current: TransferStatus) -> bool:
        return TransferStatus(current) in cls.CANCELLABLE_STATES

    @classmethod
    def is_terminal(cls, current: TransferStatus) -> bool:
        return TransferStatus(current) in cls.TERMINAL_STATES

    @classmethod
    def get_allowed_actions(cls, current: TransferStatus) -> Dict[ApprovalStage, Tuple[ApprovalAction, ...]]:
        """Decisions each stage may take from ``current`` (empty when none)"""
        current = TransferStatus(current)
        allowed: Dict[ApprovalStage, Tuple[ApprovalAction, ...]] = {}
        for (stage, from_status, action) in cls.TRANSITIONS:
            if from_status is current:
                allowed[stage] = allowed.get(stage, ()) + (action,)
        return allowed
