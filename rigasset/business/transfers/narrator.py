"""
Composes the human-readable text attached to transfer events:
notification payloads and asset history notes.
"""

from rigasset.business.core.notifications import NotificationPayload


class TransferNarrator:

    ENTITY_TYPE = 'transfer'

    @staticmethod
    def submitted(transfer) -> NotificationPayload:
        return NotificationPayload(
            title='New Transfer Request',
            description=f"Transfer request {transfer.transfer_id} submitted for your review",
            entity_type=TransferNarrator.ENTITY_TYPE,
            entity_id=transfer.id,
            type='info',
            icon='exchange-alt',
        )

    @staticmethod
    def awaiting_final_approval(transfer) -> NotificationPayload:
        return NotificationPayload(
            title='Transfer Awaiting Final Approval',
            description=f"Transfer {transfer.transfer_id} approved by Ops Manager – needs your final decision",
            entity_type=TransferNarrator.ENTITY_TYPE,
            entity_id=transfer.id,
            type='info',
            icon='user-tie',
        )

    @staticmethod
    def completed(transfer) -> NotificationPayload:
        return NotificationPayload(
            title='Transfer Completed',
            description=f"Transfer {transfer.transfer_id} fully approved – asset relocated",
            entity_type=TransferNarrator.ENTITY_TYPE,
            entity_id=transfer.id,
            type='success',
            icon='check-double',
        )

    @staticmethod
    def relocation_note(destination: str, transfer_code: str) -> str:
        return f"Transferred to {destination} via {transfer_code}"
