"""
Applies a completed transfer to its asset

Location is always overwritten; rig and company links are only replaced
when the transfer names a new one, so a destination without a rig keeps
the asset's current rig.
"""

from typing import Optional
from rigasset.business.transfers.narrator import TransferNarrator


class RelocationApplier:

    HISTORY_ACTION = 'Transfer Completed'

    def __init__(self, persistence):
        self.persistence = persistence

    @staticmethod
    def build_update(destination: str, rig_id: Optional[int] = None, company_id: Optional[int] = None) -> dict:
        fields = {'location': destination}
        if rig_id is not None:
            fields['rig_id'] = rig_id
        if company_id is not None:
            fields['company_id'] = company_id
        return fields

    def apply(self, asset_id: int, destination: str, rig_id: Optional[int] = None,
              company_id: Optional[int] = None, actor_id: Optional[int] = None,
              transfer_code: Optional[str] = None) -> dict:
        """
        Move the asset and append its history entry.

        Must run inside the caller's unit of work; both writes succeed or
        neither does.

        Returns:
            dict: the fields written to the asset
        """
        asset = self.persistence.find_asset_by_ref(asset_id)
        fields = self.build_update(destination, rig_id, company_id)
        old_values = {key: getattr(asset, key) for key in ('location', 'rig_id', 'company_id')}
        new_values = dict(old_values, **fields)

        self.persistence.update_asset_location(asset_id, fields)
        self.persistence.append_asset_history({
            'asset_id': asset_id,
            'action': self.HISTORY_ACTION,
            'changed_by': actor_id,
            'old_values': old_values,
            'new_values': new_values,
            'notes': TransferNarrator.relocation_note(destination, transfer_code),
        })
        return fields
