"""Refresh action — a key that reloads every group button on its device."""

from __future__ import annotations

from pyJsonGroupDeck.actions import ActionHandler
from pyJsonGroupDeck.group import GroupSynchronizer
from pyJsonGroupDeck.host import ActionHandle

#: UUID of the refresh action.
REFRESH_ACTION_UUID: str = "json-group.refresh"


class RefreshAction(ActionHandler):
    """Re-resolves all group buttons of the device on key-down.

    The synchroniser must be the one shared with the
    :class:`~pyJsonGroupDeck.button_action.ButtonAction`, so the refresh
    sees the group buttons rather than the refresh keys.
    """

    uuid = REFRESH_ACTION_UUID

    def __init__(self, synchronizer: GroupSynchronizer) -> None:
        self._synchronizer = synchronizer

    async def on_key_down(self, handle: ActionHandle) -> None:
        await handle.show_ok()
        await self._synchronizer.refresh_group(handle.device_id)
