"""Handler interface for host events.

The host delivers one event at a time for one visible action.  Each
action type implements :class:`ActionHandler`, overriding only the events
it reacts to; :class:`~pyJsonGroupDeck.plugin.Plugin` routes host events
to the handler registered for the action's UUID.
"""

from __future__ import annotations

from typing import ClassVar

from pyJsonGroupDeck.host import ActionHandle


class ActionHandler:
    """Base class for action types.  Every event defaults to a no-op."""

    #: Action UUID the handler registers under.
    uuid: ClassVar[str] = ""

    async def on_will_appear(self, handle: ActionHandle) -> None:
        """The action became visible (start-up, page or folder switch)."""

    async def on_will_disappear(self, handle: ActionHandle) -> None:
        """The action is no longer visible."""

    async def on_key_down(self, handle: ActionHandle) -> None:
        """The key was pressed."""

    async def on_key_up(self, handle: ActionHandle) -> None:
        """The key was released."""

    async def on_property_inspector_did_disappear(
        self, handle: ActionHandle
    ) -> None:
        """The configuration UI for the action was closed."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(uuid={self.uuid!r})"
