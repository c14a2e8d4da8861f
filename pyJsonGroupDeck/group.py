"""Group synchronisation — keep buttons sharing a descriptor consistent.

A *group* is the set of visible key actions on one device whose settings
point at the same descriptor file.  The group behaves like a set of radio
buttons: :meth:`GroupSynchronizer.clear_siblings` resets ``pressed`` on
every member before the caller marks the newly pressed button.  The
caller must await it before writing its own ``pressed = True``, otherwise
the clearing pass could overwrite that write.

:meth:`GroupSynchronizer.refresh_group` re-resolves every key on a device
from its descriptor, one by one, pausing between buttons so the host
channel is not flooded.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from pyJsonGroupDeck.descriptor import DescriptorResolver
from pyJsonGroupDeck.host import ActionHandle, ActionRegistry
from pyJsonGroupDeck.projector import default_title, project
from pyJsonGroupDeck.settings import ButtonSettings

#: Pause between two buttons during a refresh pass (seconds).
DEFAULT_REFRESH_INTERVAL: float = 0.2


class GroupSynchronizer:
    """Enforces the single-pressed rule and refreshes button groups.

    Parameters
    ----------
    registry:
        Currently visible actions.
    resolver:
        Descriptor resolver used for full refreshes.
    refresh_interval:
        Pause between buttons during :meth:`refresh_group` (seconds);
        ``0`` disables it.
    sleep:
        Sleep coroutine, ``asyncio.sleep`` by default.
    logger:
        Defaults to the module logger.
    """

    def __init__(
        self,
        registry: ActionRegistry,
        resolver: Optional[DescriptorResolver] = None,
        *,
        refresh_interval: float = DEFAULT_REFRESH_INTERVAL,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._registry = registry
        self._resolver = resolver or DescriptorResolver(logger=logger)
        self._refresh_interval = refresh_interval
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)

    @property
    def registry(self) -> ActionRegistry:
        return self._registry

    @property
    def resolver(self) -> DescriptorResolver:
        return self._resolver

    @property
    def refresh_interval(self) -> float:
        return self._refresh_interval

    # ---- enumeration -------------------------------------------------

    def device_actions(self, device_id: str) -> List[ActionHandle]:
        """Key actions with coordinates on *device_id*."""
        return self._registry.device_actions(device_id)

    async def same_group_actions(
        self, device_id: str, descriptor_file: str
    ) -> List[ActionHandle]:
        """Key actions on *device_id* driven by *descriptor_file*."""
        members: List[ActionHandle] = []
        for handle in self.device_actions(device_id):
            settings = await handle.get_settings()
            if settings.json == descriptor_file:
                members.append(handle)
        return members

    # ---- rendering ---------------------------------------------------

    async def render(self, handle: ActionHandle, settings: ButtonSettings) -> None:
        """Show the projection of *settings* on *handle* (no resolve)."""
        appearance = project(settings)
        await handle.set_title(appearance.title)
        await handle.set_image(appearance.image)

    # ---- group operations --------------------------------------------

    async def clear_siblings(self, device_id: str, descriptor_file: str) -> int:
        """Set ``pressed = False`` on every member of the group.

        Returns the number of buttons cleared.
        """
        members = await self.same_group_actions(device_id, descriptor_file)
        for handle in members:
            settings = await handle.get_settings()
            settings.pressed = False
            await handle.set_settings(settings)
            await self.render(handle, settings)
        self._logger.debug(
            "Cleared %d buttons of group %s on %s",
            len(members),
            descriptor_file,
            device_id,
        )
        return len(members)

    async def refresh_group(self, device_id: str) -> int:
        """Re-resolve every key action on *device_id*.

        Returns the number of buttons refreshed.
        """
        actions = self.device_actions(device_id)
        self._logger.info("Refreshing %d buttons on %s", len(actions), device_id)
        for position, handle in enumerate(actions):
            if position > 0 and self._refresh_interval > 0:
                await self._sleep(self._refresh_interval)
            await self.update_button_details(handle)
        return len(actions)

    async def update_button_details(
        self, handle: ActionHandle
    ) -> Optional[ButtonSettings]:
        """Resolve *handle*'s descriptor entry, persist and render it.

        When the descriptor is unavailable the button falls back to a
        numbered title, no images and no commands.
        """
        settings = await handle.get_settings()
        if settings is None:
            return None

        resolved = await self._resolver.resolve(
            settings.json, settings.index_number
        )
        if resolved is None:
            settings.title = default_title(settings)
            settings.image_url = ""
            settings.image_url_pressed = ""
            settings.scripts = []
            settings.script_cmds = []
            settings.osc_commands = []
            settings.delays = []
            await handle.set_settings(settings)
            await self.render(handle, settings)
            return settings

        resolved.apply_to(settings)
        await handle.set_settings(settings)
        await self.render(handle, settings)
        if handle.is_key:
            await handle.show_ok()
        return settings

    def __repr__(self) -> str:
        return (
            f"GroupSynchronizer({self._registry!r}, "
            f"refresh_interval={self._refresh_interval})"
        )
