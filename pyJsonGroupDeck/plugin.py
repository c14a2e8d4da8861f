"""Plugin — action registration and host event dispatch.

A :class:`Plugin` maps action UUIDs to :class:`ActionHandler` instances
and routes host events to them.  Host event names map to handler
coroutines as follows:

=================================  ===========================================
host event                         handler coroutine
=================================  ===========================================
``willAppear``                     :meth:`ActionHandler.on_will_appear`
``willDisappear``                  :meth:`ActionHandler.on_will_disappear`
``keyDown``                        :meth:`ActionHandler.on_key_down`
``keyUp``                          :meth:`ActionHandler.on_key_up`
``propertyInspectorDidDisappear``  :meth:`ActionHandler.on_property_inspector_did_disappear`
=================================  ===========================================

No handler failure ever reaches the host: :meth:`Plugin.dispatch` logs
the exception and returns.

Usage::

    plugin = create_plugin(load_config("json-group.yaml"))
    key = plugin.create_action("ctx-1", "device-1", coordinates=(0, 0))
    await plugin.dispatch("willAppear", BUTTON_ACTION_UUID, key)
    await plugin.dispatch("keyDown", BUTTON_ACTION_UUID, key)
    await plugin.dispatch("keyUp", BUTTON_ACTION_UUID, key)
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from pyJsonGroupDeck.actions import ActionHandler
from pyJsonGroupDeck.button_action import ButtonAction, PressDisambiguator
from pyJsonGroupDeck.config import EngineConfig
from pyJsonGroupDeck.descriptor import DescriptorResolver
from pyJsonGroupDeck.group import GroupSynchronizer
from pyJsonGroupDeck.host import (
    ActionHandle,
    ActionRegistry,
    Coordinates,
    StoredAction,
)
from pyJsonGroupDeck.persistence import SettingsStore
from pyJsonGroupDeck.refresh_action import RefreshAction
from pyJsonGroupDeck.runner import CommandRunner
from pyJsonGroupDeck.sequencer import CommandSequencer
from pyJsonGroupDeck.settings import ButtonSettings

logger = logging.getLogger(__name__)

#: Logger name the configured log level is applied to.
PACKAGE_LOGGER: str = "pyJsonGroupDeck"

#: Host event name → handler coroutine name.
EVENT_HANDLERS: Dict[str, str] = {
    "willAppear": "on_will_appear",
    "willDisappear": "on_will_disappear",
    "keyDown": "on_key_down",
    "keyUp": "on_key_up",
    "propertyInspectorDidDisappear": "on_property_inspector_did_disappear",
}


class Plugin:
    """Registered actions plus the settings store they persist to.

    Parameters
    ----------
    config:
        Engine configuration; its ``log_level`` is applied to the
        package logger.
    store:
        Settings store for :meth:`create_action`.  Created from
        ``config.settings_path`` when omitted.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        store: Optional[SettingsStore] = None,
    ) -> None:
        self._config = config or EngineConfig()
        if store is None and self._config.settings_path:
            store = SettingsStore(self._config.settings_path)
        self._store = store
        self._actions: Dict[str, ActionHandler] = {}
        logging.getLogger(PACKAGE_LOGGER).setLevel(
            self._config.numeric_log_level
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def store(self) -> Optional[SettingsStore]:
        return self._store

    # ---- registration ------------------------------------------------

    def register_action(
        self, handler: ActionHandler, uuid: Optional[str] = None
    ) -> None:
        """Register *handler* under *uuid* (default: ``handler.uuid``)."""
        key = uuid or handler.uuid
        if not key:
            raise ValueError(f"{handler!r} has no action UUID")
        if key in self._actions:
            logger.warning("Replacing handler for action %s", key)
        self._actions[key] = handler
        logger.debug("Registered %r as %s", handler, key)

    def get_action(self, uuid: str) -> Optional[ActionHandler]:
        return self._actions.get(uuid)

    @property
    def action_uuids(self) -> List[str]:
        return list(self._actions)

    # ---- actions -----------------------------------------------------

    def create_action(
        self,
        context: str,
        device_id: str,
        *,
        coordinates: Optional[Coordinates] = (0, 0),
        is_key: bool = True,
        settings: Optional[ButtonSettings] = None,
    ) -> StoredAction:
        """Create a :class:`StoredAction` persisting to :attr:`store`."""
        return StoredAction(
            context,
            device_id,
            coordinates=coordinates,
            is_key=is_key,
            settings=settings,
            store=self._store,
        )

    # ---- dispatch ----------------------------------------------------

    async def dispatch(
        self, event: str, action_uuid: str, handle: ActionHandle
    ) -> bool:
        """Route host *event* for *handle* to the handler of *action_uuid*.

        Returns
        -------
        bool
            ``True`` when a handler was invoked (even if it failed),
            ``False`` for unknown events or actions.
        """
        method_name = EVENT_HANDLERS.get(event)
        if method_name is None:
            logger.debug("Ignoring unsupported event %s", event)
            return False
        handler = self._actions.get(action_uuid)
        if handler is None:
            logger.warning("No handler registered for action %s", action_uuid)
            return False
        try:
            await getattr(handler, method_name)(handle)
        except Exception:  # noqa: BLE001
            logger.exception(
                "Handler %r failed on %s for %s",
                handler,
                event,
                handle.context,
            )
        return True

    def __repr__(self) -> str:
        return f"Plugin(actions={list(self._actions)!r})"


def create_plugin(
    config: Optional[EngineConfig] = None,
    *,
    runner: Optional[CommandRunner] = None,
    store: Optional[SettingsStore] = None,
) -> Plugin:
    """Build a :class:`Plugin` with the group button and refresh actions."""
    config = config or EngineConfig()
    plugin = Plugin(config, store=store)

    resolver = DescriptorResolver(default_delay_ms=config.default_delay_ms)
    synchronizer = GroupSynchronizer(
        ActionRegistry(),
        resolver,
        refresh_interval=config.refresh_interval,
    )
    sequencer = CommandSequencer(
        runner or CommandRunner(config.interpreter),
        honor_delay_on_failure=config.honor_delay_on_failure,
    )
    button = ButtonAction(
        synchronizer,
        sequencer,
        PressDisambiguator(long_press_ms=config.long_press_ms),
        osc_ip=config.osc_ip,
        osc_port=config.osc_port,
        osc_module=config.osc_module,
    )
    plugin.register_action(button)
    plugin.register_action(RefreshAction(synchronizer))
    return plugin
