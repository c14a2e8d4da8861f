"""Group button action — toggle indicator plus command sequence.

Every physical key carrying this action points at a descriptor file and
an index.  Releasing a key:

1. clears ``pressed`` on every key of the same group (same device, same
   descriptor),
2. marks the released key as pressed,
3. decides between the **trigger** and the **refresh** path using the
   time since the matching key-down (:class:`PressDisambiguator`).

Press disambiguation
~~~~~~~~~~~~~~~~~~~~

The host delivers key-down and key-up as independent events, so the
press time is kept in a side table keyed by :class:`ButtonIdentity`
rather than in per-button state::

    key-down ──► record press time ──► (idle)
                                          │
    key-up ───► pop press time ───────────┤
                                          │
                 elapsed <= long_press ───┼──► TRIGGER: render, run OSC
                                          │
                 elapsed >  long_press ───┴──► REFRESH: re-resolve device

A key-up without a recorded key-down uses press time ``0`` and therefore
takes the refresh path.

Only the OSC command list drives the trigger path; ``scripts`` and
``scriptCmds`` are stored on the settings for other callers.

While a sequence started by a button is still running, further trigger
paths for the same button are rejected (the visual toggle still happens).
"""

from __future__ import annotations

import enum
import logging
import time
from typing import Callable, Dict, Optional, Set

from pyJsonGroupDeck.actions import ActionHandler
from pyJsonGroupDeck.group import GroupSynchronizer
from pyJsonGroupDeck.host import ActionHandle, ActionRegistry
from pyJsonGroupDeck.osc import (
    OSC_DEFAULT_PORT,
    OSC_LOOPBACK_IP,
    OSC_MODULE,
    render_osc_commands,
)
from pyJsonGroupDeck.sequencer import CommandSequencer
from pyJsonGroupDeck.settings import ButtonIdentity, ButtonSettings

#: UUID of the group button action.
BUTTON_ACTION_UUID: str = "json-group.execute"

#: Hold duration (ms) above which a key-up refreshes instead of triggering.
DEFAULT_LONG_PRESS_MS: float = 2000.0


def _wall_clock_ms() -> float:
    return time.time() * 1000.0


# ---------------------------------------------------------------------------
# PressDisambiguator
# ---------------------------------------------------------------------------


class PressOutcome(enum.Enum):
    """Result of a key-up."""

    TRIGGER = "trigger"
    """Short press — run the configured sequence."""

    REFRESH = "refresh"
    """Held (or unmatched) press — reload the device from descriptors."""


class PressDisambiguator:
    """Turns key-down / key-up pairs into a :class:`PressOutcome`.

    Parameters
    ----------
    long_press_ms:
        Presses held strictly longer than this take the refresh path.
    clock:
        Returns the current time in milliseconds.
    """

    def __init__(
        self,
        *,
        long_press_ms: float = DEFAULT_LONG_PRESS_MS,
        clock: Callable[[], float] = _wall_clock_ms,
    ) -> None:
        self._long_press_ms = long_press_ms
        self._clock = clock
        self._press_times: Dict[ButtonIdentity, float] = {}

    @property
    def long_press_ms(self) -> float:
        return self._long_press_ms

    def is_pending(self, identity: ButtonIdentity) -> bool:
        """``True`` while a key-down for *identity* awaits its key-up."""
        return identity in self._press_times

    def record_press(self, identity: ButtonIdentity) -> None:
        """Remember the key-down time of *identity*."""
        self._press_times[identity] = self._clock()

    def resolve_release(self, identity: ButtonIdentity) -> PressOutcome:
        """Consume the recorded press of *identity* and classify it."""
        pressed_at = self._press_times.pop(identity, 0.0)
        elapsed = self._clock() - pressed_at
        if elapsed > self._long_press_ms:
            return PressOutcome.REFRESH
        return PressOutcome.TRIGGER

    def clear(self) -> None:
        """Forget all pending presses."""
        self._press_times.clear()

    def __repr__(self) -> str:
        return (
            f"PressDisambiguator(long_press_ms={self._long_press_ms}, "
            f"pending={len(self._press_times)})"
        )


# ---------------------------------------------------------------------------
# ButtonAction
# ---------------------------------------------------------------------------


class ButtonAction(ActionHandler):
    """Handler for keys bound to an entry of a group descriptor.

    Parameters
    ----------
    synchronizer:
        Group synchroniser (owns the registry and the resolver).  A
        default one over a fresh :class:`ActionRegistry` is created when
        omitted.
    sequencer:
        Runs rendered OSC commands.
    disambiguator:
        Press-time tracker.
    osc_ip, osc_port, osc_module:
        OSC rendering target (see :mod:`pyJsonGroupDeck.osc`).
    logger:
        Defaults to the module logger.
    """

    uuid = BUTTON_ACTION_UUID

    def __init__(
        self,
        synchronizer: Optional[GroupSynchronizer] = None,
        sequencer: Optional[CommandSequencer] = None,
        disambiguator: Optional[PressDisambiguator] = None,
        *,
        osc_ip: str = OSC_LOOPBACK_IP,
        osc_port: Optional[int] = OSC_DEFAULT_PORT,
        osc_module: str = OSC_MODULE,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._synchronizer = synchronizer or GroupSynchronizer(
            ActionRegistry(), logger=logger
        )
        self._sequencer = sequencer or CommandSequencer(logger=logger)
        self._disambiguator = disambiguator or PressDisambiguator()
        self._osc_ip = osc_ip
        self._osc_port = osc_port
        self._osc_module = osc_module
        self._running: Set[ButtonIdentity] = set()

    # ---- public properties -------------------------------------------

    @property
    def registry(self) -> ActionRegistry:
        return self._synchronizer.registry

    @property
    def synchronizer(self) -> GroupSynchronizer:
        return self._synchronizer

    @property
    def sequencer(self) -> CommandSequencer:
        return self._sequencer

    @property
    def disambiguator(self) -> PressDisambiguator:
        return self._disambiguator

    def is_running(self, identity: ButtonIdentity) -> bool:
        """``True`` while a sequence started by *identity* is running."""
        return identity in self._running

    # ---- host events -------------------------------------------------

    async def on_will_appear(self, handle: ActionHandle) -> None:
        self.registry.add(handle)
        settings = await handle.get_settings()
        if settings.is_resolved:
            await self._synchronizer.render(handle, settings)
            return
        await self._synchronizer.update_button_details(handle)

    async def on_will_disappear(self, handle: ActionHandle) -> None:
        self.registry.remove(handle.context)

    async def on_property_inspector_did_disappear(
        self, handle: ActionHandle
    ) -> None:
        await self._synchronizer.update_button_details(handle)

    async def on_key_down(self, handle: ActionHandle) -> None:
        settings = await handle.get_settings()
        if not settings.has_identity:
            return
        self._disambiguator.record_press(settings.identity(handle.device_id))

    async def on_key_up(self, handle: ActionHandle) -> None:
        settings = await handle.get_settings()

        # Must complete before this button is marked pressed.
        await self._synchronizer.clear_siblings(handle.device_id, settings.json)
        settings.pressed = True
        await handle.set_settings(settings)

        if not settings.has_identity:
            return

        identity = settings.identity(handle.device_id)
        outcome = self._disambiguator.resolve_release(identity)
        if outcome is PressOutcome.REFRESH:
            self._logger.info(
                "Long press on %s[%s] — refreshing %s",
                settings.json,
                settings.index,
                handle.device_id,
            )
            await self._synchronizer.refresh_group(handle.device_id)
            return

        await self._synchronizer.render(handle, settings)
        if settings.osc_commands:
            await self._run_osc(identity, settings)

    # ---- helpers -----------------------------------------------------

    async def _run_osc(
        self, identity: ButtonIdentity, settings: ButtonSettings
    ) -> None:
        if identity in self._running:
            self._logger.warning(
                "Sequence for %s[%s] still running — ignoring press",
                identity.descriptor_file,
                identity.index,
            )
            return
        commands = render_osc_commands(
            settings.osc_commands,
            ip=self._osc_ip,
            port=self._osc_port,
            module=self._osc_module,
        )
        self._running.add(identity)
        try:
            await self._sequencer.run_sequence(commands, settings.delays)
        finally:
            self._running.discard(identity)
