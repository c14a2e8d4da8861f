"""Host boundary — visible physical actions and their settings.

The engine never talks to the control surface directly.  Every visible
physical button is represented by an :class:`ActionHandle` supplied by the
host integration; the set of currently visible handles lives in an
:class:`ActionRegistry`.

:class:`StoredAction` is a concrete handle that keeps the rendered title
and image in memory and persists settings through an optional
:class:`~pyJsonGroupDeck.persistence.SettingsStore`.  It is used when the
engine runs stand-alone and in tests.
"""

from __future__ import annotations

import abc
import logging
from typing import Dict, Iterator, List, Optional, Tuple

from pyJsonGroupDeck.persistence import SettingsStore
from pyJsonGroupDeck.settings import ButtonSettings

logger = logging.getLogger(__name__)

#: Column / row of a key on the device grid.
Coordinates = Tuple[int, int]


# ---------------------------------------------------------------------------
# ActionHandle
# ---------------------------------------------------------------------------


class ActionHandle(abc.ABC):
    """One visible action instance on a device."""

    @property
    @abc.abstractmethod
    def context(self) -> str:
        """Host-unique id of this action instance."""

    @property
    @abc.abstractmethod
    def device_id(self) -> str:
        """Id of the device the action is placed on."""

    @property
    def is_key(self) -> bool:
        """``True`` for keys, ``False`` for dials / touch strips."""
        return True

    @property
    def coordinates(self) -> Optional[Coordinates]:
        """Grid position, or ``None`` when the action is not on the grid
        (e.g. inside a multi-action)."""
        return None

    @abc.abstractmethod
    async def get_settings(self) -> ButtonSettings:
        """Return the persisted settings of this action."""

    @abc.abstractmethod
    async def set_settings(self, settings: ButtonSettings) -> None:
        """Persist *settings* for this action."""

    @abc.abstractmethod
    async def set_title(self, title: str) -> None:
        """Render *title* on the key."""

    @abc.abstractmethod
    async def set_image(self, image: str) -> None:
        """Render *image* (``data:`` URL, ``""`` clears) on the key."""

    async def show_ok(self) -> None:
        """Flash the host's success indicator (no-op by default)."""


# ---------------------------------------------------------------------------
# StoredAction
# ---------------------------------------------------------------------------


class StoredAction(ActionHandle):
    """In-process :class:`ActionHandle` with optional YAML persistence.

    Parameters
    ----------
    context:
        Unique action id.
    device_id:
        Device the key sits on.
    coordinates:
        Grid position; ``None`` marks an off-grid action.
    is_key:
        ``False`` for dial actions.
    settings:
        Initial settings.  Ignored when *store* already holds settings
        for *context*.
    store:
        Settings store to persist to.
    """

    def __init__(
        self,
        context: str,
        device_id: str,
        *,
        coordinates: Optional[Coordinates] = (0, 0),
        is_key: bool = True,
        settings: Optional[ButtonSettings] = None,
        store: Optional[SettingsStore] = None,
    ) -> None:
        self._context = context
        self._device_id = device_id
        self._coordinates = coordinates
        self._is_key = is_key
        self._store = store

        stored = store.get(context) if store is not None else None
        if stored is not None:
            self._settings = ButtonSettings.from_dict(stored)
        else:
            self._settings = (settings or ButtonSettings()).copy()

        self.title: Optional[str] = None
        self.image: Optional[str] = None
        self.ok_count: int = 0

    @property
    def context(self) -> str:
        return self._context

    @property
    def device_id(self) -> str:
        return self._device_id

    @property
    def is_key(self) -> bool:
        return self._is_key

    @property
    def coordinates(self) -> Optional[Coordinates]:
        return self._coordinates

    @property
    def settings(self) -> ButtonSettings:
        """The live settings (not a copy)."""
        return self._settings

    async def get_settings(self) -> ButtonSettings:
        return self._settings.copy()

    async def set_settings(self, settings: ButtonSettings) -> None:
        self._settings = settings.copy()
        if self._store is not None:
            self._store.set(self._context, self._settings.to_dict())

    async def set_title(self, title: str) -> None:
        self.title = title

    async def set_image(self, image: str) -> None:
        self.image = image

    async def show_ok(self) -> None:
        self.ok_count += 1

    def __repr__(self) -> str:
        return (
            f"StoredAction(context={self._context!r}, "
            f"device_id={self._device_id!r}, "
            f"coordinates={self._coordinates!r})"
        )


# ---------------------------------------------------------------------------
# ActionRegistry
# ---------------------------------------------------------------------------


class ActionRegistry:
    """The currently visible actions of one action type, in appearance order."""

    def __init__(self) -> None:
        self._actions: Dict[str, ActionHandle] = {}

    def add(self, handle: ActionHandle) -> None:
        """Register *handle* (replacing one with the same context)."""
        self._actions[handle.context] = handle
        logger.debug("Action %s appeared on %s", handle.context, handle.device_id)

    def remove(self, context: str) -> Optional[ActionHandle]:
        """Forget the action with *context*; returns it when known."""
        handle = self._actions.pop(context, None)
        if handle is not None:
            logger.debug("Action %s disappeared", context)
        return handle

    def get(self, context: str) -> Optional[ActionHandle]:
        return self._actions.get(context)

    def device_actions(self, device_id: str) -> List[ActionHandle]:
        """Key actions with grid coordinates on *device_id*."""
        return [
            handle
            for handle in self._actions.values()
            if handle.device_id == device_id
            and handle.is_key
            and handle.coordinates is not None
        ]

    def __iter__(self) -> Iterator[ActionHandle]:
        return iter(list(self._actions.values()))

    def __len__(self) -> int:
        return len(self._actions)

    def __contains__(self, context: object) -> bool:
        return context in self._actions

    def __repr__(self) -> str:
        return f"ActionRegistry({len(self._actions)} actions)"
