"""Settings model for group buttons.

:class:`ButtonSettings` is the per-action record the host persists for
every physical button.  It mirrors one resolved descriptor entry and adds
the visual toggle state.  The host speaks camelCase keys, so
:meth:`ButtonSettings.to_dict` / :meth:`ButtonSettings.from_dict` convert
between the attribute names and the wire names below:

=====================  ===================
attribute              wire key
=====================  ===================
``json``               ``json``
``index``              ``index``
``pressed``            ``pressed``
``title``              ``title``
``image_url``          ``imageUrl``
``image_url_pressed``  ``imageUrlPressed``
``scripts``            ``scripts``
``script_cmds``        ``scriptCmds``
``osc_commands``       ``osc_commands``
``delays``             ``delays``
=====================  ===================

``index`` is kept as the string the property inspector delivers; an
empty string means "not configured".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

#: A single OSC argument.
OscValue = Union[str, int, float]


@dataclass(frozen=True)
class ButtonIdentity:
    """Natural key of a physical button inside a group."""

    device_id: str
    descriptor_file: str
    index: str

    @property
    def group(self) -> Tuple[str, str]:
        """The ``(device_id, descriptor_file)`` pair shared by the group."""
        return (self.device_id, self.descriptor_file)


@dataclass(frozen=True)
class OscCommand:
    """One OSC message as configured in the descriptor.

    Attributes
    ----------
    path:
        OSC address pattern (e.g. ``"/light/1/on"``).
    values:
        Message arguments, in order.
    port:
        Port configured in the descriptor.
    """

    path: str
    values: Tuple[OscValue, ...] = ()
    port: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Return the descriptor representation."""
        return {
            "osc_path": self.path,
            "osc_value": list(self.values),
            "osc_port": self.port,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> OscCommand:
        """Create an :class:`OscCommand` from a descriptor entry."""
        values = data.get("osc_value") or []
        if not isinstance(values, (list, tuple)):
            values = [values]
        return cls(
            path=str(data.get("osc_path", "")),
            values=tuple(values),
            port=_osc_port(data.get("osc_port")),
        )


def _osc_port(raw: Any) -> int:
    """Descriptor port as an integer; ``0`` when unset or not numeric."""
    try:
        return int(raw or 0)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid OSC port %r", raw)
        return 0


def _osc_list(raw: Any) -> List[OscCommand]:
    commands: List[OscCommand] = []
    for item in raw or []:
        if isinstance(item, OscCommand):
            commands.append(item)
        elif isinstance(item, dict):
            commands.append(OscCommand.from_dict(item))
    return commands


@dataclass
class ButtonSettings:
    """Persisted state of one physical group button."""

    json: str = ""
    index: str = ""
    pressed: bool = False
    title: Optional[str] = None
    image_url: str = ""
    image_url_pressed: str = ""
    scripts: List[str] = field(default_factory=list)
    script_cmds: List[str] = field(default_factory=list)
    osc_commands: List[OscCommand] = field(default_factory=list)
    delays: List[float] = field(default_factory=list)

    # ---- identity ------------------------------------------------------

    @property
    def has_identity(self) -> bool:
        """``True`` when both the descriptor file and index are set."""
        return self.json != "" and self.index != ""

    @property
    def index_number(self) -> int:
        """The index as an integer (``0`` when unset or not numeric)."""
        try:
            return int(self.index)
        except (TypeError, ValueError):
            return 0

    def identity(self, device_id: str) -> ButtonIdentity:
        """Return the :class:`ButtonIdentity` of this button on *device_id*."""
        return ButtonIdentity(device_id, self.json, self.index)

    @property
    def is_resolved(self) -> bool:
        """``False`` until the descriptor has been resolved at least once."""
        return self.image_url != ""

    # ---- (de)serialisation ---------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return the settings under their host wire keys."""
        return {
            "json": self.json,
            "index": self.index,
            "pressed": self.pressed,
            "title": self.title,
            "imageUrl": self.image_url,
            "imageUrlPressed": self.image_url_pressed,
            "scripts": list(self.scripts),
            "scriptCmds": list(self.script_cmds),
            "osc_commands": [cmd.to_dict() for cmd in self.osc_commands],
            "delays": list(self.delays),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> ButtonSettings:
        """Create settings from a host payload; missing keys take defaults."""
        data = data or {}
        index = data.get("index", "")
        return cls(
            json=data.get("json") or "",
            index="" if index is None else str(index),
            pressed=bool(data.get("pressed", False)),
            title=data.get("title"),
            image_url=data.get("imageUrl") or "",
            image_url_pressed=data.get("imageUrlPressed") or "",
            scripts=list(data.get("scripts") or []),
            script_cmds=list(data.get("scriptCmds") or []),
            osc_commands=_osc_list(data.get("osc_commands")),
            delays=list(data.get("delays") or []),
        )

    def copy(self) -> ButtonSettings:
        """Return an independent copy (lists are not shared)."""
        return ButtonSettings.from_dict(self.to_dict())
