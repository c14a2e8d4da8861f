"""Descriptor resolver — one JSON file drives a whole button group.

The descriptor is a JSON object with a top-level ``files`` array.  Entry
*i* configures every physical button whose settings carry ``index = i``::

    {
      "files": [
        {
          "title": "Lights",
          "image": "img/lights.png",
          "image_pressed": "img/lights_on.png",
          "script": ["scripts/a.ps1", "scripts/b.ps1"],
          "scriptCmd": ["Write-Output hello"],
          "osc_commands": [
            {"osc_path": "/lights/on", "osc_value": [1], "osc_port": 8000}
          ],
          "delays": [250]
        }
      ]
    }

Image paths are relative to the directory containing the descriptor and
are materialised as ``data:`` URLs so that the host can embed them
directly.  The resolver never raises: an unusable descriptor resolves to
``None`` and an unusable image resolves to an empty string, both with an
error log entry.

Usage::

    resolver = DescriptorResolver()
    resolved = await resolver.resolve("/path/to/group.json", 0)
    if resolved is not None:
        resolved.apply_to(settings)
"""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from pyJsonGroupDeck.conformity import DEFAULT_DELAY_MS, enforce_length_conformity
from pyJsonGroupDeck.errors import DescriptorUnavailableError, ImageUnavailableError
from pyJsonGroupDeck.settings import ButtonSettings, OscCommand

#: MIME type used when the image suffix is not recognised.
DEFAULT_IMAGE_MIME: str = "image/png"


def _list_field(record: Dict[str, Any], key: str) -> List[Any]:
    """A list-valued entry field; anything but a list counts as empty."""
    value = record.get(key)
    return list(value) if isinstance(value, list) else []


# ---------------------------------------------------------------------------
# ResolvedButton
# ---------------------------------------------------------------------------


@dataclass
class ResolvedButton:
    """Renderable state for one descriptor entry."""

    title: str
    image_url: str = ""
    image_url_pressed: str = ""
    scripts: List[str] = field(default_factory=list)
    script_cmds: List[str] = field(default_factory=list)
    osc_commands: List[OscCommand] = field(default_factory=list)
    delays: List[float] = field(default_factory=list)

    def apply_to(self, settings: ButtonSettings) -> None:
        """Copy every resolved field onto *settings* (``pressed`` is kept)."""
        settings.title = self.title
        settings.image_url = self.image_url
        settings.image_url_pressed = self.image_url_pressed
        settings.scripts = list(self.scripts)
        settings.script_cmds = list(self.script_cmds)
        settings.osc_commands = list(self.osc_commands)
        settings.delays = list(self.delays)


# ---------------------------------------------------------------------------
# DescriptorResolver
# ---------------------------------------------------------------------------


class DescriptorResolver:
    """Reads a group descriptor and resolves single entries.

    Parameters
    ----------
    default_delay_ms:
        Delay appended to too-short delay lists.
    logger:
        Logger for resolution failures.  Defaults to the module logger.
    """

    def __init__(
        self,
        *,
        default_delay_ms: float = DEFAULT_DELAY_MS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._default_delay_ms = default_delay_ms
        self._logger = logger or logging.getLogger(__name__)

    @property
    def default_delay_ms(self) -> float:
        """Delay used to pad too-short delay lists (milliseconds)."""
        return self._default_delay_ms

    # ---- resolve -----------------------------------------------------

    async def resolve(
        self, descriptor_file: str, index: int
    ) -> Optional[ResolvedButton]:
        """Resolve entry *index* of *descriptor_file*.

        Returns
        -------
        ResolvedButton or None
            The resolved entry, or ``None`` when the descriptor itself
            cannot be used.  An out-of-range *index* yields an entry
            with all defaults.
        """
        try:
            records = await asyncio.to_thread(
                self._load_records, descriptor_file
            )
        except DescriptorUnavailableError as exc:
            self._logger.error("%s", exc)
            return None

        record: Any = records[index] if 0 <= index < len(records) else {}
        if not isinstance(record, dict):
            record = {}

        title = record.get("title")
        if title is None:
            title = f"button {index + 1}"

        image_url = await self.create_image_string(
            str(record.get("image") or ""), descriptor_file
        )
        image_url_pressed = await self.create_image_string(
            str(record.get("image_pressed") or ""), descriptor_file
        )

        scripts = [str(s) for s in _list_field(record, "script")]
        script_cmds = [str(s) for s in _list_field(record, "scriptCmd")]
        osc_commands = [
            OscCommand.from_dict(cmd)
            for cmd in _list_field(record, "osc_commands")
            if isinstance(cmd, dict)
        ]
        delays = _list_field(record, "delays")

        # All three lists share one delay list; the longest one wins.
        enforce_length_conformity(scripts, delays, self._default_delay_ms)
        enforce_length_conformity(script_cmds, delays, self._default_delay_ms)
        enforce_length_conformity(osc_commands, delays, self._default_delay_ms)

        resolved = ResolvedButton(
            title=str(title),
            image_url=image_url,
            image_url_pressed=image_url_pressed,
            scripts=scripts,
            script_cmds=script_cmds,
            osc_commands=osc_commands,
            delays=delays,
        )
        self._logger.debug(
            "Resolved %s[%d] → %r (%d scripts, %d inline, %d osc)",
            descriptor_file,
            index,
            resolved.title,
            len(scripts),
            len(script_cmds),
            len(osc_commands),
        )
        return resolved

    # ---- images ------------------------------------------------------

    async def create_image_string(
        self, image_relative_path: str, descriptor_file: str
    ) -> str:
        """Return *image_relative_path* as a ``data:`` URL.

        The path is resolved against the descriptor's directory.  An
        empty path returns ``""`` without touching the filesystem; an
        unreadable image returns ``""`` and logs the error.
        """
        if image_relative_path == "":
            return ""
        image_path = Path(descriptor_file).parent / image_relative_path
        try:
            data = await asyncio.to_thread(self._read_image, image_path)
        except ImageUnavailableError as exc:
            self._logger.error("%s", exc)
            return ""
        mime = mimetypes.guess_type(image_path.name)[0] or DEFAULT_IMAGE_MIME
        encoded = base64.b64encode(data).decode("ascii")
        return f"data:{mime};base64,{encoded}"

    # ---- helpers -----------------------------------------------------

    @staticmethod
    def _load_records(descriptor_file: str) -> List[Any]:
        """Read and parse the ``files`` array of *descriptor_file*."""
        if not descriptor_file:
            raise DescriptorUnavailableError(
                descriptor_file, "no descriptor configured"
            )
        path = Path(descriptor_file)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, ValueError) as exc:
            raise DescriptorUnavailableError(descriptor_file, str(exc)) from exc
        try:
            data: Dict[str, Any] = json.loads(text)
        except ValueError as exc:
            raise DescriptorUnavailableError(
                descriptor_file, f"invalid JSON ({exc})"
            ) from exc
        files = data.get("files") if isinstance(data, dict) else None
        if not isinstance(files, list):
            raise DescriptorUnavailableError(
                descriptor_file, "missing top-level 'files' array"
            )
        return files

    @staticmethod
    def _read_image(image_path: Path) -> bytes:
        try:
            return image_path.read_bytes()
        except (OSError, ValueError) as exc:
            raise ImageUnavailableError(str(image_path), str(exc)) from exc

    def __repr__(self) -> str:
        return f"DescriptorResolver(default_delay_ms={self._default_delay_ms})"
