"""Engine configuration.

All tunables of the engine live in one :class:`EngineConfig`.  The
defaults reproduce the behaviour existing descriptors were written for;
a YAML file can override any of them::

    # json-group.yaml
    default_delay_ms: 500
    long_press_ms: 2000
    refresh_interval: 0.2
    interpreter: pwsh
    osc_ip: 127.0.0.1
    osc_port: 8000
    honor_delay_on_failure: false
    log_level: INFO
    settings_path: /var/lib/json-group/settings.yaml

Usage::

    config = load_config("json-group.yaml")
    plugin = create_plugin(config)
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from pyJsonGroupDeck.button_action import DEFAULT_LONG_PRESS_MS
from pyJsonGroupDeck.conformity import DEFAULT_DELAY_MS
from pyJsonGroupDeck.group import DEFAULT_REFRESH_INTERVAL
from pyJsonGroupDeck.osc import OSC_DEFAULT_PORT, OSC_LOOPBACK_IP, OSC_MODULE
from pyJsonGroupDeck.runner import DEFAULT_INTERPRETER

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Tunables of the group engine.

    * **default_delay_ms** — delay used to pad too-short delay lists.
    * **long_press_ms** — key-up after a longer hold refreshes the device.
    * **refresh_interval** — pause between buttons during a refresh (s).
    * **interpreter** — executable running scripts and OSC snippets.
    * **osc_ip** / **osc_port** / **osc_module** — OSC rendering target;
      ``osc_port: null`` uses the per-command port from the descriptor.
    * **honor_delay_on_failure** — also wait after a failed step.
    * **log_level** — level applied to the ``pyJsonGroupDeck`` logger.
    * **settings_path** — YAML settings store for stand-alone use.
    """

    default_delay_ms: float = DEFAULT_DELAY_MS
    long_press_ms: float = DEFAULT_LONG_PRESS_MS
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    interpreter: str = DEFAULT_INTERPRETER
    osc_ip: str = OSC_LOOPBACK_IP
    osc_port: Optional[int] = OSC_DEFAULT_PORT
    osc_module: str = OSC_MODULE
    honor_delay_on_failure: bool = False
    log_level: str = "INFO"
    settings_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> EngineConfig:
        """Create a config from *data*; unknown keys are logged and ignored."""
        data = data or {}
        known = {f.name for f in dataclasses.fields(cls)}
        for key in sorted(set(data) - known):
            logger.warning("Ignoring unknown configuration key %r", key)
        return cls(**{k: v for k, v in data.items() if k in known})

    @property
    def numeric_log_level(self) -> int:
        """``log_level`` as a :mod:`logging` constant (INFO if unknown)."""
        level = logging.getLevelName(str(self.log_level).upper())
        return level if isinstance(level, int) else logging.INFO


def load_config(path: Union[str, Path]) -> EngineConfig:
    """Load an :class:`EngineConfig` from a YAML file.

    A missing file yields the defaults.

    Raises
    ------
    ValueError
        If the file does not contain a YAML mapping.
    yaml.YAMLError
        If the file is not valid YAML.
    """
    path = Path(path)
    if not path.is_file():
        logger.info("No configuration at %s — using defaults", path)
        return EngineConfig()
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return EngineConfig()
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a mapping at top level in {path}, "
            f"got {type(data).__name__}"
        )
    return EngineConfig.from_dict(data)
