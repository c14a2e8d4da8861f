#!/usr/bin/env python3
"""Real-world demo: a JSON button group on a simulated control surface.

This script drives the full engine the way a host integration would,
without a physical device attached.

  **Phase 1 — Fresh start**

  1. Write a descriptor with three scene buttons (titles, images and
     OSC commands) into a temporary directory.
  2. Create a plugin with a YAML settings store.
  3. Let three keys appear; each one is resolved from the descriptor.
  4. Short-press the keys one after another and watch the group behave
     like radio buttons (``*`` marks the pressed key).
  5. Hold a key longer than the long-press threshold to refresh the
     whole device.

  **Phase 2 — Restart from persistence**

  1. Create a new plugin on the same settings file.
  2. Let the keys reappear; resolved keys render without touching the
     descriptor.

  **Phase 3 — Cleanup**

  1. Let the keys disappear and delete all persistence artefacts.

OSC commands are rendered as usual but handed to a dry-run runner that
only logs them, so no interpreter needs to be installed.  Pass
``--live`` to run them through ``pwsh`` instead.

Run from the project root::

    python examples/realworld_json_group_demo.py
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import tempfile
from pathlib import Path
from typing import List

# ---------------------------------------------------------------------------
# Ensure the package is importable when running from the repo root.
# ---------------------------------------------------------------------------
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from pyJsonGroupDeck import (  # noqa: E402
    BUTTON_ACTION_UUID,
    ButtonSettings,
    CommandRunner,
    EngineConfig,
    StoredAction,
    create_plugin,
)
from pyJsonGroupDeck.runner import ExecutableCommand  # noqa: E402

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

#: Device id of the simulated control surface.
DEVICE_ID = "demo-deck"

#: Number of keys in the demo group.
KEY_COUNT = 3

#: Hold time (ms) of a short press.
SHORT_PRESS_MS = 150

#: Long-press threshold used by the demo (ms), shortened to keep it quick.
LONG_PRESS_MS = 600

# A 1x1 transparent PNG.
PIXEL_PNG = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d00000000"
    "49454e44ae426082"
)

# ---------------------------------------------------------------------------
# Logging: colourful, timestamped, to stdout
# ---------------------------------------------------------------------------

BOLD = "\033[1m"
GREEN = "\033[32m"
CYAN = "\033[36m"
YELLOW = "\033[33m"
RED = "\033[31m"
RESET = "\033[0m"


class ColourFormatter(logging.Formatter):
    LEVEL_COLOURS = {
        logging.DEBUG: CYAN,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: RED + BOLD,
    }

    def format(self, record: logging.LogRecord) -> str:
        colour = self.LEVEL_COLOURS.get(record.levelno, "")
        ts = self.formatTime(record, "%H:%M:%S")
        return (
            f"{BOLD}{ts}{RESET} "
            f"{colour}{record.levelname:<8s}{RESET} "
            f"{record.name}: {record.getMessage()}"
        )


def setup_logging() -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColourFormatter())
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()
    root.addHandler(handler)
    # Image data URLs make the debug output unreadable.
    logging.getLogger("pyJsonGroupDeck.descriptor").setLevel(logging.INFO)


log = logging.getLogger("demo")


# ---------------------------------------------------------------------------
# Dry-run runner
# ---------------------------------------------------------------------------


class DryRunRunner(CommandRunner):
    """Logs the argv of every command instead of starting a process."""

    async def run(self, command: ExecutableCommand) -> str:
        argv = self.argv(command)
        log.info("%sWOULD RUN%s %s", YELLOW, RESET, " ".join(argv[:2]))
        for line in argv[-1].strip().splitlines():
            log.info("    %s", line)
        return ""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def write_descriptor(directory: Path) -> Path:
    (directory / "scene.png").write_bytes(PIXEL_PNG)
    (directory / "scene_on.png").write_bytes(PIXEL_PNG)
    files = []
    for i in range(KEY_COUNT):
        files.append(
            {
                "title": f"Scene {i + 1}",
                "image": "scene.png",
                "image_pressed": "scene_on.png",
                "osc_commands": [
                    {"osc_path": f"/scene/{i + 1}/go", "osc_value": 1,
                     "osc_port": 9000},
                    {"osc_path": "/master/fade", "osc_value": [0.5, "lin"],
                     "osc_port": 9000},
                ],
                "delays": [250],
            }
        )
    path = directory / "scenes.json"
    path.write_text(json.dumps({"files": files}, indent=2), encoding="utf-8")
    return path


def show(keys: List[StoredAction]) -> None:
    log.info(
        "%sDeck:%s %s",
        BOLD,
        RESET,
        " | ".join(f"[{key.title}]" for key in keys),
    )


async def press(plugin, key: StoredAction, held_ms: float) -> None:
    await plugin.dispatch("keyDown", BUTTON_ACTION_UUID, key)
    await asyncio.sleep(held_ms / 1000.0)
    await plugin.dispatch("keyUp", BUTTON_ACTION_UUID, key)


def make_keys(plugin, descriptor: Path) -> List[StoredAction]:
    return [
        plugin.create_action(
            f"ctx-{i}",
            DEVICE_ID,
            coordinates=(i, 0),
            settings=ButtonSettings(json=str(descriptor), index=str(i)),
        )
        for i in range(KEY_COUNT)
    ]


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


async def main(live: bool) -> None:
    setup_logging()
    workdir = Path(tempfile.mkdtemp(prefix="json_group_demo_"))
    descriptor = write_descriptor(workdir)
    config = EngineConfig(
        long_press_ms=LONG_PRESS_MS,
        settings_path=str(workdir / "settings.yaml"),
        log_level="DEBUG",
    )
    runner = None if live else DryRunRunner(config.interpreter)

    # ---- Phase 1 -----------------------------------------------------
    log.info("%s=== Phase 1: fresh start ===%s", BOLD, RESET)
    plugin = create_plugin(config, runner=runner)
    keys = make_keys(plugin, descriptor)
    for key in keys:
        await plugin.dispatch("willAppear", BUTTON_ACTION_UUID, key)
    show(keys)

    for key in keys:
        await press(plugin, key, SHORT_PRESS_MS)
        show(keys)

    log.info("Holding %s for a refresh", keys[0].context)
    await press(plugin, keys[0], LONG_PRESS_MS + 200)
    show(keys)

    # ---- Phase 2 -----------------------------------------------------
    log.info("%s=== Phase 2: restart from persistence ===%s", BOLD, RESET)
    plugin = create_plugin(config, runner=runner)
    keys = [
        plugin.create_action(f"ctx-{i}", DEVICE_ID, coordinates=(i, 0))
        for i in range(KEY_COUNT)
    ]
    for key in keys:
        await plugin.dispatch("willAppear", BUTTON_ACTION_UUID, key)
    show(keys)
    log.info("Stored contexts: %s", plugin.store.contexts())

    # ---- Phase 3 -----------------------------------------------------
    log.info("%s=== Phase 3: cleanup ===%s", BOLD, RESET)
    for key in keys:
        await plugin.dispatch("willDisappear", BUTTON_ACTION_UUID, key)
    plugin.store.delete()
    for path in workdir.iterdir():
        path.unlink()
    workdir.rmdir()
    log.info("Removed %s", workdir)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--live",
        action="store_true",
        help="run OSC commands through pwsh instead of logging them",
    )
    args = parser.parse_args()
    try:
        asyncio.run(main(args.live))
    except KeyboardInterrupt:
        pass
