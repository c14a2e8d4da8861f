"""YAML-backed store for per-action button settings.

The host normally owns settings durability.  When the engine runs
stand-alone, :class:`SettingsStore` keeps the settings of every action
context in one human-readable YAML file::

    actions:
      ctx-1:
        json: /decks/lights.json
        index: '0'
        pressed: true
        ...

A backup copy (``<file>.bak``) is kept so that a corrupt primary file can
be recovered.

Write strategy (atomic with backup):
  1. If the current YAML file exists, copy it to ``<file>.bak``.
  2. Write ``<file>.tmp`` next to the target.
  3. ``os.replace`` the temporary file onto the target.

Load strategy (with fallback):
  1. Try the primary YAML file.
  2. If that fails, try ``<file>.bak`` and restore the primary from it.
  3. If both fail, start with an empty store.

Usage example::

    store = SettingsStore("/var/lib/json-group/settings.yaml")
    store.set("ctx-1", settings.to_dict())
    data = store.get("ctx-1")
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

logger = logging.getLogger(__name__)

#: Mapping of action context → settings dictionary.
SettingsTree = Dict[str, Dict[str, Any]]

_BACKUP_SUFFIX = ".bak"
_TMP_SUFFIX = ".tmp"
_ROOT_KEY = "actions"


class SettingsStore:
    """Per-action settings persisted to YAML with backup / recovery.

    Parameters
    ----------
    path:
        Path to the primary YAML file.  Parent directories are created
        on first write.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        self._backup_path = self._path.with_suffix(
            self._path.suffix + _BACKUP_SUFFIX
        )
        self._tmp_path = self._path.with_suffix(
            self._path.suffix + _TMP_SUFFIX
        )
        self._cache: Optional[SettingsTree] = None

    # ---- public properties -------------------------------------------

    @property
    def path(self) -> Path:
        """The primary YAML file path."""
        return self._path

    @property
    def backup_path(self) -> Path:
        """The backup file path (``<path>.bak``)."""
        return self._backup_path

    # ---- per-action access -------------------------------------------

    def get(self, context: str) -> Optional[Dict[str, Any]]:
        """Return a copy of the settings stored for *context*."""
        entry = self._tree().get(context)
        return dict(entry) if entry is not None else None

    def set(self, context: str, settings: Dict[str, Any]) -> None:
        """Store *settings* for *context* and write the file."""
        tree = self._tree()
        tree[context] = dict(settings)
        self.save(tree)

    def remove(self, context: str) -> None:
        """Forget *context* (no-op when unknown)."""
        tree = self._tree()
        if tree.pop(context, None) is not None:
            self.save(tree)

    def contexts(self) -> List[str]:
        """All stored action contexts."""
        return list(self._tree())

    # ---- save ---------------------------------------------------------

    def save(self, tree: SettingsTree) -> None:
        """Persist *tree* (with backup).

        Raises
        ------
        OSError
            If the file cannot be written.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)

        if self._path.is_file():
            try:
                shutil.copy2(str(self._path), str(self._backup_path))
            except OSError:
                logger.warning(
                    "Could not back up settings to %s; saving anyway",
                    self._backup_path,
                )

        try:
            with open(self._tmp_path, "w", encoding="utf-8") as fh:
                yaml.safe_dump(
                    {_ROOT_KEY: tree},
                    fh,
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                )
        except OSError:
            logger.error("Could not write action settings to %s", self._tmp_path)
            raise

        try:
            os.replace(str(self._tmp_path), str(self._path))
        except OSError:
            logger.error(
                "Could not move %s into place as %s", self._tmp_path, self._path
            )
            raise

        self._cache = tree
        logger.debug("Saved %d action settings to %s", len(tree), self._path)

    # ---- load ---------------------------------------------------------

    def load(self) -> SettingsTree:
        """Load all settings from YAML (primary, then backup).

        Returns an empty mapping when neither file is usable.
        """
        tree = self._try_load(self._path)
        if tree is None:
            logger.warning(
                "Action settings in %s unusable; falling back to %s",
                self._path,
                self._backup_path,
            )
            tree = self._try_load(self._backup_path)
            if tree is not None:
                try:
                    shutil.copy2(str(self._backup_path), str(self._path))
                    logger.info(
                        "Restored action settings %s from %s",
                        self._path,
                        self._backup_path,
                    )
                except OSError:
                    logger.warning(
                        "Could not restore %s from its backup", self._path
                    )
        if tree is None:
            logger.info("No persisted settings found — starting fresh.")
            tree = {}
        self._cache = tree
        return tree

    def delete(self) -> None:
        """Remove the primary, backup and temporary files."""
        for p in (self._path, self._backup_path, self._tmp_path):
            try:
                p.unlink(missing_ok=True)
            except OSError:
                logger.warning("Could not remove %s", p)
        self._cache = None

    # ---- helpers ------------------------------------------------------

    def _tree(self) -> SettingsTree:
        if self._cache is None:
            return self.load()
        return self._cache

    @staticmethod
    def _try_load(path: Path) -> Optional[SettingsTree]:
        """Load one YAML file; ``None`` on any failure."""
        if not path.is_file():
            return None
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Cannot read action settings %s: %s", path, exc)
            return None

        if not isinstance(data, dict) or not isinstance(
            data.get(_ROOT_KEY, {}), dict
        ):
            logger.warning("Unexpected settings layout in %s", path)
            return None
        return dict(data.get(_ROOT_KEY) or {})

    def __repr__(self) -> str:
        return f"SettingsStore({str(self._path)!r})"
