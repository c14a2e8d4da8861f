"""Tests for the GroupSynchronizer."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List
from unittest.mock import AsyncMock

import pytest

from pyJsonGroupDeck.descriptor import DescriptorResolver
from pyJsonGroupDeck.group import GroupSynchronizer
from pyJsonGroupDeck.host import ActionRegistry, StoredAction
from pyJsonGroupDeck.settings import ButtonSettings

PNG_BYTES = b"\x89PNG\r\n\x1a\ngroup"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _write_group(directory: Path, count: int = 3) -> str:
    (directory / "on.png").write_bytes(PNG_BYTES)
    files = [
        {"title": f"Scene {i}", "image": "on.png", "image_pressed": "on.png"}
        for i in range(count)
    ]
    path = directory / "group.json"
    path.write_text(json.dumps({"files": files}), encoding="utf-8")
    return str(path)


def _make_key(
    context: str,
    descriptor: str = "/g.json",
    index: str = "0",
    *,
    device: str = "dev",
    pressed: bool = False,
    coordinates=(0, 0),
    is_key: bool = True,
) -> StoredAction:
    return StoredAction(
        context,
        device,
        coordinates=coordinates,
        is_key=is_key,
        settings=ButtonSettings(
            json=descriptor,
            index=index,
            pressed=pressed,
            title=f"T{context}",
            image_url="data:up",
            image_url_pressed="data:down",
        ),
    )


def _make_sync(*actions: StoredAction, **kwargs) -> GroupSynchronizer:
    registry = ActionRegistry()
    for action in actions:
        registry.add(action)
    return GroupSynchronizer(registry, DescriptorResolver(), **kwargs)


class _RecordingSleep:
    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


# ---------------------------------------------------------------------------
# Enumeration
# ---------------------------------------------------------------------------


class TestEnumeration:

    @pytest.mark.asyncio
    async def test_same_group_matches_descriptor_and_device(self):
        a = _make_key("a", "/g.json")
        b = _make_key("b", "/g.json", "1")
        other_file = _make_key("c", "/other.json")
        other_device = _make_key("d", "/g.json", device="dev-2")
        sync = _make_sync(a, b, other_file, other_device)

        members = await sync.same_group_actions("dev", "/g.json")
        assert members == [a, b]

    @pytest.mark.asyncio
    async def test_dials_and_off_grid_actions_excluded(self):
        key = _make_key("k")
        dial = _make_key("d", is_key=False)
        off_grid = _make_key("o", coordinates=None)
        sync = _make_sync(key, dial, off_grid)

        assert sync.device_actions("dev") == [key]
        assert await sync.same_group_actions("dev", "/g.json") == [key]


# ---------------------------------------------------------------------------
# clear_siblings
# ---------------------------------------------------------------------------


class TestClearSiblings:

    @pytest.mark.asyncio
    async def test_clears_pressed_and_renders(self):
        a = _make_key("a", pressed=True)
        b = _make_key("b", index="1", pressed=True)
        sync = _make_sync(a, b)

        cleared = await sync.clear_siblings("dev", "/g.json")

        assert cleared == 2
        assert a.settings.pressed is False
        assert b.settings.pressed is False
        assert a.title == "Ta"
        assert a.image == "data:up"

    @pytest.mark.asyncio
    async def test_other_groups_untouched(self):
        a = _make_key("a", pressed=True)
        other = _make_key("x", "/other.json", pressed=True)
        remote = _make_key("r", device="dev-2", pressed=True)
        sync = _make_sync(a, other, remote)

        await sync.clear_siblings("dev", "/g.json")

        assert other.settings.pressed is True
        assert remote.settings.pressed is True
        assert other.title is None

    @pytest.mark.asyncio
    async def test_empty_group(self):
        sync = _make_sync()
        assert await sync.clear_siblings("dev", "/g.json") == 0


# ---------------------------------------------------------------------------
# update_button_details
# ---------------------------------------------------------------------------


class TestUpdateButtonDetails:

    @pytest.mark.asyncio
    async def test_resolves_persists_and_renders(self, tmp_path):
        descriptor = _write_group(tmp_path)
        key = StoredAction(
            "k", "dev", settings=ButtonSettings(json=descriptor, index="1")
        )
        sync = _make_sync(key)

        settings = await sync.update_button_details(key)

        assert settings.title == "Scene 1"
        assert key.settings.title == "Scene 1"
        assert key.settings.image_url.startswith("data:image/png;base64,")
        assert key.title == "Scene 1"
        assert key.image == key.settings.image_url
        assert key.ok_count == 1

    @pytest.mark.asyncio
    async def test_keeps_pressed_state(self, tmp_path):
        descriptor = _write_group(tmp_path)
        key = StoredAction(
            "k",
            "dev",
            settings=ButtonSettings(json=descriptor, index="0", pressed=True),
        )
        sync = _make_sync(key)

        await sync.update_button_details(key)

        assert key.settings.pressed is True
        assert key.title == "Scene 0 *"

    @pytest.mark.asyncio
    async def test_missing_descriptor_falls_back(self, tmp_path):
        key = StoredAction(
            "k",
            "dev",
            settings=ButtonSettings(
                json=str(tmp_path / "missing.json"),
                index="2",
                title="Old",
                image_url="data:old",
                scripts=["a.ps1"],
                delays=[500],
            ),
        )
        sync = _make_sync(key)

        await sync.update_button_details(key)

        assert key.settings.title == "button 3"
        assert key.settings.image_url == ""
        assert key.settings.image_url_pressed == ""
        assert key.settings.scripts == []
        assert key.settings.delays == []
        assert key.title == "button 3"
        assert key.image == ""
        assert key.ok_count == 0

    @pytest.mark.asyncio
    async def test_undecodable_descriptor_falls_back(self, tmp_path):
        descriptor = tmp_path / "group.json"
        descriptor.write_bytes(b'{"files": [{"title": "\xff\xfe"}]}')
        key = StoredAction(
            "k", "dev", settings=ButtonSettings(json=str(descriptor), index="0")
        )
        sync = _make_sync(key)

        await sync.update_button_details(key)

        assert key.settings.title == "button 1"
        assert key.title == "button 1"

    @pytest.mark.asyncio
    async def test_unset_descriptor_falls_back(self):
        key = StoredAction("k", "dev")
        sync = _make_sync(key)

        await sync.update_button_details(key)

        assert key.title == "button 1"

    @pytest.mark.asyncio
    async def test_no_ok_for_dials(self, tmp_path):
        descriptor = _write_group(tmp_path)
        dial = StoredAction(
            "d",
            "dev",
            is_key=False,
            settings=ButtonSettings(json=descriptor, index="0"),
        )
        sync = _make_sync(dial)

        await sync.update_button_details(dial)

        assert dial.ok_count == 0
        assert dial.title == "Scene 0"


# ---------------------------------------------------------------------------
# refresh_group
# ---------------------------------------------------------------------------


class TestRefreshGroup:

    @pytest.mark.asyncio
    async def test_refreshes_every_key_with_pauses_between(self, tmp_path):
        descriptor = _write_group(tmp_path)
        keys = [
            StoredAction(
                f"k{i}",
                "dev",
                coordinates=(i, 0),
                settings=ButtonSettings(json=descriptor, index=str(i)),
            )
            for i in range(3)
        ]
        sleep = _RecordingSleep()
        sync = _make_sync(*keys, sleep=sleep)

        refreshed = await sync.refresh_group("dev")

        assert refreshed == 3
        assert [k.title for k in keys] == ["Scene 0", "Scene 1", "Scene 2"]
        assert sleep.calls == [0.2, 0.2]

    @pytest.mark.asyncio
    async def test_zero_interval_never_sleeps(self, tmp_path):
        descriptor = _write_group(tmp_path)
        keys = [
            StoredAction(
                f"k{i}", "dev", settings=ButtonSettings(json=descriptor, index=str(i))
            )
            for i in range(2)
        ]
        sleep = _RecordingSleep()
        sync = _make_sync(*keys, refresh_interval=0, sleep=sleep)

        await sync.refresh_group("dev")

        assert sleep.calls == []

    @pytest.mark.asyncio
    async def test_only_target_device(self):
        local = _make_key("l")
        remote = _make_key("r", device="dev-2")
        sync = _make_sync(local, remote, refresh_interval=0)
        sync.update_button_details = AsyncMock()

        refreshed = await sync.refresh_group("dev")

        assert refreshed == 1
        sync.update_button_details.assert_awaited_once_with(local)

    @pytest.mark.asyncio
    async def test_empty_device(self):
        sleep = _RecordingSleep()
        sync = _make_sync(sleep=sleep)
        assert await sync.refresh_group("dev") == 0
        assert sleep.calls == []
