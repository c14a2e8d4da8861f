"""Tests for the host boundary: StoredAction and ActionRegistry."""

import pytest

from pyJsonGroupDeck.host import ActionHandle, ActionRegistry, StoredAction
from pyJsonGroupDeck.persistence import SettingsStore
from pyJsonGroupDeck.settings import ButtonSettings


class TestStoredAction:

    def test_is_action_handle(self):
        assert isinstance(StoredAction("c", "d"), ActionHandle)

    def test_defaults(self):
        action = StoredAction("ctx", "dev")
        assert action.context == "ctx"
        assert action.device_id == "dev"
        assert action.is_key is True
        assert action.coordinates == (0, 0)
        assert action.title is None
        assert action.image is None

    @pytest.mark.asyncio
    async def test_get_settings_returns_copy(self):
        action = StoredAction("ctx", "dev", settings=ButtonSettings(title="A"))
        settings = await action.get_settings()
        settings.title = "B"
        assert (await action.get_settings()).title == "A"

    @pytest.mark.asyncio
    async def test_set_settings_persists_to_store(self, tmp_path):
        store = SettingsStore(tmp_path / "s.yaml")
        action = StoredAction("ctx", "dev", store=store)
        await action.set_settings(ButtonSettings(json="/g.json", index="1"))
        assert SettingsStore(store.path).get("ctx")["json"] == "/g.json"

    @pytest.mark.asyncio
    async def test_store_settings_take_precedence(self, tmp_path):
        store = SettingsStore(tmp_path / "s.yaml")
        store.set("ctx", ButtonSettings(title="stored").to_dict())
        action = StoredAction(
            "ctx", "dev", settings=ButtonSettings(title="initial"), store=store
        )
        assert (await action.get_settings()).title == "stored"

    @pytest.mark.asyncio
    async def test_rendering_and_ok(self):
        action = StoredAction("ctx", "dev")
        await action.set_title("T")
        await action.set_image("data:x")
        await action.show_ok()
        assert action.title == "T"
        assert action.image == "data:x"
        assert action.ok_count == 1


class TestActionRegistry:

    def test_add_get_remove(self):
        registry = ActionRegistry()
        action = StoredAction("ctx", "dev")
        registry.add(action)
        assert "ctx" in registry
        assert registry.get("ctx") is action
        assert len(registry) == 1
        assert registry.remove("ctx") is action
        assert registry.remove("ctx") is None
        assert len(registry) == 0

    def test_add_replaces_same_context(self):
        registry = ActionRegistry()
        registry.add(StoredAction("ctx", "dev"))
        newer = StoredAction("ctx", "dev")
        registry.add(newer)
        assert list(registry) == [newer]

    def test_device_actions_filters(self):
        registry = ActionRegistry()
        key = StoredAction("k", "dev", coordinates=(1, 0))
        other_device = StoredAction("o", "other")
        dial = StoredAction("d", "dev", is_key=False)
        off_grid = StoredAction("m", "dev", coordinates=None)
        second_key = StoredAction("k2", "dev", coordinates=(2, 0))
        for action in (key, other_device, dial, off_grid, second_key):
            registry.add(action)
        assert registry.device_actions("dev") == [key, second_key]
        assert registry.device_actions("other") == [other_device]
        assert registry.device_actions("nope") == []
