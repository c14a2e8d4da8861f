"""Tests for EngineConfig and load_config."""

import logging

import pytest
import yaml

from pyJsonGroupDeck.config import EngineConfig, load_config


class TestEngineConfig:

    def test_defaults(self):
        config = EngineConfig()
        assert config.default_delay_ms == 500
        assert config.long_press_ms == 2000.0
        assert config.refresh_interval == 0.2
        assert config.interpreter == "pwsh"
        assert config.osc_ip == "127.0.0.1"
        assert config.osc_port == 8000
        assert config.osc_module == "SendOscModule"
        assert config.honor_delay_on_failure is False
        assert config.settings_path is None

    def test_dict_round_trip(self):
        config = EngineConfig(long_press_ms=1500, osc_port=None, log_level="DEBUG")
        assert EngineConfig.from_dict(config.to_dict()) == config

    def test_from_none(self):
        assert EngineConfig.from_dict(None) == EngineConfig()

    def test_unknown_keys_ignored_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="pyJsonGroupDeck.config"):
            config = EngineConfig.from_dict({"interpreter": "bash", "colour": "red"})
        assert config.interpreter == "bash"
        assert "colour" in caplog.text

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("DEBUG", logging.DEBUG),
            ("warning", logging.WARNING),
            ("nonsense", logging.INFO),
        ],
    )
    def test_numeric_log_level(self, name, expected):
        assert EngineConfig(log_level=name).numeric_log_level == expected


class TestLoadConfig:

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == EngineConfig()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == EngineConfig()

    def test_overrides(self, tmp_path):
        path = tmp_path / "json-group.yaml"
        path.write_text(
            "long_press_ms: 1200\n"
            "osc_port: null\n"
            "honor_delay_on_failure: true\n"
            "settings_path: /tmp/s.yaml\n",
            encoding="utf-8",
        )
        config = load_config(str(path))
        assert config.long_press_ms == 1200
        assert config.osc_port is None
        assert config.honor_delay_on_failure is True
        assert config.settings_path == "/tmp/s.yaml"
        assert config.interpreter == "pwsh"

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("a: [unclosed\n", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            load_config(path)
