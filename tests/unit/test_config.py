"""Unit tests for configuration loading."""

import json

import pytest

from crediario.config import ConfigManager, CrediarioConfig, get_config


@pytest.mark.unit
class TestConfigManager:

    def test_defaults_with_test_environment(self):
        config = get_config()

        assert config.database.url == "sqlite://"
        assert config.app.log_to_file is False
        assert config.app.temporary_password_length == 7
        assert config.app.password_hash_iterations == 120_000

    def test_config_is_cached(self):
        assert get_config() is get_config()

    def test_loads_file_and_applies_environment(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "app": {"temporary_password_length": 10, "email_from": "it@example.com"},
            "database": {"url": "sqlite:///from-file.db"},
        }))
        monkeypatch.setenv("CREDIARIO_CONFIG_FILE", str(config_file))
        monkeypatch.setenv("CREDIARIO_DATABASE_URL", "sqlite:///from-env.db")
        monkeypatch.setenv("CREDIARIO_DEBUG", "1")

        config = ConfigManager().load_config()

        assert config.app.temporary_password_length == 10
        assert config.app.email_from == "it@example.com"
        assert config.database.url == "sqlite:///from-env.db"
        assert config.server.debug is True
        assert config.app.log_level == "DEBUG"

    def test_unreadable_file_falls_back_to_defaults(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")
        monkeypatch.setenv("CREDIARIO_CONFIG_FILE", str(config_file))

        config = ConfigManager().load_config()

        assert config.app.temporary_password_length == 7

    def test_save_round_trip(self, tmp_path, monkeypatch):
        config_file = tmp_path / "nested" / "config.json"
        monkeypatch.setenv("CREDIARIO_CONFIG_FILE", str(config_file))
        manager = ConfigManager()
        config = manager.load_config()
        config.app.email_from = "saved@example.com"

        assert manager.save_config()
        assert json.loads(config_file.read_text())["app"]["email_from"] == "saved@example.com"

    def test_validate_config_reports_weak_settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CREDIARIO_CONFIG_FILE", str(tmp_path / "missing.json"))
        manager = ConfigManager()
        config = manager.load_config()
        config.app.password_hash_iterations = 100
        config.app.temporary_password_length = 3
        config.app.password_reset_body_template = "no placeholder"
        config.app.email_from = "nobody"

        issues = manager.validate_config()

        assert len(issues) == 4

    def test_default_config_is_valid(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CREDIARIO_CONFIG_FILE", str(tmp_path / "missing.json"))

        assert ConfigManager().validate_config() == []

    def test_dict_round_trip(self):
        config = get_config()

        assert CrediarioConfig.from_dict(config.to_dict()) == config
