"""Tests for the YAML configuration manager."""

from healthmate_sleep.config.config_manager import CONFIG_ENV_VAR, ConfigManager


def test_bundled_defaults():
    config = ConfigManager()

    assert config.get("storage.max_sessions") == 365
    assert config.get("stage_simulation.strategy") == "deterministic"
    assert config.get("analysis.circular_clock_average") is False


def test_missing_keys_return_default():
    config = ConfigManager()

    assert config.get("storage.missing", "fallback") == "fallback"
    assert config.get("storage.data_dir.deeper") is None


def test_overrides_and_set():
    config = ConfigManager(overrides={"storage.data_dir": "/tmp/sleep", "new.section.key": 1})

    assert config.get("storage.data_dir") == "/tmp/sleep"
    assert config.get("new.section.key") == 1


def test_config_path_from_environment(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    path.write_text("storage:\n  max_sessions: 30\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    config = ConfigManager()

    assert config.config_path == str(path)
    assert config.get("storage.max_sessions") == 30
