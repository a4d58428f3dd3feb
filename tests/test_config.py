import pytest

from passfield_guard import yaml_config
from passfield_guard.config import Settings


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    path = tmp_path / "settings.yml"
    monkeypatch.setattr(yaml_config, "_SETTINGS_PATH", path)
    monkeypatch.setattr(yaml_config, "_cache", None)
    return path


def test_defaults_section_is_read(settings_file):
    settings_file.write_text("defaults:\n  refresh_interval_ms: 30000\n  max_retries: 5\n")
    assert yaml_config.get_defaults() == {"refresh_interval_ms": 30000, "max_retries": 5}


def test_missing_file_means_no_defaults(settings_file):
    assert yaml_config.get_defaults() == {}


def test_empty_file_means_no_defaults(settings_file):
    settings_file.write_text("")
    assert yaml_config.get_defaults() == {}


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PASSFIELD_GUARD_MAX_RETRIES", "7")
    monkeypatch.setenv("PASSFIELD_GUARD_CONFIG_URL", "https://ext.example/config.json")
    cfg = Settings()
    assert cfg.max_retries == 7
    assert cfg.config_url == "https://ext.example/config.json"
    assert cfg.refresh_interval_ms == 60000


def test_malformed_yaml_means_no_defaults(settings_file):
    settings_file.write_text("defaults: [unclosed\n")
    assert yaml_config.get_defaults() == {}


@pytest.mark.parametrize("text", ["- a\n- b\n", "defaults: 5\n"])
def test_non_mapping_sections_mean_no_defaults(settings_file, text):
    settings_file.write_text(text)
    assert yaml_config.get_defaults() == {}
