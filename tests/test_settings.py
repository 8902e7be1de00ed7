from pathlib import Path

import pytest

from proofdesk.utils import settings as settings_module
from proofdesk.utils.settings import load_settings


@pytest.fixture(autouse=True)
def no_home_config(tmp_path, monkeypatch):
    monkeypatch.setattr(settings_module, "CONFIG_FILE", tmp_path / "absent.yaml")


def test_defaults():
    settings = load_settings(env={})
    assert settings.history_capacity == 10
    assert settings.stale_threshold == 5
    assert settings.language == "Khmer"


def test_yaml_then_environment(tmp_path):
    config = tmp_path / "proofdesk.yaml"
    config.write_text("model: claude-3-5-haiku-latest\nstale_threshold: 0\nhistory_path: ~/h.json\n",
                      encoding="utf-8")
    settings = load_settings(config, env={"PROOFDESK_STALE_THRESHOLD": "none",
                                          "PROOFDESK_TEMPERATURE": "0.5"})
    assert settings.model == "claude-3-5-haiku-latest"
    assert settings.stale_threshold is None
    assert settings.temperature == 0.5
    assert settings.history_path == Path("~/h.json").expanduser()


def test_home_config_is_picked_up(tmp_path, monkeypatch):
    config = tmp_path / "home.yaml"
    config.write_text("language: English\n", encoding="utf-8")
    monkeypatch.setattr(settings_module, "CONFIG_FILE", config)
    assert load_settings(env={}).language == "English"


def test_unknown_yaml_key_is_rejected(tmp_path):
    config = tmp_path / "proofdesk.yaml"
    config.write_text("modle: gpt-4o\n", encoding="utf-8")
    with pytest.raises(ValueError, match="modle"):
        load_settings(config, env={})


def test_bad_environment_value():
    with pytest.raises(ValueError, match="PROOFDESK_MAX_RETRIES"):
        load_settings(env={"PROOFDESK_MAX_RETRIES": "many"})
