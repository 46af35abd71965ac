"""Unit tests for config.py"""

import pytest
from pydantic import ValidationError

from mdmerge.config import load_config


def test_load_config_defaults():
    """Settings defaults apply when no .mdmerge.yaml, env var, or CLI override exists."""
    settings = load_config()
    assert settings.preference == "destination"
    assert settings.add_template_only_nodes is False
    assert settings.freeze_token == "merge"
    assert settings.parser_preset == "gfm-like"
    assert settings.fuzzy_tables is False


def test_load_config_reads_yaml(tmp_path):
    (tmp_path / ".mdmerge.yaml").write_text("preference: template\nfreeze_token: keep\n")
    settings = load_config()
    assert settings.preference == "template"
    assert settings.freeze_token == "keep"


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """MDMERGE_PREFERENCE takes precedence over .mdmerge.yaml."""
    (tmp_path / ".mdmerge.yaml").write_text("preference: template\n")
    monkeypatch.setenv("MDMERGE_PREFERENCE", "destination")
    assert load_config().preference == "destination"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var."""
    monkeypatch.setenv("MDMERGE_FREEZE_TOKEN", "env-token")
    settings = load_config(overrides={"freeze_token": "cli-token"})
    assert settings.freeze_token == "cli-token"


def test_load_config_none_override_ignored(monkeypatch):
    monkeypatch.setenv("MDMERGE_PREFERENCE", "template")
    assert load_config(overrides={"preference": None}).preference == "template"


def test_load_config_env_bool_coerced(monkeypatch):
    """MDMERGE_ADD_TEMPLATE_ONLY_NODES is coerced to bool."""
    monkeypatch.setenv("MDMERGE_ADD_TEMPLATE_ONLY_NODES", "true")
    assert load_config().add_template_only_nodes is True


def test_load_config_env_float_coerced(monkeypatch):
    monkeypatch.setenv("MDMERGE_TABLE_MATCH_THRESHOLD", "0.75")
    assert load_config().table_match_threshold == 0.75


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when .mdmerge.yaml contains invalid YAML."""
    (tmp_path / ".mdmerge.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid .mdmerge.yaml"):
        load_config()


def test_load_config_non_mapping_yaml(tmp_path):
    (tmp_path / ".mdmerge.yaml").write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_config()


def test_load_config_empty_yaml(tmp_path):
    (tmp_path / ".mdmerge.yaml").write_text("")
    assert load_config().preference == "destination"


def test_invalid_preference_rejected():
    with pytest.raises(ValidationError):
        load_config(overrides={"preference": "newest"})


def test_empty_freeze_token_rejected():
    with pytest.raises(ValidationError):
        load_config(overrides={"freeze_token": ""})


def test_threshold_out_of_range_rejected():
    with pytest.raises(ValidationError):
        load_config(overrides={"table_match_threshold": 1.5})


def test_load_config_explicit_path(tmp_path):
    """An explicit path is read instead of .mdmerge.yaml."""
    (tmp_path / ".mdmerge.yaml").write_text("preference: template\n")
    custom = tmp_path / "merge.yaml"
    custom.write_text("freeze_token: keep\n")
    settings = load_config(path=custom)
    assert settings.freeze_token == "keep"
    assert settings.preference == "destination"


def test_load_config_missing_explicit_path(tmp_path):
    with pytest.raises(ValueError, match="Config file not found"):
        load_config(path=tmp_path / "nope.yaml")
