from __future__ import annotations

import os

import pytest
from pydantic import ValidationError

from token_gate import config as config_mod
from token_gate.config import (
    PORT,
    MissingAuthTokenError,
    Settings,
    SettingsFileError,
    is_local,
    load_env_overrides,
)


def test_missing_file_is_noop(clean_env, tmp_path):
    assert load_env_overrides(tmp_path / "absent.env") is False
    assert "AUTH_TOKEN" not in os.environ


def test_file_seeds_environment(clean_env, tmp_path):
    env = tmp_path / ".env"
    env.write_text("AUTH_TOKEN=from-file\nLOG_LEVEL=debug\n", encoding="utf-8")
    assert load_env_overrides(env) is True
    assert os.environ["AUTH_TOKEN"] == "from-file"
    assert os.environ["LOG_LEVEL"] == "debug"


def test_exported_variables_win_over_file(clean_env, tmp_path, monkeypatch):
    env = tmp_path / ".env"
    env.write_text("AUTH_TOKEN=from-file\n", encoding="utf-8")
    monkeypatch.setenv("AUTH_TOKEN", "exported")
    load_env_overrides(env)
    assert os.environ["AUTH_TOKEN"] == "exported"


def test_env_file_variable_selects_path(clean_env, tmp_path, monkeypatch):
    env = tmp_path / "custom.env"
    env.write_text("AUTH_TOKEN=custom\n", encoding="utf-8")
    monkeypatch.setenv("ENV_FILE", str(env))
    assert load_env_overrides() is True
    assert os.environ["AUTH_TOKEN"] == "custom"


def test_is_local_skips_file(clean_env, tmp_path, monkeypatch):
    env = tmp_path / ".env"
    env.write_text("AUTH_TOKEN=from-file\n", encoding="utf-8")
    monkeypatch.setenv("IS_LOCAL", "true")
    assert load_env_overrides(env) is False
    assert "AUTH_TOKEN" not in os.environ


def test_undecodable_file_is_fatal(clean_env, tmp_path):
    env = tmp_path / ".env"
    env.write_bytes(b"AUTH_TOKEN=\xff\xfe\n")
    with pytest.raises(SettingsFileError) as ei:
        load_env_overrides(env)
    assert ei.value.code == "settings_file_unreadable"


def test_unopenable_file_is_fatal(clean_env, tmp_path, monkeypatch):
    env = tmp_path / ".env"
    env.write_text("AUTH_TOKEN=tok\n", encoding="utf-8")

    def _denied(path, **kwargs):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(config_mod, "dotenv_values", _denied)
    with pytest.raises(SettingsFileError) as ei:
        load_env_overrides(env)
    assert ei.value.code == "settings_file_unreadable"
    assert "AUTH_TOKEN" not in os.environ


@pytest.mark.skipif(
    not hasattr(os, "geteuid") or os.geteuid() == 0,
    reason="file permissions do not restrict root",
)
def test_unreadable_permissions_are_fatal(clean_env, tmp_path):
    env = tmp_path / ".env"
    env.write_text("AUTH_TOKEN=tok\n", encoding="utf-8")
    env.chmod(0)
    try:
        with pytest.raises(SettingsFileError):
            load_env_overrides(env)
    finally:
        env.chmod(0o600)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("1", True), ("TRUE", True), ("yes", True), ("0", False), ("false", False), ("", False)],
)
def test_is_local_parsing(value, expected):
    assert is_local({"IS_LOCAL": value}) is expected


def test_settings_from_env():
    s = Settings.from_env({"AUTH_TOKEN": "abc", "LOG_LEVEL": "debug"})
    assert s.auth_token == "abc"
    assert s.port == PORT == 8888
    assert s.host == "0.0.0.0"
    assert s.log_level == "DEBUG"


@pytest.mark.parametrize("environ", [{}, {"AUTH_TOKEN": ""}], ids=["unset", "empty"])
def test_settings_require_token(environ):
    with pytest.raises(MissingAuthTokenError) as ei:
        Settings.from_env(environ)
    assert ei.value.code == "missing_auth_token"


def test_settings_are_immutable():
    s = Settings(auth_token="abc")
    with pytest.raises(ValidationError):
        s.auth_token = "other"  # type: ignore[misc]


def test_settings_repr_hides_token():
    assert "abc" not in repr(Settings(auth_token="abc"))
