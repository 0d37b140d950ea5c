from unittest.mock import patch

import pytest


@pytest.fixture
def fresh_cache():
    with patch("app.core.auth_config._config_cache", None):
        yield


def test_reads_project_config(fresh_cache, monkeypatch):
    monkeypatch.delenv("AUTH_CONFIG_PATH", raising=False)
    from app.core.auth_config import get_auth_setting
    assert get_auth_setting("access_token_expire_days", None) == 7
    assert get_auth_setting("email_confirmation_expire_hours", None) == 24
    assert get_auth_setting("admin_invite_expire_hours", None) == 24
    assert get_auth_setting("password_reset_expire_hours", None) == 1


def test_override_path(fresh_cache, monkeypatch, tmp_path):
    config_file = tmp_path / "auth.yaml"
    config_file.write_text("auth:\n  access_token_expire_days: 1\n")
    monkeypatch.setenv("AUTH_CONFIG_PATH", str(config_file))
    from app.core.auth_config import get_auth_setting
    assert get_auth_setting("access_token_expire_days", 7) == 1
    assert get_auth_setting("bcrypt_rounds", 12) == 12


def test_missing_file_uses_defaults(fresh_cache, monkeypatch, tmp_path):
    monkeypatch.setenv("AUTH_CONFIG_PATH", str(tmp_path / "nao-existe.yaml"))
    from app.core.auth_config import load_auth_config, get_auth_setting
    assert load_auth_config() == {}
    assert get_auth_setting("algorithm", "HS256") == "HS256"


def test_invalid_yaml_uses_defaults(fresh_cache, monkeypatch, tmp_path):
    config_file = tmp_path / "auth.yaml"
    config_file.write_text("auth: [sem fechar\n")
    monkeypatch.setenv("AUTH_CONFIG_PATH", str(config_file))
    from app.core.auth_config import load_auth_config
    assert load_auth_config() == {}
