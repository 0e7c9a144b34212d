from __future__ import annotations

from pathlib import Path

import pytest
from _pytest.monkeypatch import MonkeyPatch

from ssh_proxy_cli.core import settings as settings_module
from ssh_proxy_cli.core.exceptions import SettingsError
from ssh_proxy_cli.core.settings import ProxySettings, load_settings

SAMPLE_SETTINGS = """
proxies = ["bastion-a.example.com", "bastion-b.example.com"]
remotes = ["db1.internal"]

[defaults]
user_dir_base = "/srv/users"
identity_file = "~/.ssh/ops_ed25519"
ssh_extra_args = ["-o", "ConnectTimeout=15"]
"""


def test_load_settings_reads_hosts_and_defaults(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    monkeypatch.setenv("HOME", str(fake_home))
    path = tmp_path / "ssh-proxy.toml"
    path.write_text(SAMPLE_SETTINGS, encoding="utf-8")

    settings = load_settings(path)

    assert settings.proxies == ("bastion-a.example.com", "bastion-b.example.com")
    assert settings.remotes == ("db1.internal",)
    assert settings.user_dir_base == Path("/srv/users")
    assert settings.identity_file == fake_home / ".ssh" / "ops_ed25519"
    assert settings.ssh_extra_args == ("-o", "ConnectTimeout=15")
    assert settings.ssh_binary == "ssh"


def test_missing_default_file_uses_builtin_values(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr(settings_module, "DEFAULT_CONFIG_PATH", tmp_path / "absent.toml")
    settings = load_settings()
    assert settings == ProxySettings()
    assert settings.proxies == ("proxy1.example.com", "proxy2.example.com")
    assert settings.user_dir_base == Path("/home/users")


def test_missing_explicit_file_is_an_error(tmp_path: Path) -> None:
    with pytest.raises(SettingsError):
        load_settings(tmp_path / "absent.toml")


def test_invalid_toml_is_an_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text("proxies = [", encoding="utf-8")
    with pytest.raises(SettingsError):
        load_settings(path)


def test_unknown_default_key_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "extra.toml"
    path.write_text("[defaults]\npassword = 'hunter2'\n", encoding="utf-8")
    with pytest.raises(SettingsError, match="password"):
        load_settings(path)


def test_wrong_type_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "wrong.toml"
    path.write_text("proxies = 42\n", encoding="utf-8")
    with pytest.raises(SettingsError):
        load_settings(path)
