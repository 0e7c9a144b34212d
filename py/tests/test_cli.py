from __future__ import annotations

import sys
from pathlib import Path
from typing import cast

import pytest
from _pytest.monkeypatch import MonkeyPatch
from typer.testing import CliRunner

from ssh_proxy_cli.app import app
from ssh_proxy_cli.core.exceptions import MissingKeyError, PromptAborted, UnknownIdentityError
from ssh_proxy_cli.core.settings import ProxySettings
from ssh_proxy_cli.models import ConnectOptions

cli_module = sys.modules["ssh_proxy_cli.app"]


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "configure_logging", lambda verbose=False: None)
    monkeypatch.setattr(cli_module, "load_settings", lambda path=None: ProxySettings())


def test_help_exits_cleanly(monkeypatch: MonkeyPatch) -> None:
    called: list[object] = []

    async def fake_run_session(*args: object, **kwargs: object) -> int:
        called.append(args)
        return 0

    monkeypatch.setattr(cli_module, "async_run_session", fake_run_session)
    result = CliRunner().invoke(app, ["-h"])

    assert result.exit_code == 0
    assert "--cmd-file" in result.output
    assert "--stop-on-error" in result.output
    assert called == []


def test_cli_passes_options_to_session(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    captured: dict[str, object] = {}

    async def fake_run_session(options: ConnectOptions, settings: ProxySettings, prompter: object) -> int:
        captured["options"] = options
        return 0

    monkeypatch.setattr(cli_module, "async_run_session", fake_run_session)
    result = CliRunner().invoke(
        app,
        [
            "--proxy-user",
            "bob",
            "--remote-user",
            "alice",
            "--proxy",
            "proxy1.example.com",
            "--remote",
            "remote2.example.com",
            "--cmd-file",
            str(tmp_path / "commands.txt"),
            "--stop-on-error",
            "-d",
        ],
    )

    assert result.exit_code == 0
    options = cast(ConnectOptions, captured["options"])
    assert options.proxy_user == "bob"
    assert options.remote_user == "alice"
    assert options.user is None
    assert options.cmd_file == tmp_path / "commands.txt"
    assert options.stop_on_error is True
    assert options.debug is True


def test_cli_propagates_session_exit_code(monkeypatch: MonkeyPatch) -> None:
    async def fake_run_session(*args: object, **kwargs: object) -> int:
        return 7

    monkeypatch.setattr(cli_module, "async_run_session", fake_run_session)
    result = CliRunner().invoke(app, ["--user", "alice", "--remote-cmd", "false"])
    assert result.exit_code == 7


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (UnknownIdentityError("User 'mallory' is not a member of the users directory group."), 1),
        (MissingKeyError("SSH key not found at /nope"), 2),
        (PromptAborted("Prompt aborted by operator."), 1),
    ],
)
def test_cli_maps_configuration_errors(monkeypatch: MonkeyPatch, error: Exception, expected: int) -> None:
    async def fake_run_session(*args: object, **kwargs: object) -> int:
        raise error

    monkeypatch.setattr(cli_module, "async_run_session", fake_run_session)
    result = CliRunner().invoke(app, ["--user", "mallory"])
    assert result.exit_code == expected


def test_cli_end_to_end_with_fake_ssh(monkeypatch: MonkeyPatch, tmp_path: Path) -> None:
    users = tmp_path / "users"
    (users / "alice").mkdir(parents=True)
    key = tmp_path / "id_rsa"
    key.write_text("PRIVATE KEY", encoding="utf-8")
    fake_ssh = tmp_path / "fake-ssh"
    fake_ssh.write_text('#!/bin/sh\ncase "$*" in *false*) exit 1 ;; esac\nexit 0\n', encoding="utf-8")
    fake_ssh.chmod(0o755)
    commands = tmp_path / "commands.txt"
    commands.write_text("uptime\nfalse\nwhoami\n", encoding="utf-8")
    settings = ProxySettings(user_dir_base=users, identity_file=key, ssh_binary=str(fake_ssh))
    monkeypatch.setattr(cli_module, "load_settings", lambda path=None: settings)

    result = CliRunner().invoke(
        app,
        [
            "--user",
            "alice",
            "--proxy",
            "proxy1.example.com",
            "--remote",
            "remote1.example.com",
            "--cmd-file",
            str(commands),
            "--stop-on-error",
            "-d",
        ],
    )

    assert result.exit_code == 1
    assert "Command: uptime | Status: SUCCESS" in result.output
    assert "Command: false | Status: FAILED (Exit 1)" in result.output
    assert "Stop-on-error triggered. Halting execution." in result.output
    assert "whoami" not in result.output
    logs = list((users / "alice").glob("ssh_proxy_connection_log_*.log"))
    assert len(logs) == 1
    assert "Status: ATTEMPTING" in logs[0].read_text(encoding="utf-8")


def test_cli_interrupt_exits_130(monkeypatch: MonkeyPatch) -> None:
    async def fake_run_session(*args: object, **kwargs: object) -> int:
        raise KeyboardInterrupt

    monkeypatch.setattr(cli_module, "async_run_session", fake_run_session)
    result = CliRunner().invoke(app, ["--user", "alice", "--remote-cmd", "sleep 60"])
    assert result.exit_code == 130
