"""Session orchestration: resolve who and where, then audit and run."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from datetime import date
from pathlib import Path
from typing import Protocol

import structlog
import structlog.contextvars

from ssh_proxy_cli.core.audit import SessionLogger, format_fields, log_path_for
from ssh_proxy_cli.core.batch import Runner, read_command_file, run_batch
from ssh_proxy_cli.core.identity import ensure_key_exists, resolve_user_dir
from ssh_proxy_cli.core.models import (
    CommandEntry,
    CommandFileMode,
    InteractiveMode,
    SessionConfig,
    SessionMode,
    SingleCommandMode,
)
from ssh_proxy_cli.core.runner import CommandRunner
from ssh_proxy_cli.core.settings import ProxySettings
from ssh_proxy_cli.models import ConnectOptions

logger = structlog.get_logger(__name__)


class Prompter(Protocol):
    def identity(self) -> str: ...

    def select_host(self, label: str, hosts: Sequence[str]) -> str: ...


RunnerFactory = Callable[[SessionConfig], Runner]


def resolve_users(options: ConnectOptions, prompter: Prompter) -> tuple[str, str, str]:
    """Return ``(identity, proxy_user, remote_user)``.

    ``--user`` sets both hops and the per-hop flags override it. Without
    ``--user`` or ``--remote-user`` the operator is asked for an identity.
    """
    identity = options.user or options.remote_user or prompter.identity()
    proxy_user = options.proxy_user or options.user or identity
    remote_user = options.remote_user or options.user or identity
    return identity, proxy_user, remote_user


def select_mode(options: ConnectOptions) -> SessionMode:
    if options.cmd_file is not None:
        return CommandFileMode(path=options.cmd_file)
    if options.remote_cmd:
        return SingleCommandMode(command=options.remote_cmd)
    return InteractiveMode()


def build_session_config(
    options: ConnectOptions,
    settings: ProxySettings,
    prompter: Prompter,
) -> tuple[SessionConfig, Path]:
    """Resolve every input of a run, failing before any connection is made."""
    identity, proxy_user, remote_user = resolve_users(options, prompter)
    user_dir = resolve_user_dir(identity, settings.user_dir_base)

    proxy_host = options.proxy or prompter.select_host("proxy", settings.proxies)
    remote_host = options.remote or prompter.select_host("remote", settings.remotes)

    key_path = ensure_key_exists(options.identity_file or settings.identity_file)

    mode = select_mode(options)
    if options.stop_on_error and not isinstance(mode, CommandFileMode):
        logger.warning("stop-on-error-ignored", mode=mode.describe())

    config = SessionConfig(
        proxy_user=proxy_user,
        remote_user=remote_user,
        proxy_host=proxy_host,
        remote_host=remote_host,
        key_path=key_path,
        mode=mode,
        stop_on_error=options.stop_on_error,
        ssh_binary=settings.ssh_binary,
        ssh_extra_args=settings.ssh_extra_args,
    )
    return config, user_dir


def attempt_record(config: SessionConfig) -> str:
    return format_fields(
        [
            ("ProxyUser", config.proxy_user),
            ("RemoteUser", config.remote_user),
            ("Proxy", config.proxy_host),
            ("Remote", config.remote_host),
            ("SSH Key", config.key_path),
            ("Mode", config.mode.describe()),
            ("Status", "ATTEMPTING"),
        ]
    )


async def _run_single(config: SessionConfig, session_logger: SessionLogger, runner: Runner) -> int:
    command = config.mode.command if isinstance(config.mode, SingleCommandMode) else None
    outcome = await runner.run(command)
    session_logger.log_event(format_fields([("Status", outcome.describe_status())]))
    return outcome.exit_code


async def async_run_session(
    options: ConnectOptions,
    settings: ProxySettings,
    prompter: Prompter,
    *,
    runner_factory: RunnerFactory = CommandRunner,
    today: date | None = None,
) -> int:
    """Run one proxied SSH session and return the process exit code.

    Configuration problems raise ``ConfigurationError`` before the audit log
    is touched. Once the log is open every outcome is recorded.
    """
    config, user_dir = build_session_config(options, settings, prompter)
    commands: list[CommandEntry] = []
    if isinstance(config.mode, CommandFileMode):
        commands = read_command_file(config.mode.path)

    runner = runner_factory(config)
    structlog.contextvars.bind_contextvars(target=config.target, jump=config.jump_host)
    try:
        with SessionLogger(log_path_for(user_dir, today), debug=options.debug) as session_logger:
            session_logger.log_event(attempt_record(config))
            try:
                if isinstance(config.mode, CommandFileMode):
                    return await run_batch(
                        config,
                        commands,
                        session_logger=session_logger,
                        runner=runner,
                    )
                return await _run_single(config, session_logger, runner)
            except (asyncio.CancelledError, KeyboardInterrupt):
                session_logger.log_event(format_fields([("Status", "INTERRUPTED")]))
                raise
    finally:
        structlog.contextvars.unbind_contextvars("target", "jump")


__all__ = [
    "async_run_session",
    "attempt_record",
    "build_session_config",
    "resolve_users",
    "select_mode",
]
