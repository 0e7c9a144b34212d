"""Core logic for audited SSH sessions through a jump host."""

from ssh_proxy_cli.core.audit import SessionLogger, log_path_for
from ssh_proxy_cli.core.batch import execute_batch, read_command_file, run_batch
from ssh_proxy_cli.core.exceptions import (
    AuditLogError,
    CommandFileError,
    ConfigurationError,
    ExecutionError,
    HostSelectionError,
    MissingKeyError,
    PromptAborted,
    SettingsError,
    SSHClientError,
    SSHProxyError,
    UnknownIdentityError,
)
from ssh_proxy_cli.core.models import (
    CommandEntry,
    CommandFileMode,
    ExecutionOutcome,
    InteractiveMode,
    SessionConfig,
    SingleCommandMode,
)
from ssh_proxy_cli.core.runner import CommandRunner
from ssh_proxy_cli.core.session import async_run_session
from ssh_proxy_cli.core.settings import ProxySettings, load_settings

__all__ = [
    "AuditLogError",
    "CommandEntry",
    "CommandFileError",
    "CommandFileMode",
    "CommandRunner",
    "ConfigurationError",
    "ExecutionError",
    "ExecutionOutcome",
    "HostSelectionError",
    "InteractiveMode",
    "MissingKeyError",
    "PromptAborted",
    "ProxySettings",
    "SSHClientError",
    "SSHProxyError",
    "SessionConfig",
    "SessionLogger",
    "SettingsError",
    "SingleCommandMode",
    "UnknownIdentityError",
    "async_run_session",
    "execute_batch",
    "load_settings",
    "log_path_for",
    "read_command_file",
    "run_batch",
]
