"""Centralized exception hierarchy for the SSH proxy CLI."""

from __future__ import annotations


class SSHProxyError(Exception):
    """Base exception for all SSH proxy CLI errors."""

    exit_code: int = 1


class ConfigurationError(SSHProxyError):
    """Raised before any connection attempt when the run cannot be configured."""


class UnknownIdentityError(ConfigurationError):
    """Raised when a user has no directory under the users base path."""


class MissingKeyError(ConfigurationError):
    """Raised when the configured private key does not exist."""

    exit_code = 2


class SettingsError(ConfigurationError):
    """Raised when the settings TOML file is invalid or cannot be loaded."""


class HostSelectionError(ConfigurationError):
    """Raised when no host can be selected for a hop."""


class CommandFileError(ConfigurationError):
    """Raised when the command file cannot be read."""


class PromptAborted(ConfigurationError):
    """Raised when the operator aborts an interactive prompt."""


class ExecutionError(SSHProxyError):
    """Raised when a run cannot proceed once configured."""


class AuditLogError(ExecutionError):
    """Raised when the audit log cannot be opened or appended to."""


class SSHClientError(ExecutionError):
    """Raised when the ssh client itself cannot be started."""

    exit_code = 255


__all__ = [
    "AuditLogError",
    "CommandFileError",
    "ConfigurationError",
    "ExecutionError",
    "HostSelectionError",
    "MissingKeyError",
    "PromptAborted",
    "SSHClientError",
    "SSHProxyError",
    "SettingsError",
    "UnknownIdentityError",
]
