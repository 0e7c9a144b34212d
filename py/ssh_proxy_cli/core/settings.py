"""Settings file loading for the SSH proxy CLI."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, TypeGuard, cast

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ssh_proxy_cli.core.exceptions import SettingsError

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "ssh-proxy.toml"
DEFAULT_USER_DIR_BASE = Path("/home/users")
DEFAULT_IDENTITY_FILE = "~/.ssh/id_rsa"
DEFAULT_PROXIES: tuple[str, ...] = ("proxy1.example.com", "proxy2.example.com")
DEFAULT_REMOTES: tuple[str, ...] = ("remote1.example.com", "remote2.example.com")


def _is_nonstring_sequence(value: object) -> TypeGuard[Sequence[object]]:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


class ProxySettings(BaseModel):
    """Site-wide defaults: where user directories live and which hosts to offer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_dir_base: Path = DEFAULT_USER_DIR_BASE
    identity_file: Path = Field(default_factory=lambda: Path(DEFAULT_IDENTITY_FILE).expanduser())
    ssh_binary: str = "ssh"
    ssh_extra_args: tuple[str, ...] = Field(default_factory=tuple)
    proxies: tuple[str, ...] = DEFAULT_PROXIES
    remotes: tuple[str, ...] = DEFAULT_REMOTES

    @field_validator("user_dir_base", "identity_file", mode="before")
    @classmethod
    def _expand(cls, value: str | Path) -> Path:
        return Path(value).expanduser()

    @field_validator("ssh_extra_args", "proxies", "remotes", mode="before")
    @classmethod
    def _ensure_tuple(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        if _is_nonstring_sequence(value):
            return tuple(str(item) for item in value)
        raise TypeError("Expected a list of strings")


def _parse_settings(data: Mapping[str, Any], path: Path) -> ProxySettings:
    defaults_raw = data.get("defaults", {})
    if not isinstance(defaults_raw, Mapping):
        raise SettingsError(f"[defaults] in '{path}' must be a table")
    defaults = cast(Mapping[str, Any], defaults_raw)

    values: dict[str, Any] = {}
    for key in ("user_dir_base", "identity_file", "ssh_binary", "ssh_extra_args"):
        if key in defaults:
            values[key] = defaults[key]
    # host lists may live at the top level or under [defaults]
    for key in ("proxies", "remotes"):
        if key in data:
            values[key] = data[key]
        elif key in defaults:
            values[key] = defaults[key]

    unknown = sorted(set(defaults) - set(ProxySettings.model_fields))
    if unknown:
        raise SettingsError(f"Unknown setting(s) in '{path}': {', '.join(unknown)}")

    try:
        return ProxySettings(**values)
    except (ValidationError, TypeError) as exc:
        raise SettingsError(f"Invalid settings in '{path}': {exc}") from exc


def load_settings(path: Path | None = None) -> ProxySettings:
    """Load settings from TOML.

    With no explicit path the default file is optional and built-in values are
    used when it is absent. An explicit path must exist.
    """
    explicit = path is not None
    config_path = path if path is not None else DEFAULT_CONFIG_PATH
    try:
        with config_path.open("rb") as handle:
            data: dict[str, Any] = tomllib.load(handle)
    except FileNotFoundError as exc:
        if explicit:
            raise SettingsError(f"Settings file '{config_path}' was not found") from exc
        logger.debug("settings-defaults", path=str(config_path))
        return ProxySettings()
    except tomllib.TOMLDecodeError as exc:
        raise SettingsError(f"Settings file '{config_path}' is invalid: {exc}") from exc

    settings = _parse_settings(data, config_path)
    logger.debug("settings-loaded", path=str(config_path))
    return settings


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ProxySettings",
    "load_settings",
]
