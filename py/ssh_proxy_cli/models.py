"""Pydantic models for Typer CLI options."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator


class _BaseOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    verbose: bool = False


def _expand_optional_path(value: str | Path | None) -> Path | None:
    if value is None:
        return None
    return Path(value).expanduser()


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class ConnectOptions(_BaseOptions):
    user: str | None = None
    proxy_user: str | None = None
    remote_user: str | None = None
    proxy: str | None = None
    remote: str | None = None
    remote_cmd: str | None = None
    cmd_file: Path | None = None
    stop_on_error: bool = False
    debug: bool = False
    identity_file: Path | None = None
    config: Path | None = None

    _validate_paths = field_validator("cmd_file", "identity_file", "config", mode="before")(
        _expand_optional_path
    )
    _validate_names = field_validator(
        "user", "proxy_user", "remote_user", "proxy", "remote", mode="before"
    )(_blank_to_none)

    @field_validator("remote_cmd", mode="before")
    @classmethod
    def _empty_command(cls, value: str | None) -> str | None:
        # the command text is sent verbatim, only an empty one is dropped
        if not value:
            return None
        return value
