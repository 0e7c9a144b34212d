"""Unified Pydantic models for the SSH proxy CLI."""

from __future__ import annotations

from enum import Enum, StrEnum
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _FrozenModel(BaseModel):
    """Base model for values that are read-only once built."""

    model_config = ConfigDict(frozen=True, extra="forbid")


# Session modes


class InteractiveMode(_FrozenModel):
    kind: Literal["interactive"] = "interactive"

    def describe(self) -> str:
        return "INTERACTIVE"


class SingleCommandMode(_FrozenModel):
    kind: Literal["command"] = "command"
    command: str = Field(min_length=1)

    def describe(self) -> str:
        return f"COMMAND: {self.command}"


class CommandFileMode(_FrozenModel):
    kind: Literal["command-file"] = "command-file"
    path: Path

    def describe(self) -> str:
        return f"COMMAND FILE: {self.path}"


SessionMode = Annotated[
    InteractiveMode | SingleCommandMode | CommandFileMode,
    Field(discriminator="kind"),
]


class SessionConfig(_FrozenModel):
    """Everything one run needs to reach the remote host through the proxy."""

    proxy_user: str = Field(min_length=1)
    remote_user: str = Field(min_length=1)
    proxy_host: str = Field(min_length=1)
    remote_host: str = Field(min_length=1)
    key_path: Path
    mode: SessionMode = Field(default_factory=InteractiveMode)
    stop_on_error: bool = False
    ssh_binary: str = "ssh"
    ssh_extra_args: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("key_path", mode="before")
    @classmethod
    def _expand_key(cls, value: str | Path) -> Path:
        return Path(value).expanduser()

    @property
    def jump_host(self) -> str:
        return f"{self.proxy_user}@{self.proxy_host}"

    @property
    def target(self) -> str:
        return f"{self.remote_user}@{self.remote_host}"


# Execution results


class CommandStatus(StrEnum):
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


class ExecutionOutcome(_FrozenModel):
    """Result of a single ssh invocation."""

    command: str | None = None
    exit_code: int

    @property
    def status(self) -> CommandStatus:
        return CommandStatus.SUCCESS if self.exit_code == 0 else CommandStatus.FAILED

    @property
    def succeeded(self) -> bool:
        return self.status is CommandStatus.SUCCESS

    def describe_status(self) -> str:
        if self.succeeded:
            return CommandStatus.SUCCESS.value
        return f"{CommandStatus.FAILED.value} (Exit {self.exit_code})"


class CommandEntry(_FrozenModel):
    """A non-blank line of a command file."""

    line_number: int = Field(ge=1)
    text: str = Field(min_length=1)


class BatchState(Enum):
    START = "start"
    ATTEMPT_LOGGED = "attempt-logged"
    RUNNING = "running"
    HALTED = "halted"
    COMPLETED = "completed"


__all__ = [
    "BatchState",
    "CommandEntry",
    "CommandFileMode",
    "CommandStatus",
    "ExecutionOutcome",
    "InteractiveMode",
    "SessionConfig",
    "SessionMode",
    "SingleCommandMode",
]
