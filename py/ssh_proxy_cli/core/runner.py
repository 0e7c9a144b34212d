"""Runs the system ssh client through a jump host."""

from __future__ import annotations

import asyncio

import structlog

from ssh_proxy_cli.core.exceptions import SSHClientError
from ssh_proxy_cli.core.models import ExecutionOutcome, SessionConfig

logger = structlog.get_logger(__name__)


def build_ssh_command(config: SessionConfig, command: str | None = None) -> list[str]:
    ssh_command = [config.ssh_binary, "-i", str(config.key_path), "-J", config.jump_host]
    ssh_command.extend(config.ssh_extra_args)
    ssh_command.append(config.target)
    if command is not None:
        ssh_command.append(command)
    return ssh_command


class CommandRunner:
    """Executes one ssh invocation at a time with the operator's terminal attached.

    A ``None`` command opens an interactive session. Non-zero exit codes are
    returned as failed outcomes rather than raised.
    """

    def __init__(self, config: SessionConfig) -> None:
        self.config = config

    async def run(self, command: str | None = None) -> ExecutionOutcome:
        ssh_command = build_ssh_command(self.config, command)
        logger.debug("ssh-exec", target=self.config.target, jump=self.config.jump_host, command=command)
        try:
            # stdio is inherited so output and interactive sessions reach the operator
            process = await asyncio.create_subprocess_exec(*ssh_command)
        except FileNotFoundError as exc:
            raise SSHClientError(f"ssh client '{self.config.ssh_binary}' was not found") from exc
        except PermissionError as exc:
            raise SSHClientError(f"ssh client '{self.config.ssh_binary}' is not executable") from exc
        try:
            return_code = await process.wait()
        except asyncio.CancelledError:
            # the child shares our process group and got the same interrupt
            await process.wait()
            raise
        if return_code < 0:
            # killed by signal N: report 128+N as a shell would
            return_code = 128 - return_code
        logger.debug("ssh-exit", target=self.config.target, command=command, returncode=return_code)
        return ExecutionOutcome(command=command, exit_code=return_code)


__all__ = ["CommandRunner", "build_ssh_command"]
