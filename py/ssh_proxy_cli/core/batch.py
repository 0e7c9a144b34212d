"""Command file execution with stop-on-error semantics."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import structlog

from ssh_proxy_cli.core.audit import SessionLogger, format_fields
from ssh_proxy_cli.core.exceptions import CommandFileError
from ssh_proxy_cli.core.models import BatchState, CommandEntry, ExecutionOutcome, SessionConfig

logger = structlog.get_logger(__name__)

HALT_MESSAGE = "Stop-on-error triggered. Halting execution."


class Runner(Protocol):
    async def run(self, command: str | None = None) -> ExecutionOutcome: ...


def parse_commands(lines: Sequence[str]) -> list[CommandEntry]:
    """Turn raw lines into entries, dropping blank ones."""
    entries: list[CommandEntry] = []
    for line_number, raw in enumerate(lines, start=1):
        text = raw.rstrip("\r\n")
        if not text.strip():
            continue
        entries.append(CommandEntry(line_number=line_number, text=text))
    return entries


def read_command_file(path: Path) -> list[CommandEntry]:
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise CommandFileError(f"Command file '{path}' was not found") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise CommandFileError(f"Command file '{path}' cannot be read: {exc}") from exc
    return parse_commands(content.splitlines())


@dataclass
class BatchReport:
    state: BatchState = BatchState.ATTEMPT_LOGGED
    outcomes: list[ExecutionOutcome] = field(default_factory=list)
    exit_code: int = 0

    def record(self, outcome: ExecutionOutcome) -> None:
        self.state = BatchState.RUNNING
        self.outcomes.append(outcome)

    def halt(self, exit_code: int) -> None:
        self.state = BatchState.HALTED
        self.exit_code = exit_code

    def complete(self) -> None:
        self.state = BatchState.COMPLETED
        self.exit_code = 0


async def execute_batch(
    config: SessionConfig,
    commands: Sequence[CommandEntry],
    *,
    session_logger: SessionLogger,
    runner: Runner,
) -> BatchReport:
    """Run every entry in order, halting on the first failure when configured to."""
    report = BatchReport()
    for entry in commands:
        session_logger.log_event(f"Executing Command: {entry.text}")
        outcome = await runner.run(entry.text)
        report.record(outcome)
        session_logger.log_event(
            format_fields([("Command", entry.text), ("Status", outcome.describe_status())])
        )
        if outcome.succeeded:
            continue
        logger.warning(
            "command-failed",
            command=entry.text,
            line=entry.line_number,
            returncode=outcome.exit_code,
        )
        if config.stop_on_error:
            session_logger.log_event(HALT_MESSAGE)
            report.halt(outcome.exit_code)
            return report
    report.complete()
    return report


async def run_batch(
    config: SessionConfig,
    commands: Sequence[CommandEntry],
    *,
    session_logger: SessionLogger,
    runner: Runner,
) -> int:
    """Return 0 when the batch ran to completion, else the halting command's exit code."""
    report = await execute_batch(config, commands, session_logger=session_logger, runner=runner)
    logger.info(
        "batch-finished",
        state=report.state.value,
        commands=len(report.outcomes),
        failed=sum(1 for outcome in report.outcomes if not outcome.succeeded),
    )
    return report.exit_code


__all__ = [
    "HALT_MESSAGE",
    "BatchReport",
    "execute_batch",
    "parse_commands",
    "read_command_file",
    "run_batch",
]
