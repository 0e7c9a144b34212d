"""Per-user, per-day audit log for proxied SSH sessions.

Records are single lines of the form::

    2024-05-01 13:37:00 | ProxyUser: bob | RemoteUser: alice | ... | Status: ATTEMPTING

The file is opened once per run in append mode and each record is flushed
as soon as it is written, so an interrupted run still leaves a readable log.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from types import TracebackType
from typing import IO, Any

import structlog
from structlog.types import EventDict, WrappedLogger

from ssh_proxy_cli.core.exceptions import AuditLogError

LOG_FILE_PREFIX = "ssh_proxy_connection_log_"
LOG_FILE_MODE = 0o600
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
FIELD_SEPARATOR = " | "


def log_path_for(user_dir: Path, day: date | None = None) -> Path:
    stamp = (day or date.today()).strftime("%m-%d-%y")
    return user_dir / f"{LOG_FILE_PREFIX}{stamp}.log"


def format_fields(pairs: Iterable[tuple[str, object]]) -> str:
    """Join ``label: value`` pairs the way audit records expect."""
    return FIELD_SEPARATOR.join(f"{label}: {value}" for label, value in pairs)


def render_record(_logger: WrappedLogger, _name: str, event_dict: EventDict) -> str:
    timestamp = event_dict.pop("timestamp", "")
    message = event_dict.pop("event", "")
    extras = format_fields(event_dict.items())
    parts = [str(timestamp), str(message)]
    if extras:
        parts.append(extras)
    return FIELD_SEPARATOR.join(parts)


class _TeeWriter:
    """structlog logger writing each rendered record to the log file and, optionally, stdout."""

    def __init__(self, handle: IO[str], echo: IO[str] | None) -> None:
        self._handle = handle
        self._echo = echo

    def msg(self, message: str) -> None:
        self._handle.write(message + "\n")
        self._handle.flush()
        if self._echo is not None:
            self._echo.write(message + "\n")
            self._echo.flush()

    info = msg


class SessionLogger:
    """Appends timestamped records to the day's audit log."""

    def __init__(self, path: Path, *, debug: bool = False, echo: IO[str] | None = None) -> None:
        self.path = path
        self.debug = debug
        self._echo = echo
        self._handle: IO[str] | None = None
        self._log: Any = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> SessionLogger:
        if self._handle is not None:
            return self
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, LOG_FILE_MODE)
            os.fchmod(fd, LOG_FILE_MODE)
            handle = os.fdopen(fd, "a", encoding="utf-8")
        except OSError as exc:
            raise AuditLogError(f"Cannot open audit log '{self.path}': {exc}") from exc
        if not handle.writable():
            handle.close()
            raise AuditLogError(f"Audit log '{self.path}' is not writable")
        self._handle = handle
        echo = (self._echo or sys.stdout) if self.debug else None
        self._log = structlog.wrap_logger(
            _TeeWriter(handle, echo),
            processors=[
                structlog.processors.TimeStamper(fmt=TIMESTAMP_FORMAT, utc=False),
                render_record,
            ],
            wrapper_class=structlog.BoundLogger,
            cache_logger_on_first_use=False,
        )
        return self

    def log_event(self, message: str, **fields: object) -> None:
        if self._log is None:
            raise AuditLogError(f"Audit log '{self.path}' is not open")
        try:
            self._log.info(message, **fields)
        except (OSError, ValueError) as exc:
            raise AuditLogError(f"Cannot append to audit log '{self.path}': {exc}") from exc

    def close(self) -> None:
        if self._handle is None:
            return
        self._handle.close()
        self._handle = None
        self._log = None

    def __enter__(self) -> SessionLogger:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = [
    "LOG_FILE_MODE",
    "SessionLogger",
    "format_fields",
    "log_path_for",
    "render_record",
]
