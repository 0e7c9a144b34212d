"""Diagnostic logging via structlog + Logfire.

Diagnostics are separate from the audit log: they go to stderr so that stdout
stays with the remote session output and the ``-d`` echo of audit records.
"""

from __future__ import annotations

import logging
import sys
import uuid
from typing import TextIO

import logfire
import structlog
import structlog.contextvars

_logfire_ready = False


def _ensure_logfire() -> None:
    global _logfire_ready
    if _logfire_ready:
        return
    logfire.configure(send_to_logfire="if-token-present", console=False, service_name="ssh-proxy")
    logfire.instrument_pydantic()
    _logfire_ready = True


def _renderer(verbose: bool) -> structlog.types.Processor:
    if verbose:
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.KeyValueRenderer(
        key_order=["timestamp", "level", "event", "run_id"],
        drop_missing=True,
    )


def configure_logging(verbose: bool = False, *, stream: TextIO | None = None) -> str:
    """Configure diagnostics and return the run id bound to every event.

    Only warnings and errors are shown unless ``verbose`` is set.
    """

    _ensure_logfire()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, handlers=[handler], force=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=True),
            structlog.processors.format_exc_info,
            logfire.StructlogProcessor(),
            _renderer(verbose),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    run_id = uuid.uuid4().hex[:12]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(run_id=run_id)
    return run_id
