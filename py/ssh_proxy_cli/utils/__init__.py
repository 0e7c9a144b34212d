"""Utility modules for the SSH proxy CLI."""

from ssh_proxy_cli.utils.logging import configure_logging
from ssh_proxy_cli.utils.prompts import QuestionaryPrompter, ask_host, ask_identity

__all__ = [
    "QuestionaryPrompter",
    "ask_host",
    "ask_identity",
    "configure_logging",
]
