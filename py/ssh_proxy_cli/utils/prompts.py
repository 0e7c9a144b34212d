"""Shared helpers for Questionary-based CLI prompts."""

from __future__ import annotations

from collections.abc import Sequence

import questionary

from ssh_proxy_cli.core.exceptions import HostSelectionError, PromptAborted


def ask_text(message: str, *, default: str | None = None, required: bool = False) -> str:
    """Prompt for a text value, optionally enforcing a non-empty response."""

    prompt_default = default or ""
    while True:
        response = questionary.text(message, default=prompt_default).ask()
        if response is None:
            raise PromptAborted("Prompt aborted by operator.")
        result = response.strip()
        if result:
            return result
        if prompt_default and not required:
            return prompt_default
        if required:
            questionary.print("Value is required.", style="bold red")
            continue
        return ""


def ask_identity() -> str:
    return ask_text("Enter the user identity for SSH:", required=True)


def ask_host(label: str, hosts: Sequence[str]) -> str:
    """Present a numbered menu of hosts and block until one is chosen."""

    if not hosts:
        raise HostSelectionError(f"No {label} hosts are configured.")
    choices = [questionary.Choice(title=host, value=host) for host in hosts]
    # numeric shortcuts only exist for the first 36 entries
    response = questionary.select(
        f"Select a {label} host:",
        choices=choices,
        use_shortcuts=len(choices) <= 36,
    ).ask()
    if response is None:
        raise PromptAborted("Host selection aborted by operator.")
    return str(response)


class QuestionaryPrompter:
    """Prompts used by a session when values were not given on the command line."""

    def identity(self) -> str:
        return ask_identity()

    def select_host(self, label: str, hosts: Sequence[str]) -> str:
        return ask_host(label, hosts)


__all__ = [
    "QuestionaryPrompter",
    "ask_host",
    "ask_identity",
    "ask_text",
]
