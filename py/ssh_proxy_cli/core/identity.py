"""User directory resolution and SSH key checks."""

from __future__ import annotations

from pathlib import Path

from ssh_proxy_cli.core.exceptions import MissingKeyError, UnknownIdentityError


def resolve_user_dir(identity: str, base: Path) -> Path:
    """Return the per-user directory, which doubles as group membership."""
    if not identity or "/" in identity or identity in {".", ".."}:
        raise UnknownIdentityError(f"User '{identity}' is not a valid identity.")
    user_dir = base / identity
    if not user_dir.is_dir():
        raise UnknownIdentityError(
            f"User '{identity}' is not a member of the users directory group."
        )
    return user_dir


def ensure_key_exists(key_path: Path) -> Path:
    if not key_path.is_file():
        raise MissingKeyError(f"SSH key not found at {key_path}")
    return key_path


__all__ = ["ensure_key_exists", "resolve_user_dir"]
