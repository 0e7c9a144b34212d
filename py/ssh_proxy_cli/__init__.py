"""Audited SSH sessions to internal hosts through a bastion."""

__version__ = "0.1.0"
