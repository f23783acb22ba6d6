"""Auxiliary services used by the dashboard."""

from cloudboard.services.sound import AlertSound, terminal_bell

__all__ = ["AlertSound", "terminal_bell"]
