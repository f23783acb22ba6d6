"""Logging integration for cloudboard."""

from cloudboard.logging.formatters import LogLineFormatter
from cloudboard.logging.handlers import SUCCESS, LogBook, LogEntry

__all__ = ["LogBook", "LogEntry", "LogLineFormatter", "SUCCESS"]
