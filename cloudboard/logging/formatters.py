"""Logging formatters for the logs screen and plain CLI output."""

import logging
from datetime import UTC, datetime


class LogLineFormatter(logging.Formatter):
    """Formatter producing ``HH:MM:SS LEVEL message`` lines in UTC."""

    def __init__(self) -> None:
        super().__init__("%(message)s")

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with a UTC time and padded level name.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format

        Returns
        -------
        str
            Formatted log line
        """
        msg = super().format(record)
        stamp = datetime.fromtimestamp(record.created, UTC).strftime("%H:%M:%S")

        return f"{stamp} {record.levelname:<7} {msg}"
