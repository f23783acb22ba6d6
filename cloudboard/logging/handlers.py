"""Logging handlers feeding the dashboard's logs screen."""

import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import UTC, datetime

from cloudboard.constants import MAX_LOG_ENTRIES

SUCCESS = 25
"""Log level for completed user actions, between INFO and WARNING."""

logging.addLevelName(SUCCESS, "SUCCESS")


@dataclass(frozen=True)
class LogEntry:
    """A single timestamped, severity-tagged log line."""

    timestamp: datetime
    level: int
    message: str

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level)


class LogBook(logging.Handler):
    """Logging handler that keeps the most recent records in memory.

    The logs screen renders these entries, filtered by the configured
    verbosity at display time.

    Parameters
    ----------
    capacity : int
        Maximum number of entries retained; older entries are discarded

    Attributes
    ----------
    capacity : int
        Maximum number of entries retained
    """

    def __init__(self, capacity: int = MAX_LOG_ENTRIES) -> None:
        super().__init__(level=logging.DEBUG)
        self.capacity = capacity
        self._entries: deque[LogEntry] = deque(maxlen=capacity)
        self._entries_lock = threading.Lock()

    def emit(self, record: logging.LogRecord) -> None:
        """Store a log record as a LogEntry.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to store
        """
        try:
            message = self.format(record)
        except (TypeError, ValueError):
            self.handleError(record)
            return

        entry = LogEntry(
            timestamp=datetime.fromtimestamp(record.created, UTC),
            level=record.levelno,
            message=message,
        )

        with self._entries_lock:
            self._entries.append(entry)

    def entries(self, min_level: int = logging.NOTSET) -> list[LogEntry]:
        """Return stored entries, oldest first.

        Parameters
        ----------
        min_level : int
            Only entries at or above this level are returned

        Returns
        -------
        list[LogEntry]
            Matching entries in insertion order
        """
        with self._entries_lock:
            return [entry for entry in self._entries if entry.level >= min_level]

    def clear(self) -> None:
        with self._entries_lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
