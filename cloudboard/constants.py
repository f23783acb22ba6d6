"""Global constants for cloudboard.

This module contains application-wide constants shared by the dashboard core,
the terminal front end and the provider layer.
"""

from enum import Enum

DEFAULT_REGION = "us-east-1"
"""Default cloud provider region.

Used when no region is specified in configuration, environment,
or command-line arguments.
"""

DEFAULT_TICK_RATE_MS = 250
"""Main loop tick interval in milliseconds.

Also used as the input poll timeout, so one tick never waits longer than
this for a key press.
"""

TOAST_TTL_SECONDS = 5
"""Lifetime of a toast notification in seconds.

Toasts at least this old are purged once per tick.
"""

MAX_VISIBLE_TOASTS = 3
"""Number of most recent toasts shown on screen, newest on top."""

BOOST_REFRESH_INTERVAL_SECONDS = 5
"""Auto-refresh interval in seconds while boost mode is active.

Boost mode is entered after a state-changing instance action and left once
every instance reports a stable state.
"""

ALERT_CHECK_INTERVAL_SECONDS = 30
"""Minimum interval in seconds between two long-running instance checks."""

DEFAULT_AUTO_STOP_SECONDS = 3600
"""Delay in seconds applied when scheduling an auto-stop from the dialog."""

MAX_LOG_ENTRIES = 1000
"""Maximum number of log entries kept in memory for the logs screen."""

MAX_STATUS_LENGTH = 100
"""Status messages longer than this are truncated in the status bar."""

DEFAULT_WINDOW_SIZE = (80, 24)
"""Terminal size assumed until the first resize event arrives."""

SCREEN_CHROME_HEIGHT = 8
"""Rows taken by tabs (3), status bar (3) and content borders (2)."""

WIDE_LAYOUT_MIN_WIDTH = 100
"""Terminal width from which Home and About switch to a side-by-side layout."""

SCREEN_CONTENT_HEIGHTS = {
    "home": (18, 25),
    "about": (30, 58),
    "logs": (50, 50),
}
"""Content height per scrollable screen as (wide, narrow) line counts."""

DIALOG_BORDER_HEIGHT = 2
"""Rows taken by a dialog's top and bottom border."""

DIALOG_SELECTION_PADDING = 3
"""Rows lost around a selectable dialog list: two borders and one padding row."""

DIALOG_SELECTION_TOP_LINES = 5
"""Header lines above the first selectable row in picker and settings dialogs."""

SETTINGS_ROW_HEIGHT = 2
"""Lines occupied by one settings row (label and spacer)."""

REFRESH_INTERVALS = (15, 30, 60, 120, 300)
"""Selectable auto-refresh intervals in seconds."""

ALERT_THRESHOLDS = (1800, 3600, 7200, 14400, 28800)
"""Selectable long-running alert thresholds in seconds."""

SSO_CONFIG_MISSING_MARKER = "Missing the following required SSO configuration"
"""Substring of the login helper's output when the profile lacks SSO setup."""

SESSION_EXPIRED_KEYWORDS = (
    "expiredtoken",
    "expired token",
    "token is expired",
    "security token",
    "invalidtoken",
    "invalid token",
    "credentials have expired",
    "requestexpired",
    "request has expired",
    "authfailure",
)
"""Lowercase substrings that mark a provider error as an expired session."""

EXIT_SUCCESS = 0
"""Exit code indicating successful program completion."""

EXIT_ERROR = 1
"""Exit code indicating a general application error."""

EXIT_CONFIG_ERROR = 2
"""Exit code indicating a configuration error."""


class InstanceState(str, Enum):
    """Instance state values."""

    PENDING = "pending"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"


STABLE_INSTANCE_STATES = frozenset(
    (
        InstanceState.RUNNING.value,
        InstanceState.STOPPED.value,
        InstanceState.TERMINATED.value,
    )
)
"""States in which an instance is not mid-transition."""
