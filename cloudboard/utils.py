"""Utility functions for cloudboard."""

from datetime import datetime, timedelta

from cloudboard.constants import MAX_STATUS_LENGTH

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600


def format_duration(delta: timedelta) -> str:
    """Format a running duration as hours and minutes.

    Parameters
    ----------
    delta : timedelta
        Elapsed time; negative values are treated as zero

    Returns
    -------
    str
        Duration such as "2h 15m"
    """
    seconds = max(int(delta.total_seconds()), 0)
    hours = seconds // SECONDS_PER_HOUR
    minutes = (seconds % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE
    return f"{hours}h {minutes}m"


def format_time_ago(dt: datetime, now: datetime) -> str:
    """Format datetime as human-readable time ago.

    Parameters
    ----------
    dt : datetime
        Datetime to format (timezone-aware)
    now : datetime
        Reference time (timezone-aware)

    Returns
    -------
    str
        Human-readable time string (e.g., "just now", "30m ago", "2h ago")
    """
    elapsed = (now - dt).total_seconds()

    if elapsed < SECONDS_PER_MINUTE:
        return "just now"
    elif elapsed < SECONDS_PER_HOUR:
        return f"{int(elapsed // SECONDS_PER_MINUTE)}m ago"
    return f"{int(elapsed // SECONDS_PER_HOUR)}h ago"


def truncate_text(text: str, max_width: int = MAX_STATUS_LENGTH) -> str:
    """Truncate text to fit in max_width characters.

    Parameters
    ----------
    text : str
        Text to truncate
    max_width : int
        Maximum width (default: MAX_STATUS_LENGTH)

    Returns
    -------
    str
        Truncated text with ellipsis if it exceeds max_width, otherwise original text
    """
    if len(text) > max_width:
        return text[: max_width - 3] + "..."

    return text
