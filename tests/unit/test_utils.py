from datetime import UTC, datetime, timedelta

import pytest

from cloudboard.utils import format_duration, format_time_ago, truncate_text

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "delta,expected",
    [
        (timedelta(seconds=59), "0h 0m"),
        (timedelta(minutes=5), "0h 5m"),
        (timedelta(hours=2, minutes=15, seconds=40), "2h 15m"),
        (timedelta(days=1, hours=1), "25h 0m"),
        (timedelta(seconds=-30), "0h 0m"),
    ],
)
def test_format_duration(delta: timedelta, expected: str) -> None:
    assert format_duration(delta) == expected


@pytest.mark.parametrize(
    "ago,expected",
    [
        (timedelta(seconds=10), "just now"),
        (timedelta(minutes=30), "30m ago"),
        (timedelta(hours=2, minutes=59), "2h ago"),
    ],
)
def test_format_time_ago(ago: timedelta, expected: str) -> None:
    assert format_time_ago(NOW - ago, NOW) == expected


def test_truncate_text_short() -> None:
    assert truncate_text("short") == "short"


def test_truncate_text_long() -> None:
    result = truncate_text("x" * 150)

    assert len(result) == 100
    assert result.endswith("...")


def test_truncate_text_custom_width() -> None:
    assert truncate_text("abcdefghij", max_width=6) == "abc..."
