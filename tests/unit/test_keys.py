import pytest

from cloudboard.core.events import AppEvent, EventKind
from cloudboard.tui.keys import map_key


@pytest.mark.parametrize(
    "key,character,expected",
    [
        ("q", "q", EventKind.QUIT),
        ("ctrl+c", None, EventKind.QUIT),
        ("up", None, EventKind.UP),
        ("k", "k", EventKind.UP),
        ("down", None, EventKind.DOWN),
        ("j", "j", EventKind.DOWN),
        ("enter", "\r", EventKind.ENTER),
        ("s", "s", EventKind.START),
        ("x", "x", EventKind.STOP),
        ("t", "t", EventKind.TERMINATE),
        ("r", "r", EventKind.REFRESH),
        ("a", "a", EventKind.SCHEDULE),
        ("h", "h", EventKind.SHOW_HELP),
        ("question_mark", "?", EventKind.SHOW_HELP),
        ("comma", ",", EventKind.OPEN_SETTINGS),
        ("c", "c", EventKind.CONFIGURE_PROVIDER),
        ("l", "l", EventKind.SSO_LOGIN),
        ("v", "v", EventKind.SHOW_CHANGELOG),
        ("escape", None, EventKind.CANCEL_SETTINGS),
        ("z", "z", EventKind.NONE),
        ("f5", None, EventKind.NONE),
    ],
)
def test_simple_bindings(key: str, character: str | None, expected: EventKind) -> None:
    assert map_key(key, character) == AppEvent.of(expected)


@pytest.mark.parametrize("key,index", [("1", 0), ("2", 1), ("3", 2), ("4", 3), ("5", 4)])
def test_digit_keys_navigate_tabs(key: str, index: int) -> None:
    assert map_key(key, key) == AppEvent.navigate_tab(index)


@pytest.mark.parametrize(
    "key,character,delta",
    [
        ("left", None, -1),
        ("minus", "-", -1),
        ("right", None, 1),
        ("plus", "+", 1),
        ("equals_sign", "=", 1),
    ],
)
def test_modify_keys(key: str, character: str | None, delta: int) -> None:
    assert map_key(key, character) == AppEvent.modify_setting(delta)


def test_character_fallback_for_unusual_key_names() -> None:
    assert map_key("shift+slash", "?") == AppEvent.of(EventKind.SHOW_HELP)
