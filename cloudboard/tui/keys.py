"""Translation of Textual key presses into dashboard events."""

from __future__ import annotations

from cloudboard.core.events import AppEvent, EventKind

KEY_EVENTS = {
    "q": EventKind.QUIT,
    "ctrl+c": EventKind.QUIT,
    "up": EventKind.UP,
    "k": EventKind.UP,
    "down": EventKind.DOWN,
    "j": EventKind.DOWN,
    "enter": EventKind.ENTER,
    "s": EventKind.START,
    "x": EventKind.STOP,
    "t": EventKind.TERMINATE,
    "r": EventKind.REFRESH,
    "a": EventKind.SCHEDULE,
    "h": EventKind.SHOW_HELP,
    "question_mark": EventKind.SHOW_HELP,
    "comma": EventKind.OPEN_SETTINGS,
    "c": EventKind.CONFIGURE_PROVIDER,
    "l": EventKind.SSO_LOGIN,
    "v": EventKind.SHOW_CHANGELOG,
    "escape": EventKind.CANCEL_SETTINGS,
}
"""Textual key names bound to parameterless events."""

CHARACTER_EVENTS = {
    "?": EventKind.SHOW_HELP,
    ",": EventKind.OPEN_SETTINGS,
}

DECREASE_KEYS = frozenset(("left", "minus"))
INCREASE_KEYS = frozenset(("right", "plus", "equals_sign"))

TAB_KEYS = {"1": 0, "2": 1, "3": 2, "4": 3, "5": 4}


def map_key(key: str, character: str | None = None) -> AppEvent:
    """Map a key press to an AppEvent.

    Parameters
    ----------
    key : str
        Textual key name (e.g. "up", "ctrl+c", "comma")
    character : str | None
        Printable character of the key, if any

    Returns
    -------
    AppEvent
        Matching event, or an event of kind NONE for unbound keys
    """
    if key in TAB_KEYS:
        return AppEvent.navigate_tab(TAB_KEYS[key])

    if key in DECREASE_KEYS or character == "-":
        return AppEvent.modify_setting(-1)

    if key in INCREASE_KEYS or character in ("+", "="):
        return AppEvent.modify_setting(1)

    if key in KEY_EVENTS:
        return AppEvent.of(KEY_EVENTS[key])

    if character in CHARACTER_EVENTS:
        return AppEvent.of(CHARACTER_EVENTS[character])

    return AppEvent.of(EventKind.NONE)
