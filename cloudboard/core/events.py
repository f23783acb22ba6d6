"""Abstract application events produced by the input source."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventKind(str, Enum):
    """The closed vocabulary of input events."""

    QUIT = "quit"
    NAVIGATE_TAB = "navigate_tab"
    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    START = "start"
    STOP = "stop"
    TERMINATE = "terminate"
    REFRESH = "refresh"
    SCHEDULE = "schedule"
    SHOW_HELP = "show_help"
    OPEN_SETTINGS = "open_settings"
    MODIFY_SETTING_VALUE = "modify_setting_value"
    CANCEL_SETTINGS = "cancel_settings"
    RESIZE = "resize"
    CONFIGURE_PROVIDER = "configure_provider"
    SSO_LOGIN = "sso_login"
    SHOW_CHANGELOG = "show_changelog"
    NONE = "none"


@dataclass(frozen=True)
class AppEvent:
    """One input event.

    Parameters
    ----------
    kind : EventKind
        Event type
    index : int
        Tab index for NAVIGATE_TAB
    delta : int
        Direction for MODIFY_SETTING_VALUE (+1 or -1)
    width : int
        Terminal width for RESIZE
    height : int
        Terminal height for RESIZE
    """

    kind: EventKind
    index: int = 0
    delta: int = 0
    width: int = 0
    height: int = 0

    @classmethod
    def navigate_tab(cls, index: int) -> AppEvent:
        return cls(EventKind.NAVIGATE_TAB, index=index)

    @classmethod
    def modify_setting(cls, delta: int) -> AppEvent:
        return cls(EventKind.MODIFY_SETTING_VALUE, delta=delta)

    @classmethod
    def resize(cls, width: int, height: int) -> AppEvent:
        return cls(EventKind.RESIZE, width=width, height=height)

    @classmethod
    def of(cls, kind: EventKind) -> AppEvent:
        return cls(kind)
