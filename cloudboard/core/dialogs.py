"""Modal dialog navigation and scroll geometry.

Scroll limits mirror the layout the front end draws: every dialog occupies a
fixed percentage of the window height and has a known number of content
lines, so the bounds can be computed from the window size alone.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from cloudboard.constants import (
    DEFAULT_AUTO_STOP_SECONDS,
    DIALOG_BORDER_HEIGHT,
    DIALOG_SELECTION_PADDING,
    DIALOG_SELECTION_TOP_LINES,
    SCREEN_CHROME_HEIGHT,
    SCREEN_CONTENT_HEIGHTS,
    SETTINGS_ROW_HEIGHT,
    WIDE_LAYOUT_MIN_WIDTH,
)
from cloudboard.core.events import AppEvent, EventKind
from cloudboard.core.models import NO_DIALOG, Dialog, DialogKind, Screen
from cloudboard.core.settings import SettingsField

if TYPE_CHECKING:
    from cloudboard.core.dashboard import Dashboard
    from cloudboard.core.state import AppState

DIALOG_GEOMETRY = {
    DialogKind.SETUP: (70, 27),
    DialogKind.HELP: (60, 27),
    DialogKind.SETTINGS: (60, 15),
    DialogKind.SESSION_EXPIRED: (60, 25),
    DialogKind.CONFIRM_TERMINATE: (30, 12),
    DialogKind.SCHEDULE_AUTO_STOP: (30, 12),
    DialogKind.ALERT: (25, 10),
    DialogKind.CHANGELOG: (70, 50),
}
"""Height percentage and content line count per dialog."""

SELECTION_DIALOG_HEIGHT = {
    DialogKind.CONFIGURE_PROVIDER: 50,
    DialogKind.SESSION_EXPIRED: 50,
    DialogKind.SETTINGS: 60,
}
"""Height percentage used when keeping a highlighted row visible."""

SSO_LOGIN_DIALOGS = (DialogKind.SESSION_EXPIRED, DialogKind.CONFIGURE_PROVIDER, DialogKind.SETUP)


def dialog_geometry(kind: DialogKind, profile_count: int) -> tuple[int, int]:
    """Return (height percent, content lines) for a dialog.

    The provider dialog grows with the profile list: header, one line per
    profile (at least one for the empty-list hint) and a footer.
    """
    if kind is DialogKind.CONFIGURE_PROVIDER:
        return 50, 5 + max(profile_count, 1) + 1
    return DIALOG_GEOMETRY.get(kind, (0, 0))


def dialog_max_scroll(kind: DialogKind, window_height: int, profile_count: int = 0) -> int:
    """Largest scroll offset that still shows content in the dialog.

    Parameters
    ----------
    kind : DialogKind
        Open dialog
    window_height : int
        Terminal height in rows
    profile_count : int
        Number of known profiles, used by the provider dialog

    Returns
    -------
    int
        Maximum dialog scroll offset, 0 when everything fits
    """
    percent, content_lines = dialog_geometry(kind, profile_count)
    available = max(window_height * percent // 100 - DIALOG_BORDER_HEIGHT, 0)
    return max(content_lines - available, 0)


def screen_max_scroll(screen: Screen, window_size: tuple[int, int]) -> int:
    """Largest scroll offset for the scrollable screens (Home, About, Logs)."""
    width, height = window_size
    heights = SCREEN_CONTENT_HEIGHTS.get(screen.value)

    if heights is None:
        return 0

    wide, narrow = heights
    content_height = wide if width >= WIDE_LAYOUT_MIN_WIDTH else narrow
    available = max(height - SCREEN_CHROME_HEIGHT, 0)
    return max(content_height - available, 0)


def visible_scroll_offset(offset: int, target_line: int, visible_height: int) -> int:
    """Adjust offset so target_line falls inside a window of visible_height lines."""
    if target_line < offset:
        return target_line
    if target_line >= offset + visible_height:
        return max(target_line - visible_height, 0) + 1
    return offset


class DialogNavigator:
    """Interprets input events while a dialog is open.

    The navigator owns no state of its own. It reads and writes the
    dashboard's AppState and commits through the dashboard's actions, so a
    dialog's Enter runs exactly the same code path as the top-level action.

    Parameters
    ----------
    dashboard : Dashboard
        Dashboard whose state and actions the dialogs drive
    """

    def __init__(self, dashboard: Dashboard) -> None:
        self.dashboard = dashboard

    @property
    def state(self) -> AppState:
        return self.dashboard.state

    def handle(self, event: AppEvent) -> None:
        """Apply one event to the open dialog.

        Parameters
        ----------
        event : AppEvent
            Event to apply; screen navigation and list actions are ignored
        """
        kind = self.state.dialog.kind

        if event.kind in (EventKind.QUIT, EventKind.CANCEL_SETTINGS):
            if kind is DialogKind.SETTINGS:
                self.dashboard.cancel_settings()
            else:
                self.close()
        elif event.kind is EventKind.UP:
            self.move_up()
        elif event.kind is EventKind.DOWN:
            self.move_down()
        elif event.kind is EventKind.ENTER:
            self.commit()
        elif event.kind is EventKind.MODIFY_SETTING_VALUE:
            if kind is DialogKind.SETTINGS:
                self.dashboard.modify_current_setting(event.delta)
        elif event.kind is EventKind.SSO_LOGIN:
            if kind in SSO_LOGIN_DIALOGS:
                self.dashboard.login_with_sso()
        elif event.kind is EventKind.REFRESH:
            if kind is DialogKind.SESSION_EXPIRED:
                self.close()
                self.dashboard.refresh_data()
        elif event.kind is EventKind.CONFIGURE_PROVIDER:
            self.dashboard.open_dialog(Dialog(DialogKind.CONFIGURE_PROVIDER))
        elif event.kind is EventKind.RESIZE:
            self.state.window_size = (event.width, event.height)

    def close(self) -> None:
        self.state.dialog = NO_DIALOG

    def max_scroll(self) -> int:
        return dialog_max_scroll(
            self.state.dialog.kind,
            self.state.window_size[1],
            len(self.state.available_profiles),
        )

    def scroll_up(self) -> None:
        self.state.dialog_scroll_offset = max(self.state.dialog_scroll_offset - 1, 0)

    def scroll_down(self) -> None:
        if self.state.dialog_scroll_offset < self.max_scroll():
            self.state.dialog_scroll_offset += 1

    def move_up(self) -> None:
        state = self.state

        if state.dialog.kind is DialogKind.SETTINGS:
            if state.settings_selected_field is not SettingsField.REFRESH_INTERVAL:
                self.dashboard.navigate_settings_field(up=True)
                self.ensure_selection_visible()
            else:
                self.scroll_up()
        elif state.dialog.is_profile_picker:
            if state.selected_profile_index > 0:
                state.selected_profile_index -= 1
                self.ensure_selection_visible()
            else:
                self.scroll_up()
        else:
            self.scroll_up()

    def move_down(self) -> None:
        state = self.state

        if state.dialog.kind is DialogKind.SETTINGS:
            if state.settings_selected_field is not SettingsField.TEST_SOUND:
                self.dashboard.navigate_settings_field(up=False)
                self.ensure_selection_visible()
            else:
                self.scroll_down()
        elif state.dialog.is_profile_picker:
            if state.selected_profile_index < len(state.available_profiles) - 1:
                state.selected_profile_index += 1
                self.ensure_selection_visible()
            else:
                self.scroll_down()
        else:
            self.scroll_down()

    def commit(self) -> None:
        """Complete the open dialog's action."""
        state = self.state
        dialog = state.dialog

        if dialog.kind is DialogKind.CONFIRM_TERMINATE:
            self.close()
            if dialog.instance_id is not None:
                self.dashboard.terminate_instance(dialog.instance_id)
        elif dialog.kind is DialogKind.SCHEDULE_AUTO_STOP:
            self.close()
            if dialog.instance_id is not None:
                self.dashboard.schedule_auto_stop(
                    dialog.instance_id, timedelta(seconds=DEFAULT_AUTO_STOP_SECONDS)
                )
        elif dialog.kind is DialogKind.SETTINGS:
            if state.settings_selected_field is SettingsField.TEST_SOUND:
                self.dashboard.trigger_test_alert()
            else:
                self.dashboard.save_settings()
        elif dialog.is_profile_picker:
            profile = state.highlighted_profile
            if profile is not None:
                self.dashboard.activate_profile(profile)
        else:
            self.close()

    def ensure_selection_visible(self) -> None:
        """Scroll so the highlighted profile or settings row stays on screen."""
        state = self.state
        percent = SELECTION_DIALOG_HEIGHT.get(state.dialog.kind)

        if percent is None:
            return

        if state.dialog.kind is DialogKind.SETTINGS:
            row = state.settings_selected_field.position * SETTINGS_ROW_HEIGHT
        else:
            row = state.selected_profile_index

        visible_height = max(state.window_size[1] * percent // 100 - DIALOG_SELECTION_PADDING, 0)
        state.dialog_scroll_offset = visible_scroll_offset(
            state.dialog_scroll_offset,
            DIALOG_SELECTION_TOP_LINES + row,
            visible_height,
        )
