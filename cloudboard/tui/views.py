"""Rich renderables for every screen and dialog.

All functions here are pure: they read AppState and never modify it.
"""

from __future__ import annotations

import logging
from datetime import datetime

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cloudboard import __version__
from cloudboard.constants import MAX_VISIBLE_TOASTS, WIDE_LAYOUT_MIN_WIDTH
from cloudboard.core.models import TAB_SCREENS, DialogKind, Screen, Toast, ToastKind
from cloudboard.core.settings import Settings, SettingsField, format_seconds
from cloudboard.core.state import AppState
from cloudboard.logging.handlers import SUCCESS
from cloudboard.utils import format_duration, format_time_ago, truncate_text

STATE_STYLES = {
    "running": "green",
    "stopped": "red",
    "pending": "yellow",
    "stopping": "yellow",
    "shutting-down": "yellow",
    "terminated": "dim",
}

TOAST_STYLES = {
    ToastKind.SUCCESS: "bold green",
    ToastKind.ERROR: "bold red",
    ToastKind.INFO: "bold cyan",
}

LOG_STYLES = {
    logging.DEBUG: "dim",
    logging.INFO: "cyan",
    SUCCESS: "green",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "bold red",
}

DIALOG_TITLES = {
    DialogKind.HELP: "Help",
    DialogKind.SETUP: "Welcome to cloudboard",
    DialogKind.SETTINGS: "Settings",
    DialogKind.SESSION_EXPIRED: "Session Expired",
    DialogKind.CONFIRM_TERMINATE: "Confirm Termination",
    DialogKind.SCHEDULE_AUTO_STOP: "Schedule Auto-Stop",
    DialogKind.ALERT: "Alert",
    DialogKind.CONFIGURE_PROVIDER: "Select Profile",
    DialogKind.CHANGELOG: "Changelog",
}

SETTINGS_LABELS = {
    SettingsField.REFRESH_INTERVAL: "Refresh interval",
    SettingsField.SHOW_LOGS_PANEL: "Show logs tab",
    SettingsField.LOG_LEVEL: "Log level",
    SettingsField.ALERT_THRESHOLD: "Alert threshold",
    SettingsField.SOUND_ENABLED: "Alert sound",
    SettingsField.TEST_SOUND: "Test alert sound",
}

HELP_LINES = (
    ("1-5", "Switch tab"),
    ("↑/k ↓/j", "Move selection or scroll"),
    ("Enter", "Refresh instances / open function"),
    ("r", "Refresh current screen"),
    ("s", "Start selected instance"),
    ("x", "Stop selected instance"),
    ("t", "Terminate selected instance"),
    ("a", "Schedule auto-stop in one hour"),
    (",", "Open settings"),
    ("c", "Select credentials profile"),
    ("l", "SSO login (profile and setup dialogs)"),
    ("v", "Changelog (About tab)"),
    ("?/h", "Show this help"),
    ("Esc", "Close dialog"),
    ("q", "Quit"),
)

CHANGELOG_ENTRIES = (
    (
        "0.3.0",
        (
            "Settings dialog with persisted preferences",
            "Profile picker and SSO login from the dashboard",
            "Session expiry detection with guided re-login",
            "Adaptive refresh after instance actions",
        ),
    ),
    (
        "0.2.0",
        (
            "Long-running instance alerts with sound",
            "Advisory auto-stop schedules",
            "Toast notifications",
        ),
    ),
    (
        "0.1.0",
        (
            "Instance list with start, stop and terminate",
            "Function list",
        ),
    ),
)


def on_off(value: bool) -> str:
    return "On" if value else "Off"


def render_tabs(state: AppState) -> Text:
    """Render the tab bar; the Logs tab is hidden while disabled."""
    text = Text()

    for index, screen in enumerate(TAB_SCREENS):
        if screen is Screen.LOGS and not state.settings.show_logs_panel:
            continue

        style = "bold reverse" if screen is state.current_screen else ""
        text.append(f" {index + 1} {screen.value.title()} ", style=style)
        text.append(" ")

    return text


def render_status(state: AppState, seconds_until_refresh: int | None) -> Text:
    """Render the status bar.

    Parameters
    ----------
    state : AppState
        Current state
    seconds_until_refresh : int | None
        Countdown to the next auto-refresh, or None while suspended
    """
    text = Text()
    text.append(f" {state.active_profile_name or 'default'} ", style="bold black on cyan")
    text.append(f" {state.region} ", style="bold black on blue")
    text.append(" ")

    if state.is_loading:
        text.append("⟳ ", style="yellow")

    text.append(truncate_text(state.status_message))

    if seconds_until_refresh is not None:
        text.append(f"  refresh in {seconds_until_refresh}s", style="dim")

    if state.boost_refresh:
        text.append("  [boost]", style="bold magenta")

    return text


def visible_toasts(state: AppState) -> list[Toast]:
    """The most recent toasts, newest first."""
    return list(reversed(state.toasts[-MAX_VISIBLE_TOASTS:]))


def render_toasts(state: AppState) -> Text | None:
    toasts = visible_toasts(state)
    if not toasts:
        return None

    text = Text()
    for index, toast in enumerate(toasts):
        if index:
            text.append("\n")
        text.append(toast.message, style=TOAST_STYLES[toast.kind])

    return text


def render_body(state: AppState, now: datetime) -> RenderableType:
    """Render the content of the current screen.

    Home, About and Logs are line-based and start at the screen scroll
    offset; Instances and Functions are tables with the selected row
    highlighted.
    """
    if state.current_screen is Screen.INSTANCES:
        return instances_table(state, now)
    if state.current_screen is Screen.FUNCTIONS:
        return functions_table(state)

    if state.current_screen is Screen.HOME:
        lines = home_lines(state, now)
    elif state.current_screen is Screen.ABOUT:
        lines = about_lines(state)
    else:
        lines = logs_lines(state)

    return Group(*lines[state.scroll_offset :])


def instances_table(state: AppState, now: datetime) -> Table:
    table = Table(expand=True, header_style="bold")
    table.add_column("Name")
    table.add_column("ID")
    table.add_column("Type")
    table.add_column("State")
    table.add_column("Public IP")
    table.add_column("Launched")
    table.add_column("Auto-stop")

    for index, instance in enumerate(state.instances):
        schedule = state.schedule_for(instance.id)
        launched = format_time_ago(instance.launch_time, now) if instance.launch_time else "-"
        table.add_row(
            instance.name,
            instance.id,
            instance.instance_type,
            Text(instance.state, style=STATE_STYLES.get(instance.state, "")),
            instance.public_ip or "-",
            launched,
            schedule.stop_time.strftime("%H:%M:%S") if schedule else "-",
            style="reverse" if index == state.instance_selected else None,
        )

    if not state.instances:
        table.caption = "No instances loaded. Press r to refresh."

    return table


def functions_table(state: AppState) -> Table:
    table = Table(expand=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Runtime")
    table.add_column("Memory", justify="right")
    table.add_column("Last modified")
    table.add_column("Description")

    for index, function in enumerate(state.functions):
        table.add_row(
            function.name,
            function.runtime,
            f"{function.memory} MB",
            function.last_modified,
            function.description,
            style="reverse" if index == state.function_selected else None,
        )

    if not state.functions:
        table.caption = "No functions loaded. Press r to refresh."

    return table


def home_lines(state: AppState, now: datetime) -> list[Text]:
    running = [i for i in state.instances if i.state == "running"]
    stopped = [i for i in state.instances if i.state == "stopped"]
    wide = state.window_size[0] >= WIDE_LAYOUT_MIN_WIDTH

    lines = [
        Text("Overview", style="bold underline"),
        Text(""),
        Text(f"Profile:      {state.active_profile_name or 'default'}"),
        Text(f"Region:       {state.region}"),
        Text(f"Credentials:  {'configured' if state.configured else 'not configured'}"),
        Text(""),
        Text(f"Instances:    {len(state.instances)}"),
        Text(f"  running:    {len(running)}", style="green"),
        Text(f"  stopped:    {len(stopped)}", style="red"),
        Text(f"Functions:    {len(state.functions)}"),
        Text(f"Schedules:    {len(state.schedules)}"),
        Text(""),
    ]

    if running:
        lines.append(Text("Longest running", style="bold"))
        for instance in sorted(running, key=lambda i: i.launch_time or now)[:3]:
            uptime = format_duration(now - instance.launch_time) if instance.launch_time else "?"
            lines.append(Text(f"  {instance.name} ({instance.id}) {uptime}"))

    if not wide:
        lines.extend(
            [
                Text(""),
                Text("Alerts", style="bold"),
                Text(f"  threshold:  {format_seconds(state.settings.alert_threshold_secs)}"),
                Text(f"  sound:      {on_off(state.settings.sound_enabled)}"),
                Text(f"  raised:     {len(state.pending_alerts)}"),
            ]
        )

    lines.append(Text(""))
    lines.append(Text("Press ? for help", style="dim"))
    return lines


def about_lines(state: AppState) -> list[Text]:
    lines = [
        Text(f"cloudboard {__version__}", style="bold"),
        Text(""),
        Text("A terminal dashboard for EC2 instances and Lambda functions."),
        Text(""),
        Text("Auto-refresh is paused on this screen.", style="dim"),
        Text("Press v to see the changelog.", style="dim"),
        Text(""),
        Text("Settings", style="bold"),
    ]

    lines.extend(Text(f"  {line}") for line in settings_summary(state.settings))
    return lines


def settings_summary(settings: Settings) -> list[str]:
    return [
        f"refresh interval: {format_seconds(settings.refresh_interval_secs)}",
        f"alert threshold:  {format_seconds(settings.alert_threshold_secs)}",
        f"log level:        {settings.log_level.label}",
        f"alert sound:      {on_off(settings.sound_enabled)}",
        f"logs tab:         {on_off(settings.show_logs_panel)}",
    ]


def logs_lines(state: AppState) -> list[Text]:
    """Log entries at or above the configured verbosity, newest first."""
    entries = [
        entry for entry in state.log_book.entries() if state.settings.should_show_log(entry.level)
    ]

    if not entries:
        return [Text("No log entries.", style="dim")]

    lines = []
    for entry in reversed(entries):
        line = Text(entry.timestamp.strftime("%H:%M:%S "), style="dim")
        line.append(f"{entry.level_name:<8}", style=LOG_STYLES.get(entry.level, ""))
        line.append(entry.message)
        lines.append(line)

    return lines


def dialog_lines(state: AppState) -> list[Text]:
    """Content lines of the open dialog, before scrolling."""
    kind = state.dialog.kind

    if kind is DialogKind.HELP:
        return [Text(""), *[Text(f"  {key:<10} {action}") for key, action in HELP_LINES]]
    if kind is DialogKind.SETUP:
        return setup_lines()
    if kind is DialogKind.SETTINGS:
        return settings_lines(state)
    if kind is DialogKind.SESSION_EXPIRED:
        header = [
            Text("Your cloud session has expired.", style="bold red"),
            Text(""),
            Text("Pick a profile and press Enter to reactivate it,"),
            Text("l to run SSO login, r to retry, Esc to close."),
            Text(""),
        ]
        return header + profile_lines(state)
    if kind is DialogKind.CONFIGURE_PROVIDER:
        header = [
            Text("Choose the credentials profile to use."),
            Text(""),
            Text("Enter activates, l runs SSO login, Esc closes."),
            Text(f"Active: {state.active_profile_name or 'default'}", style="dim"),
            Text(""),
        ]
        return header + profile_lines(state) + [Text("")]
    if kind is DialogKind.CONFIRM_TERMINATE:
        instance_id = state.dialog.instance_id or ""
        return [
            Text(""),
            Text(f"Terminate {state.instance_name(instance_id)} ({instance_id})?", style="bold"),
            Text(""),
            Text("This cannot be undone.", style="red"),
            Text(""),
            Text("Enter to confirm, Esc to cancel", style="dim"),
        ]
    if kind is DialogKind.SCHEDULE_AUTO_STOP:
        instance_id = state.dialog.instance_id or ""
        return [
            Text(""),
            Text(f"Schedule auto-stop for {state.instance_name(instance_id)}?", style="bold"),
            Text("The instance is marked to stop in one hour."),
            Text(""),
            Text("Enter to confirm, Esc to cancel", style="dim"),
        ]
    if kind is DialogKind.ALERT:
        return [
            Text(""),
            Text(state.dialog.message or "", style="bold yellow"),
            Text(""),
            Text("Schedule an auto-stop with a to silence this alert.", style="dim"),
            Text("Enter to dismiss", style="dim"),
        ]
    if kind is DialogKind.CHANGELOG:
        return changelog_lines()
    return []


def setup_lines() -> list[Text]:
    return [
        Text("No cloud credentials were found.", style="bold"),
        Text(""),
        Text("cloudboard reads credentials the same way the AWS CLI does:"),
        Text(""),
        Text("  1. AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY"),
        Text("  2. ~/.aws/credentials"),
        Text("  3. ~/.aws/config (including SSO profiles)"),
        Text(""),
        Text("To get started:", style="bold"),
        Text(""),
        Text("  aws configure        # access keys"),
        Text("  aws configure sso    # single sign-on"),
        Text(""),
        Text("Press l to run SSO login now, c to pick a profile,"),
        Text("or Enter to continue without credentials."),
    ]


def settings_lines(state: AppState) -> list[Text]:
    """Settings dialog rows, two lines each, showing the draft values."""
    settings = state.settings_draft or state.settings
    values = {
        SettingsField.REFRESH_INTERVAL: format_seconds(settings.refresh_interval_secs),
        SettingsField.SHOW_LOGS_PANEL: on_off(settings.show_logs_panel),
        SettingsField.LOG_LEVEL: settings.log_level.label,
        SettingsField.ALERT_THRESHOLD: format_seconds(settings.alert_threshold_secs),
        SettingsField.SOUND_ENABLED: on_off(settings.sound_enabled),
        SettingsField.TEST_SOUND: "press Enter",
    }

    lines = [
        Text(""),
        Text("↑/↓ select   ←/→ change", style="dim"),
        Text("Enter save   Esc cancel", style="dim"),
        Text(""),
        Text(""),
    ]

    for field in SettingsField:
        selected = field is state.settings_selected_field
        marker = "▶ " if selected else "  "
        line = Text(f"{marker}{SETTINGS_LABELS[field]:<20}", style="bold" if selected else "")
        line.append(f"◀ {values[field]} ▶" if selected else values[field])
        lines.append(line)
        lines.append(Text(""))

    return lines


def profile_lines(state: AppState) -> list[Text]:
    if not state.available_profiles:
        return [Text("  No profiles found in the AWS config file.", style="dim")]

    lines = []
    for index, profile in enumerate(state.available_profiles):
        active = " (active)" if profile == state.active_profile_name else ""
        if index == state.selected_profile_index:
            lines.append(Text(f"▶ {profile}{active}", style="bold reverse"))
        else:
            lines.append(Text(f"  {profile}{active}"))

    return lines


def changelog_lines() -> list[Text]:
    lines = []

    for version, changes in CHANGELOG_ENTRIES:
        lines.append(Text(version, style="bold"))
        lines.extend(Text(f"  - {change}") for change in changes)
        lines.append(Text(""))

    return lines


def render_dialog(state: AppState) -> Panel | None:
    """Render the open dialog starting at the dialog scroll offset."""
    if not state.dialog.is_open:
        return None

    lines = dialog_lines(state)[state.dialog_scroll_offset :]
    border = "red" if state.dialog.kind in (DialogKind.CONFIRM_TERMINATE, DialogKind.ALERT) else "cyan"

    return Panel(
        Group(*lines),
        title=DIALOG_TITLES.get(state.dialog.kind, ""),
        border_style=border,
    )
