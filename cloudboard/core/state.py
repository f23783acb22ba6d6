"""Root state of the dashboard, owned by the event loop thread."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from cloudboard.constants import DEFAULT_WINDOW_SIZE
from cloudboard.core.models import (
    NO_DIALOG,
    AutoStopSchedule,
    Dialog,
    Function,
    Identity,
    Instance,
    Screen,
    Toast,
)
from cloudboard.core.settings import Settings, SettingsField
from cloudboard.logging.handlers import LogBook


@dataclass
class AppState:
    """Everything the dashboard knows.

    Only the loop thread mutates this object. The render layer reads it once
    per tick and must not modify it.
    """

    client: Any
    settings: Settings = field(default_factory=Settings)
    identity: Identity = field(default_factory=Identity)
    configured: bool = True
    should_quit: bool = False

    current_screen: Screen = Screen.HOME
    dialog: Dialog = NO_DIALOG

    status_message: str = "Ready"
    is_loading: bool = False

    instances: list[Instance] = field(default_factory=list)
    instance_selected: int = 0
    schedules: list[AutoStopSchedule] = field(default_factory=list)

    functions: list[Function] = field(default_factory=list)
    function_selected: int = 0

    scroll_offset: int = 0
    dialog_scroll_offset: int = 0
    window_size: tuple[int, int] = DEFAULT_WINDOW_SIZE

    pending_alerts: list[str] = field(default_factory=list)
    last_alert_check: datetime | None = None

    last_refresh: datetime | None = None
    auto_refresh_interval: int = 60
    boost_refresh: bool = False

    toasts: list[Toast] = field(default_factory=list)

    settings_selected_field: SettingsField = SettingsField.REFRESH_INTERVAL
    settings_draft: Settings | None = None

    available_profiles: list[str] = field(default_factory=list)
    selected_profile_index: int = 0
    active_profile_name: str | None = "default"

    log_book: LogBook = field(default_factory=LogBook)

    @property
    def region(self) -> str:
        return getattr(self.client, "region", None) or self.identity.region or "unknown"

    @property
    def selected_instance(self) -> Instance | None:
        if 0 <= self.instance_selected < len(self.instances):
            return self.instances[self.instance_selected]
        return None

    @property
    def selected_function(self) -> Function | None:
        if 0 <= self.function_selected < len(self.functions):
            return self.functions[self.function_selected]
        return None

    @property
    def highlighted_profile(self) -> str | None:
        if 0 <= self.selected_profile_index < len(self.available_profiles):
            return self.available_profiles[self.selected_profile_index]
        return None

    def schedule_for(self, instance_id: str) -> AutoStopSchedule | None:
        for schedule in self.schedules:
            if schedule.instance_id == instance_id:
                return schedule
        return None

    def instance_name(self, instance_id: str) -> str:
        for instance in self.instances:
            if instance.id == instance_id:
                return instance.name
        return instance_id
