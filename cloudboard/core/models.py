"""Domain entities for the dashboard: screens, dialogs, resources and toasts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from cloudboard.constants import STABLE_INSTANCE_STATES


class Screen(str, Enum):
    """Top-level screens, one per tab."""

    HOME = "home"
    INSTANCES = "instances"
    FUNCTIONS = "functions"
    LOGS = "logs"
    ABOUT = "about"


TAB_SCREENS = (Screen.HOME, Screen.INSTANCES, Screen.FUNCTIONS, Screen.ABOUT, Screen.LOGS)
"""Screen reached by each tab index."""


class DialogKind(str, Enum):
    """Modal overlays. At most one is open at a time."""

    NONE = "none"
    HELP = "help"
    SETUP = "setup"
    SETTINGS = "settings"
    SESSION_EXPIRED = "session_expired"
    CONFIRM_TERMINATE = "confirm_terminate"
    SCHEDULE_AUTO_STOP = "schedule_auto_stop"
    ALERT = "alert"
    CONFIGURE_PROVIDER = "configure_provider"
    CHANGELOG = "changelog"


@dataclass(frozen=True)
class Dialog:
    """Open dialog with the payload needed to render or complete it.

    Parameters
    ----------
    kind : DialogKind
        Which dialog is open
    instance_id : str | None
        Target instance for CONFIRM_TERMINATE and SCHEDULE_AUTO_STOP, captured
        when the dialog opens
    message : str | None
        Alert text for ALERT
    """

    kind: DialogKind = DialogKind.NONE
    instance_id: str | None = None
    message: str | None = None

    @classmethod
    def confirm_terminate(cls, instance_id: str) -> Dialog:
        return cls(DialogKind.CONFIRM_TERMINATE, instance_id=instance_id)

    @classmethod
    def schedule_auto_stop(cls, instance_id: str) -> Dialog:
        return cls(DialogKind.SCHEDULE_AUTO_STOP, instance_id=instance_id)

    @classmethod
    def alert(cls, message: str) -> Dialog:
        return cls(DialogKind.ALERT, message=message)

    @property
    def is_open(self) -> bool:
        return self.kind is not DialogKind.NONE

    @property
    def is_profile_picker(self) -> bool:
        """Whether Up/Down move the highlighted profile."""
        return self.kind in (DialogKind.CONFIGURE_PROVIDER, DialogKind.SESSION_EXPIRED)


NO_DIALOG = Dialog()


@dataclass(frozen=True)
class Instance:
    """Compute instance as reported by the last successful refresh."""

    id: str
    name: str
    instance_type: str
    state: str
    public_ip: str | None = None
    private_ip: str | None = None
    launch_time: datetime | None = None

    @property
    def is_stable(self) -> bool:
        return self.state in STABLE_INSTANCE_STATES


@dataclass(frozen=True)
class Function:
    """Serverless function as reported by the last successful refresh."""

    name: str
    runtime: str
    memory: int
    last_modified: str
    description: str = ""


@dataclass(frozen=True)
class AutoStopSchedule:
    """Advisory stop time for one instance.

    Nothing stops the instance when the time arrives; the entry only
    suppresses long-running alerts and is shown on screen.
    """

    instance_id: str
    stop_time: datetime


class ToastKind(str, Enum):
    """Toast severity."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Toast:
    """Transient notification shown in the corner of the screen."""

    message: str
    kind: ToastKind
    created_at: datetime


@dataclass(frozen=True)
class Identity:
    """Credential identity used to construct cloud clients.

    Parameters
    ----------
    profile : str | None
        Named credentials profile, or None for the default credential chain
    region : str | None
        Region override, or None to let the provider chain decide
    """

    profile: str | None = None
    region: str | None = None
