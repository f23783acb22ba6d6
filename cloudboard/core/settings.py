"""User settings with cyclic field editing and YAML persistence."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from cloudboard.constants import ALERT_THRESHOLDS, REFRESH_INTERVALS

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL_INDEX = 2
DEFAULT_ALERT_THRESHOLD_INDEX = 1


class SettingsError(Exception):
    """Raised when settings cannot be read, parsed or written."""


class LogVerbosity(str, Enum):
    """Minimum severity shown on the logs screen."""

    DEBUG = "debug"
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"

    @property
    def threshold(self) -> int:
        """Lowest logging level number displayed at this verbosity."""
        return {
            LogVerbosity.DEBUG: logging.DEBUG,
            LogVerbosity.INFO: logging.INFO,
            LogVerbosity.SUCCESS: logging.INFO,
            LogVerbosity.WARNING: logging.WARNING,
            LogVerbosity.ERROR: logging.ERROR,
        }[self]

    @property
    def label(self) -> str:
        return {
            LogVerbosity.DEBUG: "Debug (All)",
            LogVerbosity.INFO: "Info",
            LogVerbosity.SUCCESS: "Info",
            LogVerbosity.WARNING: "Warning",
            LogVerbosity.ERROR: "Error Only",
        }[self]


_VERBOSITY_CYCLE = (
    LogVerbosity.DEBUG,
    LogVerbosity.INFO,
    LogVerbosity.WARNING,
    LogVerbosity.ERROR,
)


class SettingsField(str, Enum):
    """Rows of the settings dialog, in display order."""

    REFRESH_INTERVAL = "refresh_interval"
    SHOW_LOGS_PANEL = "show_logs_panel"
    LOG_LEVEL = "log_level"
    ALERT_THRESHOLD = "alert_threshold"
    SOUND_ENABLED = "sound_enabled"
    TEST_SOUND = "test_sound"

    @property
    def position(self) -> int:
        return list(SettingsField).index(self)

    def next(self) -> SettingsField:
        members = list(SettingsField)
        return members[(self.position + 1) % len(members)]

    def prev(self) -> SettingsField:
        members = list(SettingsField)
        return members[(self.position - 1) % len(members)]


def _cycle(values: tuple[int, ...], current: int, default_index: int, forward: bool) -> int:
    try:
        index = values.index(current)
    except ValueError:
        index = default_index

    step = 1 if forward else -1
    return values[(index + step) % len(values)]


def format_seconds(seconds: int) -> str:
    """Format a duration as the largest whole unit: 30s, 5m, 2h."""
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m"
    return f"{seconds // 3600}h"


@dataclass
class Settings:
    """Persisted user preferences.

    Attributes
    ----------
    refresh_interval_secs : int
        Auto-refresh interval, one of REFRESH_INTERVALS
    show_logs_panel : bool
        Whether the Logs tab is reachable
    log_level : LogVerbosity
        Minimum severity displayed on the logs screen
    alert_threshold_secs : int
        Running time after which an unscheduled instance raises an alert
    sound_enabled : bool
        Whether alerts play a sound
    default_profile : str | None
        Credentials profile activated at startup when available
    """

    refresh_interval_secs: int = 60
    show_logs_panel: bool = False
    log_level: LogVerbosity = LogVerbosity.INFO
    alert_threshold_secs: int = 3600
    sound_enabled: bool = True
    default_profile: str | None = None

    def copy(self) -> Settings:
        return replace(self)

    def cycle_refresh_interval(self, forward: bool) -> None:
        self.refresh_interval_secs = _cycle(
            REFRESH_INTERVALS,
            self.refresh_interval_secs,
            DEFAULT_REFRESH_INTERVAL_INDEX,
            forward,
        )

    def cycle_alert_threshold(self, forward: bool) -> None:
        self.alert_threshold_secs = _cycle(
            ALERT_THRESHOLDS,
            self.alert_threshold_secs,
            DEFAULT_ALERT_THRESHOLD_INDEX,
            forward,
        )

    def cycle_log_level(self, forward: bool) -> None:
        """Cycle Debug, Info, Warning, Error with wrap-around.

        Success is not part of the cycle and normalizes to Info.
        """
        if self.log_level is LogVerbosity.SUCCESS:
            self.log_level = LogVerbosity.INFO
            return

        index = _VERBOSITY_CYCLE.index(self.log_level)
        step = 1 if forward else -1
        self.log_level = _VERBOSITY_CYCLE[(index + step) % len(_VERBOSITY_CYCLE)]

    def toggle_logs_panel(self) -> None:
        self.show_logs_panel = not self.show_logs_panel

    def toggle_sound(self) -> None:
        self.sound_enabled = not self.sound_enabled

    def should_show_log(self, level: int) -> bool:
        return level >= self.log_level.threshold

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["log_level"] = self.log_level.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Build settings from a mapping, ignoring unknown keys.

        Raises
        ------
        SettingsError
            If a value has the wrong type or an unknown log level
        """
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}

        try:
            if "log_level" in values:
                values["log_level"] = LogVerbosity(str(values["log_level"]).lower())
            for key in ("refresh_interval_secs", "alert_threshold_secs"):
                if key in values:
                    values[key] = int(values[key])
        except (TypeError, ValueError) as e:
            raise SettingsError(f"Invalid settings value: {e}") from e

        for key in ("show_logs_panel", "sound_enabled"):
            if key in values and not isinstance(values[key], bool):
                raise SettingsError(f"{key} must be a boolean")

        return cls(**values)


def get_settings_path() -> Path:
    """Resolve the settings file path from CLOUDBOARD_DIR (default ~/.cloudboard)."""
    base_dir = Path(os.environ.get("CLOUDBOARD_DIR", "~/.cloudboard")).expanduser()
    return base_dir / "settings.yaml"


class SettingsStore:
    """Load and save Settings as a YAML file.

    Parameters
    ----------
    path : Path | None
        Settings file location. If None, uses get_settings_path()
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path) if path is not None else get_settings_path()

    def load(self) -> Settings:
        """Load settings, creating the file with defaults when missing.

        Returns
        -------
        Settings
            Parsed settings

        Raises
        ------
        SettingsError
            If the file cannot be read or parsed
        """
        if not self.path.exists():
            defaults = Settings()
            self.save(defaults)
            return defaults

        try:
            cfg = OmegaConf.load(self.path)
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML in {self.path}: {e}") from e
        except OSError as e:
            raise SettingsError(f"Failed to read settings file {self.path}: {e}") from e

        if cfg is None:
            return Settings()

        try:
            data = OmegaConf.to_container(cfg, resolve=True)
        except OmegaConfBaseException as e:
            raise SettingsError(f"Failed to resolve settings: {e}") from e

        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {self.path} must contain a mapping")

        return Settings.from_dict(data)

    def save(self, settings: Settings) -> None:
        """Write settings to disk.

        Raises
        ------
        SettingsError
            If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            OmegaConf.save(OmegaConf.create(settings.to_dict()), self.path)
        except OSError as e:
            raise SettingsError(f"Failed to write settings file {self.path}: {e}") from e

        logger.debug("Settings written to %s", self.path)


def load_settings_or_default(store: SettingsStore) -> Settings:
    """Load settings, falling back to defaults with a warning on failure."""
    try:
        settings = store.load()
    except SettingsError as e:
        logger.warning("Failed to load settings, using defaults: %s", e)
        return Settings()

    logger.info("Settings loaded successfully")
    return settings
