"""Application configuration loaded from YAML, environment and CLI overrides."""

import copy
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import InterpolationResolutionError

from cloudboard.constants import DEFAULT_TICK_RATE_MS
from cloudboard.core.settings import get_settings_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """Process-level configuration, fixed for the lifetime of the app.

    Attributes
    ----------
    region : str | None
        Region override, or None to use the provider's default chain
    profile : str | None
        Profile to activate at startup, overriding the settings default
    tick_rate_ms : int
        Main loop tick interval in milliseconds
    settings_path : Path
        Location of the persisted settings file
    aws_config_path : Path
        Location of the shared AWS config file listing profiles
    login_command : str
        Executable used for SSO login
    """

    region: str | None = None
    profile: str | None = None
    tick_rate_ms: int = DEFAULT_TICK_RATE_MS
    settings_path: Path = Path("~/.cloudboard/settings.yaml")
    aws_config_path: Path = Path("~/.aws/config")
    login_command: str = "aws"

    @property
    def tick_seconds(self) -> float:
        return self.tick_rate_ms / 1000


class ConfigLoader:
    """Load and merge YAML configuration with defaults."""

    def __init__(self) -> None:
        """Initialize ConfigLoader with built-in defaults."""
        self.BUILT_IN_DEFAULTS = {
            "region": os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION"),
            "profile": None,
            "tick_rate_ms": DEFAULT_TICK_RATE_MS,
            "settings_path": str(get_settings_path()),
            "aws_config_path": os.environ.get("AWS_CONFIG_FILE", "~/.aws/config"),
            "login_command": "aws",
        }

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Load configuration from YAML file.

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file. If None, checks CLOUDBOARD_CONFIG env var,
            then falls back to cloudboard.yaml

        Returns
        -------
        dict[str, Any]
            Parsed configuration with interpolations resolved, or an empty
            mapping when the file does not exist

        Raises
        ------
        ValueError
            If the file is not valid YAML or variables cannot be resolved
        RuntimeError
            If the file exists but cannot be read
        """
        if config_path is None:
            config_path = os.environ.get("CLOUDBOARD_CONFIG", "cloudboard.yaml")

        config_file = Path(config_path)

        if not config_file.exists():
            return {}

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.error("Failed to parse YAML config file %s: %s", config_file, e)
            raise ValueError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            logger.error("Failed to read config file %s: %s", config_file, e)
            raise RuntimeError(f"Failed to read config file {config_file}: {e}") from e

        if cfg is None:
            return {}

        try:
            config = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except InterpolationResolutionError as e:
            logger.error("Failed to resolve configuration variables: %s", e)
            raise ValueError(f"Configuration variable resolution error: {e}") from e

        if not isinstance(config, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping")

        return config

    def build(
        self,
        config: dict[str, Any] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> AppConfig:
        """Merge built-in defaults, file values and CLI overrides into AppConfig.

        Parameters
        ----------
        config : dict[str, Any] | None
            Values loaded from the config file
        overrides : dict[str, Any] | None
            CLI values; None entries are ignored

        Returns
        -------
        AppConfig
            Validated configuration

        Raises
        ------
        ValueError
            If tick_rate_ms is not a positive integer
        """
        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        for key, value in (config or {}).items():
            if key in merged:
                merged[key] = value
            else:
                logger.warning("Ignoring unknown config key: %s", key)

        for key, value in (overrides or {}).items():
            if value is not None:
                merged[key] = value

        tick_rate_ms = merged["tick_rate_ms"]
        if isinstance(tick_rate_ms, bool) or not isinstance(tick_rate_ms, int) or tick_rate_ms <= 0:
            raise ValueError("tick_rate_ms must be a positive integer")

        return AppConfig(
            region=merged["region"],
            profile=merged["profile"],
            tick_rate_ms=tick_rate_ms,
            settings_path=Path(merged["settings_path"]).expanduser(),
            aws_config_path=Path(merged["aws_config_path"]).expanduser(),
            login_command=merged["login_command"],
        )
