"""CLI entry point for cloudboard."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from typing import Any

import fire

from cloudboard.constants import EXIT_CONFIG_ERROR, EXIT_ERROR
from cloudboard.core.config import AppConfig, ConfigLoader
from cloudboard.core.dashboard import Dashboard
from cloudboard.core.settings import SettingsStore, format_seconds, load_settings_or_default
from cloudboard.logging import LogLineFormatter
from cloudboard.providers import ProviderAPIError, ProviderCredentialsError
from cloudboard.providers.aws import list_profiles

logger = logging.getLogger(__name__)

CREDENTIALS_HELP = (
    "Cloud credentials not found\n\n"
    "Fix it:\n"
    "  aws configure           # access keys\n"
    "  aws configure sso       # single sign-on\n"
    "  aws sso login --profile <name>"
)


class CloudBoardCLI:
    """Terminal dashboard for EC2 instances and Lambda functions.

    Parameters
    ----------
    config_loader : ConfigLoader | None
        Loader for cloudboard.yaml. If None, a default loader is used
    app_factory : Callable[[Dashboard], Any] | None
        Builds the Textual app for a dashboard. If None, uses CloudBoardTUI
    """

    def __init__(
        self,
        config_loader: ConfigLoader | None = None,
        app_factory: Callable[[Dashboard], Any] | None = None,
    ) -> None:
        self._config_loader = config_loader or ConfigLoader()
        self._app_factory = app_factory

    def _build_config(self, **overrides: Any) -> AppConfig:
        config = self._config_loader.load_config()
        return self._config_loader.build(config, overrides)

    def run(
        self,
        region: str | None = None,
        profile: str | None = None,
        tick_rate_ms: int | None = None,
    ) -> None:
        """Launch the dashboard.

        Parameters
        ----------
        region : str | None
            Region override
        profile : str | None
            Credentials profile to activate at startup
        tick_rate_ms : int | None
            Main loop tick interval in milliseconds
        """
        config = self._build_config(region=region, profile=profile, tick_rate_ms=tick_rate_ms)
        dashboard = Dashboard.create(config)

        if self._app_factory is None:
            from cloudboard.tui import CloudBoardTUI

            app = CloudBoardTUI(dashboard)
        else:
            app = self._app_factory(dashboard)

        app.run()

        exit_code = getattr(app, "worker_exit_code", 0)
        if exit_code:
            sys.exit(exit_code)

    def profiles(self) -> str:
        """List credentials profiles from the AWS config file.

        Returns
        -------
        str
            One profile per line
        """
        config = self._build_config()
        names = list_profiles(config.aws_config_path)

        if not names:
            logger.warning("No profiles found in %s", config.aws_config_path)

        return "\n".join(names)

    def settings(self) -> str:
        """Show the effective settings and where they are stored.

        Returns
        -------
        str
            Human-readable settings summary
        """
        config = self._build_config()
        store = SettingsStore(config.settings_path)
        current = load_settings_or_default(store)

        lines = [
            f"Settings file:    {store.path}",
            f"Refresh interval: {format_seconds(current.refresh_interval_secs)}",
            f"Alert threshold:  {format_seconds(current.alert_threshold_secs)}",
            f"Log level:        {current.log_level.label}",
            f"Alert sound:      {'on' if current.sound_enabled else 'off'}",
            f"Logs tab:         {'on' if current.show_logs_panel else 'off'}",
            f"Default profile:  {current.default_profile or '-'}",
        ]
        return "\n".join(lines)


def handle_credentials_error(debug_mode: bool) -> None:
    """Handle provider credentials error.

    Parameters
    ----------
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderCredentialsError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(CREDENTIALS_HELP, file=sys.stderr)
    sys.exit(EXIT_ERROR)


def handle_value_error(error: ValueError, debug_mode: bool) -> None:
    """Handle configuration error.

    Parameters
    ----------
    error : ValueError
        The value error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ValueError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Configuration error: {error}", file=sys.stderr)
    sys.exit(EXIT_CONFIG_ERROR)


def handle_api_error(error: ProviderAPIError, debug_mode: bool) -> None:
    """Handle provider API error.

    Parameters
    ----------
    error : ProviderAPIError
        The API error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderAPIError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    if error.error_code in ["ExpiredToken", "RequestExpired", "ExpiredTokenException"]:
        print("Cloud credentials have expired\n", file=sys.stderr)
        print("Fix it:", file=sys.stderr)
        print("  aws sso login           # If using SSO", file=sys.stderr)
        print("  aws configure           # Re-configure credentials", file=sys.stderr)
    else:
        print(f"Cloud API error: {error}", file=sys.stderr)

    sys.exit(EXIT_ERROR)


def handle_runtime_error(error: RuntimeError, debug_mode: bool) -> None:
    """Handle unexpected runtime error.

    Parameters
    ----------
    error : RuntimeError
        The runtime error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    RuntimeError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Unexpected error: {error}", file=sys.stderr)
    sys.exit(EXIT_ERROR)


def main() -> None:
    """Entry point for Fire CLI with graceful error handling.

    Fire maps CloudBoardCLI methods to commands. Errors that reach this
    function are printed to stderr with an exit code; set CLOUDBOARD_DEBUG=1
    to see the traceback instead.
    """
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(LogLineFormatter())

    logging.basicConfig(level=logging.WARNING, handlers=[stderr_handler])

    for boto_module in ["botocore", "boto3", "urllib3"]:
        logging.getLogger(boto_module).setLevel(logging.WARNING)

    debug_mode = os.environ.get("CLOUDBOARD_DEBUG") == "1"

    try:
        fire.Fire(CloudBoardCLI)
    except ProviderCredentialsError:
        handle_credentials_error(debug_mode)
    except ProviderAPIError as e:
        handle_api_error(e, debug_mode)
    except ValueError as e:
        handle_value_error(e, debug_mode)
    except RuntimeError as e:
        handle_runtime_error(e, debug_mode)
