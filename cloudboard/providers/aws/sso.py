"""Interactive SSO login through the AWS CLI."""

import logging
import subprocess
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

SSO_LOGIN_TIMEOUT_SECONDS = 600


def build_sso_login_command(profile: str | None, command: str = "aws") -> list[str]:
    """Build the login helper argv, adding --profile when one is given."""
    argv = [command, "sso", "login"]

    if profile:
        argv.extend(["--profile", profile])

    return argv


def run_sso_login(
    profile: str | None,
    command: str = "aws",
    runner: Callable[..., Any] = subprocess.run,
) -> tuple[bool, str]:
    """Run the SSO login helper and wait for it to exit.

    Blocks until the browser flow finishes, so callers run it on a worker
    thread.

    Parameters
    ----------
    profile : str | None
        Profile to log in with, or None for the CLI default
    command : str
        Login helper executable
    runner : Callable[..., Any]
        subprocess.run compatible callable

    Returns
    -------
    tuple[bool, str]
        Whether the helper exited successfully, and its stderr (or stdout
        when stderr is empty)
    """
    argv = build_sso_login_command(profile, command)
    logger.debug("Running %s", " ".join(argv))

    try:
        result = runner(
            argv,
            capture_output=True,
            text=True,
            timeout=SSO_LOGIN_TIMEOUT_SECONDS,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        return False, str(e)

    stderr = result.stderr or ""
    output = stderr if stderr.strip() else (result.stdout or "")

    return result.returncode == 0, output
