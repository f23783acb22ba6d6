"""Credential profile discovery and detection."""

import configparser
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

PROFILE_SECTION_PREFIX = "profile "


def list_profiles(config_path: Path | None = None) -> list[str]:
    """List profile names declared in the shared AWS config file.

    Parameters
    ----------
    config_path : Path | None
        Config file to read. If None, uses AWS_CONFIG_FILE or ~/.aws/config

    Returns
    -------
    list[str]
        "default" for a [default] section and the name of each
        [profile name] section, in file order. Empty when the file is
        missing or unreadable.
    """
    if config_path is None:
        config_path = Path(os.environ.get("AWS_CONFIG_FILE", "~/.aws/config"))

    config_path = Path(config_path).expanduser()

    if not config_path.exists():
        return []

    parser = configparser.ConfigParser(default_section="__cloudboard_unused__", strict=False)

    try:
        parser.read(config_path)
    except (configparser.Error, OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read profiles from %s: %s", config_path, e)
        return []

    profiles = []

    for section in parser.sections():
        name = section.strip()

        if name == "default":
            profiles.append("default")
        elif name.startswith(PROFILE_SECTION_PREFIX):
            profiles.append(name[len(PROFILE_SECTION_PREFIX) :].strip())

    return profiles


def credentials_configured(home: Path | None = None) -> bool:
    """Check whether any credential source is available.

    Parameters
    ----------
    home : Path | None
        Home directory to inspect. If None, uses Path.home()

    Returns
    -------
    bool
        True when access keys are set in the environment or a shared
        credentials or config file exists
    """
    if os.environ.get("AWS_ACCESS_KEY_ID") and os.environ.get("AWS_SECRET_ACCESS_KEY"):
        return True

    aws_dir = (home or Path.home()) / ".aws"

    return (aws_dir / "credentials").exists() or (aws_dir / "config").exists()
