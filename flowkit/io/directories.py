"""XDG Base Directory support for flowkit.

This module provides functions to get appropriate directories following
the XDG Base Directory specification.
"""

import os
from pathlib import Path

SETTINGS_FILENAME = "flowkit.yaml"


def get_config_dir(create: bool = True) -> Path:
    """Get the configuration directory for flowkit.

    Returns ~/.config/flowkit/ by default, or respects $XDG_CONFIG_HOME if set.

    Args:
        create: Create the directory if it doesn't exist

    Returns:
        Path to the configuration directory
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        config_dir = Path(xdg_config_home) / "flowkit"
    else:
        config_dir = Path.home() / ".config" / "flowkit"

    if create:
        config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_user_settings_path() -> Path:
    """Path of the user-level settings file (not created)."""
    return get_config_dir(create=False) / SETTINGS_FILENAME


def get_repository_settings_path(workspace: Path) -> Path:
    """Path of the per-repository settings file inside a workspace."""
    return Path(workspace) / f".{SETTINGS_FILENAME}"
