"""Input/output and logging utilities for flowkit."""

from .directories import get_config_dir, get_repository_settings_path, get_user_settings_path
from .logger import get_logger, setup_logging

__all__ = [
    "get_config_dir",
    "get_logger",
    "get_repository_settings_path",
    "get_user_settings_path",
    "setup_logging",
]
