"""Settings, branch-type registry and persisted git-flow configuration."""

from .config import Config
from .defaults import PRESET_DESCRIPTIONS, PRESETS
from .git_config import GitConfigStore
from .registry import BranchTypeRegistry

__all__ = [
    "BranchTypeRegistry",
    "Config",
    "GitConfigStore",
    "PRESETS",
    "PRESET_DESCRIPTIONS",
]
