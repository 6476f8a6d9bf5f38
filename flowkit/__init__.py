"""flowkit - git flow branching workflows from the terminal"""

__version__ = "0.1.0"

# Config exports
from .config import PRESETS, BranchTypeRegistry, Config, GitConfigStore

# Core exports
from .core import CommandExecutor, EventBus, GitRefReader
from .core.actions import FlowActions
from .core.app_context import FlowContext
from .core.builder import CommandBuilder
from .core.classifier import BranchClassifier
from .core.resolver import SettingsResolver
from .core.synchronizer import StateSynchronizer

# IO exports
from .io import get_logger, setup_logging

__all__ = [
    # Version
    "__version__",
    # Core
    "BranchClassifier",
    "SettingsResolver",
    "CommandBuilder",
    "StateSynchronizer",
    "CommandExecutor",
    "GitRefReader",
    "EventBus",
    "FlowActions",
    "FlowContext",
    # Config
    "BranchTypeRegistry",
    "Config",
    "GitConfigStore",
    "PRESETS",
    # IO
    "get_logger",
    "setup_logging",
]
