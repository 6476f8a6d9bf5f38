"""Core workflow logic for flowkit.

Modules that depend on ``flowkit.config`` (classifier, resolver, builder,
actions, app_context) are imported from their own modules.
"""

from .event_bus import EventBus
from .events import *
from .executor import CommandExecutor
from .git_refs import GitRefReader, RefReader
from .types import *

__all__ = [
    # From event_bus
    "EventBus",
    # From executor
    "CommandExecutor",
    # From git_refs
    "GitRefReader",
    "RefReader",
    # From events
    "Event",
    "CommandStartedEvent",
    "CommandCompletedEvent",
    "CommandFailedEvent",
    "RefreshRequestedEvent",
    "SnapshotPublishedEvent",
    # From types
    "BranchState",
    "BranchTypeConfig",
    "OperationOverride",
    "UIStateSnapshot",
    "Command",
    "CommandResult",
]
