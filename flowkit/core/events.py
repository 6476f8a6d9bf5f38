"""Event types published while commands run and state refreshes."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from .types import UIStateSnapshot


@dataclass
class Event:
    """Base event with timestamp and ID."""

    timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), init=False
    )
    event_id: str = field(default_factory=lambda: uuid4().hex[:8], init=False)


@dataclass
class CommandStartedEvent(Event):
    """A workflow command is about to run."""

    command_line: str
    workspace: str


@dataclass
class CommandCompletedEvent(Event):
    """A workflow command exited successfully."""

    command_line: str
    stdout: str = ""


@dataclass
class CommandFailedEvent(Event):
    """A workflow command failed; ``message`` is the extracted error."""

    command_line: str
    message: str
    returncode: Optional[int] = None


@dataclass
class RefreshRequestedEvent(Event):
    """Something suggested that branch state may have changed."""

    reason: str


@dataclass
class SnapshotPublishedEvent(Event):
    """A new UI-state snapshot replaced the previous one."""

    snapshot: UIStateSnapshot
