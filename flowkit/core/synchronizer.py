"""Keep the published UI state in step with the repository.

The repository changes under our feet (terminal commands, other tools), so
state is never cached across commands: every refresh re-reads the current
branch and re-queries which kinds have branches.
"""

import asyncio
from typing import Optional

from ..io.logger import get_logger
from .classifier import BranchClassifier
from .constants import SystemDefaults
from .event_bus import EventBus
from .events import RefreshRequestedEvent, SnapshotPublishedEvent
from .git_refs import RefReader
from .types import BranchTypeConfig, UIStateSnapshot

logger = get_logger("synchronizer")


class StateSynchronizer:
    """Computes and publishes ``UIStateSnapshot`` objects.

    Refreshes may overlap. Each one is numbered when it starts and a result
    is dropped if a later-started refresh has already been published.
    """

    def __init__(
        self,
        reader: RefReader,
        classifier: BranchClassifier,
        event_bus: Optional[EventBus] = None,
        debounce_seconds: float = SystemDefaults.DEBOUNCE_SECONDS,
    ):
        self.reader = reader
        self.classifier = classifier
        self.event_bus = event_bus
        self.debounce_seconds = debounce_seconds
        self.snapshot = UIStateSnapshot.empty(self.kinds)
        self._started = 0
        self._pending: Optional[asyncio.Task] = None

    @property
    def kinds(self):
        return self.classifier.registry.topic_kinds()

    async def refresh(self) -> UIStateSnapshot:
        """Recompute the snapshot and publish it. Never raises.

        Returns:
            The snapshot computed by this call
        """
        self._started += 1
        sequence = self._started
        snapshot = await self._compute(sequence)
        await self._publish(snapshot)
        return snapshot

    async def _compute(self, sequence: int) -> UIStateSnapshot:
        topic_types = self.classifier.registry.topic_types()
        kinds = tuple(config.name for config in topic_types)

        try:
            name = await self.reader.current_branch_name()
            branch = self.classifier.classify(name)
        except Exception as e:
            logger.debug(f"Current branch unavailable, publishing empty state: {e}")
            return UIStateSnapshot.empty(kinds, sequence=sequence)

        exists = await asyncio.gather(
            *(self._has_branches(config) for config in topic_types)
        )
        return UIStateSnapshot(
            current_kind=branch.kind,
            exists_by_kind=dict(zip(kinds, exists)),
            branch=branch,
            sequence=sequence,
        )

    async def _has_branches(self, config: BranchTypeConfig) -> bool:
        # One kind failing counts as "no branches" for that kind only
        try:
            names = await self.reader.list_branches(config.prefix)
        except Exception as e:
            logger.debug(f"Listing {config.name} branches failed: {e}")
            return False
        return len(names) > 0

    async def _publish(self, snapshot: UIStateSnapshot) -> None:
        if snapshot.sequence < self.snapshot.sequence:
            logger.debug(
                f"Dropping refresh #{snapshot.sequence}, "
                f"#{self.snapshot.sequence} already published"
            )
            return
        self.snapshot = snapshot
        if self.event_bus:
            await self.event_bus.emit(SnapshotPublishedEvent(snapshot=snapshot))

    def request_refresh(self, reason: str = "repository change") -> None:
        """Schedule a refresh after the quiet window.

        A new request within the window replaces the pending one. Must be
        called from the event loop thread.
        """
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = asyncio.get_running_loop().create_task(self._debounced(reason))

    async def _debounced(self, reason: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        # From here on a newer request must not cancel the refresh in flight
        self._pending = None
        if self.event_bus:
            await self.event_bus.emit(RefreshRequestedEvent(reason=reason))
        await self.refresh()

    @property
    def has_pending_refresh(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def wait_pending(self) -> None:
        """Wait for a scheduled refresh, if any, to finish."""
        pending = self._pending
        if pending is None:
            return
        try:
            await pending
        except asyncio.CancelledError:
            if not pending.cancelled():
                raise
            # Superseded by a newer request; wait for that one instead
            if self._pending is not None and self._pending is not pending:
                await self.wait_pending()

    def cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
