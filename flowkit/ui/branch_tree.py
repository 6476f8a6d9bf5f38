"""Render the published branch state as a tree."""

from typing import Dict, List, Optional

from rich.tree import Tree

from ..config.registry import BranchTypeRegistry
from ..core.event_bus import EventBus
from ..core.events import SnapshotPublishedEvent
from ..core.exceptions import FlowkitError
from ..core.git_refs import RefReader
from ..core.types import UIStateSnapshot
from ..io.logger import get_logger
from .display_utils import NORD_COLORS

logger = get_logger("branch_tree")


class BranchTreeView:
    """Keeps the latest snapshot and renders one node per branch kind.

    Kinds with no branches are hidden, the same way commands that need an
    existing branch are hidden when nothing exists to act on.
    """

    def __init__(
        self,
        registry: BranchTypeRegistry,
        event_bus: Optional[EventBus] = None,
    ):
        self.registry = registry
        self.snapshot: Optional[UIStateSnapshot] = None
        self.branches: Dict[str, List[str]] = {}
        if event_bus:
            event_bus.subscribe(SnapshotPublishedEvent, self.handle_snapshot)

    def handle_snapshot(self, event: SnapshotPublishedEvent) -> None:
        self.snapshot = event.snapshot

    async def load_branches(self, reader: RefReader) -> None:
        """Fetch branch names for every kind the snapshot says exists."""
        snapshot = self.snapshot
        self.branches = {}
        if snapshot is None:
            return
        for config in self.registry.topic_types():
            if snapshot.exists_by_kind.get(config.name):
                try:
                    self.branches[config.name] = await reader.list_branches(
                        config.prefix
                    )
                except FlowkitError as e:
                    logger.debug(f"Listing {config.name} branches failed: {e}")

    def render(self) -> Tree:
        snapshot = self.snapshot or UIStateSnapshot.empty(self.registry.topic_kinds())
        branch = snapshot.branch
        current = branch.full_ref_name if branch and branch.full_ref_name else "?"

        root = Tree(
            f"[bold]{current}[/bold] [{NORD_COLORS['nord3']}]({snapshot.current_kind})"
            f"[/{NORD_COLORS['nord3']}]"
        )
        for config in self.registry.topic_types():
            if not snapshot.exists_by_kind.get(config.name):
                continue
            active = snapshot.current_kind == config.name
            color = NORD_COLORS["nord14"] if active else NORD_COLORS["nord8"]
            node = root.add(f"[{color}]{config.name}[/{color}] {config.prefix}")
            for name in self.branches.get(config.name, []):
                marker = "● " if branch and branch.full_ref_name == config.prefix + name else ""
                node.add(f"{marker}{name}")
        return root

    def context_flags(self) -> Dict[str, bool]:
        """Context flags of the current snapshot."""
        snapshot = self.snapshot or UIStateSnapshot.empty(self.registry.topic_kinds())
        return snapshot.context_flags()
