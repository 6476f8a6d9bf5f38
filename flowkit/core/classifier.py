"""Classify the checked-out branch by workflow kind."""

from ..config.registry import BranchTypeRegistry
from .constants import BaseKinds
from .types import BranchState


class BranchClassifier:
    """Maps a branch name to a ``BranchState`` using a registry.

    Topic prefixes are tried in registration order. The registry guarantees
    they never overlap, so at most one can match.
    """

    def __init__(self, registry: BranchTypeRegistry):
        self.registry = registry

    def classify(self, current_ref_name: str) -> BranchState:
        """Classify a branch name.

        A detached HEAD (empty name) classifies as ``unknown``.

        Args:
            current_ref_name: Short name of the checked-out branch

        Returns:
            The branch state for the name
        """
        name = current_ref_name
        if name.startswith("refs/heads/"):
            name = name[len("refs/heads/") :]

        for config in self.registry.topic_types():
            if name.startswith(config.prefix) and len(name) > len(config.prefix):
                return BranchState(
                    kind=config.name,
                    short_name=name[len(config.prefix) :],
                    full_ref_name=name,
                )

        if name in self.registry.main_names:
            return BranchState(kind=BaseKinds.MAIN, short_name=name, full_ref_name=name)
        if name in self.registry.develop_names:
            return BranchState(
                kind=BaseKinds.DEVELOP, short_name=name, full_ref_name=name
            )
        return BranchState(kind=BaseKinds.UNKNOWN, short_name=name, full_ref_name=name)
