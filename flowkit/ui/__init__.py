"""User interface and display components for flowkit."""

from .branch_tree import BranchTreeView
from .display_utils import DisplayUtils
from .prompts import ConsolePrompter

__all__ = [
    "BranchTreeView",
    "ConsolePrompter",
    "DisplayUtils",
]
