"""Read-only queries against the repository's refs."""

from pathlib import Path
from typing import List, Protocol

from ..io.logger import get_logger
from .exceptions import (
    ExternalCommandFailedError,
    ExternalToolUnavailableError,
    NotARepositoryError,
)
from .executor import CommandExecutor

logger = get_logger("git_refs")

HEADS = "refs/heads/"


class RefReader(Protocol):
    """Read-only branch queries used by the synchronizer and actions."""

    async def current_branch_name(self) -> str:
        """Short name of the checked-out branch ("" when detached)."""

    async def branch_exists(self, full_ref_name: str) -> bool:
        """Whether ``refs/heads/<full_ref_name>`` exists."""

    async def list_branches(self, prefix: str) -> List[str]:
        """Names under ``prefix`` with the prefix removed."""


class GitRefReader:
    """``RefReader`` backed by git plumbing commands."""

    def __init__(self, executor: CommandExecutor, workspace: Path):
        self.executor = executor
        self.workspace = Path(workspace)

    async def current_branch_name(self) -> str:
        try:
            result = await self.executor.run(
                ["git", "branch", "--show-current"], self.workspace
            )
        except (ExternalCommandFailedError, ExternalToolUnavailableError) as e:
            raise NotARepositoryError(str(self.workspace)) from e
        return result.stdout.strip()

    async def branch_exists(self, full_ref_name: str) -> bool:
        try:
            await self.executor.run(
                ["git", "show-ref", "--verify", "--quiet", f"{HEADS}{full_ref_name}"],
                self.workspace,
            )
        except ExternalCommandFailedError:
            return False
        return True

    async def list_branches(self, prefix: str) -> List[str]:
        # A trailing slash makes for-each-ref match the whole directory
        pattern = f"{HEADS}{prefix}" if prefix.endswith("/") else f"{HEADS}{prefix}*"
        result = await self.executor.run(
            ["git", "for-each-ref", "--format=%(refname)", pattern], self.workspace
        )
        names = []
        for line in result.stdout.splitlines():
            ref = line.strip()
            if not ref.startswith(HEADS):
                continue
            name = ref[len(HEADS) :]
            if name.startswith(prefix) and len(name) > len(prefix):
                names.append(name[len(prefix) :])
        return sorted(names)
