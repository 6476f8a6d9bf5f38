"""Access to the workflow CLI's settings stored in git config."""

from pathlib import Path
from typing import Dict, Optional

from ..core.exceptions import ExternalCommandFailedError
from ..core.executor import CommandExecutor
from ..io.logger import get_logger

logger = get_logger("git_config")

# `git config --get*` exits with 1 when nothing matches
_NOT_FOUND = 1


class GitConfigStore:
    """Reads and writes keys in the repository's git configuration."""

    def __init__(self, executor: CommandExecutor, workspace: Path):
        self.executor = executor
        self.workspace = Path(workspace)

    async def get_regexp(self, pattern: str) -> Dict[str, str]:
        """All keys matching ``pattern``, in configuration-file order."""
        try:
            result = await self.executor.run(
                ["git", "config", "--get-regexp", pattern], self.workspace
            )
        except ExternalCommandFailedError as e:
            if e.returncode == _NOT_FOUND:
                return {}
            raise

        entries: Dict[str, str] = {}
        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            key, _, value = line.partition(" ")
            entries[key] = value
        return entries

    async def get(self, key: str) -> Optional[str]:
        try:
            result = await self.executor.run(
                ["git", "config", "--get", key], self.workspace
            )
        except ExternalCommandFailedError as e:
            if e.returncode == _NOT_FOUND:
                return None
            raise
        return result.stdout.strip()

    async def set(self, key: str, value: str) -> bool:
        """Write ``key`` unless it already holds ``value``.

        Returns:
            True when the stored value changed
        """
        if await self.get(key) == value:
            return False
        await self.executor.run(["git", "config", key, value], self.workspace)
        logger.debug(f"Set {key}={value}")
        return True
