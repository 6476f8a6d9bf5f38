"""Wiring for one workspace: registry, resolver, builder and synchronizer."""

from pathlib import Path
from typing import Optional

from ..config.config import Config
from ..config.git_config import GitConfigStore
from ..config.registry import BranchTypeRegistry
from ..io.logger import get_logger
from .builder import CommandBuilder
from .classifier import BranchClassifier
from .constants import GitFlowKeys
from .event_bus import EventBus
from .exceptions import ExternalCommandFailedError, ExternalToolUnavailableError
from .executor import CommandExecutor
from .git_refs import GitRefReader, RefReader
from .resolver import SettingsResolver
from .synchronizer import StateSynchronizer

logger = get_logger("app_context")


class FlowContext:
    """Everything an action needs to operate on one workspace.

    The registry is re-read from git config on ``load_registry``; the
    classifier, resolver and builder are rebuilt from it each time.
    """

    def __init__(
        self,
        workspace: Path,
        config: Optional[Config] = None,
        executor: Optional[CommandExecutor] = None,
        event_bus: Optional[EventBus] = None,
        reader: Optional[RefReader] = None,
        registry: Optional[BranchTypeRegistry] = None,
    ):
        self.workspace = Path(workspace)
        self.config = config or Config(workspace=self.workspace)
        self.executor = executor or CommandExecutor()
        self.event_bus = event_bus or EventBus()
        self.reader = reader or GitRefReader(self.executor, self.workspace)
        self.git_config = GitConfigStore(self.executor, self.workspace)
        self.synchronizer: Optional[StateSynchronizer] = None
        self._install_registry(registry or BranchTypeRegistry.default())

    def _install_registry(self, registry: BranchTypeRegistry) -> None:
        self.registry = registry
        self.classifier = BranchClassifier(registry)
        self.resolver = SettingsResolver(registry)
        self.builder = CommandBuilder(self.resolver, self.git_config, self.config)
        if self.synchronizer is None:
            self.synchronizer = StateSynchronizer(
                self.reader,
                self.classifier,
                self.event_bus,
                debounce_seconds=self.config.debounce_seconds,
            )
        else:
            self.synchronizer.classifier = self.classifier

    async def load_registry(self) -> BranchTypeRegistry:
        """Re-read branch definitions from the repository's git config.

        Unreadable config (no repository, git missing) leaves the classic
        preset in place.
        """
        try:
            entries = await self.git_config.get_regexp(GitFlowKeys.BRANCH_PATTERN)
        except (ExternalCommandFailedError, ExternalToolUnavailableError) as e:
            logger.debug(f"Could not read branch definitions: {e}")
            entries = {}
        self._install_registry(BranchTypeRegistry.from_git_config(entries))
        logger.debug(f"Branch kinds: {', '.join(self.registry.topic_kinds())}")
        return self.registry

    @classmethod
    async def create(
        cls,
        workspace: Path,
        config_path: Optional[Path] = None,
        executor: Optional[CommandExecutor] = None,
        event_bus: Optional[EventBus] = None,
    ) -> "FlowContext":
        """Build a context and load the registry from git config."""
        workspace = Path(workspace).resolve()
        config = Config(config_path=config_path, workspace=workspace)
        context = cls(workspace, config=config, executor=executor, event_bus=event_bus)
        await context.load_registry()
        return context

    async def change_workspace(self, workspace: Path) -> None:
        """Point at another repository and refresh its branch state.

        Repository settings are re-read for the new workspace; the builder
        picks up the new config when ``load_registry`` rebuilds it.
        """
        self.synchronizer.cancel_pending()
        self.workspace = Path(workspace).resolve()
        self.config = Config(
            config_path=self.config.config_path, workspace=self.workspace
        )
        self.synchronizer.debounce_seconds = self.config.debounce_seconds
        if isinstance(self.reader, GitRefReader):
            self.reader.workspace = self.workspace
        self.git_config.workspace = self.workspace
        await self.load_registry()
        await self.synchronizer.refresh()
