"""Assemble workflow CLI invocations from resolved settings."""

from typing import Optional, Sequence

from ..config.config import Config
from ..config.git_config import GitConfigStore
from ..io.logger import get_logger
from .constants import Actions, GitFlowKeys, GlobalActions, Operations, ShorthandActions
from .exceptions import MissingTargetError, UnknownBranchTypeError
from .resolver import SettingsResolver
from .types import Command, OperationOverride

logger = get_logger("builder")


class CommandBuilder:
    """Builds ``git flow <kind> <action> [target] [args...]`` commands.

    ``build`` is pure. ``prepare`` runs the configuration hooks first, then
    resolves arguments, then builds, so the workflow CLI reads current
    settings when the command runs.
    """

    def __init__(
        self,
        resolver: SettingsResolver,
        git_config: GitConfigStore,
        config: Config,
    ):
        self.resolver = resolver
        self.registry = resolver.registry
        self.git_config = git_config
        self.config = config

    def build(
        self,
        kind: str,
        action: str,
        target: Optional[str] = None,
        resolved: Sequence[str] = (),
    ) -> Command:
        """Assemble a per-kind command.

        Raises:
            UnknownBranchTypeError: ``kind`` is not a topic kind
            MissingTargetError: ``action`` needs a target and got none
            ValueError: ``action`` is not recognised
        """
        if action not in Actions.ALL:
            raise ValueError(
                f"Invalid action '{action}'. Must be one of: {', '.join(Actions.ALL)}"
            )
        if not self.registry.is_topic(kind):
            raise UnknownBranchTypeError(kind)
        if action in Actions.REQUIRES_TARGET and not target:
            raise MissingTargetError(kind, action)
        if action == Actions.LIST:
            target = None
        return Command(kind=kind, action=action, target=target, arguments=tuple(resolved))

    def build_shorthand(
        self, action: str, target: Optional[str] = None, resolved: Sequence[str] = ()
    ) -> Command:
        """Assemble a command for whatever topic branch is checked out."""
        if action not in ShorthandActions.ALL:
            raise ValueError(
                f"Invalid shorthand action '{action}'. "
                f"Must be one of: {', '.join(ShorthandActions.ALL)}"
            )
        if action == ShorthandActions.RENAME and not target:
            raise MissingTargetError(None, action)
        return Command(kind=None, action=action, target=target, arguments=tuple(resolved))

    async def propagate_configuration(self, kind: str, action: str) -> None:
        """Write the active remote and delete-remote preference to git config."""
        if action not in (Actions.START, Actions.FINISH):
            return

        await self.git_config.set(GitFlowKeys.ORIGIN, self.config.remote)

        if action == Actions.FINISH:
            delete_remote = self.config.delete_remote_on_finish(kind)
            if delete_remote is None:
                delete_remote = self.registry.get(kind).delete_remote_by_default
            await self.git_config.set(
                GitFlowKeys.delete_remote(kind), "true" if delete_remote else "false"
            )

    async def prepare(
        self,
        kind: str,
        action: str,
        target: Optional[str] = None,
        explicit: Optional[OperationOverride] = None,
    ) -> Command:
        """Run hooks, resolve arguments and build one command.

        Kind and target are checked before anything is written.
        """
        if not self.registry.is_topic(kind):
            raise UnknownBranchTypeError(kind)
        if action in Actions.REQUIRES_TARGET and not target:
            raise MissingTargetError(kind, action)

        await self.propagate_configuration(kind, action)

        resolved = []
        if action in Operations.ALL:
            overrides = self.config.operation_override(kind, action)
            resolved = self.resolver.resolve(kind, action, overrides, explicit)

        command = self.build(kind, action, target, resolved)
        logger.debug(f"Prepared: {command}")
        return command

    def build_resume(self, kind: Optional[str], flag: str) -> Command:
        """``<kind> finish --continue|--abort`` (kind-agnostic when ``kind`` is None)."""
        if flag not in ("--continue", "--abort"):
            raise ValueError(f"Invalid resume flag '{flag}'")
        if kind is None:
            return self.build_shorthand(ShorthandActions.FINISH, resolved=[flag])
        return self.build(kind, Actions.FINISH, resolved=[flag])

    def build_global(self, action: str, arguments: Sequence[str] = ()) -> Command:
        """``init``, ``overview`` or ``config``."""
        if action not in GlobalActions.ALL:
            raise ValueError(
                f"Invalid action '{action}'. "
                f"Must be one of: {', '.join(GlobalActions.ALL)}"
            )
        return Command(kind=None, action=action, arguments=tuple(arguments))
