"""User-facing workflow actions.

One generic implementation per action, parameterized by branch kind. Each
mutating action runs strictly in order: configuration hooks, argument
resolution, command execution, state refresh. The refresh also happens
when the command fails, since git flow may have applied part of the work.
"""

from dataclasses import replace
from typing import TYPE_CHECKING, List, Optional

from ..io.logger import get_logger
from .constants import Actions, GlobalActions, Operations, Presets, ShorthandActions
from .events import CommandCompletedEvent, CommandFailedEvent, CommandStartedEvent
from .exceptions import (
    ExternalCommandFailedError,
    NoBranchesOfKindError,
    UnknownBranchTypeError,
    WrongBranchError,
)
from .prompts import Prompter
from .types import BranchState, Command, CommandResult, OperationOverride

if TYPE_CHECKING:
    from .app_context import FlowContext

logger = get_logger("actions")


class FlowActions:
    """Entry points for every (kind, action) pair plus shorthand variants.

    Methods return the finished ``CommandResult``, or None when the user
    cancelled a prompt.
    """

    def __init__(self, context: "FlowContext", prompter: Prompter):
        self.context = context
        self.prompter = prompter

    # Execution

    async def _execute(self, command: Command, mutating: bool) -> CommandResult:
        context = self.context
        command_line = command.command_line
        try:
            await context.executor.check_available(context.workspace)
            await context.event_bus.emit(
                CommandStartedEvent(
                    command_line=command_line, workspace=str(context.workspace)
                )
            )
            try:
                result = await context.executor.run(command, context.workspace)
            except ExternalCommandFailedError as e:
                logger.warning(f"{command_line} failed: {e}")
                await context.event_bus.emit(
                    CommandFailedEvent(
                        command_line=command_line,
                        message=str(e),
                        returncode=e.returncode,
                    )
                )
                raise
            await context.event_bus.emit(
                CommandCompletedEvent(command_line=command_line, stdout=result.stdout)
            )
            return result
        finally:
            if mutating:
                await context.synchronizer.refresh()

    async def current_branch(self) -> BranchState:
        """Classify the checked-out branch.

        Raises:
            NotARepositoryError: no current branch can be read
        """
        name = await self.context.reader.current_branch_name()
        return self.context.classifier.classify(name)

    def _require_topic(self, kind: str) -> None:
        if not self.context.registry.is_topic(kind):
            raise UnknownBranchTypeError(kind)

    async def _select(self, kind: str, prompt: str) -> Optional[str]:
        prefix = self.context.registry.get(kind).prefix
        names = await self.context.reader.list_branches(prefix)
        if not names:
            raise NoBranchesOfKindError(kind)
        return await self.prompter.choose(names, prompt)

    async def _require_current(self, kind: str, verb: str) -> BranchState:
        branch = await self.current_branch()
        if branch.kind != kind:
            raise WrongBranchError(f"You must be on a {kind} branch to {verb} it")
        return branch

    async def _with_tag_message(
        self, kind: str, explicit: OperationOverride, interactive: bool
    ) -> OperationOverride:
        """Ask for a tag message when tagging and the settings ask for it."""
        if not interactive or explicit.tag_message is not None:
            return explicit
        context = self.context
        options = context.resolver.resolve_options(
            kind,
            Operations.FINISH,
            context.config.operation_override(kind, Operations.FINISH),
            explicit,
        )
        if not options.tag_enabled or not options.get("prompt_for_tag_message"):
            return explicit
        if options.get("tag_message") or options.get("tag_message_file"):
            return explicit

        message = await self.prompter.ask_text(
            "Tag message (leave empty for the default)", allow_empty=True
        )
        if message and message.strip():
            return replace(explicit, tag_message=message.strip())
        return explicit

    # Per-kind actions

    async def start(
        self,
        kind: str,
        name: Optional[str] = None,
        explicit: Optional[OperationOverride] = None,
    ) -> Optional[CommandResult]:
        self._require_topic(kind)
        if name is None:
            name = await self.prompter.ask_text(f"Enter {kind} name")
            if not name:
                return None
        command = await self.context.builder.prepare(
            kind, Actions.START, name.strip(), explicit
        )
        return await self._execute(command, mutating=True)

    async def finish(
        self,
        kind: str,
        name: Optional[str] = None,
        explicit: Optional[OperationOverride] = None,
        interactive: bool = True,
    ) -> Optional[CommandResult]:
        self._require_topic(kind)
        if name is None:
            branch = await self.current_branch()
            if branch.kind == kind:
                name = branch.short_name
            else:
                name = await self._select(kind, f"Select {kind} to finish")
                if not name:
                    return None

        explicit = await self._with_tag_message(
            kind, explicit or OperationOverride(), interactive
        )
        command = await self.context.builder.prepare(
            kind, Actions.FINISH, name, explicit
        )
        return await self._execute(command, mutating=True)

    async def list(self, kind: str) -> List[str]:
        """Branches of ``kind`` as reported by git flow."""
        command = self.context.builder.build(kind, Actions.LIST)
        result = await self._execute(command, mutating=False)
        return result.lines

    async def checkout(
        self, kind: str, name: Optional[str] = None
    ) -> Optional[CommandResult]:
        self._require_topic(kind)
        if name is None:
            name = await self._select(kind, f"Select {kind} to checkout")
            if not name:
                return None
        command = await self.context.builder.prepare(kind, Actions.CHECKOUT, name)
        return await self._execute(command, mutating=True)

    async def delete(
        self, kind: str, name: Optional[str] = None, confirmed: bool = False
    ) -> Optional[CommandResult]:
        self._require_topic(kind)
        if name is None:
            name = await self._select(kind, f"Select {kind} to delete")
            if not name:
                return None
        if not confirmed and not await self.prompter.confirm(
            f'Are you sure you want to delete {kind} "{name}"?'
        ):
            return None
        command = await self.context.builder.prepare(kind, Actions.DELETE, name)
        return await self._execute(command, mutating=True)

    async def rename(
        self, kind: str, new_name: Optional[str] = None
    ) -> Optional[CommandResult]:
        self._require_topic(kind)
        branch = await self._require_current(kind, "rename")
        if new_name is None:
            new_name = await self.prompter.ask_text(
                f"Enter new {kind} name", default=branch.short_name
            )
            if not new_name:
                return None
        command = await self.context.builder.prepare(
            kind, Actions.RENAME, new_name.strip()
        )
        return await self._execute(command, mutating=True)

    async def update(
        self,
        kind: str,
        name: Optional[str] = None,
        explicit: Optional[OperationOverride] = None,
    ) -> Optional[CommandResult]:
        self._require_topic(kind)
        if name is None:
            name = (await self._require_current(kind, "update")).short_name
        command = await self.context.builder.prepare(
            kind, Actions.UPDATE, name, explicit
        )
        return await self._execute(command, mutating=True)

    # Shorthand actions on the checked-out topic branch

    async def shorthand(
        self,
        action: str,
        new_name: Optional[str] = None,
        confirmed: bool = False,
        explicit: Optional[OperationOverride] = None,
        interactive: bool = True,
    ) -> Optional[CommandResult]:
        context = self.context
        branch = await self.current_branch()

        if not branch.is_topic and action not in (
            ShorthandActions.PUBLISH,
            ShorthandActions.REBASE,
        ):
            raise WrongBranchError(f"Cannot {action} main/develop or unknown branch")

        resolved: List[str] = []
        target = None
        if action == ShorthandActions.FINISH:
            explicit = await self._with_tag_message(
                branch.kind, explicit or OperationOverride(), interactive
            )
            await context.builder.propagate_configuration(branch.kind, Actions.FINISH)
            resolved = context.resolver.resolve(
                branch.kind,
                Operations.FINISH,
                context.config.operation_override(branch.kind, Operations.FINISH),
                explicit,
            )
        elif action == ShorthandActions.UPDATE:
            resolved = context.resolver.resolve(
                branch.kind,
                Operations.UPDATE,
                context.config.operation_override(branch.kind, Operations.UPDATE),
                explicit,
            )
        elif action == ShorthandActions.DELETE:
            if not confirmed and not await self.prompter.confirm(
                f'Are you sure you want to delete "{branch.full_ref_name}"?'
            ):
                return None
        elif action == ShorthandActions.RENAME:
            target = new_name
            if target is None:
                target = await self.prompter.ask_text(
                    "Enter new branch name", default=branch.short_name
                )
                if not target:
                    return None
            target = target.strip()

        command = context.builder.build_shorthand(action, target, resolved)
        return await self._execute(command, mutating=True)

    # Paused finish

    async def continue_finish(self) -> CommandResult:
        return await self._resume("--continue")

    async def abort_finish(self) -> CommandResult:
        return await self._resume("--abort")

    async def _resume(self, flag: str) -> CommandResult:
        branch = await self.current_branch()
        # A finish paused mid-merge may leave the parent checked out
        kind = branch.kind if branch.is_topic else None
        command = self.context.builder.build_resume(kind, flag)
        return await self._execute(command, mutating=True)

    # Repository-wide commands

    async def init(self, preset: str = Presets.CLASSIC) -> CommandResult:
        """Initialize git flow, then reload the branch definitions."""
        if preset not in Presets.ALL:
            raise ValueError(
                f"Invalid preset '{preset}'. Must be one of: {', '.join(Presets.ALL)}"
            )
        arguments = ["--custom"] if preset == Presets.CUSTOM else [f"--preset={preset}"]
        command = self.context.builder.build_global(GlobalActions.INIT, arguments)
        try:
            result = await self._execute(command, mutating=False)
        finally:
            await self.context.load_registry()
            await self.context.synchronizer.refresh()
        return result

    async def overview(self) -> str:
        command = self.context.builder.build_global(GlobalActions.OVERVIEW)
        return (await self._execute(command, mutating=False)).stdout

    async def show_config(self) -> str:
        command = self.context.builder.build_global(GlobalActions.CONFIG)
        return (await self._execute(command, mutating=False)).stdout
