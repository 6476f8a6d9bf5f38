"""Shared plumbing for CLI commands."""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

import rich_click as click
from rich.console import Console

from ..core.actions import FlowActions
from ..core.app_context import FlowContext
from ..core.exceptions import BranchConfigurationError, NoBranchesOfKindError
from ..io.logger import setup_logging
from ..ui.display_utils import DisplayUtils
from ..ui.prompts import ConsolePrompter
from .error_handler import CLIErrorHandler, ConfigError

T = TypeVar("T")

console = Console()
display = DisplayUtils(console)


@dataclass
class CLIState:
    """Options given to the ``flowkit`` group."""

    workspace: Path
    config_path: Optional[Path] = None
    debug: bool = False


async def open_context(state: CLIState) -> FlowContext:
    """Load settings and branch definitions for the workspace.

    Raises:
        ConfigError: a settings file or the branch definitions are invalid
    """
    try:
        context = await FlowContext.create(
            state.workspace, config_path=state.config_path
        )
    except (ValueError, FileNotFoundError, BranchConfigurationError) as e:
        raise ConfigError(
            str(e), suggestion="Fix the settings file or run 'flowkit settings --show'"
        ) from e

    if not state.debug:
        setup_logging(
            context.config.get("logging.level", "WARNING"),
            context.config.get("logging.file"),
        )
    return context


def run_with_actions(
    ctx: click.Context,
    func: Callable[[FlowActions], Awaitable[T]],
) -> Optional[T]:
    """Run ``func`` against a fresh context and report errors.

    An empty branch selection is reported as information, not a failure.
    """
    state: CLIState = ctx.obj
    handler = CLIErrorHandler(debug=state.debug)

    async def _run() -> T:
        context = await open_context(state)
        actions = FlowActions(context, ConsolePrompter(console))
        return await func(actions)

    try:
        return asyncio.run(_run())
    except NoBranchesOfKindError as e:
        display.info(str(e), use_panel=False)
        ctx.exit(0)
    except Exception as e:
        handler.handle_error(e)
    return None


def report(result, done: str) -> None:
    """Print command output, or note that the user cancelled."""
    if result is None:
        display.dim("Cancelled")
        return
    display.command_output(result.stdout)
    display.success(done)
