"""Repository-wide commands: init, overview, config, status, watch."""

import asyncio
import json

import rich_click as click

from ..config.defaults import PRESET_DESCRIPTIONS
from ..core.actions import FlowActions
from ..core.constants import Presets
from ..core.events import SnapshotPublishedEvent
from ..core.watcher import RepositoryWatcher
from ..ui.branch_tree import BranchTreeView
from .helpers import display, report, run_with_actions


@click.command()
@click.option(
    "--preset",
    "-p",
    type=click.Choice(Presets.ALL),
    default=None,
    help="Branching model to set up",
)
@click.pass_context
def init(ctx, preset):
    """Initialize git flow in the repository."""
    if preset is None:
        display.info(
            "\n".join(
                f"{name:8} {PRESET_DESCRIPTIONS[name]}" for name in Presets.ALL
            ),
            title="◆ Presets",
        )
        preset = click.prompt(
            "Preset", type=click.Choice(Presets.ALL), default=Presets.CLASSIC
        )
    result = run_with_actions(ctx, lambda a: a.init(preset))
    report(result, f"Initialized with the {preset} preset")


@click.command()
@click.pass_context
def overview(ctx):
    """Show all workflow branches."""
    output = run_with_actions(ctx, lambda a: a.overview())
    display.command_output(output or "")


@click.command()
@click.pass_context
def config(ctx):
    """Show the workflow configuration stored in git config."""
    output = run_with_actions(ctx, lambda a: a.show_config())
    display.command_output(output or "")


async def _status(actions: FlowActions):
    context = actions.context
    view = BranchTreeView(context.registry)
    view.snapshot = await context.synchronizer.refresh()
    await view.load_branches(context.reader)
    return view


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print context flags as JSON")
@click.pass_context
def status(ctx, as_json: bool):
    """Show the current branch and which kinds have branches."""
    view = run_with_actions(ctx, _status)
    if view is None:
        return
    if as_json:
        click.echo(json.dumps(view.context_flags(), indent=2))
        return
    display.console.print(view.render())


async def _watch(actions: FlowActions):
    context = actions.context
    if not context.config.get("refresh.watch", True):
        display.warning("Watching is turned off (refresh.watch)", use_panel=False)
        return
    view = BranchTreeView(context.registry, context.event_bus)

    async def show(event: SnapshotPublishedEvent) -> None:
        await view.load_branches(context.reader)
        display.console.print(view.render())

    unsubscribe = context.event_bus.subscribe(SnapshotPublishedEvent, show)
    watcher = RepositoryWatcher(context.synchronizer, context.workspace)
    await watcher.start()
    try:
        await context.synchronizer.refresh()
        await asyncio.Event().wait()
    finally:
        await watcher.stop()
        unsubscribe()


@click.command()
@click.pass_context
def watch(ctx):
    """Watch the repository and print branch state when it changes."""
    display.dim("Watching for changes (Ctrl+C to stop)")
    try:
        run_with_actions(ctx, _watch)
    except KeyboardInterrupt:
        display.dim("Stopped watching")
