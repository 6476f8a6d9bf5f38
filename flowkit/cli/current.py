"""Commands acting on the checked-out branch, whatever its kind."""

from typing import Optional

import rich_click as click

from ..core.constants import ShorthandActions
from ..core.types import OperationOverride
from .helpers import report, run_with_actions


@click.command()
@click.argument("action", type=click.Choice(ShorthandActions.ALL))
@click.argument("new_name", required=False)
@click.option("--yes", "-y", is_flag=True, help="Do not ask before deleting")
@click.option("--tag/--notag", default=None, help="Create a tag when finishing")
@click.option("--message", "-m", help="Tag message when finishing")
@click.option("--no-prompt", is_flag=True, help="Never ask for a tag message")
@click.pass_context
def current(
    ctx,
    action: str,
    new_name: Optional[str],
    yes: bool,
    tag,
    message: Optional[str],
    no_prompt: bool,
):
    """Run ACTION on the checked-out topic branch.

    ACTION is one of finish, delete, rebase, update, rename or publish.
    NEW_NAME is only used by rename.
    """
    explicit = OperationOverride(tag=tag, tag_message=message)
    result = run_with_actions(
        ctx,
        lambda a: a.shorthand(
            action,
            new_name=new_name,
            confirmed=yes,
            explicit=explicit,
            interactive=not no_prompt,
        ),
    )
    report(result, f"{action.capitalize()} done")


@click.command(name="continue")
@click.pass_context
def continue_finish(ctx):
    """Continue a finish that stopped on conflicts."""
    result = run_with_actions(ctx, lambda a: a.continue_finish())
    report(result, "Finish continued")


@click.command()
@click.pass_context
def abort(ctx):
    """Abort a finish that stopped on conflicts."""
    result = run_with_actions(ctx, lambda a: a.abort_finish())
    report(result, "Finish aborted")
