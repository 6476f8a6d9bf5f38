"""Per-kind branch commands: start, finish, list, checkout, delete, rename, update."""

from typing import Optional

import rich_click as click

from ..core.types import OperationOverride
from .helpers import display, report, run_with_actions

KIND = click.argument("kind")


@click.command()
@KIND
@click.argument("name", required=False)
@click.option("--base", help="Ref to start the branch from")
@click.option(
    "--fetch/--no-fetch", default=None, help="Fetch from the remote before starting"
)
@click.pass_context
def start(ctx, kind: str, name: Optional[str], base: Optional[str], fetch):
    """Start a new KIND branch.

    Prompts for NAME when it is not given.
    """
    explicit = OperationOverride(base=base, fetch=fetch)
    result = run_with_actions(ctx, lambda a: a.start(kind, name, explicit))
    report(result, f"Started {kind}")


@click.command()
@KIND
@click.argument("name", required=False)
@click.option("--rebase", "strategy", flag_value="rebase", help="Rebase onto the parent")
@click.option("--squash", "strategy", flag_value="squash", help="Squash into the parent")
@click.option("--merge", "strategy", flag_value="merge", help="Merge into the parent")
@click.option("--ff/--no-ff", "fast_forward", default=None, help="Allow fast-forward")
@click.option("--preserve-merges/--no-preserve-merges", default=None)
@click.option("--tag/--notag", default=None, help="Create a tag")
@click.option("--sign/--no-sign", "sign_tag", default=None, help="Sign the tag")
@click.option("--signingkey", help="GPG key used to sign the tag")
@click.option("--message", "-m", help="Tag message")
@click.option("--messagefile", type=click.Path(), help="File holding the tag message")
@click.option("--keep", "retention", flag_value="keep", help="Keep the branch")
@click.option("--keeplocal", "retention", flag_value="keep-local", help="Keep the local branch")
@click.option("--keepremote", "retention", flag_value="keep-remote", help="Keep the remote branch")
@click.option("--force-delete", is_flag=True, help="Delete even if unmerged")
@click.option("--no-prompt", is_flag=True, help="Never ask for a tag message")
@click.pass_context
def finish(
    ctx,
    kind: str,
    name: Optional[str],
    strategy,
    fast_forward,
    preserve_merges,
    tag,
    sign_tag,
    signingkey,
    message,
    messagefile,
    retention,
    force_delete,
    no_prompt,
):
    """Finish a KIND branch.

    Uses the checked-out branch when it is a KIND branch, otherwise asks
    which one to finish. Options override the saved settings for this run.
    """
    if fast_forward is not None:
        fast_forward = "ff" if fast_forward else "no-ff"
    explicit = OperationOverride(
        merge=strategy or None,
        fast_forward=fast_forward,
        preserve_merges=preserve_merges,
        tag=tag,
        sign_tag=sign_tag,
        signing_key=signingkey,
        tag_message=message,
        tag_message_file=messagefile,
        retention=retention or None,
        force_delete=force_delete or None,
    )
    result = run_with_actions(
        ctx, lambda a: a.finish(kind, name, explicit, interactive=not no_prompt)
    )
    report(result, f"Finished {kind}")


@click.command(name="list")
@KIND
@click.pass_context
def list_branches(ctx, kind: str):
    """List KIND branches."""
    lines = run_with_actions(ctx, lambda a: a.list(kind))
    if lines is None:
        return
    if not lines:
        display.info(f"No {kind} branches found", use_panel=False)
        return
    for line in lines:
        display.console.print(line, markup=False, highlight=False)


@click.command()
@KIND
@click.argument("name", required=False)
@click.pass_context
def checkout(ctx, kind: str, name: Optional[str]):
    """Check out a KIND branch."""
    result = run_with_actions(ctx, lambda a: a.checkout(kind, name))
    report(result, f"Checked out {kind}")


@click.command()
@KIND
@click.argument("name", required=False)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete(ctx, kind: str, name: Optional[str], yes: bool):
    """Delete a KIND branch."""
    result = run_with_actions(ctx, lambda a: a.delete(kind, name, confirmed=yes))
    report(result, f"Deleted {kind}")


@click.command()
@KIND
@click.argument("new_name", required=False)
@click.pass_context
def rename(ctx, kind: str, new_name: Optional[str]):
    """Rename the checked-out KIND branch."""
    result = run_with_actions(ctx, lambda a: a.rename(kind, new_name))
    report(result, f"Renamed {kind}")


@click.command()
@KIND
@click.argument("name", required=False)
@click.option("--rebase/--merge", "rebase", default=None, help="How to bring in parent changes")
@click.pass_context
def update(ctx, kind: str, name: Optional[str], rebase):
    """Update a KIND branch from its parent."""
    merge = None if rebase is None else ("rebase" if rebase else "merge")
    explicit = OperationOverride(merge=merge)
    result = run_with_actions(ctx, lambda a: a.update(kind, name, explicit))
    report(result, f"Updated {kind}")
