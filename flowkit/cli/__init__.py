# flowkit/cli/__init__.py
"""Main CLI entry point."""

import os
from pathlib import Path

# Configure rich-click BEFORE importing
# NOTE: The following imports violate E402 (module level import not at top)
# This is intentional - we MUST configure rich-click settings before importing
# it as click, otherwise the configuration won't take effect.

import rich_click.rich_click as rc

rc.USE_RICH_MARKUP = True
rc.SHOW_ARGUMENTS = True
rc.GROUP_ARGUMENTS_OPTIONS = True
rc.SHOW_METAVARS_COLUMN = False
rc.APPEND_METAVARS_HELP = True
rc.MAX_WIDTH = 100

# Nord color scheme
rc.STYLE_OPTION = "bold #8fbcbb"  # Nord7 teal
rc.STYLE_ARGUMENT = "bold #88c0d0"  # Nord8 light blue
rc.STYLE_COMMAND = "bold #5e81ac"  # Nord10 blue
rc.STYLE_SWITCH = "#a3be8c"  # Nord14 green
rc.STYLE_METAVAR = "#d8dee9"  # Nord4 light gray
rc.STYLE_USAGE = "bold #8fbcbb"
rc.STYLE_OPTION_DEFAULT = "#4c566a"  # Nord3 dim gray
rc.STYLE_HELPTEXT_FIRST_LINE = "bold"
rc.STYLE_HELPTEXT = "#d8dee9"  # Nord4 light gray

rc.COMMAND_GROUPS = {
    "flowkit": [
        {
            "name": "Branches",
            "commands": [
                "start",
                "finish",
                "list",
                "checkout",
                "delete",
                "rename",
                "update",
            ],
        },
        {"name": "Current branch", "commands": ["current", "continue", "abort"]},
        {
            "name": "Repository",
            "commands": ["init", "overview", "config", "status", "watch", "settings"],
        },
    ]
}

# Now import as click
import rich_click as click

from ..io.logger import setup_logging
from .branch_commands import checkout, delete, finish, list_branches, rename, start, update
from .current import abort, continue_finish, current
from .helpers import CLIState
from .repository import config, init, overview, status, watch
from .settings import settings


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="flowkit")
@click.option(
    "--workspace",
    "-C",
    type=click.Path(file_okay=False, path_type=str),
    default=".",
    show_default=True,
    help="Repository to operate on",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Settings file to use instead of ~/.config/flowkit/flowkit.yaml",
)
@click.option("--debug", is_flag=True, help="Verbose logging and tracebacks")
@click.pass_context
def cli(ctx, workspace: str, config_path, debug: bool) -> None:
    """Drive git flow branching workflows from the terminal.

    Start, finish and maintain feature, release, hotfix and other topic
    branches. Branch types and their defaults come from the repository's
    git flow configuration; settings files override them per kind.

    QUICK START: flowkit start feature login-form

    EXAMPLES:
    Finish with a squash:    flowkit finish feature --squash
    Finish current branch:   flowkit current finish
    Resume after conflicts:  flowkit continue
    Show branch state:       flowkit status
    """
    if debug:
        os.environ["FLOWKIT_DEBUG"] = "1"
    setup_logging("DEBUG" if debug else "WARNING")
    ctx.obj = CLIState(
        workspace=Path(workspace).resolve(),
        config_path=Path(config_path) if config_path else None,
        debug=debug,
    )


# Register commands
cli.add_command(start)
cli.add_command(finish)
cli.add_command(list_branches)
cli.add_command(checkout)
cli.add_command(delete)
cli.add_command(rename)
cli.add_command(update)
cli.add_command(current)
cli.add_command(continue_finish)
cli.add_command(abort)
cli.add_command(init)
cli.add_command(overview)
cli.add_command(config)
cli.add_command(status)
cli.add_command(watch)
cli.add_command(settings)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
