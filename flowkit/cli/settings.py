"""Create and inspect flowkit settings files."""

from pathlib import Path

import rich_click as click
import yaml
from rich.syntax import Syntax

from ..config import Config
from ..io.directories import get_repository_settings_path, get_user_settings_path
from .error_handler import CLIErrorHandler, ConfigError
from .helpers import CLIState, display


@click.command()
@click.option(
    "--force", "-f", is_flag=True, help="Overwrite existing settings file"
)
@click.option(
    "--repo", is_flag=True, help="Write .flowkit.yaml in the workspace instead"
)
@click.option("--show", is_flag=True, help="Print the effective settings")
@click.pass_context
def settings(ctx, force: bool, repo: bool, show: bool):
    """Create a settings file with example values.

    Creates ~/.config/flowkit/flowkit.yaml (or .flowkit.yaml in the
    workspace with --repo). Repository settings override user settings.
    """
    state: CLIState = ctx.obj

    if show:
        try:
            config = Config(config_path=state.config_path, workspace=state.workspace)
        except (ValueError, FileNotFoundError) as e:
            CLIErrorHandler(debug=state.debug).handle_error(ConfigError(str(e)))
            return
        for path in config.loaded_paths:
            display.dim(f"Loaded: {path}")
        text = yaml.safe_dump(config.to_dict(), default_flow_style=False)
        display.console.print(Syntax(text, "yaml", background_color="default"))
        return

    if repo:
        settings_path = get_repository_settings_path(state.workspace)
    else:
        settings_path = Path(state.config_path or get_user_settings_path())

    if settings_path.exists() and not force:
        display.warning(
            f"Settings file already exists at: {settings_path}", use_panel=False
        )
        display.info("Use --force to overwrite", use_panel=False)
        return

    settings_path.parent.mkdir(parents=True, exist_ok=True)
    Config._write_example_config(settings_path)

    display.success("◆ Created settings file")
    display.info(f"Location: {settings_path}", use_panel=False)
    display.dim("\nEdit the file to customize settings")
