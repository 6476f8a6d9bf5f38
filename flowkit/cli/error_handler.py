"""Map flowkit errors to rich error panels and process exit codes."""

import sys
from enum import Enum
from typing import NoReturn, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from ..core.exceptions import (
    BranchConfigurationError,
    ExternalCommandFailedError,
    ExternalToolUnavailableError,
    FlowkitError,
    MissingTargetError,
    NotARepositoryError,
    UnknownBranchTypeError,
    WrongBranchError,
)


class ErrorType(Enum):
    """Panel headings, one per kind of failure."""

    CONFIG = "Configuration Error"
    VALIDATION = "Validation Error"
    TOOL = "Tool Not Available"
    COMMAND = "Command Failed"
    RUNTIME = "Runtime Error"


class CLIError(Exception):
    """An error the CLI knows how to present, with its exit code."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.RUNTIME,
        suggestion: Optional[str] = None,
        exit_code: int = 1,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.suggestion = suggestion
        self.exit_code = exit_code


class ConfigError(CLIError):
    """Settings, branch definitions or the workspace are unusable."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message, ErrorType.CONFIG, suggestion, exit_code=2)


class ValidationError(CLIError):
    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message, ErrorType.VALIDATION, suggestion, exit_code=3)


class ToolError(CLIError):
    """git or git flow cannot be run."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message, ErrorType.TOOL, suggestion, exit_code=4)


class CommandError(CLIError):
    """The workflow CLI ran and reported an error."""

    def __init__(self, message: str, suggestion: Optional[str] = None):
        super().__init__(message, ErrorType.COMMAND, suggestion, exit_code=1)


def to_cli_error(error: Exception) -> Exception:
    """Translate a library error into the matching ``CLIError``.

    Errors with no CLI counterpart are returned unchanged.
    """
    if isinstance(error, CLIError):
        return error
    if isinstance(error, ExternalToolUnavailableError):
        return ToolError(str(error), suggestion=error.suggestion)
    if isinstance(error, ExternalCommandFailedError):
        suggestion = f"Command: {error.command_line}"
        if "finish" in error.command_line:
            suggestion += (
                "\nResolve conflicts, then run 'flowkit continue' or 'flowkit abort'"
            )
        return CommandError(str(error), suggestion=suggestion)
    if isinstance(error, NotARepositoryError):
        return ConfigError(
            str(error), suggestion="Run inside a git repository or pass --workspace"
        )
    if isinstance(error, BranchConfigurationError):
        return ConfigError(
            str(error), suggestion="Check the gitflow.branch.* entries in git config"
        )
    if isinstance(error, UnknownBranchTypeError):
        return ValidationError(
            str(error), suggestion="Run 'flowkit status' to see the branch types"
        )
    if isinstance(error, (MissingTargetError, WrongBranchError)):
        return ValidationError(str(error))
    if isinstance(error, FlowkitError):
        return CLIError(str(error))
    if isinstance(error, ValueError):
        return ValidationError(str(error))
    return error


class CLIErrorHandler:
    """Prints an error panel on stderr and exits with the error's code."""

    def __init__(self, console: Optional[Console] = None, debug: bool = False):
        self.console = console or Console(stderr=True)
        self.debug = debug

    def handle_error(self, error: BaseException) -> NoReturn:
        if isinstance(error, KeyboardInterrupt):
            self.console.print("\n[yellow]✗ Cancelled[/yellow]")
            sys.exit(130)

        error = to_cli_error(error)
        if isinstance(error, CLIError):
            self._render("Error", f"{error.error_type.value}: ", error, error.suggestion)
            if self.debug:
                self.console.print_exception(show_locals=True)
            sys.exit(error.exit_code)

        # Unmapped errors always get a traceback
        self._render("Unexpected Error", "Unexpected error: ", error)
        self.console.print_exception(show_locals=self.debug)
        sys.exit(1)

    def _render(
        self,
        title: str,
        heading: str,
        error: BaseException,
        suggestion: Optional[str] = None,
    ) -> None:
        text = Text()
        text.append(f"✗ {heading}", style="bold red")
        text.append(str(error))
        if suggestion:
            text.append("\n\nSuggestion: ", style="bold yellow")
            text.append(suggestion, style="yellow")
        self.console.print(
            Panel(
                text,
                title=f"[bold red]{title}[/bold red]",
                border_style="red",
                expand=False,
            )
        )
