"""Custom exceptions for flowkit core functionality."""

from typing import Optional


class FlowkitError(Exception):
    """Base exception for all flowkit errors."""


class NotARepositoryError(FlowkitError):
    """Raised when no current branch can be obtained for the workspace."""

    def __init__(self, workspace: Optional[str] = None, message: str = None):
        self.workspace = workspace
        if message is None:
            message = "Not in a git repository"
            if workspace:
                message += f": {workspace}"
        super().__init__(message)


class UnknownBranchTypeError(FlowkitError):
    """Raised when a branch kind is not registered."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unknown branch type: {kind}")


class BranchConfigurationError(FlowkitError):
    """Raised when branch-type definitions are inconsistent."""


class ExternalToolUnavailableError(FlowkitError):
    """Raised when the git flow CLI cannot be found."""

    def __init__(self, tool: str = "git flow", suggestion: Optional[str] = None):
        self.tool = tool
        self.suggestion = suggestion
        super().__init__(f"{tool} is not installed or not on PATH")


class ExternalCommandFailedError(FlowkitError):
    """Raised when the workflow CLI exits with an error."""

    def __init__(
        self,
        command_line: str,
        message: str,
        returncode: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        self.command_line = command_line
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message)


class NoBranchesOfKindError(FlowkitError):
    """Raised when a selection is requested from an empty branch list.

    Not a failure; callers report it as information.
    """

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"No {kind} branches found")


class MissingTargetError(FlowkitError, ValueError):
    """Raised when an action that needs a branch name is built without one."""

    def __init__(self, kind: Optional[str], action: str):
        self.kind = kind
        self.action = action
        scope = f"{kind} {action}" if kind else action
        super().__init__(f"'{scope}' requires a branch name")


class WrongBranchError(FlowkitError):
    """Raised when an action needs a different branch to be checked out."""
