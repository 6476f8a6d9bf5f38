"""Run git and git flow commands in a workspace."""

import asyncio
import platform
import shlex
from pathlib import Path
from typing import Optional, Sequence, Union

from ..io.logger import get_logger
from .exceptions import (
    ExternalCommandFailedError,
    ExternalToolUnavailableError,
    NotARepositoryError,
)
from .types import Command, CommandResult

logger = get_logger("executor")

ERROR_MARKER = "Error: "
FAILED_PREFIX = "Command failed: "


def extract_error_message(failure_text: str, command_line: Optional[str] = None) -> str:
    """Pull the human-readable part out of a command failure.

    A leading ``Command failed: <cmdline>`` is stripped first, so markers
    inside the arguments never count. In what remains, the line following
    an ``Error: `` marker wins; otherwise the whole remainder is returned.
    """
    text = failure_text
    if text.startswith(FAILED_PREFIX):
        remainder = text[len(FAILED_PREFIX) :]
        if command_line and remainder.startswith(command_line):
            text = remainder[len(command_line) :]
        else:
            text = remainder.split("\n", 1)[1] if "\n" in remainder else ""

    index = text.find(ERROR_MARKER)
    if index != -1:
        message = text[index + len(ERROR_MARKER) :].splitlines()
        if message and message[0].strip():
            return message[0].strip()
    return text.strip()


def get_install_instructions() -> str:
    """Get platform-specific install instructions for git-flow-next."""
    system = platform.system()

    if system == "Darwin":
        return "brew install gittower/tap/git-flow-next"
    elif system == "Linux":
        return (
            "Download a release from https://github.com/gittower/git-flow-next/releases "
            "and put git-flow on your PATH"
        )
    elif system == "Windows":
        return "Download git-flow.exe from https://github.com/gittower/git-flow-next/releases"
    else:
        return "Visit https://github.com/gittower/git-flow-next"


class CommandExecutor:
    """Spawns commands without a shell and collects their output.

    Timeouts and cancellation are left to the caller.
    """

    def __init__(self):
        self._tool_checked = False

    async def run(
        self, command: Union[Command, Sequence[str]], cwd: Path
    ) -> CommandResult:
        """Run a command in ``cwd``.

        Raises:
            NotARepositoryError: ``cwd`` is not a directory
            ExternalToolUnavailableError: the executable is missing
            ExternalCommandFailedError: the command exited non-zero
        """
        argv = command.argv if isinstance(command, Command) else list(command)
        command_line = shlex.join(argv)
        cwd = Path(cwd)
        if not cwd.is_dir():
            raise NotARepositoryError(str(cwd), f"Workspace does not exist: {cwd}")

        logger.debug(f"Running: {command_line} (cwd={cwd})")
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=str(cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise ExternalToolUnavailableError(
                argv[0], suggestion=get_install_instructions()
            ) from None

        stdout_bytes, stderr_bytes = await process.communicate()
        stdout = stdout_bytes.decode(errors="replace")
        stderr = stderr_bytes.decode(errors="replace")

        if process.returncode != 0:
            failure_text = f"{FAILED_PREFIX}{command_line}\n{stderr or stdout}"
            message = extract_error_message(failure_text, command_line)
            logger.debug(f"Command failed ({process.returncode}): {message}")
            raise ExternalCommandFailedError(
                command_line,
                message or f"exit status {process.returncode}",
                returncode=process.returncode,
                stdout=stdout,
                stderr=stderr,
            )

        return CommandResult(stdout=stdout, stderr=stderr, returncode=0)

    async def check_available(self, cwd: Path) -> None:
        """Make sure ``git flow`` can be run. Checked once per executor.

        Raises:
            ExternalToolUnavailableError: git or git-flow is missing
        """
        if self._tool_checked:
            return
        try:
            await self.run(["git", "flow", "version"], cwd)
        except ExternalCommandFailedError as e:
            logger.debug(f"git flow version failed: {e}")
            raise ExternalToolUnavailableError(
                "git flow", suggestion=get_install_instructions()
            ) from e
        self._tool_checked = True
