"""Shared fixtures: in-memory collaborators standing in for git and the terminal."""

import re
from typing import Dict, List, Optional, Sequence

import pytest

from flowkit.config.config import Config
from flowkit.config.registry import BranchTypeRegistry
from flowkit.core.app_context import FlowContext
from flowkit.core.event_bus import EventBus
from flowkit.core.exceptions import (
    ExternalCommandFailedError,
    ExternalToolUnavailableError,
    NotARepositoryError,
)
from flowkit.core.types import Command, CommandResult


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path, monkeypatch):
    """Keep user settings out of the tests."""
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    yield config_home


class FakeRefReader:
    """RefReader over a fixed set of branch names."""

    def __init__(
        self,
        current: Optional[str] = "develop",
        branches: Sequence[str] = (),
        failing_prefixes: Sequence[str] = (),
    ):
        self.current = current
        self.branches = list(branches)
        self.failing_prefixes = set(failing_prefixes)
        self.listed: List[str] = []

    async def current_branch_name(self) -> str:
        if self.current is None:
            raise NotARepositoryError("/nowhere")
        return self.current

    async def branch_exists(self, full_ref_name: str) -> bool:
        return full_ref_name in self.branches

    async def list_branches(self, prefix: str) -> List[str]:
        self.listed.append(prefix)
        if prefix in self.failing_prefixes:
            raise RuntimeError(f"listing {prefix} exploded")
        return sorted(
            name[len(prefix) :]
            for name in self.branches
            if name.startswith(prefix) and len(name) > len(prefix)
        )


class RecordingExecutor:
    """CommandExecutor that records argv and keeps git config in memory."""

    def __init__(self, git_config: Optional[Dict[str, str]] = None):
        self.calls: List[List[str]] = []
        self.git_config: Dict[str, str] = dict(git_config or {})
        self.failures: Dict[str, ExternalCommandFailedError] = {}
        self.outputs: Dict[str, str] = {}
        self.available = True
        self.checks = 0

    def fail_on(self, subcommand: str, message: str = "merge conflict", returncode=1):
        """Make any ``git flow`` command starting with ``subcommand`` fail."""
        self.failures[subcommand] = ExternalCommandFailedError(
            f"git flow {subcommand}", message, returncode=returncode
        )

    @property
    def flow_calls(self) -> List[List[str]]:
        return [argv[2:] for argv in self.calls if argv[:2] == ["git", "flow"]]

    @property
    def config_writes(self) -> List[List[str]]:
        return [
            argv[2:]
            for argv in self.calls
            if argv[:2] == ["git", "config"] and not argv[2].startswith("--")
        ]

    async def check_available(self, cwd) -> None:
        self.checks += 1
        if not self.available:
            raise ExternalToolUnavailableError()

    async def run(self, command, cwd) -> CommandResult:
        argv = command.argv if isinstance(command, Command) else list(command)
        self.calls.append(argv)

        if argv[:2] == ["git", "config"]:
            return self._git_config(argv[2:])

        subcommand = " ".join(argv[2:])
        for prefix, error in self.failures.items():
            if subcommand.startswith(prefix):
                raise error
        for prefix, stdout in self.outputs.items():
            if subcommand.startswith(prefix):
                return CommandResult(stdout=stdout)
        return CommandResult()

    def _git_config(self, args: List[str]) -> CommandResult:
        not_found = ExternalCommandFailedError("git config", "", returncode=1)
        if args[0] == "--get-regexp":
            pattern = re.compile(args[1])
            lines = [f"{k} {v}" for k, v in self.git_config.items() if pattern.search(k)]
            if not lines:
                raise not_found
            return CommandResult(stdout="\n".join(lines) + "\n")
        if args[0] == "--get":
            if args[1] not in self.git_config:
                raise not_found
            return CommandResult(stdout=self.git_config[args[1]] + "\n")
        self.git_config[args[0]] = args[1]
        return CommandResult()


class ScriptedPrompter:
    """Prompter answering from queues and recording what was asked."""

    def __init__(self, texts=(), choices=(), confirms=()):
        self.texts = list(texts)
        self.choices = list(choices)
        self.confirms = list(confirms)
        self.asked: List[str] = []

    async def ask_text(self, prompt, default=None, allow_empty=False):
        self.asked.append(prompt)
        return self.texts.pop(0) if self.texts else default

    async def choose(self, options, prompt):
        self.asked.append(prompt)
        if not self.choices:
            return None
        choice = self.choices.pop(0)
        return choice if choice in options else None

    async def confirm(self, message):
        self.asked.append(message)
        return self.confirms.pop(0) if self.confirms else False


@pytest.fixture
def registry():
    return BranchTypeRegistry.default()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def reader():
    return FakeRefReader(
        current="feature/login",
        branches=["main", "develop", "feature/login", "feature/search", "release/1.0"],
    )


@pytest.fixture
def executor():
    return RecordingExecutor()


@pytest.fixture
def prompter():
    return ScriptedPrompter()


@pytest.fixture
def flow_context(tmp_path, executor, reader, event_bus, registry):
    workspace = tmp_path / "repo"
    workspace.mkdir()
    return FlowContext(
        workspace,
        config=Config(workspace=workspace),
        executor=executor,
        event_bus=event_bus,
        reader=reader,
        registry=registry,
    )


@pytest.fixture
def make_reader():
    return FakeRefReader


@pytest.fixture
def make_executor():
    return RecordingExecutor


@pytest.fixture
def make_prompter():
    return ScriptedPrompter
