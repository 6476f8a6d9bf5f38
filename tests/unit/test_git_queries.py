"""Tests for GitRefReader and GitConfigStore."""

from unittest.mock import AsyncMock

import pytest

from flowkit.config.git_config import GitConfigStore
from flowkit.core.exceptions import ExternalCommandFailedError, NotARepositoryError
from flowkit.core.git_refs import GitRefReader
from flowkit.core.types import CommandResult


def failing(returncode=128, message="fatal: not a git repository"):
    return ExternalCommandFailedError("git", message, returncode=returncode)


class TestGitRefReader:
    @pytest.mark.asyncio
    async def test_current_branch_is_stripped(self, tmp_path):
        executor = AsyncMock()
        executor.run.return_value = CommandResult(stdout="feature/login\n")

        name = await GitRefReader(executor, tmp_path).current_branch_name()

        assert name == "feature/login"
        executor.run.assert_awaited_once_with(
            ["git", "branch", "--show-current"], tmp_path
        )

    @pytest.mark.asyncio
    async def test_current_branch_outside_repository(self, tmp_path):
        executor = AsyncMock()
        executor.run.side_effect = failing()

        with pytest.raises(NotARepositoryError):
            await GitRefReader(executor, tmp_path).current_branch_name()

    @pytest.mark.asyncio
    async def test_list_branches_strips_prefix(self, tmp_path):
        executor = AsyncMock()
        executor.run.return_value = CommandResult(
            stdout="refs/heads/feature/zeta\nrefs/heads/feature/alpha\n\n"
        )

        names = await GitRefReader(executor, tmp_path).list_branches("feature/")

        assert names == ["alpha", "zeta"]
        argv = executor.run.await_args.args[0]
        assert argv[-1] == "refs/heads/feature/"

    @pytest.mark.asyncio
    async def test_list_branches_without_trailing_slash(self, tmp_path):
        executor = AsyncMock()
        executor.run.return_value = CommandResult(stdout="refs/heads/feat-x\n")

        names = await GitRefReader(executor, tmp_path).list_branches("feat-")

        assert names == ["x"]
        assert executor.run.await_args.args[0][-1] == "refs/heads/feat-*"

    @pytest.mark.asyncio
    async def test_list_failure_propagates(self, tmp_path):
        executor = AsyncMock()
        executor.run.side_effect = failing()
        with pytest.raises(ExternalCommandFailedError):
            await GitRefReader(executor, tmp_path).list_branches("feature/")

    @pytest.mark.asyncio
    async def test_branch_exists(self, tmp_path):
        executor = AsyncMock()
        executor.run.side_effect = [CommandResult(), failing(returncode=1)]
        reader = GitRefReader(executor, tmp_path)

        assert await reader.branch_exists("feature/login") is True
        assert await reader.branch_exists("feature/nope") is False


class TestGitConfigStore:
    @pytest.mark.asyncio
    async def test_get_regexp(self, make_executor, tmp_path):
        executor = make_executor(
            {"gitflow.branch.main.type": "base", "gitflow.origin": "origin", "user.name": "x"}
        )
        entries = await GitConfigStore(executor, tmp_path).get_regexp(r"^gitflow\.branch\.")
        assert entries == {"gitflow.branch.main.type": "base"}

    @pytest.mark.asyncio
    async def test_get_regexp_no_match(self, make_executor, tmp_path):
        store = GitConfigStore(make_executor(), tmp_path)
        assert await store.get_regexp(r"^gitflow\.") == {}

    @pytest.mark.asyncio
    async def test_get_missing_key(self, make_executor, tmp_path):
        assert await GitConfigStore(make_executor(), tmp_path).get("gitflow.origin") is None

    @pytest.mark.asyncio
    async def test_other_failures_propagate(self, tmp_path):
        executor = AsyncMock()
        executor.run.side_effect = failing(returncode=128)
        with pytest.raises(ExternalCommandFailedError):
            await GitConfigStore(executor, tmp_path).get("gitflow.origin")

    @pytest.mark.asyncio
    async def test_set_is_idempotent(self, make_executor, tmp_path):
        executor = make_executor()
        store = GitConfigStore(executor, tmp_path)

        assert await store.set("gitflow.origin", "upstream") is True
        assert await store.set("gitflow.origin", "upstream") is False
        assert executor.config_writes == [["gitflow.origin", "upstream"]]
