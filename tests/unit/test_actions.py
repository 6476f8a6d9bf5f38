"""Tests for FlowActions: ordering, prompts, and refresh after every mutation."""

import pytest

from flowkit.core.actions import FlowActions
from flowkit.core.events import (
    CommandCompletedEvent,
    CommandFailedEvent,
    CommandStartedEvent,
    SnapshotPublishedEvent,
)
from flowkit.core.exceptions import (
    ExternalCommandFailedError,
    ExternalToolUnavailableError,
    NoBranchesOfKindError,
    UnknownBranchTypeError,
    WrongBranchError,
)
from flowkit.core.types import OperationOverride


@pytest.fixture
def actions(flow_context, prompter):
    return FlowActions(flow_context, prompter)


def refreshes(event_bus):
    return len(event_bus.get_history(SnapshotPublishedEvent))


class TestStart:
    @pytest.mark.asyncio
    async def test_start_runs_and_refreshes(self, actions, executor, event_bus):
        await actions.start("feature", "search", OperationOverride(fetch=True))

        assert executor.flow_calls == [["feature", "start", "search", "--fetch"]]
        assert refreshes(event_bus) == 1

    @pytest.mark.asyncio
    async def test_start_prompts_for_name(self, actions, executor, make_prompter, flow_context):
        actions = FlowActions(flow_context, make_prompter(texts=[" dark-mode "]))

        await actions.start("feature")

        assert executor.flow_calls == [["feature", "start", "dark-mode"]]

    @pytest.mark.asyncio
    async def test_cancelled_prompt_runs_nothing(self, actions, executor, event_bus):
        assert await actions.start("feature") is None
        assert executor.flow_calls == []
        assert refreshes(event_bus) == 0

    @pytest.mark.asyncio
    async def test_config_hooks_run_before_command(self, actions, executor):
        await actions.start("hotfix", "1.0.1")

        kinds = [argv[1] for argv in executor.calls]
        assert kinds.index("config") < kinds.index("flow")

    @pytest.mark.asyncio
    async def test_unknown_kind(self, actions, executor):
        with pytest.raises(UnknownBranchTypeError):
            await actions.start("experiment", "x")
        assert executor.calls == []


class TestFinish:
    @pytest.mark.asyncio
    async def test_finishes_checked_out_branch(self, actions, executor):
        await actions.finish("feature", explicit=OperationOverride(merge="squash"))

        assert executor.flow_calls == [["feature", "finish", "login", "--squash", "--notag"]]

    @pytest.mark.asyncio
    async def test_selects_when_not_on_kind(self, flow_context, executor, make_prompter):
        prompter = make_prompter(choices=["1.0"], texts=[""])
        actions = FlowActions(flow_context, prompter)

        await actions.finish("release")

        assert prompter.asked[0] == "Select release to finish"
        assert executor.flow_calls[0][:3] == ["release", "finish", "1.0"]

    @pytest.mark.asyncio
    async def test_tag_message_prompt(self, flow_context, executor, make_prompter, reader):
        reader.current = "release/1.0"
        actions = FlowActions(flow_context, make_prompter(texts=["  Ship it  "]))

        await actions.finish("release")

        assert executor.flow_calls == [
            ["release", "finish", "1.0", "--tag", "--message", "Ship it"]
        ]

    @pytest.mark.asyncio
    async def test_empty_tag_message_is_omitted(self, flow_context, executor, make_prompter, reader):
        reader.current = "release/1.0"
        actions = FlowActions(flow_context, make_prompter(texts=["   "]))

        await actions.finish("release")

        assert executor.flow_calls == [["release", "finish", "1.0", "--tag"]]

    @pytest.mark.asyncio
    async def test_no_prompt_when_not_interactive(self, flow_context, executor, prompter, reader):
        reader.current = "release/1.0"
        actions = FlowActions(flow_context, prompter)

        await actions.finish("release", interactive=False)

        assert prompter.asked == []

    @pytest.mark.asyncio
    async def test_no_prompt_when_not_tagging(self, flow_context, prompter, reader):
        reader.current = "release/1.0"
        actions = FlowActions(flow_context, prompter)

        await actions.finish("release", explicit=OperationOverride(tag=False))

        assert prompter.asked == []

    @pytest.mark.asyncio
    async def test_no_prompt_for_feature(self, actions, prompter):
        await actions.finish("feature")
        assert prompter.asked == []

    @pytest.mark.asyncio
    async def test_failure_still_refreshes(self, actions, executor, event_bus):
        executor.fail_on("feature finish", "Merge conflict in app.py")

        with pytest.raises(ExternalCommandFailedError, match="Merge conflict"):
            await actions.finish("feature")

        assert refreshes(event_bus) == 1
        failed = event_bus.get_history(CommandFailedEvent)
        assert failed[0].message == "Merge conflict in app.py"
        assert event_bus.get_history(CommandCompletedEvent) == []

    @pytest.mark.asyncio
    async def test_missing_tool_still_refreshes(self, actions, executor, event_bus):
        executor.available = False

        with pytest.raises(ExternalToolUnavailableError):
            await actions.finish("feature")

        assert executor.flow_calls == []
        assert refreshes(event_bus) == 1


class TestSelection:
    @pytest.mark.asyncio
    async def test_no_branches_of_kind(self, actions, prompter):
        with pytest.raises(NoBranchesOfKindError, match="No hotfix branches found"):
            await actions.checkout("hotfix")
        assert prompter.asked == []

    @pytest.mark.asyncio
    async def test_checkout_selected(self, flow_context, executor, make_prompter, event_bus):
        actions = FlowActions(flow_context, make_prompter(choices=["search"]))

        await actions.checkout("feature")

        assert executor.flow_calls == [["feature", "checkout", "search"]]
        assert refreshes(event_bus) == 1


class TestDelete:
    @pytest.mark.asyncio
    async def test_declined_confirmation(self, actions, executor):
        assert await actions.delete("feature", "search") is None
        assert executor.flow_calls == []

    @pytest.mark.asyncio
    async def test_confirmed(self, actions, executor):
        await actions.delete("feature", "search", confirmed=True)
        assert executor.flow_calls == [["feature", "delete", "search"]]


class TestRenameAndUpdate:
    @pytest.mark.asyncio
    async def test_rename_requires_kind_checked_out(self, actions, executor):
        with pytest.raises(WrongBranchError):
            await actions.rename("release", "2.0")
        assert executor.flow_calls == []

    @pytest.mark.asyncio
    async def test_rename(self, actions, executor):
        await actions.rename("feature", "sign-in")
        assert executor.flow_calls == [["feature", "rename", "sign-in"]]

    @pytest.mark.asyncio
    async def test_update_current(self, actions, executor):
        await actions.update("feature")
        assert executor.flow_calls == [["feature", "update", "login", "--rebase"]]

    @pytest.mark.asyncio
    async def test_update_requires_kind_without_name(self, actions):
        with pytest.raises(WrongBranchError):
            await actions.update("hotfix")


class TestShorthand:
    @pytest.mark.asyncio
    async def test_finish_resolves_for_current_kind(self, actions, executor, flow_context):
        flow_context.config.set("branches.feature.finish.retention", "keep-local")

        await actions.shorthand("finish")

        assert executor.flow_calls == [["finish", "--notag", "--keeplocal"]]
        assert executor.git_config["gitflow.feature.finish.deleteremote"] == "true"

    @pytest.mark.asyncio
    async def test_publish(self, actions, executor, event_bus):
        await actions.shorthand("publish")
        assert executor.flow_calls == [["publish"]]
        assert refreshes(event_bus) == 1

    @pytest.mark.asyncio
    async def test_delete_refused_on_base_branch(self, actions, reader):
        reader.current = "develop"
        with pytest.raises(WrongBranchError):
            await actions.shorthand("delete", confirmed=True)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("current", ["develop", "main", ""])
    @pytest.mark.parametrize("action", ["finish", "update", "delete", "rename"])
    async def test_refused_off_topic_branch(self, actions, executor, reader, current, action):
        reader.current = current

        with pytest.raises(WrongBranchError):
            await actions.shorthand(action, new_name="x", confirmed=True)

        assert executor.calls == []

    @pytest.mark.asyncio
    async def test_publish_allowed_on_base_branch(self, actions, executor, reader):
        reader.current = "develop"
        await actions.shorthand("publish")
        assert executor.flow_calls == [["publish"]]

    @pytest.mark.asyncio
    async def test_rename_prompts_with_current_name(self, flow_context, executor, make_prompter):
        prompter = make_prompter(texts=["sign-in"])
        actions = FlowActions(flow_context, prompter)

        await actions.shorthand("rename")

        assert executor.flow_calls == [["rename", "sign-in"]]

    @pytest.mark.asyncio
    async def test_update(self, actions, executor):
        await actions.shorthand("update")
        assert executor.flow_calls == [["update", "--rebase"]]


class TestResume:
    @pytest.mark.asyncio
    async def test_continue_on_topic_branch(self, actions, executor, event_bus):
        await actions.continue_finish()

        assert executor.flow_calls == [["feature", "finish", "--continue"]]
        assert refreshes(event_bus) == 1

    @pytest.mark.asyncio
    async def test_abort_off_topic_branch(self, actions, executor, reader):
        reader.current = "main"
        await actions.abort_finish()
        assert executor.flow_calls == [["finish", "--abort"]]

    @pytest.mark.asyncio
    async def test_failed_continue_refreshes(self, actions, executor, event_bus):
        executor.fail_on("feature finish --continue", "Unresolved conflicts")

        with pytest.raises(ExternalCommandFailedError):
            await actions.continue_finish()

        assert refreshes(event_bus) == 1


class TestRepositoryCommands:
    @pytest.mark.asyncio
    async def test_init_reloads_registry(self, actions, executor, flow_context):
        executor.git_config.update(
            {
                "gitflow.branch.main.type": "base",
                "gitflow.branch.feature.type": "topic",
                "gitflow.branch.feature.parent": "main",
            }
        )

        await actions.init("github")

        assert executor.flow_calls == [["init", "--preset=github"]]
        assert flow_context.registry.topic_kinds() == ("feature",)
        assert flow_context.synchronizer.snapshot.exists_by_kind == {"feature": True}

    @pytest.mark.asyncio
    async def test_init_custom(self, actions, executor):
        await actions.init("custom")
        assert executor.flow_calls == [["init", "--custom"]]

    @pytest.mark.asyncio
    async def test_init_rejects_unknown_preset(self, actions, executor):
        with pytest.raises(ValueError):
            await actions.init("svn")
        assert executor.calls == []

    @pytest.mark.asyncio
    async def test_list_does_not_refresh(self, actions, executor, event_bus):
        executor.outputs["feature list"] = "  login\n* search\n"

        lines = await actions.list("feature")

        assert lines == ["login", "* search"]
        assert refreshes(event_bus) == 0

    @pytest.mark.asyncio
    async def test_events_in_order(self, actions, event_bus):
        await actions.overview()

        kinds = [type(e) for e in event_bus.get_history()]
        assert kinds == [CommandStartedEvent, CommandCompletedEvent]
