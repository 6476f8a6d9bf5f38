"""Tests for BranchTypeRegistry loading and validation."""

import pytest

from flowkit.config.defaults import GITHUB, GITLAB, PRESETS
from flowkit.config.registry import BranchTypeRegistry
from flowkit.core.exceptions import BranchConfigurationError, UnknownBranchTypeError
from flowkit.core.types import BranchTypeConfig

MAIN = BranchTypeConfig(name="main", base=True)


class TestDefaults:
    def test_classic_kinds_in_order(self):
        registry = BranchTypeRegistry.default()
        assert registry.topic_kinds() == ("feature", "release", "hotfix", "support", "bugfix")

    def test_roles(self):
        registry = BranchTypeRegistry.default()
        assert registry.main_names == ("main", "master")
        assert registry.develop_names == ("develop",)

    def test_release_defaults(self):
        release = BranchTypeRegistry.default().get("release")
        assert release.creates_tag
        assert release.tag_prefix == "v"
        assert release.start_point == "develop"

    @pytest.mark.parametrize("preset", [GITHUB, GITLAB])
    def test_presets_are_valid(self, preset):
        BranchTypeRegistry(preset)

    def test_custom_has_no_builtin_definitions(self):
        assert "custom" not in PRESETS

    def test_unknown_kind(self):
        with pytest.raises(UnknownBranchTypeError):
            BranchTypeRegistry.default().get("experiment")

    def test_base_kinds_are_not_topics(self):
        registry = BranchTypeRegistry.default()
        assert "develop" in registry
        assert not registry.is_topic("develop")
        assert registry.is_topic("hotfix")


class TestFromGitConfig:
    def test_reads_branch_definitions(self):
        registry = BranchTypeRegistry.from_git_config(
            {
                "gitflow.branch.main.type": "base",
                "gitflow.branch.develop.type": "base",
                "gitflow.branch.develop.parent": "main",
                "gitflow.branch.develop.autoupdate": "true",
                "gitflow.branch.feature.type": "topic",
                "gitflow.branch.feature.parent": "develop",
                "gitflow.branch.feature.prefix": "feat/",
                "gitflow.branch.feature.downstreamstrategy": "rebase",
                "gitflow.branch.release.type": "topic",
                "gitflow.branch.release.parent": "main",
                "gitflow.branch.release.startpoint": "develop",
                "gitflow.branch.release.tag": "true",
                "gitflow.branch.release.tagprefix": "v",
                "gitflow.branch.release.deleteremote": "false",
            }
        )

        assert registry.topic_kinds() == ("feature", "release")
        feature = registry.get("feature")
        assert feature.prefix == "feat/"
        assert feature.downstream_strategy == "rebase"
        assert feature.start_point == "develop"
        release = registry.get("release")
        assert release.creates_tag and release.tag_prefix == "v"
        assert release.delete_remote_by_default is False
        assert registry.get("develop").auto_update

    def test_prefix_defaults_to_name(self):
        registry = BranchTypeRegistry.from_git_config(
            {
                "gitflow.branch.main.type": "base",
                "gitflow.branch.chore.type": "topic",
                "gitflow.branch.chore.parent": "main",
            }
        )
        assert registry.get("chore").prefix == "chore/"

    def test_empty_config_falls_back_to_classic(self):
        registry = BranchTypeRegistry.from_git_config({"gitflow.origin": "origin"})
        assert registry.topic_kinds() == BranchTypeRegistry.default().topic_kinds()

    def test_none_strategy_allowed_for_base(self):
        registry = BranchTypeRegistry.from_git_config(
            {
                "gitflow.branch.main.type": "base",
                "gitflow.branch.main.upstreamstrategy": "none",
                "gitflow.branch.feature.type": "topic",
                "gitflow.branch.feature.parent": "main",
            }
        )
        assert registry.get("main").upstream_strategy == "none"


class TestValidation:
    def test_overlapping_prefixes_rejected(self):
        with pytest.raises(BranchConfigurationError, match="overlaps"):
            BranchTypeRegistry(
                [
                    MAIN,
                    BranchTypeConfig(name="feature", parent="main", prefix="f/"),
                    BranchTypeConfig(name="fix", parent="main", prefix="f/ix/"),
                ]
            )

    def test_empty_prefix_rejected(self):
        with pytest.raises(BranchConfigurationError, match="empty prefix"):
            BranchTypeRegistry([MAIN, BranchTypeConfig(name="feature", parent="main")])

    def test_prefix_needs_separator(self):
        with pytest.raises(BranchConfigurationError, match="separator"):
            BranchTypeRegistry(
                [MAIN, BranchTypeConfig(name="feature", parent="main", prefix="feat")]
            )

    @pytest.mark.parametrize("name", ["main", "develop", "unknown"])
    def test_reserved_topic_names_rejected(self, name):
        with pytest.raises(BranchConfigurationError, match="reserved"):
            BranchTypeRegistry([BranchTypeConfig(name=name, prefix=f"{name}-x/")])

    def test_duplicate_names_rejected(self):
        feature = BranchTypeConfig(name="feature", parent="main", prefix="feature/")
        with pytest.raises(BranchConfigurationError, match="twice"):
            BranchTypeRegistry([MAIN, feature, feature])

    def test_invalid_strategy_rejected(self):
        with pytest.raises(BranchConfigurationError, match="upstream strategy"):
            BranchTypeRegistry(
                [
                    MAIN,
                    BranchTypeConfig(
                        name="feature",
                        parent="main",
                        prefix="feature/",
                        upstream_strategy="octopus",
                    ),
                ]
            )

    def test_squash_is_not_a_downstream_strategy(self):
        with pytest.raises(BranchConfigurationError, match="downstream strategy"):
            BranchTypeRegistry(
                [
                    MAIN,
                    BranchTypeConfig(
                        name="feature",
                        parent="main",
                        prefix="feature/",
                        downstream_strategy="squash",
                    ),
                ]
            )

    def test_unknown_parent_only_warns(self):
        registry = BranchTypeRegistry(
            [BranchTypeConfig(name="feature", parent="trunk", prefix="feature/")]
        )
        assert registry.is_topic("feature")
