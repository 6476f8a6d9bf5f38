"""Core constants for flowkit."""


class BaseKinds:
    """Kinds for long-lived branches."""

    MAIN = "main"
    DEVELOP = "develop"
    UNKNOWN = "unknown"

    # Names that always fill the main role
    MAIN_ALIASES = ("main", "master")


class Actions:
    """Per-kind actions understood by the workflow CLI."""

    START = "start"
    FINISH = "finish"
    UPDATE = "update"
    CHECKOUT = "checkout"
    DELETE = "delete"
    RENAME = "rename"
    LIST = "list"

    ALL = (START, FINISH, UPDATE, CHECKOUT, DELETE, RENAME, LIST)
    # Actions that cannot be issued without a branch name
    REQUIRES_TARGET = (START, CHECKOUT, DELETE, RENAME)


class ShorthandActions:
    """Kind-agnostic actions applied to the checked-out topic branch."""

    FINISH = "finish"
    DELETE = "delete"
    REBASE = "rebase"
    UPDATE = "update"
    RENAME = "rename"
    PUBLISH = "publish"

    ALL = (FINISH, DELETE, REBASE, UPDATE, RENAME, PUBLISH)


class GlobalActions:
    """Repository-wide commands."""

    INIT = "init"
    OVERVIEW = "overview"
    CONFIG = "config"

    ALL = (INIT, OVERVIEW, CONFIG)


class Operations:
    """Operations that accept persisted overrides."""

    START = "start"
    FINISH = "finish"
    UPDATE = "update"

    ALL = (START, FINISH, UPDATE)


# Sentinel meaning "defer to the next lower layer"
USE_GIT_CONFIG = "use-git-config"


class MergeStrategies:
    MERGE = "merge"
    REBASE = "rebase"
    SQUASH = "squash"

    # Base branches may declare no integration at all
    NONE = "none"

    UPSTREAM = (MERGE, REBASE, SQUASH)
    DOWNSTREAM = (MERGE, REBASE)


class RetentionModes:
    DELETE = "delete"
    KEEP = "keep"
    KEEP_LOCAL = "keep-local"
    KEEP_REMOTE = "keep-remote"

    ALL = (DELETE, KEEP, KEEP_LOCAL, KEEP_REMOTE)


class FastForwardModes:
    NO_FF = "no-ff"
    FF = "ff"

    ALL = (NO_FF, FF)


class Presets:
    """Presets accepted by `git flow init`."""

    CLASSIC = "classic"
    GITHUB = "github"
    GITLAB = "gitlab"
    CUSTOM = "custom"

    ALL = (CLASSIC, GITHUB, GITLAB, CUSTOM)


class GitFlowKeys:
    """Keys in the workflow CLI's persisted git configuration."""

    BRANCH_PATTERN = r"^gitflow\.branch\."
    ORIGIN = "gitflow.origin"

    @staticmethod
    def delete_remote(kind: str) -> str:
        return f"gitflow.{kind}.finish.deleteremote"


class ContextKeys:
    """Names of the published UI-state flags."""

    IS_ON_TOPIC_BRANCH = "isOnTopicBranch"


# System defaults
class SystemDefaults:
    """System-wide default values."""

    MAX_EVENT_HISTORY = 500  # Maximum events to keep in memory
    DEBOUNCE_SECONDS = 1.0  # Quiet window for save-triggered refreshes
    DEFAULT_REMOTE = "origin"
    GIT_METADATA_DIR = ".git"
