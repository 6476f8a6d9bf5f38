"""Core data types for flowkit.

This module defines the structures passed between the classifier, the
settings resolver, the command builder and the state synchronizer.
"""

import shlex
from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional, Tuple, Union

from .constants import BaseKinds, ContextKeys


@dataclass(frozen=True)
class BranchState:
    """The checked-out branch, classified by kind.

    Derived from the current ref on every query. Never cache one across an
    operation that may switch branches.
    """

    kind: str
    short_name: str
    full_ref_name: str

    @property
    def is_topic(self) -> bool:
        return self.kind not in (BaseKinds.MAIN, BaseKinds.DEVELOP, BaseKinds.UNKNOWN)


@dataclass(frozen=True)
class BranchTypeConfig:
    """Authoritative default behaviour for one branch kind."""

    name: str
    base: bool = False
    parent: Optional[str] = None
    start_point: Optional[str] = None
    upstream_strategy: str = "merge"
    downstream_strategy: str = "merge"
    auto_update: bool = False
    prefix: str = ""
    creates_tag: bool = False
    tag_prefix: str = ""
    delete_remote_by_default: bool = True


@dataclass
class OperationOverride:
    """Optional per-(kind, operation) settings.

    ``None`` leaves an option unset. The same shape carries explicit
    per-invocation choices, which take precedence over persisted ones.
    """

    merge: Optional[str] = None
    tag: Optional[bool] = None
    sign_tag: Optional[bool] = None
    signing_key: Optional[str] = None
    tag_message: Optional[str] = None
    tag_message_file: Optional[str] = None
    prompt_for_tag_message: Optional[bool] = None
    retention: Optional[str] = None
    force_delete: Optional[bool] = None
    fast_forward: Optional[str] = None
    preserve_merges: Union[bool, str, None] = None
    fetch: Optional[bool] = None
    base: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Optional[Dict]) -> "OperationOverride":
        """Build from a settings mapping, ignoring unrelated keys."""
        if not data:
            return cls()
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass
class UIStateSnapshot:
    """Published summary of the repository's branch state."""

    current_kind: str = BaseKinds.UNKNOWN
    exists_by_kind: Dict[str, bool] = field(default_factory=dict)
    branch: Optional[BranchState] = None
    sequence: int = 0

    @classmethod
    def empty(cls, kinds: Tuple[str, ...] = (), sequence: int = 0) -> "UIStateSnapshot":
        """Conservative snapshot: unknown branch, nothing exists."""
        return cls(
            current_kind=BaseKinds.UNKNOWN,
            exists_by_kind={kind: False for kind in kinds},
            sequence=sequence,
        )

    @property
    def is_on_topic_branch(self) -> bool:
        return self.current_kind not in (
            BaseKinds.MAIN,
            BaseKinds.DEVELOP,
            BaseKinds.UNKNOWN,
        )

    def context_flags(self) -> Dict[str, bool]:
        """Named boolean flags used to gate command visibility."""
        flags = {ContextKeys.IS_ON_TOPIC_BRANCH: self.is_on_topic_branch}
        for kind in self.exists_by_kind:
            flags[f"isOn{kind.capitalize()}Branch"] = self.current_kind == kind
        for kind, exists in self.exists_by_kind.items():
            flags[f"{pluralize(kind)}Exist"] = exists
        return flags


@dataclass(frozen=True)
class Command:
    """A fully built workflow CLI invocation."""

    kind: Optional[str]
    action: str
    target: Optional[str] = None
    arguments: Tuple[str, ...] = ()

    @property
    def subcommand(self) -> List[str]:
        """Everything after ``git flow``."""
        parts = [self.kind, self.action] if self.kind else [self.action]
        if self.target is not None:
            parts.append(self.target)
        parts.extend(self.arguments)
        return parts

    @property
    def argv(self) -> List[str]:
        return ["git", "flow", *self.subcommand]

    @property
    def command_line(self) -> str:
        return shlex.join(self.argv)

    def __str__(self) -> str:
        return self.command_line


@dataclass
class CommandResult:
    """Output of a finished external command."""

    stdout: str = ""
    stderr: str = ""
    returncode: int = 0

    @property
    def lines(self) -> List[str]:
        """Non-empty stripped stdout lines."""
        return [line.strip() for line in self.stdout.splitlines() if line.strip()]


def pluralize(kind: str) -> str:
    """``feature`` -> ``features``, ``hotfix`` -> ``hotfixes``."""
    if kind.endswith(("s", "x", "z", "ch", "sh")):
        return f"{kind}es"
    return f"{kind}s"
