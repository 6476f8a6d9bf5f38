"""Resolve branch-type defaults, persisted overrides and explicit choices.

Every option is resolved on its own, walking three layers from the top:

1. the explicit per-invocation choice,
2. the persisted override for the (kind, operation) pair,
3. the branch type's default.

A layer whose value is unset, or is the ``use-git-config`` sentinel, defers
to the layer below it.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..config.registry import BranchTypeRegistry
from ..io.logger import get_logger
from .constants import (
    USE_GIT_CONFIG,
    FastForwardModes,
    MergeStrategies,
    Operations,
    RetentionModes,
)
from .exceptions import UnknownBranchTypeError
from .types import BranchTypeConfig, OperationOverride

logger = get_logger("resolver")


class Layers:
    """Where a resolved value came from."""

    EXPLICIT = "explicit"
    OVERRIDE = "override"
    DEFAULT = "default"


_RETENTION_FLAGS = {
    RetentionModes.DELETE: None,
    RetentionModes.KEEP: "--keep",
    RetentionModes.KEEP_LOCAL: "--keeplocal",
    RetentionModes.KEEP_REMOTE: "--keepremote",
}

_FAST_FORWARD_FLAGS = {
    FastForwardModes.NO_FF: "--no-ff",
    FastForwardModes.FF: "--ff",
}


@dataclass
class ResolvedOptions:
    """Per-option outcome of one resolution, with provenance."""

    kind: str
    operation: str
    default_strategy: str
    values: Dict[str, Any] = field(default_factory=dict)
    sources: Dict[str, str] = field(default_factory=dict)

    def get(self, option: str, default: Any = None) -> Any:
        value = self.values.get(option)
        return default if value is None else value

    def source(self, option: str) -> Optional[str]:
        return self.sources.get(option)

    @property
    def tag_enabled(self) -> bool:
        return bool(self.values.get("tag"))

    def to_arguments(self) -> List[str]:
        """Render the ordered argument list for the workflow CLI."""
        args: List[str] = []

        base = self.get("base")
        if base:
            args.append(base)

        if self.operation in (Operations.FINISH, Operations.UPDATE):
            args.extend(self._strategy_flags())

        if self.operation == Operations.FINISH:
            ff_flag = _FAST_FORWARD_FLAGS.get(self.get("fast_forward"))
            if ff_flag:
                args.append(ff_flag)

            preserve = self.values.get("preserve_merges")
            if preserve is True:
                args.append("--preserve-merges")
            elif preserve is False:
                args.append("--no-preserve-merges")

            if self.tag_enabled:
                args.append("--tag")
                if self.get("sign_tag"):
                    args.append("--sign")
                    if self.get("signing_key"):
                        args.extend(["--signingkey", self.get("signing_key")])
                message = (self.get("tag_message") or "").strip()
                if message:
                    args.extend(["--message", message])
                elif self.get("tag_message_file"):
                    args.extend(["--messagefile", self.get("tag_message_file")])
            else:
                args.append("--notag")

            retention_flag = _RETENTION_FLAGS[self.get("retention", RetentionModes.DELETE)]
            if retention_flag:
                args.append(retention_flag)

            if self.get("force_delete"):
                args.append("--force-delete")

        if self.operation == Operations.START:
            fetch = self.values.get("fetch")
            if fetch is True:
                args.append("--fetch")
            elif fetch is False:
                args.append("--no-fetch")

        return args

    def _strategy_flags(self) -> List[str]:
        strategy = self.get("merge", MergeStrategies.MERGE)
        if strategy == MergeStrategies.REBASE:
            return ["--rebase"]
        if strategy == MergeStrategies.SQUASH:
            return ["--squash"]
        # Plain merge only needs a flag when the branch type defaults elsewhere
        if self.default_strategy in (MergeStrategies.REBASE, MergeStrategies.SQUASH):
            return [f"--no-{self.default_strategy}"]
        return []


def _is_set(value: Any) -> bool:
    if isinstance(value, str) and not value.strip():
        return False
    return value is not None and value != USE_GIT_CONFIG


class SettingsResolver:
    """Turns (kind, operation) plus overrides into workflow CLI arguments."""

    def __init__(self, registry: BranchTypeRegistry):
        self.registry = registry

    def resolve(
        self,
        kind: str,
        operation: str,
        overrides: Optional[OperationOverride] = None,
        explicit: Optional[OperationOverride] = None,
    ) -> List[str]:
        """Resolve the ordered argument list for one command.

        Raises:
            UnknownBranchTypeError: ``kind`` is not a registered topic kind
            ValueError: ``operation`` or an option value is not recognised
        """
        options = self.resolve_options(kind, operation, overrides, explicit)
        arguments = options.to_arguments()
        logger.debug(f"Resolved {kind} {operation}: {arguments}")
        return arguments

    def resolve_options(
        self,
        kind: str,
        operation: str,
        overrides: Optional[OperationOverride] = None,
        explicit: Optional[OperationOverride] = None,
    ) -> ResolvedOptions:
        config = self._topic_config(kind)
        if operation not in Operations.ALL:
            raise ValueError(
                f"Invalid operation '{operation}'. "
                f"Must be one of: {', '.join(Operations.ALL)}"
            )
        overrides = overrides or OperationOverride()
        explicit = explicit or OperationOverride()

        if operation == Operations.FINISH:
            default_strategy = config.upstream_strategy
        elif operation == Operations.UPDATE:
            default_strategy = config.downstream_strategy
        else:
            default_strategy = MergeStrategies.MERGE

        result = ResolvedOptions(
            kind=kind, operation=operation, default_strategy=default_strategy
        )
        for option, default in self._defaults_for(config, operation):
            value, source = self._pick(option, explicit, overrides, default)
            result.values[option] = value
            result.sources[option] = source

        self._validate(result)
        return result

    def _topic_config(self, kind: str) -> BranchTypeConfig:
        config = self.registry.get(kind)
        if config.base:
            raise UnknownBranchTypeError(kind)
        return config

    def _defaults_for(
        self, config: BranchTypeConfig, operation: str
    ) -> List[Tuple[str, Any]]:
        if operation == Operations.FINISH:
            return [
                ("merge", config.upstream_strategy),
                ("fast_forward", None),
                ("preserve_merges", None),
                ("tag", config.creates_tag),
                ("sign_tag", False),
                ("signing_key", None),
                ("tag_message", None),
                ("tag_message_file", None),
                ("prompt_for_tag_message", False),
                ("retention", RetentionModes.DELETE),
                ("force_delete", False),
            ]
        if operation == Operations.UPDATE:
            return [("merge", config.downstream_strategy)]
        return [("base", None), ("fetch", None)]

    @staticmethod
    def _pick(
        option: str,
        explicit: OperationOverride,
        overrides: OperationOverride,
        default: Any,
    ) -> Tuple[Any, str]:
        for layer, source in ((explicit, Layers.EXPLICIT), (overrides, Layers.OVERRIDE)):
            value = getattr(layer, option)
            if _is_set(value):
                return value, source
        return default, Layers.DEFAULT

    @staticmethod
    def _validate(options: ResolvedOptions) -> None:
        strategy = options.values.get("merge")
        if strategy is not None:
            allowed = (
                MergeStrategies.UPSTREAM
                if options.operation == Operations.FINISH
                else MergeStrategies.DOWNSTREAM
            )
            if strategy not in (*allowed, MergeStrategies.NONE):
                raise ValueError(
                    f"Invalid merge strategy '{strategy}' for {options.operation}. "
                    f"Must be one of: {', '.join(allowed)}"
                )

        retention = options.values.get("retention")
        if retention is not None and retention not in RetentionModes.ALL:
            raise ValueError(
                f"Invalid retention mode '{retention}'. "
                f"Must be one of: {', '.join(RetentionModes.ALL)}"
            )

        fast_forward = options.values.get("fast_forward")
        if fast_forward is not None and fast_forward not in FastForwardModes.ALL:
            raise ValueError(
                f"Invalid fast-forward mode '{fast_forward}'. "
                f"Must be one of: {', '.join(FastForwardModes.ALL)}"
            )
