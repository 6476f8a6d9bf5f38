"""Registry of branch kinds keyed by name.

Branch kinds are data: each entry is a ``BranchTypeConfig`` read from the
repository's ``gitflow.branch.<name>.<key>`` settings, kept in the order
they were registered. Prefix overlaps are rejected when the registry is
built so classification never has to break ties.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from ..core.constants import BaseKinds, MergeStrategies
from ..core.exceptions import BranchConfigurationError, UnknownBranchTypeError
from ..core.types import BranchTypeConfig
from ..io.logger import get_logger
from .defaults import CLASSIC

logger = get_logger("registry")

_RESERVED_KINDS = (BaseKinds.MAIN, BaseKinds.DEVELOP, BaseKinds.UNKNOWN)
_TRUE_VALUES = ("true", "yes", "on", "1")


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


class BranchTypeRegistry:
    """Branch kinds in registration order."""

    def __init__(self, types: Iterable[BranchTypeConfig]):
        self._types: Dict[str, BranchTypeConfig] = {}
        for config in types:
            if config.name in self._types:
                raise BranchConfigurationError(
                    f"Branch type '{config.name}' is defined twice"
                )
            self._types[config.name] = config
        self._validate()

    @classmethod
    def default(cls) -> "BranchTypeRegistry":
        return cls(CLASSIC)

    @classmethod
    def from_git_config(cls, entries: Dict[str, str]) -> "BranchTypeRegistry":
        """Build from ``git config --get-regexp ^gitflow\\.branch\\.`` output.

        Falls back to the classic preset when no branch is defined.
        """
        raw: Dict[str, Dict[str, str]] = {}
        for key, value in entries.items():
            parts = key.split(".")
            if len(parts) < 4 or parts[0] != "gitflow" or parts[1] != "branch":
                continue
            name = ".".join(parts[2:-1])
            raw.setdefault(name, {})[parts[-1].lower()] = value

        if not raw:
            logger.debug("No gitflow.branch definitions, using classic preset")
            return cls.default()

        types = []
        for name, values in raw.items():
            is_base = values.get("type", "topic").lower() == "base"
            types.append(
                BranchTypeConfig(
                    name=name,
                    base=is_base,
                    parent=values.get("parent"),
                    start_point=values.get("startpoint", values.get("parent")),
                    upstream_strategy=values.get(
                        "upstreamstrategy", MergeStrategies.MERGE
                    ).lower(),
                    downstream_strategy=values.get(
                        "downstreamstrategy", MergeStrategies.MERGE
                    ).lower(),
                    auto_update=_as_bool(values.get("autoupdate"), False),
                    prefix="" if is_base else values.get("prefix", f"{name}/"),
                    creates_tag=_as_bool(values.get("tag"), False),
                    tag_prefix=values.get("tagprefix", ""),
                    delete_remote_by_default=_as_bool(values.get("deleteremote"), True),
                )
            )
        return cls(types)

    def _validate(self) -> None:
        upstream = (*MergeStrategies.UPSTREAM, MergeStrategies.NONE)
        downstream = (*MergeStrategies.DOWNSTREAM, MergeStrategies.NONE)
        seen: List[Tuple[str, str]] = []

        for config in self._types.values():
            if config.upstream_strategy not in upstream:
                raise BranchConfigurationError(
                    f"Invalid upstream strategy '{config.upstream_strategy}' "
                    f"for '{config.name}'. Must be one of: {', '.join(upstream)}"
                )
            if config.downstream_strategy not in downstream:
                raise BranchConfigurationError(
                    f"Invalid downstream strategy '{config.downstream_strategy}' "
                    f"for '{config.name}'. Must be one of: {', '.join(downstream)}"
                )
            if config.base:
                continue

            if config.name in _RESERVED_KINDS:
                raise BranchConfigurationError(
                    f"'{config.name}' is reserved and cannot name a topic branch type"
                )
            prefix = config.prefix
            if not prefix:
                raise BranchConfigurationError(
                    f"Topic branch type '{config.name}' has an empty prefix"
                )
            if prefix[-1].isalnum():
                raise BranchConfigurationError(
                    f"Prefix '{prefix}' of '{config.name}' must end with a "
                    f"separator such as '/'"
                )
            for other_name, other_prefix in seen:
                if prefix.startswith(other_prefix) or other_prefix.startswith(prefix):
                    raise BranchConfigurationError(
                        f"Prefix '{prefix}' of '{config.name}' overlaps "
                        f"prefix '{other_prefix}' of '{other_name}'"
                    )
            seen.append((config.name, prefix))

        for config in self._types.values():
            if config.parent and config.parent not in self._types:
                logger.warning(
                    f"Branch type '{config.name}' has unknown parent '{config.parent}'"
                )

    def get(self, kind: str) -> BranchTypeConfig:
        try:
            return self._types[kind]
        except KeyError:
            raise UnknownBranchTypeError(kind) from None

    def __contains__(self, kind: object) -> bool:
        return kind in self._types

    def __iter__(self):
        return iter(self._types.values())

    def topic_types(self) -> List[BranchTypeConfig]:
        return [c for c in self._types.values() if not c.base]

    def topic_kinds(self) -> Tuple[str, ...]:
        return tuple(c.name for c in self.topic_types())

    def is_topic(self, kind: str) -> bool:
        return kind in self._types and not self._types[kind].base

    @property
    def main_names(self) -> Tuple[str, ...]:
        """Branch names filling the main role (root base plus aliases)."""
        roots = [c.name for c in self._types.values() if c.base and not c.parent]
        names = list(roots)
        for alias in BaseKinds.MAIN_ALIASES:
            if alias not in names:
                names.append(alias)
        return tuple(names)

    @property
    def develop_names(self) -> Tuple[str, ...]:
        """Branch names filling the develop role (non-root bases)."""
        main_names = self.main_names
        return tuple(
            c.name
            for c in self._types.values()
            if c.base and c.parent and c.name not in main_names
        )
