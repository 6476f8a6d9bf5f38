"""Built-in branch-type presets.

Used when a repository carries no ``gitflow.branch.*`` definitions, and
to describe what each ``git flow init --preset`` produces.
"""

from typing import Dict, List

from ..core.constants import Presets
from ..core.types import BranchTypeConfig


def _topic(name: str, parent: str, **kwargs) -> BranchTypeConfig:
    return BranchTypeConfig(
        name=name,
        parent=parent,
        start_point=kwargs.pop("start_point", parent),
        prefix=kwargs.pop("prefix", f"{name}/"),
        **kwargs,
    )


CLASSIC: List[BranchTypeConfig] = [
    BranchTypeConfig(name="main", base=True),
    BranchTypeConfig(
        name="develop", base=True, parent="main", auto_update=True
    ),
    _topic("feature", "develop", upstream_strategy="merge", downstream_strategy="rebase"),
    _topic("release", "main", start_point="develop", creates_tag=True, tag_prefix="v"),
    _topic("hotfix", "main", creates_tag=True, tag_prefix="v"),
    _topic("support", "main", downstream_strategy="rebase"),
    _topic("bugfix", "develop", upstream_strategy="merge", downstream_strategy="rebase"),
]

GITHUB: List[BranchTypeConfig] = [
    BranchTypeConfig(name="main", base=True),
    _topic("feature", "main", downstream_strategy="rebase"),
]

GITLAB: List[BranchTypeConfig] = [
    BranchTypeConfig(name="production", base=True),
    BranchTypeConfig(name="staging", base=True, parent="production"),
    BranchTypeConfig(name="main", base=True, parent="staging"),
    _topic("feature", "main", downstream_strategy="rebase"),
    _topic("hotfix", "production", creates_tag=True, tag_prefix="v"),
]

PRESETS: Dict[str, List[BranchTypeConfig]] = {
    Presets.CLASSIC: CLASSIC,
    Presets.GITHUB: GITHUB,
    Presets.GITLAB: GITLAB,
}

PRESET_DESCRIPTIONS: Dict[str, str] = {
    Presets.CLASSIC: "Traditional GitFlow with main, develop, feature, release, hotfix",
    Presets.GITHUB: "GitHub Flow with main and feature branches",
    Presets.GITLAB: "GitLab Flow with production, staging, main, feature, and hotfix",
    Presets.CUSTOM: "Custom configuration with interactive setup",
}
