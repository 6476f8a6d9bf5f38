"""Settings management for flowkit."""

import copy
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from ..core.constants import Operations, SystemDefaults
from ..core.types import OperationOverride
from ..io.directories import get_repository_settings_path, get_user_settings_path
from ..io.logger import get_logger
from .schema import FlowkitConfig

logger = get_logger("config")


class Config:
    """Layered settings: built-in defaults, user file, repository file."""

    DEFAULT_CONFIG = {
        "remote": SystemDefaults.DEFAULT_REMOTE,
        "refresh": {
            "debounce_seconds": SystemDefaults.DEBOUNCE_SECONDS,
            "watch": True,
        },
        "logging": {"level": "WARNING", "file": None},
        "branches": {
            "release": {"finish": {"prompt_for_tag_message": True}},
            "hotfix": {"finish": {"prompt_for_tag_message": True}},
        },
    }

    def __init__(
        self, config_path: Optional[Path] = None, workspace: Optional[Path] = None
    ):
        try:
            validated_config = FlowkitConfig(**self.DEFAULT_CONFIG)
            self.config = validated_config.model_dump()
        except ValidationError as e:
            logger.error("Default configuration is invalid!")
            raise RuntimeError("Invalid default configuration") from e

        self.config_path = config_path
        self.loaded_paths = []

        if config_path:
            self.load_from_file(config_path)
        else:
            user_path = get_user_settings_path()
            if user_path.exists():
                logger.debug(f"Loading settings from: {user_path}")
                self.load_from_file(user_path)

        # Repository settings sit on top of user settings
        if workspace:
            repo_path = get_repository_settings_path(workspace)
            if repo_path.exists():
                logger.debug(f"Loading repository settings from: {repo_path}")
                self.load_from_file(repo_path)

    @staticmethod
    def _write_example_config(path: Path):
        """Write example settings file."""
        example_config = """# flowkit settings
# Values left out (or set to use-git-config) defer to the branch
# definitions git flow stores in the repository's git config.

remote: origin

refresh:
  debounce_seconds: 1.0   # Quiet window after changes under .git/
  watch: true

logging:
  level: WARNING

branches:
  feature:
    delete_remote_on_finish: true
    finish:
      merge: use-git-config   # merge, rebase, squash or use-git-config
      retention: delete       # delete, keep, keep-local or keep-remote
      force_delete: false
    update:
      merge: rebase
    start:
      fetch: true
  release:
    finish:
      tag: true
      sign_tag: false
      prompt_for_tag_message: true
      fast_forward: no-ff
  hotfix:
    finish:
      tag: true
      prompt_for_tag_message: true
"""
        with open(path, "w") as f:
            f.write(example_config)

    def load_from_file(self, path: Path):
        """Merge settings from a YAML file over the current ones."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            user_config = yaml.safe_load(f)

        if user_config:
            if not isinstance(user_config, dict):
                raise ValueError(f"Invalid configuration in {path}: expected a mapping")
            merged_config = self._deep_merge(self.config, user_config)

            try:
                validated_config = FlowkitConfig(**merged_config)
                self.config = validated_config.model_dump()
                self.config_path = path
                self.loaded_paths.append(path)
            except ValidationError as e:
                logger.error(f"Configuration validation failed: {path}")
                details = []
                for err in e.errors():
                    field_path = " → ".join(str(loc) for loc in err["loc"])
                    details.append(f"{field_path}: {err['msg']}")
                raise ValueError(
                    f"Invalid configuration in {path}\n" + "\n".join(details)
                ) from e

    def _deep_merge(self, base: Dict, update: Dict) -> Dict:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in update.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get config value using dot notation (e.g., 'refresh.watch')."""
        keys = key_path.split(".")
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any):
        """Set config value using dot notation."""
        test_config = copy.deepcopy(self.config)

        keys = key_path.split(".")
        config = test_config

        for key in keys[:-1]:
            if key not in config or config[key] is None:
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

        try:
            validated_config = FlowkitConfig(**test_config)
            self.config = validated_config.model_dump()
        except ValidationError as e:
            for err in e.errors():
                err_path = ".".join(str(loc) for loc in err["loc"])
                if err_path == key_path or err_path.startswith(key_path):
                    raise ValueError(
                        f"Invalid value for {key_path}: {err['msg']}"
                    ) from e
            raise ValueError(
                f"Configuration validation failed after setting {key_path}"
            ) from e

    def save(self, path: Optional[Path] = None):
        """Save configuration to file."""
        save_path = path or self.config_path
        if not save_path:
            save_path = get_user_settings_path()
        save_path = Path(save_path)

        save_path.parent.mkdir(parents=True, exist_ok=True)

        with open(save_path, "w") as f:
            yaml.safe_dump(self.config, f, default_flow_style=False)

    @property
    def remote(self) -> str:
        return self.get("remote", SystemDefaults.DEFAULT_REMOTE)

    @property
    def debounce_seconds(self) -> float:
        return self.get("refresh.debounce_seconds", SystemDefaults.DEBOUNCE_SECONDS)

    def operation_override(self, kind: str, operation: str) -> OperationOverride:
        """Persisted overrides for one (kind, operation) pair."""
        if operation not in Operations.ALL:
            raise ValueError(f"Invalid operation '{operation}'")
        return OperationOverride.from_mapping(self.get(f"branches.{kind}.{operation}"))

    def delete_remote_on_finish(self, kind: str) -> Optional[bool]:
        """User preference for deleting the remote branch, if any."""
        return self.get(f"branches.{kind}.delete_remote_on_finish")

    def to_dict(self) -> Dict[str, Any]:
        """Return the full configuration as a dictionary."""
        return copy.deepcopy(self.config)
