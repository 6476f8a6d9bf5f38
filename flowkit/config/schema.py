"""Pydantic schema for settings validation."""

from typing import Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from ..core.constants import SystemDefaults

UpstreamStrategy = Literal["merge", "rebase", "squash", "use-git-config"]
DownstreamStrategy = Literal["merge", "rebase", "use-git-config"]
RetentionMode = Literal["delete", "keep", "keep-local", "keep-remote"]
FastForwardMode = Literal["no-ff", "ff", "use-git-config"]


class FinishSettings(BaseModel):
    """Overrides applied when finishing a branch of one kind."""

    merge: Optional[UpstreamStrategy] = Field(
        default=None, description="How the branch is integrated into its parent"
    )
    tag: Optional[bool] = Field(default=None, description="Create a tag on finish")
    sign_tag: Optional[bool] = Field(default=None, description="Sign the tag")
    signing_key: Optional[str] = Field(default=None, description="GPG key for signing")
    tag_message: Optional[str] = Field(default=None, description="Fixed tag message")
    tag_message_file: Optional[str] = Field(
        default=None, description="File holding the tag message"
    )
    prompt_for_tag_message: Optional[bool] = Field(
        default=None, description="Ask for a tag message when finishing interactively"
    )
    retention: Optional[RetentionMode] = Field(
        default=None, description="What happens to the branch after finishing"
    )
    force_delete: Optional[bool] = Field(
        default=None, description="Force-delete the branch even if unmerged"
    )
    fast_forward: Optional[FastForwardMode] = Field(default=None)
    preserve_merges: Union[bool, Literal["use-git-config"], None] = Field(default=None)


class UpdateSettings(BaseModel):
    """Overrides applied when updating a branch from its parent."""

    merge: Optional[DownstreamStrategy] = Field(default=None)


class StartSettings(BaseModel):
    """Overrides applied when starting a branch."""

    fetch: Optional[bool] = Field(
        default=None, description="Fetch from the remote before starting"
    )
    base: Optional[str] = Field(default=None, description="Ref to start from")


class BranchSettings(BaseModel):
    """Settings for one branch kind."""

    delete_remote_on_finish: Optional[bool] = Field(
        default=None, description="Delete the remote branch when finishing"
    )
    finish: FinishSettings = Field(default_factory=FinishSettings)
    update: UpdateSettings = Field(default_factory=UpdateSettings)
    start: StartSettings = Field(default_factory=StartSettings)


class RefreshSettings(BaseModel):
    """Schema for state refresh behaviour."""

    debounce_seconds: float = Field(
        default=SystemDefaults.DEBOUNCE_SECONDS,
        ge=0.0,
        le=60.0,
        description="Quiet window before a save-triggered refresh runs",
    )
    watch: bool = Field(
        default=True, description="Watch the repository metadata for changes"
    )


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="WARNING")
    file: Optional[str] = Field(default=None)


class FlowkitConfig(BaseModel):
    """Root settings schema."""

    remote: str = Field(
        default=SystemDefaults.DEFAULT_REMOTE, description="Remote used by git flow"
    )
    refresh: RefreshSettings = Field(default_factory=RefreshSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    branches: Dict[str, BranchSettings] = Field(default_factory=dict)

    @field_validator("remote")
    @classmethod
    def validate_remote(cls, v: str) -> str:
        """Remote names cannot be blank or contain whitespace."""
        if not v.strip() or any(c.isspace() for c in v):
            raise ValueError(f"Invalid remote name '{v}'")
        return v
