"""Settings schema for the Basecamp to Redmine import.

Pydantic settings model holding every value the import treats as fixed
input: field length limits, tracker and status names, include/exclude id
sets, the static user mapping and the rollback toggle.
"""

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Import settings with validation and environment variable support."""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="forbid",
        env_prefix="B2R_",
    )

    # ========================================================================
    # REDMINE FIELD LIMITS (validates_length_of in project/issue/message/board)
    # ========================================================================

    project_name_length: int = Field(default=30, ge=1, description="Project name limit")
    board_description_length: int = Field(
        default=255, ge=1, description="Board description limit",
    )
    message_subject_length: int = Field(
        default=255, ge=1, description="Message subject limit",
    )
    issue_subject_length: int = Field(default=255, ge=1, description="Issue subject limit")

    ellipsis: str = Field(default="...", description="Center-truncation marker")
    name_append: str = Field(default="", description="Suffix appended to board names")
    reply_prefix: str = Field(default="Re: ", description="Subject prefix of replies")

    # ========================================================================
    # TRACKERS / STATUSES / MODULES
    # ========================================================================

    default_tracker: str = Field(default="Bug", description="Tracker for todo items")
    todo_list_tracker: str = Field(
        default="Todo List", description="Tracker for todo lists",
    )
    default_status: str = Field(default="New", description="Status of open issues")
    closed_status: str = Field(default="Closed", description="Status of completed issues")
    enabled_modules: list[str] = Field(
        default=["issue_tracking", "boards"],
        description="Modules enabled on created projects",
    )

    # ========================================================================
    # SELECTION
    # ========================================================================

    include_only_client_ids: list[str] = Field(
        default_factory=list, description="Only these organizations (empty = all)",
    )
    exclude_client_ids: list[str] = Field(
        default_factory=list, description="Organizations to skip",
    )
    include_only_project_ids: list[str] = Field(
        default_factory=list, description="Only these projects (empty = all)",
    )
    exclude_project_ids: list[str] = Field(
        default_factory=list, description="Projects to skip",
    )

    # ========================================================================
    # PROJECT HIERARCHY
    # ========================================================================

    parent_project_id: int = Field(
        default=0, ge=0, description="Existing Redmine project to nest under (0 = none)",
    )
    company_as_parent: bool = Field(
        default=False, description="Import firm/clients as parent projects",
    )
    company_project_prefix: str = Field(
        default="", description="Prefix of organization board descriptions",
    )
    company_project_prefix_short: str = Field(
        default="", description="Prefix of organization project names",
    )

    # ========================================================================
    # USERS / RUN BEHAVIOUR
    # ========================================================================

    user_mapping: dict[str, int] = Field(
        default_factory=dict, description="Basecamp person id -> Redmine user id",
    )
    on_failure_delete: bool = Field(
        default=False, description="Delete created projects when the run aborts",
    )
    dry_run: bool = Field(default=False, description="Use a throw-away in-memory store")
    log_level: str = Field(default="INFO", description="Logging level")

    data_dir: Path = Field(default=Path("var/data"), description="Data directory")
    output_dir: Path = Field(default=Path("var/output"), description="Output directory")
    store_file: str = Field(
        default="entity_store.json", description="Snapshot file of the JSON entity store",
    )

    @field_validator(
        "include_only_client_ids",
        "exclude_client_ids",
        "include_only_project_ids",
        "exclude_project_ids",
        mode="before",
    )
    @classmethod
    def split_id_list(cls, value: object) -> object:
        """Accept comma-separated strings and numeric ids."""
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        if isinstance(value, (list, tuple, set)):
            return [str(item).strip() for item in value if str(item).strip()]
        return value

    @field_validator("user_mapping", mode="before")
    @classmethod
    def stringify_user_keys(cls, value: object) -> object:
        """YAML reads numeric person ids as ints; keys are always strings."""
        if isinstance(value, dict):
            return {str(key): user_id for key, user_id in value.items()}
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "NOTICE", "WARNING", "ERROR", "CRITICAL", "SUCCESS"}:
            msg = f"Invalid log level: {value}"
            raise ValueError(msg)
        return level

    @model_validator(mode="after")
    def validate_name_limits(self) -> "Settings":
        if len(self.name_append) >= self.project_name_length:
            msg = "name_append must be shorter than project_name_length"
            raise ValueError(msg)
        if len(self.reply_prefix) >= self.message_subject_length:
            msg = "reply_prefix must be shorter than message_subject_length"
            raise ValueError(msg)
        return self
