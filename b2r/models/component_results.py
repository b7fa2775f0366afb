"""Result model of an import run."""

from typing import Any

from pydantic import BaseModel, Field

from b2r.models.operations import Operation
from b2r.type_definitions import EntityKind


class ComponentResult(BaseModel):
    """Counters and outcome of one import (or undo) run."""

    success: bool = False
    message: str = ""
    dry_run: bool = False
    created: dict[str, int] = Field(default_factory=dict)
    existing: dict[str, int] = Field(default_factory=dict)
    skipped_projects: list[str] = Field(default_factory=list)
    undo_plan: list[Operation] = Field(default_factory=list)
    details: dict[str, Any] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def count_created(self, entity: EntityKind) -> None:
        self.created[entity] = self.created.get(entity, 0) + 1

    def count_existing(self, entity: EntityKind) -> None:
        self.existing[entity] = self.existing.get(entity, 0) + 1

    def add_error(self, error: str) -> None:
        """Add an error message to the errors list."""
        self.errors.append(error)

    def add_warning(self, warning: str) -> None:
        """Add a warning message to the warnings list."""
        self.warnings.append(warning)

    @property
    def total_created(self) -> int:
        return sum(self.created.values())
