"""Operation records emitted while mapping the backup.

The ordered operation stream is the auditable output of a run: trace
lines for humans, plus the find/create/delete steps with their fields.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from b2r.type_definitions import EntityKind, OperationAction


class Operation(BaseModel):
    """A single step of the import (or undo) script."""

    model_config = ConfigDict(frozen=True)

    action: OperationAction
    entity: EntityKind | None = None
    source_id: str | None = None
    target_id: int | None = None
    fields: dict[str, Any] = Field(default_factory=dict)
    message: str = ""

    @classmethod
    def trace(cls, message: str, *, entity: EntityKind | None = None, source_id: str | None = None) -> "Operation":
        return cls(action="trace", entity=entity, source_id=source_id, message=message)

    @classmethod
    def delete_project(cls, project_id: int) -> "Operation":
        return cls(
            action="delete",
            entity="project",
            target_id=project_id,
            message=f"Delete project ID {project_id}",
        )

    def describe(self) -> str:
        """One-line human-readable rendering."""
        if self.action == "trace":
            return self.message
        parts = [self.action.upper(), self.entity or ""]
        if self.source_id is not None:
            parts.append(f"source={self.source_id}")
        if self.target_id is not None:
            parts.append(f"id={self.target_id}")
        if self.fields:
            rendered = ", ".join(f"{key}={value!r}" for key, value in self.fields.items())
            parts.append(f"[{rendered}]")
        return " ".join(part for part in parts if part)

    def to_line(self) -> str:
        """Render as one line of the newline-delimited JSON script."""
        return self.model_dump_json(exclude_defaults=True)
