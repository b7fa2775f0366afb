"""Redmine-side records produced by the entity mapper.

Field models hold the values of a record about to be created; scope
models hold the key used to look up an existing record first.
"""

from pydantic import BaseModel, ConfigDict, Field

from b2r.type_definitions import UserRef


class ProjectFields(BaseModel):
    """Values of a new Redmine project."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    identifier: str
    enabled_modules: list[str] = Field(default_factory=list)
    trackers: list[str] = Field(default_factory=list)
    parent_id: int | None = None


class BoardFields(BaseModel):
    """Values of the single board attached to a project."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""


class MessageFields(BaseModel):
    """Values of a forum message (post) or reply (comment)."""

    model_config = ConfigDict(frozen=True)

    board_id: int
    subject: str
    content: str = ""
    author_id: UserRef
    created_on: str = ""
    parent_id: int | None = None


class IssueFields(BaseModel):
    """Values of an issue (todo list) or sub-issue (todo item)."""

    model_config = ConfigDict(frozen=True)

    project_id: int
    subject: str
    description: str = ""
    status: str
    tracker: str
    author_id: UserRef
    assigned_to_id: UserRef | None = None
    parent_issue_id: int | None = None
    created_on: str = ""


class JournalFields(BaseModel):
    """Values of a journal note; never matched, always created."""

    model_config = ConfigDict(frozen=True)

    issue_id: int
    notes: str = ""
    user_id: UserRef
    created_on: str = ""


class MessageScope(BaseModel):
    """Lookup key of a message; ``None`` members are not constrained."""

    model_config = ConfigDict(frozen=True)

    subject: str
    board_id: int | None = None
    parent_id: int | None = None
    project_id: int | None = None
    created_on: str | None = None


class IssueScope(BaseModel):
    """Lookup key of an issue; ``None`` members are not constrained."""

    model_config = ConfigDict(frozen=True)

    subject: str
    project_id: int | None = None
    parent_issue_id: int | None = None
