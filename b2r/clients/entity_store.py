"""Contract of the Redmine-side entity store.

The mapper only ever talks to this interface. Finders return the target
id of the first matching record or ``None``; creators return the new id.
Implementations raise ``ClientError`` subclasses on failure.
"""

from abc import ABC, abstractmethod

from b2r.models.target_records import (
    BoardFields,
    IssueFields,
    IssueScope,
    JournalFields,
    MessageFields,
    MessageScope,
    ProjectFields,
)


class EntityStore(ABC):
    """Find/create access to projects, boards, messages, issues and journals."""

    @abstractmethod
    def find_project(self, name: str) -> int | None:
        """Id of the project with exactly this name."""

    @abstractmethod
    def create_project(self, fields: ProjectFields) -> int: ...

    @abstractmethod
    def find_board(self, project_id: int) -> int | None:
        """Id of the (first) board of a project."""

    @abstractmethod
    def create_board(self, project_id: int, fields: BoardFields) -> int: ...

    @abstractmethod
    def find_message(self, scope: MessageScope) -> int | None: ...

    @abstractmethod
    def create_message(self, fields: MessageFields) -> int: ...

    @abstractmethod
    def find_issue(self, scope: IssueScope) -> int | None: ...

    @abstractmethod
    def create_issue(self, fields: IssueFields) -> int: ...

    @abstractmethod
    def create_journal(self, fields: JournalFields) -> int: ...

    @abstractmethod
    def delete_project(self, project_id: int) -> None:
        """Delete a project together with everything that belongs to it."""
