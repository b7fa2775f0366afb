"""Records read from a Basecamp XML backup.

Plain slotted dataclasses; the hierarchy walker fills them from the
direct child elements of each XML node. Values are raw text, cleanup
happens in the entity mapper.
"""

from dataclasses import dataclass


@dataclass(slots=True)
class Organization:
    """A Basecamp firm or client company."""

    id: str
    name: str


@dataclass(slots=True)
class Project:
    """A Basecamp project."""

    id: str
    name: str
    status: str = "active"
    company_id: str | None = None

    @property
    def archived(self) -> bool:
        return self.status == "archived"


@dataclass(slots=True)
class Post:
    """A message board post."""

    id: str
    project_id: str
    title: str
    body: str = ""
    author_id: str = ""
    author_name: str = ""
    posted_on: str = ""


@dataclass(slots=True)
class Comment:
    """A comment on a post or on a todo item."""

    id: str
    commentable_id: str
    commentable_type: str
    body: str = ""
    author_id: str = ""
    author_name: str = ""
    created_at: str = ""


@dataclass(slots=True)
class TodoList:
    """A todo list; imported as a parent issue."""

    id: str
    project_id: str
    name: str
    description: str = ""
    complete: bool = False
    creator_id: str = ""


@dataclass(slots=True)
class TodoItem:
    """A todo item; imported as a sub-issue of its list."""

    id: str
    todo_list_id: str
    content: str
    completed: bool = False
    created_at: str = ""
    responsible_party_id: str = ""
    creator_id: str = ""
    creator_name: str = ""
    comments_count: str | None = None

    @property
    def has_comments(self) -> bool:
        """False only when the backup states there are no comments."""
        return self.comments_count != "0"
