"""Find-or-create mapping of Basecamp records to Redmine records.

Every mapping step first derives the normalized target values, then looks
up an existing record by its scope key and only creates one when nothing
matches. Reruns over the same backup therefore reuse what an earlier run
created; journals are the exception and are always appended.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel

from b2r.clients.entity_store import EntityStore
from b2r.clients.exceptions import ClientError
from b2r.display import LOGGER_NAME
from b2r.mappings.mappings import Mappings
from b2r.migrations.run_context import RunContext, Thread
from b2r.migrations.undo_planner import UndoPlanner
from b2r.models.component_results import ComponentResult
from b2r.models.migration_error import StoreFailureError
from b2r.models.operations import Operation
from b2r.models.source_records import (
    Comment,
    Organization,
    Post,
    Project,
    TodoItem,
    TodoList,
)
from b2r.models.target_records import (
    BoardFields,
    IssueFields,
    IssueScope,
    JournalFields,
    MessageFields,
    MessageScope,
    ProjectFields,
)
from b2r.schemas.settings import Settings
from b2r.type_definitions import EntityKind
from b2r.utils.emission import OperationSink
from b2r.utils.text import center_truncate, cleanse_html, cleanse_quotes, left, sign, to_slug

logger = logging.getLogger(LOGGER_NAME)

T = TypeVar("T")


class EntityMapper:
    """Maps one Basecamp record at a time onto the entity store."""

    def __init__(
        self,
        settings: Settings,
        store: EntityStore,
        sink: OperationSink,
        context: RunContext,
        mappings: Mappings,
        undo_planner: UndoPlanner,
    ) -> None:
        self.settings = settings
        self.store = store
        self.sink = sink
        self.context = context
        self.mappings = mappings
        self.undo_planner = undo_planner

    @property
    def result(self) -> ComponentResult:
        return self.context.result

    # ------------------------------------------------------------------
    # operation plumbing
    # ------------------------------------------------------------------

    def _trace(self, message: str, entity: EntityKind | None = None, source_id: str | None = None) -> None:
        self.sink.emit(Operation.trace(message, entity=entity, source_id=source_id))

    def _call_store(self, description: str, func: Callable[..., T], *args: Any) -> T:
        try:
            return func(*args)
        except ClientError as e:
            msg = f"{description} failed: {e}"
            raise StoreFailureError(msg) from e

    def _find(
        self,
        entity: EntityKind,
        source_id: str,
        scope: BaseModel | dict[str, Any],
        finder: Callable[..., int | None],
        *args: Any,
    ) -> int | None:
        found = self._call_store(f"Looking up {entity} for Basecamp {source_id}", finder, *args)
        fields = scope if isinstance(scope, dict) else scope.model_dump()
        self.sink.emit(
            Operation(action="find", entity=entity, source_id=source_id, target_id=found, fields=fields)
        )
        return found

    def _create(
        self,
        entity: EntityKind,
        source_id: str,
        fields: BaseModel,
        creator: Callable[..., int],
        *args: Any,
    ) -> int:
        target_id = self._call_store(f"Creating {entity} for Basecamp {source_id}", creator, *args)
        self.sink.emit(
            Operation(
                action="create",
                entity=entity,
                source_id=source_id,
                target_id=target_id,
                fields=fields.model_dump(),
            )
        )
        self.result.count_created(entity)
        return target_id

    # ------------------------------------------------------------------
    # derived values
    # ------------------------------------------------------------------

    def _project_names(self, name: str, short_prefix: str = "", long_prefix: str = "") -> tuple[str, str]:
        """Short project name and board description for an already cleansed name."""
        s = self.settings
        short_name = center_truncate(short_prefix + name, s.project_name_length - len(s.name_append), s.ellipsis)
        board_description = left(long_prefix + name, s.board_description_length)
        return short_name, board_description

    def _subject(self, text: str, limit: int) -> str:
        return center_truncate(text, limit, self.settings.ellipsis)

    def _status(self, complete: bool) -> str:
        return self.settings.closed_status if complete else self.settings.default_status

    def _project_trackers(self) -> list[str]:
        trackers = [self.settings.default_tracker]
        if self.settings.todo_list_tracker not in trackers:
            trackers.append(self.settings.todo_list_tracker)
        return trackers

    def _configured_parent(self) -> int | None:
        return self.settings.parent_project_id or None

    def _parent_for(self, project: Project) -> int | None:
        if self.settings.company_as_parent and project.company_id:
            company_project = self.context.organizations.get(project.company_id)
            if company_project is not None:
                return company_project
        return self._configured_parent()

    # ------------------------------------------------------------------
    # projects and boards
    # ------------------------------------------------------------------

    def _ensure_project(self, source_id: str, fields: ProjectFields, board: BoardFields) -> tuple[int, int]:
        project_id = self._find("project", source_id, {"name": fields.name}, self.store.find_project, fields.name)

        if project_id is None:
            project_id = self._create("project", source_id, fields, self.store.create_project, fields)
            self.undo_planner.record_created_project(project_id)
            board_id = self._create("board", source_id, board, self.store.create_board, project_id, board)
            self._trace(f"Saved as new project ID {project_id} with board ID {board_id}", "project", source_id)
        else:
            self.result.count_existing("project")
            self._trace(f"Exists as project ID {project_id}", "project", source_id)
            board_id = self._find(
                "board", source_id, {"project_id": project_id}, self.store.find_board, project_id
            )
            if board_id is None:
                self._trace("(re-creating board)", "board", source_id)
                board_id = self._create("board", source_id, board, self.store.create_board, project_id, board)
            else:
                self.result.count_existing("board")

        return project_id, board_id

    def skip_organization(self, organization: Organization) -> None:
        self._trace(f"Skipping client {organization.id} ('{organization.name}')", "project", organization.id)

    def skip_project(self, project: Project, reason: str) -> None:
        self._trace(f"Skipping {reason} project {project.id} ('{project.name}')", "project", project.id)
        self.result.skipped_projects.append(project.id)

    def map_organization(self, organization: Organization) -> int:
        """Firm or client as a parent project."""
        s = self.settings
        name = cleanse_quotes(organization.name)
        short_name, board_description = self._project_names(
            name, s.company_project_prefix_short, s.company_project_prefix
        )
        self._trace(
            f"About to create client {organization.id} ('{short_name}') as parent project",
            "project",
            organization.id,
        )
        fields = ProjectFields(
            name=short_name,
            description=name,
            identifier=to_slug(short_name) or f"basecamp-{organization.id}",
            enabled_modules=list(s.enabled_modules),
            trackers=[s.default_tracker],
            parent_id=self._configured_parent(),
        )
        board = BoardFields(name=short_name + s.name_append, description=board_description)
        project_id, _ = self._ensure_project(organization.id, fields, board)
        self.context.claim("organizations", organization.id, project_id)
        return project_id

    def map_project(self, project: Project) -> int:
        s = self.settings
        name = cleanse_quotes(project.name)
        short_name, board_description = self._project_names(name)
        self._trace(f"About to create project {project.id} ('{short_name}')", "project", project.id)
        fields = ProjectFields(
            name=short_name,
            description=board_description,
            identifier=to_slug(short_name) or f"basecamp-{project.id}",
            enabled_modules=list(s.enabled_modules),
            trackers=self._project_trackers(),
            parent_id=self._parent_for(project),
        )
        board = BoardFields(name=short_name + s.name_append, description=board_description)
        project_id, board_id = self._ensure_project(project.id, fields, board)
        self.context.claim("projects", project.id, project_id)
        self.context.boards[project.id] = board_id
        return project_id

    # ------------------------------------------------------------------
    # messages
    # ------------------------------------------------------------------

    def map_post(self, post: Post) -> int:
        s = self.settings
        project_id = self.context.resolve(
            "projects", post.project_id, kind="post", source_id=post.id, parent_kind="project"
        )
        board_id = self.context.boards[post.project_id]
        subject = self._subject(
            cleanse_html(cleanse_quotes(post.title)), s.message_subject_length - len(s.reply_prefix)
        )
        self._trace(
            f"About to create post {post.id} as message under project {post.project_id}",
            "message",
            post.id,
        )

        scope = MessageScope(subject=subject, board_id=board_id)
        message_id = self._find("message", post.id, scope, self.store.find_message, scope)
        if message_id is None:
            fields = MessageFields(
                board_id=board_id,
                subject=subject,
                content=sign(cleanse_html(cleanse_quotes(post.body)), cleanse_quotes(post.author_name)),
                author_id=self.mappings.get_user_id(post.author_id),
                created_on=post.posted_on,
            )
            message_id = self._create("message", post.id, fields, self.store.create_message, fields)
            self._trace(f"Saved as new message ID {message_id}", "message", post.id)
        else:
            self.result.count_existing("message")
            self._trace(f"Exists as message ID {message_id}", "message", post.id)

        self.context.claim("messages", post.id, message_id)
        self.context.threads[post.id] = Thread(
            message_id=message_id, board_id=board_id, project_id=project_id, subject=subject
        )
        return message_id

    def map_post_comment(self, comment: Comment) -> int:
        parent_id = self.context.resolve(
            "messages", comment.commentable_id, kind="comment", source_id=comment.id, parent_kind="post"
        )
        thread = self.context.threads[comment.commentable_id]
        subject = self.settings.reply_prefix + thread.subject
        self._trace(
            f"About to create post comment {comment.id} as reply to message ID {parent_id}",
            "message",
            comment.id,
        )

        scope = MessageScope(
            subject=subject,
            parent_id=parent_id,
            project_id=thread.project_id,
            created_on=comment.created_at,
        )
        reply_id = self._find("message", comment.id, scope, self.store.find_message, scope)
        if reply_id is None:
            fields = MessageFields(
                board_id=thread.board_id,
                subject=subject,
                content=sign(cleanse_html(cleanse_quotes(comment.body)), cleanse_quotes(comment.author_name)),
                author_id=self.mappings.get_user_id(comment.author_id),
                created_on=comment.created_at,
                parent_id=parent_id,
            )
            reply_id = self._create("message", comment.id, fields, self.store.create_message, fields)
            self._trace(f"Saved as new reply ID {reply_id}", "message", comment.id)
        else:
            self.result.count_existing("message")
            self._trace(f"Exists as reply ID {reply_id}", "message", comment.id)

        self.context.claim("replies", comment.id, reply_id)
        return reply_id

    # ------------------------------------------------------------------
    # issues and journals
    # ------------------------------------------------------------------

    def map_todo_list(self, todo_list: TodoList) -> int:
        s = self.settings
        project_id = self.context.resolve(
            "projects", todo_list.project_id, kind="todo-list", source_id=todo_list.id, parent_kind="project"
        )
        subject = self._subject(cleanse_quotes(todo_list.name), s.issue_subject_length)
        self._trace(
            f"About to create todo list {todo_list.id} as issue under project {todo_list.project_id}",
            "issue",
            todo_list.id,
        )

        scope = IssueScope(subject=subject, project_id=project_id)
        issue_id = self._find("issue", todo_list.id, scope, self.store.find_issue, scope)
        if issue_id is None:
            fields = IssueFields(
                project_id=project_id,
                subject=subject,
                description=cleanse_quotes(todo_list.description),
                status=self._status(todo_list.complete),
                tracker=s.todo_list_tracker,
                author_id=self.mappings.get_user_id(todo_list.creator_id),
            )
            issue_id = self._create("issue", todo_list.id, fields, self.store.create_issue, fields)
            self._trace(f"Saved as new issue ID {issue_id}", "issue", todo_list.id)
        else:
            self.result.count_existing("issue")
            self._trace(f"Exists as issue ID {issue_id}", "issue", todo_list.id)

        self.context.claim("todo_lists", todo_list.id, issue_id)
        self.context.todo_list_projects[todo_list.id] = project_id
        return issue_id

    def map_todo_item(self, item: TodoItem) -> int:
        s = self.settings
        parent_issue_id = self.context.resolve(
            "todo_lists", item.todo_list_id, kind="todo-item", source_id=item.id, parent_kind="todo-list"
        )
        project_id = self.context.todo_list_projects[item.todo_list_id]
        content = cleanse_quotes(item.content)
        subject = self._subject(content, s.issue_subject_length)
        self._trace(
            f"About to create todo item {item.id} as sub-issue of issue ID {parent_issue_id}",
            "issue",
            item.id,
        )

        scope = IssueScope(subject=subject, parent_issue_id=parent_issue_id)
        issue_id = self._find("issue", item.id, scope, self.store.find_issue, scope)
        if issue_id is None:
            assignee = (
                self.mappings.get_user_id(item.responsible_party_id) if item.responsible_party_id else None
            )
            fields = IssueFields(
                project_id=project_id,
                subject=subject,
                description=sign(content, cleanse_quotes(item.creator_name)),
                status=self._status(item.completed),
                tracker=s.default_tracker,
                author_id=self.mappings.get_user_id(item.creator_id),
                assigned_to_id=assignee,
                parent_issue_id=parent_issue_id,
                created_on=item.created_at,
            )
            issue_id = self._create("issue", item.id, fields, self.store.create_issue, fields)
            self._trace(f"Saved as new issue ID {issue_id}", "issue", item.id)
        else:
            self.result.count_existing("issue")
            self._trace(f"Exists as issue ID {issue_id}", "issue", item.id)

        self.context.claim("todos", item.id, issue_id)
        return issue_id

    def map_todo_comment(self, comment: Comment) -> int:
        issue_id = self.context.resolve(
            "todos", comment.commentable_id, kind="comment", source_id=comment.id, parent_kind="todo-item"
        )
        if comment.id in self.context.journals:
            warning = f"Seen journal {comment.id} once before"
            logger.warning(warning)
            self.result.add_warning(warning)

        self._trace(
            f"About to create todo comment {comment.id} as journal of issue ID {issue_id}",
            "journal",
            comment.id,
        )
        fields = JournalFields(
            issue_id=issue_id,
            notes=sign(cleanse_html(comment.body), cleanse_quotes(comment.author_name)),
            user_id=self.mappings.get_user_id(comment.author_id),
            created_on=comment.created_at,
        )
        journal_id = self._create("journal", comment.id, fields, self.store.create_journal, fields)
        self.context.journals[comment.id] = journal_id
        return journal_id
