"""Traversal of a Basecamp XML backup.

Organizations first (when they become parent projects), then every
project with its posts, post comments, todo lists, todo items and todo
comments, strictly in document order. The walker only reads the tree and
decides what takes part; all mapping is delegated to the entity mapper.
"""

import logging
from pathlib import Path

from lxml import etree

from b2r.display import LOGGER_NAME
from b2r.migrations.entity_mapper import EntityMapper
from b2r.migrations.run_context import RunContext
from b2r.models.migration_error import MalformedRecordError
from b2r.models.source_records import (
    Comment,
    Organization,
    Post,
    Project,
    TodoItem,
    TodoList,
)
from b2r.schemas.settings import Settings
from b2r.utils.inclusion import is_included

logger = logging.getLogger(LOGGER_NAME)

POST_COMMENTS = './/comment[commentable-type = "Post"]'
TODO_COMMENTS = './/comment[commentable-type = "TodoItem"]'


def parse_backup(source: Path | str | bytes) -> etree._Element:
    """Parse a backup file (path) or document (bytes) into its root element.

    Raises:
        MalformedRecordError: If the XML cannot be parsed or the file is missing

    """
    try:
        if isinstance(source, bytes):
            return etree.fromstring(source)
        return etree.parse(str(source)).getroot()
    except (etree.XMLSyntaxError, OSError) as e:
        logger.error("Cannot read backup: %s", e)
        raise MalformedRecordError("backup", None, "xml") from e


def _text(node: etree._Element, field: str) -> str | None:
    """Text content of a direct child element, or None if there is none."""
    child = node.find(field)
    if child is None:
        return None
    return "".join(child.itertext())


def _optional(node: etree._Element, field: str, default: str = "") -> str:
    value = _text(node, field)
    return default if value is None else value


def _required(node: etree._Element, kind: str, field: str, source_id: str | None = None) -> str:
    value = _text(node, field)
    if value is None or not value.strip():
        raise MalformedRecordError(kind, source_id, field)
    return value


def _record_id(node: etree._Element, kind: str) -> str:
    return _required(node, kind, "id").strip()


def _flag(node: etree._Element, field: str) -> bool:
    return _optional(node, field).strip().lower() == "true"


def read_organization(node: etree._Element, kind: str) -> Organization:
    source_id = _record_id(node, kind)
    return Organization(id=source_id, name=_required(node, kind, "name", source_id))


def read_project(node: etree._Element) -> Project:
    source_id = _record_id(node, "project")
    company_id = _text(node, "company/id")
    if company_id is None:
        company_id = _text(node, "company-id")
    return Project(
        id=source_id,
        name=_required(node, "project", "name", source_id),
        status=_optional(node, "status").strip() or "active",
        company_id=company_id.strip() if company_id and company_id.strip() else None,
    )


def read_post(node: etree._Element) -> Post:
    source_id = _record_id(node, "post")
    return Post(
        id=source_id,
        project_id=_required(node, "post", "project-id", source_id).strip(),
        title=_required(node, "post", "title", source_id),
        body=_optional(node, "body"),
        author_id=_optional(node, "author-id").strip(),
        author_name=_optional(node, "author-name"),
        posted_on=_optional(node, "posted-on").strip(),
    )


def read_comment(node: etree._Element) -> Comment:
    source_id = _record_id(node, "comment")
    return Comment(
        id=source_id,
        commentable_id=_required(node, "comment", "commentable-id", source_id).strip(),
        commentable_type=_optional(node, "commentable-type").strip(),
        body=_optional(node, "body"),
        author_id=_optional(node, "author-id").strip(),
        author_name=_optional(node, "author-name"),
        created_at=_optional(node, "created-at").strip(),
    )


def read_todo_list(node: etree._Element) -> TodoList:
    source_id = _record_id(node, "todo-list")
    return TodoList(
        id=source_id,
        project_id=_required(node, "todo-list", "project-id", source_id).strip(),
        name=_required(node, "todo-list", "name", source_id),
        description=_optional(node, "description"),
        complete=_flag(node, "complete"),
        creator_id=_optional(node, "creator-id").strip(),
    )


def read_todo_item(node: etree._Element) -> TodoItem:
    source_id = _record_id(node, "todo-item")
    comments_count = _text(node, "comments-count")
    return TodoItem(
        id=source_id,
        todo_list_id=_required(node, "todo-item", "todo-list-id", source_id).strip(),
        content=_required(node, "todo-item", "content", source_id),
        completed=_flag(node, "completed"),
        created_at=_optional(node, "created-at").strip(),
        responsible_party_id=_optional(node, "responsible-party-id").strip(),
        creator_id=_optional(node, "creator-id").strip(),
        creator_name=_optional(node, "creator-name"),
        comments_count=comments_count.strip() if comments_count is not None else None,
    )


class HierarchyWalker:
    """Feeds the records of a backup to the entity mapper in document order."""

    def __init__(self, settings: Settings, mapper: EntityMapper, context: RunContext) -> None:
        self.settings = settings
        self.mapper = mapper
        self.context = context

    def walk(self, root: etree._Element) -> None:
        if self.settings.company_as_parent:
            for node in root.xpath("//firm"):
                self._walk_organization(node, "firm")
            for node in root.xpath("//clients/client"):
                self._walk_organization(node, "client")

        for node in root.xpath("//project"):
            self._walk_project(node)

    def _walk_organization(self, node: etree._Element, kind: str) -> None:
        organization = read_organization(node, kind)
        s = self.settings
        if not is_included(organization.id, s.include_only_client_ids, s.exclude_client_ids):
            self.context.excluded_organizations.add(organization.id)
            self.mapper.skip_organization(organization)
            return
        self.mapper.map_organization(organization)

    def _skip_reason(self, project: Project) -> str | None:
        s = self.settings
        if project.archived:
            return "archived"
        if s.company_as_parent and project.company_id in self.context.excluded_organizations:
            return "excluded client's"
        if not is_included(project.id, s.include_only_project_ids, s.exclude_project_ids):
            return "excluded"
        return None

    def _walk_project(self, node: etree._Element) -> None:
        project = read_project(node)
        reason = self._skip_reason(project)
        if reason is not None:
            logger.debug("Skipping %s project %s", reason, project.id)
            self.mapper.skip_project(project, reason)
            return

        self.mapper.map_project(project)

        for post_node in node.xpath(".//post"):
            self.mapper.map_post(read_post(post_node))
            for comment_node in post_node.xpath(POST_COMMENTS):
                self.mapper.map_post_comment(read_comment(comment_node))

        for list_node in node.xpath(".//todo-list"):
            self.mapper.map_todo_list(read_todo_list(list_node))
            for item_node in list_node.xpath(".//todo-item"):
                item = read_todo_item(item_node)
                self.mapper.map_todo_item(item)
                if not item.has_comments:
                    continue
                for comment_node in item_node.xpath(TODO_COMMENTS):
                    self.mapper.map_todo_comment(read_comment(comment_node))
