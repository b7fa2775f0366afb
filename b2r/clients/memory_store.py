"""In-process entity store implementations.

``InMemoryEntityStore`` keeps every table in dictionaries and is used for
dry runs and tests. ``JsonFileEntityStore`` persists the same tables to a
JSON snapshot after every write, so consecutive runs see each other's
records the way consecutive runs against a real Redmine database would.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from b2r.clients.entity_store import EntityStore
from b2r.clients.exceptions import RecordNotFoundError, SnapshotError
from b2r.display import LOGGER_NAME
from b2r.models.migration_error import MigrationError
from b2r.models.target_records import (
    BoardFields,
    IssueFields,
    IssueScope,
    JournalFields,
    MessageFields,
    MessageScope,
    ProjectFields,
)
from b2r.utils import data_handler

logger = logging.getLogger(LOGGER_NAME)

TABLES = ("projects", "boards", "messages", "issues", "journals")

type Table = dict[int, dict[str, Any]]


class InMemoryEntityStore(EntityStore):
    """Dictionary-backed store with Redmine's cascading project deletion."""

    def __init__(self) -> None:
        self.tables: dict[str, Table] = {name: {} for name in TABLES}
        self.next_ids: dict[str, int] = {name: 1 for name in TABLES}

    def _insert(self, table: str, record: dict[str, Any]) -> int:
        new_id = self.next_ids[table]
        self.next_ids[table] = new_id + 1
        self.tables[table][new_id] = record
        self._changed()
        return new_id

    def _changed(self) -> None:
        """Hook called after every write."""

    # ------------------------------------------------------------------
    # projects / boards
    # ------------------------------------------------------------------

    def find_project(self, name: str) -> int | None:
        for project_id, record in self.tables["projects"].items():
            if record["name"] == name:
                return project_id
        return None

    def create_project(self, fields: ProjectFields) -> int:
        return self._insert("projects", fields.model_dump())

    def find_board(self, project_id: int) -> int | None:
        for board_id, record in self.tables["boards"].items():
            if record["project_id"] == project_id:
                return board_id
        return None

    def create_board(self, project_id: int, fields: BoardFields) -> int:
        if project_id not in self.tables["projects"]:
            msg = f"Project {project_id} does not exist"
            raise RecordNotFoundError(msg)
        return self._insert("boards", {"project_id": project_id, **fields.model_dump()})

    # ------------------------------------------------------------------
    # messages
    # ------------------------------------------------------------------

    def _message_matches(self, record: dict[str, Any], scope: MessageScope) -> bool:
        if record["subject"] != scope.subject:
            return False
        if scope.board_id is not None and record["board_id"] != scope.board_id:
            return False
        if scope.parent_id is not None and record["parent_id"] != scope.parent_id:
            return False
        if scope.created_on is not None and record["created_on"] != scope.created_on:
            return False
        if scope.project_id is not None:
            board = self.tables["boards"].get(record["board_id"])
            if board is None or board["project_id"] != scope.project_id:
                return False
        return True

    def find_message(self, scope: MessageScope) -> int | None:
        for message_id, record in self.tables["messages"].items():
            if self._message_matches(record, scope):
                return message_id
        return None

    def create_message(self, fields: MessageFields) -> int:
        if fields.board_id not in self.tables["boards"]:
            msg = f"Board {fields.board_id} does not exist"
            raise RecordNotFoundError(msg)
        return self._insert("messages", fields.model_dump())

    # ------------------------------------------------------------------
    # issues / journals
    # ------------------------------------------------------------------

    def find_issue(self, scope: IssueScope) -> int | None:
        for issue_id, record in self.tables["issues"].items():
            if record["subject"] != scope.subject:
                continue
            if scope.project_id is not None and record["project_id"] != scope.project_id:
                continue
            if scope.parent_issue_id is not None and record["parent_issue_id"] != scope.parent_issue_id:
                continue
            return issue_id
        return None

    def create_issue(self, fields: IssueFields) -> int:
        if fields.project_id not in self.tables["projects"]:
            msg = f"Project {fields.project_id} does not exist"
            raise RecordNotFoundError(msg)
        return self._insert("issues", fields.model_dump())

    def create_journal(self, fields: JournalFields) -> int:
        if fields.issue_id not in self.tables["issues"]:
            msg = f"Issue {fields.issue_id} does not exist"
            raise RecordNotFoundError(msg)
        return self._insert("journals", fields.model_dump())

    # ------------------------------------------------------------------
    # deletion
    # ------------------------------------------------------------------

    def _subtree(self, project_id: int) -> list[int]:
        found = [project_id]
        for child_id, record in self.tables["projects"].items():
            if record.get("parent_id") == project_id:
                found.extend(self._subtree(child_id))
        return found

    def delete_project(self, project_id: int) -> None:
        """Delete a project, its sub-projects and all their content."""
        if project_id not in self.tables["projects"]:
            msg = f"Project {project_id} does not exist"
            raise RecordNotFoundError(msg)

        project_ids = set(self._subtree(project_id))
        board_ids = {bid for bid, b in self.tables["boards"].items() if b["project_id"] in project_ids}
        issue_ids = {iid for iid, i in self.tables["issues"].items() if i["project_id"] in project_ids}

        self.tables["journals"] = {
            jid: j for jid, j in self.tables["journals"].items() if j["issue_id"] not in issue_ids
        }
        self.tables["issues"] = {
            iid: i for iid, i in self.tables["issues"].items() if iid not in issue_ids
        }
        self.tables["messages"] = {
            mid: m for mid, m in self.tables["messages"].items() if m["board_id"] not in board_ids
        }
        self.tables["boards"] = {
            bid: b for bid, b in self.tables["boards"].items() if bid not in board_ids
        }
        self.tables["projects"] = {
            pid: p for pid, p in self.tables["projects"].items() if pid not in project_ids
        }
        self._changed()

    def count(self, table: str) -> int:
        return len(self.tables[table])


class JsonFileEntityStore(InMemoryEntityStore):
    """``InMemoryEntityStore`` persisted to a JSON snapshot file."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        self._load()

    def _load(self) -> None:
        snapshot = data_handler.load_dict(self.path)
        if snapshot is None:
            if self.path.exists():
                msg = f"Unreadable store snapshot: {self.path}"
                raise SnapshotError(msg)
            logger.debug("Starting with an empty store at %s", self.path)
            return

        try:
            for name in TABLES:
                self.tables[name] = {
                    int(record_id): record
                    for record_id, record in snapshot.get(name, {}).items()
                }
            next_ids = snapshot.get("next_ids", {})
            self.next_ids = {
                name: int(next_ids.get(name, max(self.tables[name], default=0) + 1))
                for name in TABLES
            }
        except (AttributeError, TypeError, ValueError) as e:
            msg = f"Corrupt store snapshot: {self.path}"
            raise SnapshotError(msg) from e

        logger.debug(
            "Loaded store snapshot %s (%s)",
            self.path,
            ", ".join(f"{name}={len(self.tables[name])}" for name in TABLES),
        )

    def _changed(self) -> None:
        snapshot: dict[str, Any] = {"next_ids": dict(self.next_ids)}
        snapshot.update({name: self.tables[name] for name in TABLES})
        try:
            data_handler.save(snapshot, self.path)
        except MigrationError as e:
            raise SnapshotError(str(e)) from e
