"""Reversal plan of an import run.

Only projects created by the run are recorded; deleting a project
removes its board, messages, issues and journals with it, so nothing
below project level needs its own delete step. Projects that already
existed are never part of the plan.
"""

import logging
from collections.abc import Iterable

from b2r.clients.entity_store import EntityStore
from b2r.clients.exceptions import ClientError, RecordNotFoundError
from b2r.display import LOGGER_NAME
from b2r.models.migration_error import StoreFailureError
from b2r.models.operations import Operation
from b2r.utils.emission import OperationSink

logger = logging.getLogger(LOGGER_NAME)


class UndoPlanner:
    """Collects created project ids in creation order."""

    def __init__(self) -> None:
        self._created: list[int] = []

    def record_created_project(self, project_id: int) -> None:
        if project_id not in self._created:
            self._created.append(project_id)

    @property
    def created_project_ids(self) -> list[int]:
        return list(self._created)

    def plan(self) -> list[Operation]:
        """One delete operation per created project, oldest first."""
        return [Operation.delete_project(project_id) for project_id in self._created]

    def execute(self, store: EntityStore, sink: OperationSink) -> list[Operation]:
        """Delete every project created so far."""
        return apply_plan(self.plan(), store, sink)


def apply_plan(
    operations: Iterable[Operation], store: EntityStore, sink: OperationSink,
) -> list[Operation]:
    """Run the project deletions of an undo plan against a store.

    A project that is already gone (e.g. removed together with its parent
    organization project) is logged and skipped.

    Returns:
        The delete operations that were applied

    Raises:
        StoreFailureError: If the store fails to delete an existing project

    """
    applied: list[Operation] = []
    for operation in operations:
        if operation.action != "delete" or operation.entity != "project":
            continue
        if operation.target_id is None:
            continue

        sink.emit(operation)
        try:
            store.delete_project(operation.target_id)
        except RecordNotFoundError:
            logger.notice("Project ID %s is already gone", operation.target_id)
            continue
        except ClientError as e:
            msg = f"Deleting project ID {operation.target_id} failed: {e}"
            raise StoreFailureError(msg) from e
        logger.info("Deleted project ID %s", operation.target_id)
        applied.append(operation)
    return applied
