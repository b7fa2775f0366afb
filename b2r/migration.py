"""Orchestration of an import run and of its reversal.

``run_import`` wires the run context, mapper, walker and undo planner
together and walks one backup; ``run_undo`` replays a saved undo plan.
"""

import logging
from pathlib import Path

from lxml import etree

from b2r.clients.entity_store import EntityStore
from b2r.display import LOGGER_NAME
from b2r.mappings.mappings import Mappings
from b2r.migrations.entity_mapper import EntityMapper
from b2r.migrations.hierarchy_walker import HierarchyWalker, parse_backup
from b2r.migrations.run_context import RunContext
from b2r.migrations.undo_planner import UndoPlanner, apply_plan
from b2r.models.component_results import ComponentResult
from b2r.models.migration_error import MigrationError
from b2r.models.operations import Operation
from b2r.schemas.settings import Settings
from b2r.utils.emission import OperationSink, read_operations

logger = logging.getLogger(LOGGER_NAME)


def _roll_back(planner: UndoPlanner, store: EntityStore, sink: OperationSink) -> None:
    """Delete what the aborted run created; a failing rollback is only logged."""
    logger.warning(
        "Import aborted, deleting %d project(s) created by this run",
        len(planner.created_project_ids),
    )
    try:
        planner.execute(store, sink)
    except MigrationError as e:
        logger.error("Rollback failed: %s", e)


def run_import(
    source: Path | str | bytes | etree._Element,
    settings: Settings,
    store: EntityStore,
    sink: OperationSink,
    mappings: Mappings | None = None,
) -> ComponentResult:
    """Import one Basecamp backup into the entity store.

    Args:
        source: Backup file path, XML document bytes, or an already parsed root
        settings: Run settings
        store: Store to find and create records in
        sink: Receives every operation of the run, in order
        mappings: User mapping; built from settings when omitted

    Returns:
        Counters, skipped projects and the undo plan of the run

    Raises:
        MigrationError: On the first fatal condition; when ``on_failure_delete``
            is set, the projects created so far are deleted first

    """
    root = source if isinstance(source, etree._Element) else parse_backup(source)
    if mappings is None:
        mappings = Mappings(settings.user_mapping, settings.data_dir)

    context = RunContext()
    context.result.dry_run = settings.dry_run
    planner = UndoPlanner()
    mapper = EntityMapper(settings, store, sink, context, mappings, planner)
    walker = HierarchyWalker(settings, mapper, context)

    try:
        walker.walk(root)
    except Exception as e:
        logger.error("Import failed: %s", e)
        context.result.add_error(str(e))
        if settings.on_failure_delete:
            _roll_back(planner, store, sink)
        raise

    result = context.result
    result.success = True
    result.undo_plan = planner.plan()
    result.details = {
        "organizations": len(context.organizations),
        "projects": len(context.projects),
        "messages": len(context.messages),
        "replies": len(context.replies),
        "todo_lists": len(context.todo_lists),
        "todos": len(context.todos),
        "journals": len(context.journals),
    }
    result.message = (
        f"Imported {len(context.projects)} project(s), "
        f"created {result.total_created} record(s)"
    )
    sink.emit(Operation.trace(f"Undo plan covers {len(result.undo_plan)} project(s)"))
    logger.success(result.message)
    return result


def run_undo(plan_path: Path, store: EntityStore, sink: OperationSink) -> ComponentResult:
    """Replay a saved undo plan against the store.

    Raises:
        FileNotFoundError: If the plan file does not exist
        StoreFailureError: If a deletion fails

    """
    operations = read_operations(plan_path)
    logger.info("Replaying %d operation(s) from %s", len(operations), plan_path)
    applied = apply_plan(operations, store, sink)

    result = ComponentResult(
        success=True,
        message=f"Deleted {len(applied)} project(s)",
        undo_plan=applied,
        details={"planned": len(operations), "deleted": len(applied)},
    )
    logger.success(result.message)
    return result
