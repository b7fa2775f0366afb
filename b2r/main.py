"""Command line entry point of the Basecamp to Redmine import.

    b2r import BACKUP.xml [--dry-run] [--rollback-on-failure] [--store PATH] [--output DIR]
    b2r undo UNDO_PLAN.jsonl [--store PATH]
"""

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from b2r import config
from b2r.config import logger, update_from_cli_args

if TYPE_CHECKING:
    from b2r.clients.entity_store import EntityStore
    from b2r.schemas.settings import Settings

IMPORT_SCRIPT = "import_operations.jsonl"
UNDO_PLAN = "undo_plan.jsonl"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="b2r",
        description="Import a Basecamp XML backup into Redmine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    import_parser = subparsers.add_parser("import", help="Import a Basecamp XML backup")
    import_parser.add_argument("backup", type=Path, help="Basecamp XML backup file")
    import_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run against a throw-away in-memory store",
    )
    import_parser.add_argument(
        "--rollback-on-failure",
        action="store_true",
        help="Delete the projects created by this run when it aborts",
    )
    import_parser.add_argument("--store", type=Path, help="Entity store snapshot file")
    import_parser.add_argument(
        "--output",
        type=Path,
        help="Directory for the operation script and the undo plan",
    )

    undo_parser = subparsers.add_parser("undo", help="Delete the projects listed in an undo plan")
    undo_parser.add_argument("plan", type=Path, help="Undo plan written by a previous import")
    undo_parser.add_argument("--store", type=Path, help="Entity store snapshot file")

    return parser


def _open_store(settings: "Settings", store_path: Path | None, dry_run: bool = False) -> "EntityStore":
    """Snapshot-backed store, or an in-memory one for dry runs."""
    from b2r.clients.memory_store import InMemoryEntityStore, JsonFileEntityStore  # noqa: PLC0415

    if dry_run:
        logger.notice("Dry run: changes are made to an in-memory store only")
        return InMemoryEntityStore()
    path = store_path or config.get_path("data") / settings.store_file
    logger.info("Using entity store %s", path)
    return JsonFileEntityStore(path)


def _run_import(args: argparse.Namespace) -> None:
    from b2r.display import print_summary  # noqa: PLC0415
    from b2r.migration import run_import  # noqa: PLC0415
    from b2r.utils.emission import JsonLinesSink, LoggingSink, MultiSink, write_operations  # noqa: PLC0415

    settings = update_from_cli_args(args)
    store = _open_store(settings, args.store, settings.dry_run)
    output_dir = args.output or config.get_path("output")
    output_dir.mkdir(parents=True, exist_ok=True)

    with JsonLinesSink(output_dir / IMPORT_SCRIPT) as script:
        result = run_import(args.backup, settings, store, MultiSink(LoggingSink(), script))

    plan_path = write_operations(result.undo_plan, output_dir / UNDO_PLAN)
    print_summary(result)
    logger.info("Operation script written to %s", output_dir / IMPORT_SCRIPT)
    logger.info("Undo plan written to %s", plan_path)


def _run_undo(args: argparse.Namespace) -> None:
    from b2r.migration import run_undo  # noqa: PLC0415
    from b2r.utils.emission import LoggingSink  # noqa: PLC0415

    store = _open_store(config.get_settings(), args.store)
    run_undo(args.plan, store, LoggingSink())


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and execute the appropriate command."""
    from pydantic import ValidationError  # noqa: PLC0415

    from b2r.clients.exceptions import ClientError  # noqa: PLC0415
    from b2r.models.migration_error import MigrationError  # noqa: PLC0415

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        match args.command:
            case "import":
                _run_import(args)
            case "undo":
                _run_undo(args)
            case _:
                parser.print_help()
                sys.exit(1)
    except MigrationError as e:
        logger.error("Import failed: %s", e.message)
        sys.exit(1)
    except ClientError as e:
        logger.error("Store error: %s", e)
        sys.exit(1)
    except ValidationError as e:
        logger.error("Malformed operation file: %s", e)
        sys.exit(1)
    except (FileNotFoundError, PermissionError) as e:
        logger.error("File system error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Import interrupted by user")
        sys.exit(1)
    except Exception as e:  # noqa: BLE001
        logger.exception("Unexpected error occurred during import: %s", e)
        sys.exit(1)
