"""
Console output for the Basecamp import.
Rich-based logging setup and the end-of-run summary table.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, cast

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.theme import Theme

from b2r.type_definitions import ENTITY_KINDS

if TYPE_CHECKING:
    from b2r.models.component_results import ComponentResult

SUCCESS = 25
NOTICE = 21

LOGGER_NAME = "migration"


class ExtendedLogger(Protocol):
    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def success(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def notice(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


LOGGING_THEME = Theme(
    {
        "logging.level.debug": "dim",
        "logging.level.info": "blue",
        "logging.level.notice": "cyan",
        "logging.level.warning": "bold yellow",
        "logging.level.error": "bold red",
        "logging.level.critical": "bold red on white",
        "logging.level.success": "bold green",
    }
)

console = Console(theme=LOGGING_THEME)


def _success(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
    if self.isEnabledFor(SUCCESS):
        self._log(SUCCESS, message, args, stacklevel=2, **kwargs)


def _notice(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
    if self.isEnabledFor(NOTICE):
        self._log(NOTICE, message, args, stacklevel=2, **kwargs)


def _install_custom_levels() -> None:
    logging.addLevelName(SUCCESS, "SUCCESS")
    logging.addLevelName(NOTICE, "NOTICE")
    setattr(logging.Logger, "success", _success)
    setattr(logging.Logger, "notice", _notice)


_install_custom_levels()


def _numeric_level(level: str) -> int:
    match level.upper():
        case "NOTICE":
            return NOTICE
        case "SUCCESS":
            return SUCCESS
        case other:
            return getattr(logging, other, logging.INFO)


def configure_logging(
    level: str = "INFO", log_file: str | Path | None = None
) -> ExtendedLogger:
    """
    Configure the shared migration logger with rich console output.

    Args:
        level: Logging level (DEBUG, INFO, NOTICE, SUCCESS, WARNING, ERROR)
        log_file: Optional path of a plain-text log file

    Returns:
        The configured "migration" logger
    """
    numeric_level = _numeric_level(level)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console,
            rich_tracebacks=True,
            tracebacks_show_locals=False,
            show_time=True,
            show_level=True,
            log_time_format="[%X]",
        )
    ]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        file_handler.setLevel(numeric_level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=numeric_level,
        format="%(message)s",
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    if log_file:
        logger.debug("Log file: %s", log_file)
    return cast(ExtendedLogger, logger)


def print_summary(result: "ComponentResult") -> None:
    """Render created/existing counters of a run as a table."""
    table = Table(title="Basecamp import summary")
    table.add_column("Entity", style="bold")
    table.add_column("Created", justify="right", style="green")
    table.add_column("Existing", justify="right", style="cyan")

    for entity in ENTITY_KINDS:
        table.add_row(
            entity,
            str(result.created.get(entity, 0)),
            str(result.existing.get(entity, 0)),
        )

    console.print(table)
    if result.skipped_projects:
        console.print(f"Skipped projects: {', '.join(result.skipped_projects)}")
    if result.errors:
        console.print(f"[bold red]Errors:[/] {'; '.join(result.errors)}")
