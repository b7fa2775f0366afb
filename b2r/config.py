"""Configuration module for the Basecamp to Redmine import.
Provides a centralized configuration interface using ConfigLoader.
"""

from pathlib import Path
from typing import Any

from b2r.config_loader import ConfigLoader
from b2r.display import configure_logging
from b2r.schemas.settings import Settings
from b2r.type_definitions import DirType

# Create a singleton instance of ConfigLoader
_config_loader = ConfigLoader()
settings: Settings = _config_loader.get_settings()

# Set up the var directory structure
root_dir = Path(__file__).parent.parent
var_dir = root_dir / "var"

var_dirs: dict[DirType, Path] = {
    "root": var_dir,
    "data": settings.data_dir if settings.data_dir.is_absolute() else root_dir / settings.data_dir,
    "logs": var_dir / "logs",
    "output": (
        settings.output_dir if settings.output_dir.is_absolute() else root_dir / settings.output_dir
    ),
}

for dir_path in var_dirs.values():
    dir_path.mkdir(parents=True, exist_ok=True)

log_file = var_dirs["logs"] / "import.log"
logger = configure_logging(settings.log_level, log_file)


def get_settings() -> Settings:
    """Get the validated settings object."""
    return settings


def get_path(path_type: DirType) -> Path:
    """Get a specific path from var_dirs."""
    if path_type not in var_dirs:
        msg = f"Invalid path type: {path_type}"
        raise ValueError(msg)

    return var_dirs[path_type]


def update_from_cli_args(args: Any) -> Settings:
    """Apply CLI arguments on top of the loaded settings.

    Args:
        args: An object containing CLI arguments (typically from argparse)

    Returns:
        The updated settings object

    """
    global settings

    overrides: dict[str, Any] = {}
    if getattr(args, "dry_run", False):
        overrides["dry_run"] = True
        logger.debug("Setting dry_run=True from CLI arguments")

    if getattr(args, "rollback_on_failure", False):
        overrides["on_failure_delete"] = True
        logger.debug("Setting on_failure_delete=True from CLI arguments")

    if overrides:
        settings = settings.model_copy(update=overrides)
    return settings
