"""Data handler module for JSON serialization of import state.

Used for the entity store snapshot and the optional user mapping file.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from b2r.display import LOGGER_NAME
from b2r.models.migration_error import MigrationError

logger = logging.getLogger(LOGGER_NAME)


def _json_default(value: Any) -> Any:
    """Best-effort encoder for non-JSON-native objects."""
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, BaseModel):
        return value.model_dump()
    return str(value)


def save(data: Any, filepath: Path, indent: int = 2) -> None:
    """Save data to a JSON file, writing through a temporary sibling file.

    Args:
        data: The data to save (Pydantic model or any JSON-serializable data)
        filepath: Target file
        indent: JSON indentation level

    Raises:
        MigrationError: If saving fails

    """
    filepath.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = filepath.with_suffix(filepath.suffix + ".tmp")

    try:
        if isinstance(data, BaseModel):
            data = data.model_dump()

        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False, default=_json_default)
        tmp_path.replace(filepath)
        logger.debug("Saved data to %s", filepath)
    except (OSError, TypeError, ValueError) as e:
        msg = f"Failed to save data to {filepath}"
        raise MigrationError(msg) from e


def load_dict(filepath: Path) -> dict[str, Any] | None:
    """Load a JSON object from a file.

    Returns:
        The decoded dictionary, or None if the file is missing or not a JSON object

    """
    if not filepath.exists():
        return None

    try:
        with filepath.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError:
        logger.warning("Invalid JSON in %s", filepath)
        return None

    if not isinstance(data, dict):
        logger.warning("Expected a JSON object in %s, got %s", filepath, type(data).__name__)
        return None
    return data
