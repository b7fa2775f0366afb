"""User id mapping between Basecamp people and Redmine users."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from b2r.display import LOGGER_NAME
from b2r.type_definitions import UserRef
from b2r.utils import data_handler

logger = logging.getLogger(LOGGER_NAME)

# Stands for Redmine's anonymous user wherever a person is not mapped
DEFAULT_AUTHOR: Final[str] = "anonymous"


def map_user(source_id: str | None, table: Mapping[str, Any]) -> UserRef:
    """Map a Basecamp person id to a Redmine user id.

    Args:
        source_id: Basecamp person id, possibly empty or missing
        table: Basecamp person id -> Redmine user id

    Returns:
        The mapped user id, or ``DEFAULT_AUTHOR`` when there is no usable entry

    """
    if not source_id:
        return DEFAULT_AUTHOR
    user_id = table.get(str(source_id).strip())
    if user_id is None or user_id == "":
        return DEFAULT_AUTHOR
    return user_id


class Mappings:
    """Static mapping tables used during an import."""

    USER_MAPPING_FILE = Path("user_mapping.json")

    def __init__(
        self,
        user_mapping: Mapping[str, Any] | None = None,
        data_dir: Path | None = None,
    ) -> None:
        """Merge the configured user mapping with the optional mapping file.

        Args:
            user_mapping: Mapping from settings; wins over the file
            data_dir: Directory that may contain ``user_mapping.json``

        """
        self.data_dir = data_dir
        merged: dict[str, Any] = {}
        if data_dir is not None:
            merged.update(self._load_mapping(data_dir / self.USER_MAPPING_FILE))
        merged.update({str(key): value for key, value in (user_mapping or {}).items()})
        self.user_mapping = merged

        if not self.user_mapping:
            logger.notice("User mapping is empty, all content will be authored by the anonymous user")

    def _load_mapping(self, file_path: Path) -> dict[str, Any]:
        mapping = data_handler.load_dict(file_path)
        if mapping is None:
            logger.debug("Mapping file not found or invalid: %s", file_path)
            return {}
        logger.notice("Loaded mapping '%s' with %d entries.", file_path.name, len(mapping))
        return {str(key): value for key, value in mapping.items()}

    def get_user_id(self, source_id: str | None) -> UserRef:
        """Redmine user for a Basecamp person id, anonymous when unmapped."""
        return map_user(source_id, self.user_mapping)
