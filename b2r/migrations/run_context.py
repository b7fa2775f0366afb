"""State of a single import run.

Holds the lookup tables from Basecamp ids to Redmine ids that later
steps use to wire parents. One instance is created per run and passed to
the walker and the mapper; nothing here outlives the run.
"""

import logging
from dataclasses import dataclass, field

from b2r.display import LOGGER_NAME
from b2r.models.component_results import ComponentResult
from b2r.models.migration_error import DanglingReferenceError

logger = logging.getLogger(LOGGER_NAME)


@dataclass(slots=True, frozen=True)
class Thread:
    """Where the replies of a post go."""

    message_id: int
    board_id: int
    project_id: int
    subject: str


@dataclass
class RunContext:
    """Lookup tables keyed by Basecamp id, plus the run's result counters."""

    organizations: dict[str, int] = field(default_factory=dict)
    projects: dict[str, int] = field(default_factory=dict)
    boards: dict[str, int] = field(default_factory=dict)
    messages: dict[str, int] = field(default_factory=dict)
    replies: dict[str, int] = field(default_factory=dict)
    todo_lists: dict[str, int] = field(default_factory=dict)
    todos: dict[str, int] = field(default_factory=dict)
    journals: dict[str, int] = field(default_factory=dict)

    threads: dict[str, Thread] = field(default_factory=dict)
    todo_list_projects: dict[str, int] = field(default_factory=dict)
    excluded_organizations: set[str] = field(default_factory=set)

    result: ComponentResult = field(default_factory=ComponentResult)
    _claims: dict[tuple[str, int], str] = field(default_factory=dict, repr=False)

    def table(self, name: str) -> dict[str, int]:
        return getattr(self, name)

    def resolve(
        self,
        table: str,
        parent_id: str,
        *,
        kind: str,
        source_id: str,
        parent_kind: str,
    ) -> int:
        """Target id of an already mapped parent.

        Raises:
            DanglingReferenceError: If the parent was not mapped in this run

        """
        target_id = self.table(table).get(parent_id)
        if target_id is None:
            raise DanglingReferenceError(kind, source_id, parent_kind, parent_id)
        return target_id

    def claim(self, table: str, source_id: str, target_id: int) -> None:
        """Record ``source_id -> target_id`` and warn if another record got there first.

        Matching on truncated subjects is lossy; two Basecamp records can
        resolve to the same Redmine record within one run.
        """
        key = (table, target_id)
        previous = self._claims.get(key)
        if previous is not None and previous != source_id:
            warning = (
                f"{table}: Basecamp {source_id} matched Redmine id {target_id} "
                f"already used by Basecamp {previous}"
            )
            logger.warning(warning)
            self.result.add_warning(warning)
        else:
            self._claims[key] = source_id
        self.table(table)[source_id] = target_id
