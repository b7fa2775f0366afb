"""Defines exceptions for the import process.

Every fatal condition of a run is a ``MigrationError``; the walker and the
mapper never catch them, so the first one aborts the whole traversal.
"""


class MigrationError(Exception):
    """Base exception for import errors.

    Should be used when an import component encounters an error
    that prevents it from continuing execution.
    """

    def __init__(self, message: str, *args: object) -> None:
        """Initialize the exception with a descriptive message.

        Args:
            message: Detailed error message
            *args: Additional positional arguments for Exception

        """
        super().__init__(message, *args)
        self.message = message


class InvalidArgumentError(MigrationError, ValueError):
    """A text helper received a length argument that is not a non-negative int."""


class MalformedRecordError(MigrationError):
    """A source record lacks a required field, or the backup is unreadable."""

    def __init__(self, kind: str, source_id: str | None, field: str) -> None:
        self.kind = kind
        self.source_id = source_id
        self.field = field
        super().__init__(
            f"Malformed {kind} {source_id or '<unknown id>'}: missing required field '{field}'",
        )


class DanglingReferenceError(MigrationError):
    """A child record references a parent that was not mapped in this run."""

    def __init__(self, kind: str, source_id: str, parent_kind: str, parent_id: str) -> None:
        self.kind = kind
        self.source_id = source_id
        self.parent_kind = parent_kind
        self.parent_id = parent_id
        super().__init__(
            f"{kind} {source_id} references unknown {parent_kind} {parent_id}",
        )


class StoreFailureError(MigrationError):
    """An entity store find/create/delete call failed."""
