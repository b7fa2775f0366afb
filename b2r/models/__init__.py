"""Models package for data structures used in the application."""

from b2r.models.component_results import ComponentResult
from b2r.models.migration_error import (
    DanglingReferenceError,
    InvalidArgumentError,
    MalformedRecordError,
    MigrationError,
    StoreFailureError,
)
from b2r.models.operations import Operation

__all__ = [
    "ComponentResult",
    "DanglingReferenceError",
    "InvalidArgumentError",
    "MalformedRecordError",
    "MigrationError",
    "Operation",
    "StoreFailureError",
]
