"""Common exceptions for entity store clients."""


class ClientError(Exception):
    """Base exception for all client errors."""


class QueryExecutionError(ClientError):
    """Error when a find or create call cannot be executed."""


class RecordNotFoundError(ClientError):
    """Error when a record addressed by id does not exist."""


class SnapshotError(ClientError):
    """Error when a persisted store snapshot cannot be read or written."""
