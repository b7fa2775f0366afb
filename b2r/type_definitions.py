"""Type definitions shared across the Basecamp import.

Literal aliases for entity kinds and operation actions, and the
directory layout used under ``var/``.
"""

from typing import Literal

EntityKind = Literal["project", "board", "message", "issue", "journal"]

OperationAction = Literal["trace", "find", "create", "delete"]

# Redmine user id or the anonymous-author sentinel
UserRef = int | str

type DirType = Literal[
    "data",
    "logs",
    "output",
    "root",
]

ENTITY_KINDS: tuple[EntityKind, ...] = ("project", "board", "message", "issue", "journal")
