"""Sinks receiving the ordered operation stream of a run."""

import logging
from pathlib import Path
from types import TracebackType
from typing import Protocol, Self

from b2r.display import LOGGER_NAME
from b2r.models.operations import Operation


class OperationSink(Protocol):
    """Anything that accepts operations in emission order."""

    def emit(self, operation: Operation) -> None: ...


class MemorySink:
    """Collects operations in a list."""

    def __init__(self) -> None:
        self.operations: list[Operation] = []

    def emit(self, operation: Operation) -> None:
        self.operations.append(operation)

    def of_action(self, action: str) -> list[Operation]:
        return [op for op in self.operations if op.action == action]

    def lines(self) -> list[str]:
        return [op.describe() for op in self.operations]


class LoggingSink:
    """Writes trace operations at INFO and all other operations at DEBUG."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def emit(self, operation: Operation) -> None:
        if operation.action == "trace":
            self.logger.info(operation.describe())
        else:
            self.logger.debug(operation.describe())


class JsonLinesSink:
    """Writes one JSON document per operation to a file.

    Use as a context manager; the file is opened on enter and closed on exit.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._handle = None
        self.count = 0

    def __enter__(self) -> Self:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.path.open("w", encoding="utf-8")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def emit(self, operation: Operation) -> None:
        if self._handle is None:
            msg = f"JsonLinesSink for {self.path} is not open"
            raise RuntimeError(msg)
        self._handle.write(operation.to_line() + "\n")
        self.count += 1


class MultiSink:
    """Fans every operation out to several sinks, in order."""

    def __init__(self, *sinks: OperationSink) -> None:
        self.sinks = list(sinks)

    def emit(self, operation: Operation) -> None:
        for sink in self.sinks:
            sink.emit(operation)


def write_operations(operations: list[Operation], path: Path) -> Path:
    """Write a finished operation list (e.g. an undo plan) as JSON lines."""
    with JsonLinesSink(path) as sink:
        for operation in operations:
            sink.emit(operation)
    return path


def read_operations(path: Path) -> list[Operation]:
    """Read back a JSON-lines operation file, skipping blank lines."""
    with path.open("r", encoding="utf-8") as handle:
        return [Operation.model_validate_json(line) for line in handle if line.strip()]
