"""Tests for the operation sinks."""

import logging
from pathlib import Path

import pytest

from b2r.models.operations import Operation
from b2r.utils.emission import (
    JsonLinesSink,
    LoggingSink,
    MemorySink,
    MultiSink,
    read_operations,
    write_operations,
)

pytestmark = pytest.mark.unit


def _create_op() -> Operation:
    return Operation(
        action="create",
        entity="project",
        source_id="100",
        target_id=1,
        fields={"name": "Website"},
    )


def test_describe() -> None:
    assert Operation.trace("About to create project 100").describe() == "About to create project 100"
    assert _create_op().describe() == "CREATE project source=100 id=1 [name='Website']"
    assert Operation.delete_project(3).describe() == "DELETE project id=3"


def test_memory_sink_filters_by_action(sink: MemorySink) -> None:
    sink.emit(Operation.trace("hello"))
    sink.emit(_create_op())

    assert len(sink.operations) == 2
    assert sink.of_action("create") == [_create_op()]
    assert sink.lines()[0] == "hello"


def test_logging_sink_levels(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("test.emission")
    sink = LoggingSink(logger)

    with caplog.at_level(logging.DEBUG, logger="test.emission"):
        sink.emit(Operation.trace("a trace"))
        sink.emit(_create_op())

    levels = [(record.levelno, record.getMessage()) for record in caplog.records]
    assert levels[0] == (logging.INFO, "a trace")
    assert levels[1][0] == logging.DEBUG


def test_json_lines_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "out" / "ops.jsonl"
    operations = [Operation.trace("start"), _create_op(), Operation.delete_project(1)]

    write_operations(operations, path)

    assert len(path.read_text(encoding="utf-8").splitlines()) == 3
    assert read_operations(path) == operations


def test_json_lines_sink_must_be_open(tmp_path: Path) -> None:
    sink = JsonLinesSink(tmp_path / "ops.jsonl")
    with pytest.raises(RuntimeError):
        sink.emit(Operation.trace("too early"))


def test_multi_sink_fans_out(tmp_path: Path) -> None:
    memory = MemorySink()
    with JsonLinesSink(tmp_path / "ops.jsonl") as script:
        MultiSink(memory, script).emit(_create_op())

    assert memory.operations == [_create_op()]
    assert script.count == 1
