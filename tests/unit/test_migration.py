"""Tests for whole import runs: counters, reruns, rollback and undo."""

from pathlib import Path

import pytest

from b2r.clients.memory_store import InMemoryEntityStore, JsonFileEntityStore
from b2r.mappings.mappings import DEFAULT_AUTHOR, Mappings
from b2r.migration import run_import, run_undo
from b2r.models.migration_error import DanglingReferenceError, MalformedRecordError
from b2r.schemas.settings import Settings
from b2r.utils.emission import MemorySink, write_operations

pytestmark = pytest.mark.unit

THREE_PROJECTS_THEN_DANGLING = b"""<account><projects>
  <project><id>1</id><name>Alpha</name></project>
  <project><id>2</id><name>Beta</name></project>
  <project>
    <id>3</id><name>Gamma</name>
    <posts>
      <post><id>50</id><project-id>999</project-id><title>Lost</title></post>
    </posts>
  </project>
</projects></account>
"""


def _import(
    backup: bytes | Path,
    settings: Settings,
    store: InMemoryEntityStore,
    mappings: Mappings,
    sink: MemorySink | None = None,
):
    return run_import(backup, settings, store, sink or MemorySink(), mappings)


class TestSampleImport:
    def test_counters(
        self, sample_backup: bytes, settings: Settings, store: InMemoryEntityStore, mappings: Mappings
    ) -> None:
        result = _import(sample_backup, settings, store, mappings)

        assert result.success
        assert result.created == {
            "project": 1,
            "board": 1,
            "message": 2,
            "issue": 3,
            "journal": 1,
        }
        assert result.existing == {}
        assert result.skipped_projects == ["101"]
        assert [op.target_id for op in result.undo_plan] == [1]
        assert result.details["journals"] == 1

    def test_records(
        self, sample_backup: bytes, settings: Settings, store: InMemoryEntityStore, mappings: Mappings
    ) -> None:
        _import(sample_backup, settings, store, mappings)

        assert [p["name"] for p in store.tables["projects"].values()] == ["Website Relaunch"]
        subjects = {m["subject"]: m for m in store.tables["messages"].values()}
        assert subjects["Kickoff"]["content"] == "Hello\nteam\n\n-- \nJane Doe"
        assert subjects["Re: Kickoff"]["author_id"] == 4
        issues = {i["subject"]: i for i in store.tables["issues"].values()}
        assert issues["Buy domain"]["status"] == "Closed"
        assert issues["Write copy"]["assigned_to_id"] is None
        journal = next(iter(store.tables["journals"].values()))
        assert journal["user_id"] == DEFAULT_AUTHOR
        assert journal["notes"] == "Done\ncheap\n\n-- \nGhost"

    def test_operation_stream(
        self,
        sample_backup: bytes,
        settings: Settings,
        store: InMemoryEntityStore,
        mappings: Mappings,
        sink: MemorySink,
    ) -> None:
        _import(sample_backup, settings, store, mappings, sink)

        traces = [op.message for op in sink.of_action("trace")]
        assert traces[0] == "About to create project 100 ('Website Relaunch')"
        assert "Skipping archived project 101 ('Old Stuff')" in traces
        assert traces[-1] == "Undo plan covers 1 project(s)"
        assert len(sink.of_action("create")) == 8

    def test_organizations_as_parents(
        self, sample_backup: bytes, settings: Settings, store: InMemoryEntityStore, mappings: Mappings
    ) -> None:
        settings = settings.model_copy(update={"company_as_parent": True, "exclude_client_ids": ["3"]})

        result = _import(sample_backup, settings, store, mappings)

        names = {record["name"]: pid for pid, record in store.tables["projects"].items()}
        assert set(names) == {"Acme Firm", "Client One", "Website Relaunch"}
        assert store.tables["projects"][names["Website Relaunch"]]["parent_id"] == names["Client One"]
        assert [op.target_id for op in result.undo_plan] == [1, 2, 3]


class TestRerun:
    def test_second_run_creates_no_duplicates(
        self, sample_backup: bytes, settings: Settings, store: InMemoryEntityStore, mappings: Mappings
    ) -> None:
        first = _import(sample_backup, settings, store, mappings)
        second = _import(sample_backup, settings, store, mappings)

        for entity in ("project", "board", "message", "issue"):
            assert second.created.get(entity, 0) == 0
            assert second.existing[entity] == first.created[entity]
        assert second.created["journal"] == first.created["journal"]
        assert store.count("journals") == 2
        assert store.count("projects") == 1
        assert second.undo_plan == []

    def test_rerun_across_snapshot_store(
        self, backup_file: Path, settings: Settings, mappings: Mappings, tmp_path: Path
    ) -> None:
        snapshot = tmp_path / "store.json"
        _import(backup_file, settings, JsonFileEntityStore(snapshot), mappings)

        reopened = JsonFileEntityStore(snapshot)
        result = _import(backup_file, settings, reopened, mappings)

        assert result.created == {"journal": 1}
        assert reopened.count("messages") == 2
        assert reopened.count("issues") == 3


class TestFailure:
    def test_rollback_deletes_created_projects(
        self, settings: Settings, store: InMemoryEntityStore, mappings: Mappings, sink: MemorySink
    ) -> None:
        settings = settings.model_copy(update={"on_failure_delete": True})

        with pytest.raises(DanglingReferenceError) as excinfo:
            _import(THREE_PROJECTS_THEN_DANGLING, settings, store, mappings, sink)

        assert excinfo.value.parent_id == "999"
        deletes = sink.of_action("delete")
        assert [op.target_id for op in deletes] == [1, 2, 3]
        assert store.count("projects") == 0
        assert store.count("boards") == 0

    def test_rollback_keeps_preexisting_projects(
        self, settings: Settings, store: InMemoryEntityStore, mappings: Mappings, sink: MemorySink
    ) -> None:
        _import(b"<account><project><id>1</id><name>Alpha</name></project></account>", settings, store, mappings)
        settings = settings.model_copy(update={"on_failure_delete": True})

        with pytest.raises(DanglingReferenceError):
            _import(THREE_PROJECTS_THEN_DANGLING, settings, store, mappings, sink)

        assert [op.target_id for op in sink.of_action("delete")] == [2, 3]
        assert [p["name"] for p in store.tables["projects"].values()] == ["Alpha"]

    def test_without_rollback_records_stay(
        self, settings: Settings, store: InMemoryEntityStore, mappings: Mappings, sink: MemorySink
    ) -> None:
        with pytest.raises(DanglingReferenceError):
            _import(THREE_PROJECTS_THEN_DANGLING, settings, store, mappings, sink)

        assert sink.of_action("delete") == []
        assert store.count("projects") == 3

    def test_unreadable_backup(self, settings: Settings, store: InMemoryEntityStore, mappings: Mappings) -> None:
        with pytest.raises(MalformedRecordError):
            _import(b"not xml at all", settings, store, mappings)
        assert store.count("projects") == 0


def test_undo_replays_saved_plan(
    sample_backup: bytes, settings: Settings, store: InMemoryEntityStore, mappings: Mappings, tmp_path: Path
) -> None:
    result = _import(sample_backup, settings, store, mappings)
    plan = write_operations(result.undo_plan, tmp_path / "undo_plan.jsonl")

    undo = run_undo(plan, store, MemorySink())

    assert undo.success
    assert undo.details == {"planned": 1, "deleted": 1}
    assert store.count("projects") == 0
    assert store.count("journals") == 0
