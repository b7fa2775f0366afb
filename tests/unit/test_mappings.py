"""Tests for the Basecamp to Redmine user mapping."""

import json
from pathlib import Path

import pytest

from b2r.mappings.mappings import DEFAULT_AUTHOR, Mappings, map_user

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("source_id", "expected"),
    [
        ("10", 3),
        (" 10 ", 3),
        ("11", 4),
        ("99", DEFAULT_AUTHOR),
        ("", DEFAULT_AUTHOR),
        (None, DEFAULT_AUTHOR),
        ("12", DEFAULT_AUTHOR),
    ],
)
def test_map_user(source_id: str | None, expected: object) -> None:
    table = {"10": 3, "11": 4, "12": ""}
    assert map_user(source_id, table) == expected


def test_map_user_with_empty_table() -> None:
    assert map_user("10", {}) == DEFAULT_AUTHOR


def test_mappings_merge_file_and_settings(tmp_path: Path) -> None:
    (tmp_path / "user_mapping.json").write_text(
        json.dumps({"10": 30, "20": 40}), encoding="utf-8"
    )

    mappings = Mappings({10: 3}, data_dir=tmp_path)

    assert mappings.get_user_id("10") == 3
    assert mappings.get_user_id("20") == 40
    assert mappings.get_user_id("30") == DEFAULT_AUTHOR


def test_mappings_ignore_invalid_file(tmp_path: Path) -> None:
    (tmp_path / "user_mapping.json").write_text("not json", encoding="utf-8")

    mappings = Mappings(data_dir=tmp_path)

    assert mappings.user_mapping == {}
    assert mappings.get_user_id("10") == DEFAULT_AUTHOR
