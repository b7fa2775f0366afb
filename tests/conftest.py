"""Shared pytest fixtures and configuration for all tests."""

import os
from pathlib import Path

import pytest
from _pytest.config import Config

from b2r.clients.memory_store import InMemoryEntityStore
from b2r.mappings.mappings import Mappings
from b2r.schemas.settings import Settings
from b2r.utils.emission import MemorySink

SAMPLE_BACKUP = b"""<?xml version="1.0" encoding="UTF-8"?>
<account>
  <firm>
    <id>1</id>
    <name>Acme Firm</name>
  </firm>
  <clients>
    <client>
      <id>2</id>
      <name>Client One</name>
    </client>
    <client>
      <id>3</id>
      <name>Client Two</name>
    </client>
  </clients>
  <projects>
    <project>
      <id>100</id>
      <name>Website Relaunch</name>
      <status>active</status>
      <company>
        <id>2</id>
        <name>Client One</name>
      </company>
      <posts>
        <post>
          <id>500</id>
          <project-id>100</project-id>
          <title>Kickoff</title>
          <body>&lt;div&gt;Hello&lt;/div&gt;team</body>
          <author-id>10</author-id>
          <author-name>Jane Doe</author-name>
          <posted-on>2009-01-01T10:00:00Z</posted-on>
          <comments>
            <comment>
              <id>900</id>
              <commentable-id>500</commentable-id>
              <commentable-type>Post</commentable-type>
              <body>Agreed</body>
              <author-id>11</author-id>
              <author-name>Bob Smith</author-name>
              <created-at>2009-01-02T10:00:00Z</created-at>
            </comment>
          </comments>
        </post>
      </posts>
      <todo-lists>
        <todo-list>
          <id>700</id>
          <project-id>100</project-id>
          <name>Launch</name>
          <description>Go live</description>
          <complete>false</complete>
          <creator-id>10</creator-id>
          <todo-items>
            <todo-item>
              <id>800</id>
              <todo-list-id>700</todo-list-id>
              <content>Buy domain</content>
              <completed>true</completed>
              <created-at>2009-01-03T10:00:00Z</created-at>
              <responsible-party-id>11</responsible-party-id>
              <creator-id>10</creator-id>
              <creator-name>Jane Doe</creator-name>
              <comments-count>1</comments-count>
              <comments>
                <comment>
                  <id>901</id>
                  <commentable-id>800</commentable-id>
                  <commentable-type>TodoItem</commentable-type>
                  <body>Done&lt;br /&gt;cheap</body>
                  <author-id>99</author-id>
                  <author-name>Ghost</author-name>
                  <created-at>2009-01-04T10:00:00Z</created-at>
                </comment>
              </comments>
            </todo-item>
            <todo-item>
              <id>801</id>
              <todo-list-id>700</todo-list-id>
              <content>Write copy</content>
              <completed>false</completed>
              <created-at>2009-01-05T10:00:00Z</created-at>
              <creator-id>10</creator-id>
              <creator-name>Jane Doe</creator-name>
              <comments-count>0</comments-count>
              <comments>
                <comment>
                  <id>902</id>
                  <commentable-id>801</commentable-id>
                  <commentable-type>TodoItem</commentable-type>
                  <body>Stray</body>
                  <author-id>10</author-id>
                  <author-name>Jane Doe</author-name>
                  <created-at>2009-01-06T10:00:00Z</created-at>
                </comment>
              </comments>
            </todo-item>
          </todo-items>
        </todo-list>
      </todo-lists>
    </project>
    <project>
      <id>101</id>
      <name>Old Stuff</name>
      <status>archived</status>
      <posts>
        <post>
          <id>501</id>
          <project-id>101</project-id>
          <title>Ancient history</title>
        </post>
      </posts>
    </project>
  </projects>
</account>
"""

USER_MAPPING = {"10": 3, "11": 4}


def pytest_configure(config: Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark a test as a unit test")
    config.addinivalue_line("markers", "functional: mark a test as a functional test")
    config.addinivalue_line("markers", "slow: mark a test as slow-running")


def _env_flag(name: str, default: bool = False) -> bool:
    """Read boolean environment flag (true/false)."""
    val = os.environ.get(name, "true" if default else "false").strip().lower()
    return val in {"1", "true", "yes", "on"}


def pytest_collection_modifyitems(config: Config, items: list[pytest.Item]) -> None:
    """Skip functional and unmarked tests unless enabled.

    - Functional tests run only with B2R_RUN_FUNCTIONAL=true.
    - Unmarked tests (neither unit nor functional) are skipped unless
      B2R_RUN_ALL_TESTS=true.
    """
    run_all = _env_flag("B2R_RUN_ALL_TESTS", False)
    run_functional = _env_flag("B2R_RUN_FUNCTIONAL", False) or run_all

    skip_functional = pytest.mark.skip(
        reason="Functional tests disabled by default. Set B2R_RUN_FUNCTIONAL=true to enable.",
    )
    skip_unmarked = pytest.mark.skip(
        reason="Unmarked test skipped by default. Mark with unit/functional or set B2R_RUN_ALL_TESTS=true.",
    )

    for item in items:
        kws = item.keywords
        if "functional" in kws and not run_functional:
            item.add_marker(skip_functional)
            continue
        if not run_all and not any(m in kws for m in ("unit", "functional")):
            item.add_marker(skip_unmarked)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Default settings writing nothing outside the test's temp directory."""
    return Settings(
        data_dir=tmp_path / "data",
        output_dir=tmp_path / "output",
        user_mapping=USER_MAPPING,
    )


@pytest.fixture
def mappings() -> Mappings:
    return Mappings(USER_MAPPING)


@pytest.fixture
def store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def sample_backup() -> bytes:
    return SAMPLE_BACKUP


@pytest.fixture
def backup_file(tmp_path: Path) -> Path:
    path = tmp_path / "backup.xml"
    path.write_bytes(SAMPLE_BACKUP)
    return path
