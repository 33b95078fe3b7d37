"""
Pytest configuration and shared fixtures.

Provides a recording executor and models bound to it.
"""

import pytest
from typing import Generator

import config.settings
import database.rdbms_connector
from model import Model
from sync import ChangeTracker


# ============================================================================
# Executor Fixtures
# ============================================================================

class RecordingExecutor:
    """Executor that records SQL and hands out increasing identities"""

    def __init__(self, rows=None, fail_on=None):
        self.executed = []
        self.autoid = 0
        self.rows = rows or []
        self.fail_on = fail_on

    async def execute(self, sql):
        if self.fail_on and self.fail_on in sql:
            raise RuntimeError("database unavailable")
        self.executed.append(sql)
        if sql.startswith("SELECT"):
            return [dict(row) for row in self.rows]
        return None

    async def get_last_inserted_id(self, table):
        self.autoid += 1
        return self.autoid


@pytest.fixture
def make_executor():
    """Factory for recording executors with canned rows or failures."""
    return RecordingExecutor


@pytest.fixture
def executor() -> RecordingExecutor:
    """Create a fresh recording executor."""
    return RecordingExecutor()


@pytest.fixture
def model(executor: RecordingExecutor) -> Model:
    """Create a model bound to morm_test."""
    return Model(table="morm_test", identity="id", executor=executor)


@pytest.fixture
def tracker() -> ChangeTracker:
    """Create an empty change tracker."""
    return ChangeTracker(identity="id")


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def fresh_config(monkeypatch) -> Generator[None, None, None]:
    """Reset cached config and connector around a test."""
    for name in ("DATABASE_URL", "MORM_TABLE", "MORM_IDENTITY", "MORM_BULK",
                 "MORM_SQL_DIALECT", "RECORDS_PATH", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(database.rdbms_connector, "_default_connector", None)
    config.settings.reload_config()
    yield
    monkeypatch.undo()
    config.settings.reload_config()
