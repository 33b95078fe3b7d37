"""
Model Module
Binds a table and its identity field to change tracking and SQL generation
"""

import logging
from typing import Any, List, Mapping, Optional
from config.settings import ConfigurationError, ModelConfig
from database.sql_builder import SQLBuilder
from sync.change_tracker import ChangeTracker
from sync.incremental_sync import IncrementalSyncEngine, SyncResult
from sync.operations import PersistenceOperation
from sync.record import TrackedRecord
from .queries import DeleteQuery, SelectQuery

logger = logging.getLogger(__name__)


class Model:
    """
    Tracks records for one table and keeps the table in sync with them

    Usage:
        model = Model(table="people", identity="id", executor=connector)
        person = model.create({"name": "Ada"})
        await model.save()          # INSERT, person["id"] is now set
        person["name"] = "Ada L."
        await model.save()          # UPDATE ... WHERE id = <id>
    """

    def __init__(self, table: Optional[str] = None, identity: Optional[str] = None,
                 executor=None, builder: Optional[SQLBuilder] = None, bulk: bool = False):
        """
        Initialize model

        Args:
            table: Table the records belong to
            identity: Name of the server-assigned identity column
            executor: Object with async ``execute(sql)`` and
                ``get_last_inserted_id(table)``
            builder: SQL builder; defaults to one matching the executor's
                dialect, or SQLite
            bulk: Default insert strategy for ``save``

        Raises:
            ConfigurationError: table or identity is missing
        """
        ModelConfig(table=table, identity=identity).validate()

        if builder is None:
            builder = SQLBuilder(getattr(executor, "dialect", "sqlite"))

        self._table = table
        self._identity = identity
        self._executor = executor
        self._builder = builder
        self.bulk = bulk
        self._tracker = ChangeTracker(identity)
        self._engine = IncrementalSyncEngine(table, identity, self._tracker, builder, executor)
        logger.debug(f"Model bound to {table} ({identity})")

    @classmethod
    def from_config(cls, config: ModelConfig, executor=None) -> 'Model':
        """Build a model from a ModelConfig"""
        config.validate()
        return cls(
            table=config.table,
            identity=config.identity,
            executor=executor,
            builder=SQLBuilder(config.sql_dialect),
            bulk=config.bulk
        )

    @property
    def table(self) -> str:
        return self._table

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def executor(self):
        return self._executor

    @property
    def builder(self) -> SQLBuilder:
        return self._builder

    def require_executor(self):
        """Return the executor, failing if the model has none"""
        if self._executor is None:
            raise ConfigurationError("You must initialise a model with an executor to run statements")
        return self._executor

    def create(self, fields: Optional[Mapping[str, Any]] = None, existing: bool = False, **meta) -> TrackedRecord:
        """
        Track a record

        Args:
            fields: Column values
            existing: True when the record is already stored
            **meta: Further metadata overrides

        Returns:
            The tracked record
        """
        return self._tracker.create({} if fields is None else fields, existing=existing, **meta)

    def clear(self):
        """Stop tracking every record without touching the database"""
        self._tracker.clear()

    def tracked_items(self) -> int:
        """Number of tracked records"""
        return self._tracker.tracked_items()

    def records(self) -> List[TrackedRecord]:
        """Tracked records in creation order"""
        return list(self._tracker.records())

    def pending_inserts(self) -> List[TrackedRecord]:
        return self._tracker.pending_inserts()

    def pending_updates(self) -> List[TrackedRecord]:
        return self._tracker.pending_updates()

    def plan(self, bulk: Optional[bool] = None) -> List[PersistenceOperation]:
        """Statements ``save`` would run, without running them"""
        return self._engine.plan(bulk=self.bulk if bulk is None else bulk)

    async def save(self, bulk: Optional[bool] = None) -> SyncResult:
        """
        Insert new records and update modified ones

        Args:
            bulk: Use one multi-row INSERT for new records; falls back to
                the model default

        Returns:
            SyncResult describing what was written
        """
        return await self._engine.save(bulk=self.bulk if bulk is None else bulk)

    def select(self, bulk: bool = False) -> SelectQuery:
        """SELECT query; rows are tracked as existing unless bulk"""
        return SelectQuery(self, bulk=bulk)

    def delete(self) -> DeleteQuery:
        """DELETE query; tracked records are not affected"""
        return DeleteQuery(self)
