"""
Incremental Synchronization Module
Plans INSERT/UPDATE statements for changed records and runs them in order
"""

import logging
from dataclasses import dataclass, field
from typing import List
from config.settings import ConfigurationError
from database.sql_builder import SQLBuilder
from .change_tracker import ChangeTracker
from .exceptions import EmptyUpdateError, ExecutionError, UpdateWithoutIdentityError
from .operations import BulkInsertOperation, InsertOperation, PersistenceOperation, UpdateOperation

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of a save"""
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    statements: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return (
            f"Sync complete: {self.inserted} inserted, {self.updated} updated, "
            f"{self.skipped} unchanged, {len(self.statements)} statements"
        )


class IncrementalSyncEngine:
    """Synchronizes the records of one change tracker with their table"""

    def __init__(self, table: str, identity: str, tracker: ChangeTracker,
                 builder: SQLBuilder, executor=None):
        """
        Initialize incremental sync engine

        Args:
            table: Bound table name
            identity: Identity field name
            tracker: Change tracker holding the records
            builder: SQL builder rendering statements
            executor: Object with async ``execute(sql)`` and
                ``get_last_inserted_id(table)``
        """
        self.table = table
        self.identity = identity
        self.tracker = tracker
        self.builder = builder
        self.executor = executor

    def plan(self, bulk: bool = False) -> List[PersistenceOperation]:
        """
        Build the ordered statements for every pending change

        Inserts come first, then updates, each group in tracking order.

        Args:
            bulk: Insert all new records with one multi-row statement

        Returns:
            Operations ready to run

        Raises:
            UpdateWithoutIdentityError: A modified existing record has no identity
            EmptyUpdateError: A modified existing record has no fields to set
        """
        changes = self.tracker.detect_changes()
        operations: List[PersistenceOperation] = []

        if bulk:
            operations.extend(self._plan_bulk_insert(changes["insert"]))
        else:
            operations.extend(self._plan_inserts(changes["insert"]))

        operations.extend(self._plan_updates(changes["update"]))
        return operations

    def _plan_bulk_insert(self, records) -> List[PersistenceOperation]:
        if not records:
            return []
        payloads = [record.sanitized() for record in records]
        if not any(payloads):
            # Column-less rows each need their own DEFAULT VALUES insert
            return [
                BulkInsertOperation(
                    self.builder.build("bulk_insert", self.table, rows=[payload]),
                    [record], [payload], self.tracker
                )
                for record, payload in zip(records, payloads)
            ]
        sql = self.builder.build("bulk_insert", self.table, rows=payloads)
        return [BulkInsertOperation(sql, list(records), payloads, self.tracker)]

    def _plan_inserts(self, records) -> List[PersistenceOperation]:
        operations = []
        for record in records:
            payload = record.sanitized()
            sql = self.builder.build("insert", self.table, fields=payload)
            operations.append(InsertOperation(sql, record, self.table, payload))
        return operations

    def _plan_updates(self, records) -> List[PersistenceOperation]:
        operations = []
        for record in records:
            identity_value = record.identity_value
            if not identity_value:
                raise UpdateWithoutIdentityError()
            payload = record.sanitized()
            if not payload:
                raise EmptyUpdateError()
            sql = self.builder.build(
                "update",
                self.table,
                fields=payload,
                filter={self.identity: identity_value}
            )
            operations.append(UpdateOperation(sql, record, payload))
        return operations

    async def save(self, bulk: bool = False) -> SyncResult:
        """
        Persist every pending change, one statement at a time

        Args:
            bulk: Insert all new records with one multi-row statement

        Returns:
            SyncResult with counts and the executed statements

        Raises:
            UpdateWithoutIdentityError: Raised before any statement runs
            EmptyUpdateError: Raised before any statement runs
            ExecutionError: The executor failed; earlier statements stay applied
        """
        skipped = sum(1 for record in self.tracker.records() if record.existing and not record.modified())
        operations = self.plan(bulk=bulk)
        result = SyncResult(skipped=skipped)

        if not operations:
            logger.info(f"No changes to persist for {self.table}")
            return result

        if self.executor is None:
            raise ConfigurationError("You must initialise a model with an executor to persist records")

        logger.info(f"Persisting {len(operations)} statements to {self.table}")

        for completed, operation in enumerate(operations):
            try:
                await operation.run(self.executor)
            except Exception as e:
                logger.error(f"Statement failed on {self.table}: {operation.sql} ({e})")
                raise ExecutionError(operation.sql, e, completed) from e

            result.statements.append(operation.sql)
            if operation.kind == "bulk_insert":
                result.inserted += len(operation.records)
            elif operation.kind == "insert":
                result.inserted += 1
            else:
                result.updated += 1

        logger.info(str(result))
        return result
