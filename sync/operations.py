"""
Persistence Operations Module
One object per planned statement, carrying its SQL and the reconciliation to
apply to tracked records once the statement has run
"""

import logging
from typing import Any, List, Optional
from .change_tracker import ChangeTracker
from .record import TrackedRecord

logger = logging.getLogger(__name__)


class PersistenceOperation:
    """Base class for planned statements"""

    kind = "statement"

    def __init__(self, sql: str):
        self.sql = sql

    async def run(self, executor) -> None:
        """Execute the statement and reconcile the affected records"""
        logger.debug(f"Running {self.kind}: {self.sql}")
        await executor.execute(self.sql)
        await self.apply(executor)

    async def apply(self, executor) -> None:
        """Hook run after the statement succeeded"""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.sql!r})"


class InsertOperation(PersistenceOperation):
    """Single-row insert that recovers the generated identity"""

    kind = "insert"

    def __init__(self, sql: str, record: TrackedRecord, table: str, payload: dict):
        super().__init__(sql)
        self.record = record
        self.table = table
        self.payload = payload

    async def apply(self, executor) -> None:
        identity_value: Optional[Any] = await executor.get_last_inserted_id(self.table)
        self.record.mark_persisted(self.payload)
        if identity_value is not None:
            self.record[self.record.identity] = identity_value
        logger.debug(f"Inserted record into {self.table} with identity {identity_value}")


class BulkInsertOperation(PersistenceOperation):
    """
    Multi-row insert covering the whole insert set

    Identities cannot be mapped back to individual rows, so the inserted
    records are marked persisted and evicted from the tracker.
    """

    kind = "bulk_insert"

    def __init__(self, sql: str, records: List[TrackedRecord], payloads: List[dict], tracker: ChangeTracker):
        super().__init__(sql)
        self.records = records
        self.payloads = payloads
        self.tracker = tracker

    async def apply(self, executor) -> None:
        for record, payload in zip(self.records, self.payloads):
            record.mark_persisted(payload)
            self.tracker.remove(record)
        logger.info(f"Bulk inserted {len(self.records)} records, no longer tracked")


class UpdateOperation(PersistenceOperation):
    """Update of one record filtered by its identity"""

    kind = "update"

    def __init__(self, sql: str, record: TrackedRecord, payload: dict):
        super().__init__(sql)
        self.record = record
        self.payload = payload

    async def apply(self, executor) -> None:
        self.record.mark_persisted(self.payload)
