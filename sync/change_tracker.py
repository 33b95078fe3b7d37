"""
Change Tracking Module
Tracks in-memory records for one table and classifies them for synchronization
"""

import logging
from typing import Any, List, Mapping, Tuple
from .record import TrackedRecord

logger = logging.getLogger(__name__)


class ChangeTracker:
    """Owns the tracked records of a single table binding"""

    def __init__(self, identity: str):
        """
        Initialize change tracker

        Args:
            identity: Name of the identity field of the bound table
        """
        self.identity = identity
        self._records: List[TrackedRecord] = []

    def create(self, fields: Mapping[str, Any], existing: bool = False, **meta) -> TrackedRecord:
        """
        Start tracking a record

        Args:
            fields: Column values; snapshotted as the record's original state
            existing: True if the record is already persisted
            **meta: Further metadata overrides, e.g. ``original``

        Returns:
            The tracked record, to be mutated in place by the caller
        """
        record = TrackedRecord(fields, self.identity, existing=existing, **meta)
        self._records.append(record)
        logger.debug(f"Tracking {'existing' if existing else 'new'} record ({len(self._records)} tracked)")
        return record

    def remove(self, record: TrackedRecord) -> bool:
        """
        Stop tracking one record, matched by identity rather than content

        Returns:
            True if the record was tracked
        """
        for index, tracked in enumerate(self._records):
            if tracked is record:
                del self._records[index]
                return True
        return False

    def clear(self):
        """Forget every tracked record without persisting anything"""
        count = len(self._records)
        self._records = []
        logger.info(f"Cleared {count} tracked records")

    def tracked_items(self) -> int:
        """Number of tracked records"""
        return len(self._records)

    def records(self) -> Tuple[TrackedRecord, ...]:
        """Tracked records in creation order"""
        return tuple(self._records)

    def pending_inserts(self) -> List[TrackedRecord]:
        """Records never persisted"""
        return [record for record in self._records if not record.existing]

    def pending_updates(self) -> List[TrackedRecord]:
        """Persisted records whose content changed since the last sync"""
        return [record for record in self._records if record.existing and record.modified()]

    def detect_changes(self) -> dict:
        """
        Classify every tracked record

        Returns:
            Dictionary with insert, update and unchanged record lists
        """
        changes = {
            "insert": [],
            "update": [],
            "unchanged": []
        }

        for record in self._records:
            if not record.existing:
                changes["insert"].append(record)
            elif record.modified():
                changes["update"].append(record)
            else:
                changes["unchanged"].append(record)

        logger.info(
            f"Detected {len(changes['insert'])} new, {len(changes['update'])} modified, "
            f"{len(changes['unchanged'])} unchanged records"
        )
        return changes
