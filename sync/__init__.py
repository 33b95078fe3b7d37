"""Synchronization module"""

from .change_tracker import ChangeTracker
from .exceptions import EmptyUpdateError, ExecutionError, MormError, UpdateWithoutIdentityError
from .incremental_sync import IncrementalSyncEngine, SyncResult
from .record import TrackedRecord

__all__ = [
    'ChangeTracker',
    'EmptyUpdateError',
    'ExecutionError',
    'IncrementalSyncEngine',
    'MormError',
    'SyncResult',
    'TrackedRecord',
    'UpdateWithoutIdentityError'
]
