"""
Synchronization errors
"""

from typing import Optional


class MormError(Exception):
    """Base class for record synchronization errors"""


class UpdateWithoutIdentityError(MormError):
    """A record classified for update carries no identity value"""

    def __init__(self, message: str = "A record flagged for update must have an identifier set"):
        super().__init__(message)


class ExecutionError(MormError):
    """
    The executor failed while running a planned statement

    Attributes:
        sql: Statement that failed
        completed: Number of operations that finished before the failure
    """

    def __init__(self, sql: str, cause: Optional[BaseException] = None, completed: int = 0):
        self.sql = sql
        self.cause = cause
        self.completed = completed
        super().__init__(f"Failed to execute statement after {completed} completed operation(s): {cause}")


class EmptyUpdateError(MormError):
    """A record classified for update has no fields left to set"""

    def __init__(self, message: str = "A record flagged for update must have at least one field besides its identifier"):
        super().__init__(message)
