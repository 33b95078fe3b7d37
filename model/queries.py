"""
Query Module
Chainable SELECT and DELETE statements bound to a model, run with ``go()``
"""

import logging
from typing import Any, List, Optional
from sqlalchemy import column
from database.sql_builder import Filter

logger = logging.getLogger(__name__)


class _FilteredQuery:
    """
    Shared WHERE handling; filters are ANDed in the order given

    Subclasses provide ``statement()``.
    """

    def __init__(self, model):
        self.model = model
        self._filters: List[Filter] = []

    def where(self, condition: Filter) -> '_FilteredQuery':
        """Add a raw SQL condition, a clause, or a column/value mapping"""
        self._filters.append(condition)
        return self

    def filter_by(self, **values: Any) -> '_FilteredQuery':
        """Add equality conditions on columns"""
        self._filters.append(values)
        return self

    def _apply_filters(self, statement):
        for condition in self._filters:
            clause = self.model.builder.filter_clause(condition)
            if clause is not None:
                statement = statement.where(clause)
        return statement

    def __str__(self) -> str:
        return self.model.builder.render(self.statement())


class SelectQuery(_FilteredQuery):
    """
    SELECT against the model's table

    In the default mode every returned row is tracked as an existing record
    and the tracked records are returned. With ``bulk=True`` the raw row
    mappings are returned untracked.
    """

    def __init__(self, model, bulk: bool = False):
        super().__init__(model)
        self.bulk = bulk
        self._columns: List[str] = []
        self._order_by: List[str] = []
        self._limit: Optional[int] = None

    def columns(self, *names: str) -> 'SelectQuery':
        self._columns.extend(names)
        return self

    def order_by(self, *names: str) -> 'SelectQuery':
        self._order_by.extend(names)
        return self

    def limit(self, count: int) -> 'SelectQuery':
        self._limit = count
        return self

    def statement(self):
        statement = self.model.builder.select_statement(self.model.table, columns=self._columns)
        statement = self._apply_filters(statement)
        if self._order_by:
            statement = statement.order_by(*[column(name) for name in self._order_by])
        if self._limit is not None:
            statement = statement.limit(self._limit)
        return statement

    async def go(self) -> list:
        """Run the query, returning tracked records or raw rows"""
        executor = self.model.require_executor()
        rows = await executor.execute(str(self)) or []

        if self.bulk:
            return rows

        records = [self.model.create(row, existing=True) for row in rows]
        logger.info(f"Loaded {len(records)} records from {self.model.table}")
        return records


class DeleteQuery(_FilteredQuery):
    """
    DELETE against the model's table, table-wide unless filtered

    Tracked records are left alone: what is tracked and what is stored are
    managed separately.
    """

    def statement(self):
        return self._apply_filters(self.model.builder.delete_statement(self.model.table))

    async def go(self) -> None:
        """Run the delete"""
        executor = self.model.require_executor()
        await executor.execute(str(self))
        logger.info(f"Deleted rows from {self.model.table}")
