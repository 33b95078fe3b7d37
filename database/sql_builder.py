"""
SQL Builder Module
Renders table-level statements to SQL text with SQLAlchemy Core
"""

import json
import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union
from sqlalchemy import and_, column, delete, insert, literal, literal_column, null, select, table, text, update
from sqlalchemy.engine import Dialect, make_url
from sqlalchemy.sql.expression import ClauseElement, TableClause

logger = logging.getLogger(__name__)

Filter = Union[str, Mapping[str, Any], ClauseElement, None]


class SQLBuilder:
    """Builds INSERT/UPDATE/DELETE/SELECT text for a single table"""

    OPERATIONS = ("insert", "bulk_insert", "update", "delete", "select")

    def __init__(self, dialect: Union[str, Dialect] = "sqlite"):
        """
        Initialize SQL builder

        Args:
            dialect: Dialect name (e.g. "sqlite", "mysql") or a SQLAlchemy
                dialect instance, such as ``engine.dialect``
        """
        if isinstance(dialect, str):
            dialect = make_url(f"{dialect}://").get_dialect()()
        self.dialect = dialect

    def build(self, operation: str, table_name: str,
              fields: Optional[Mapping[str, Any]] = None,
              rows: Optional[Sequence[Mapping[str, Any]]] = None,
              filter: Filter = None) -> str:
        """
        Render a statement description to SQL text

        Args:
            operation: One of insert, bulk_insert, update, delete, select
            table_name: Target table
            fields: Column values for insert and update
            rows: Column values per row for bulk_insert
            filter: Mapping of column to value, raw SQL text or a clause

        Returns:
            SQL text with values rendered inline
        """
        if operation == "insert":
            statement = self.insert_statement(table_name, fields or {})
        elif operation == "bulk_insert":
            statement = self.bulk_insert_statement(table_name, rows or [])
        elif operation == "update":
            statement = self.update_statement(table_name, fields or {}, filter)
        elif operation == "delete":
            statement = self.delete_statement(table_name, filter)
        elif operation == "select":
            statement = self.select_statement(table_name, filter=filter)
        else:
            raise ValueError(f"Unsupported operation '{operation}', expected one of {self.OPERATIONS}")

        return self.render(statement)

    def insert_statement(self, table_name: str, fields: Mapping[str, Any]):
        """Single-row INSERT with columns in field order"""
        target = self._table(table_name, fields.keys())
        return insert(target).values({key: self.value(val) for key, val in fields.items()})

    def bulk_insert_statement(self, table_name: str, rows: Sequence[Mapping[str, Any]]):
        """
        Multi-row INSERT covering every row in one statement

        Rows are normalized to the union of their keys in first-seen order;
        a row lacking a key gets NULL for that column.
        """
        if not rows:
            raise ValueError("A bulk insert needs at least one row")

        keys: List[str] = []
        for row in rows:
            for key in row:
                if key not in keys:
                    keys.append(key)

        if not keys:
            # DEFAULT VALUES inserts exactly one row
            if len(rows) > 1:
                raise ValueError(f"Cannot insert {len(rows)} rows without columns in one statement")
            return insert(table(table_name))

        target = self._table(table_name, keys)
        values = [{key: self.value(row.get(key)) for key in keys} for row in rows]
        return insert(target).values(values)

    def update_statement(self, table_name: str, fields: Mapping[str, Any], filter: Filter = None):
        """UPDATE setting every given field, restricted by filter"""
        if not fields:
            raise ValueError("An update needs at least one field to set")
        target = self._table(table_name, fields.keys())
        statement = update(target).values({key: self.value(val) for key, val in fields.items()})
        clause = self.filter_clause(filter)
        if clause is not None:
            statement = statement.where(clause)
        return statement

    def delete_statement(self, table_name: str, filter: Filter = None):
        """DELETE, table-wide unless filtered"""
        statement = delete(table(table_name))
        clause = self.filter_clause(filter)
        if clause is not None:
            statement = statement.where(clause)
        return statement

    def select_statement(self, table_name: str, columns: Iterable[str] = (), filter: Filter = None):
        """SELECT of the given columns, or of every column"""
        selected = [column(name) for name in columns] or [literal_column("*")]
        statement = select(*selected).select_from(table(table_name))
        clause = self.filter_clause(filter)
        if clause is not None:
            statement = statement.where(clause)
        return statement

    def filter_clause(self, filter: Filter) -> Optional[ClauseElement]:
        """
        Convert a filter to a WHERE clause

        Args:
            filter: None, raw SQL text, a clause, or a mapping of column to
                value combined with AND

        Returns:
            Clause element, or None when there is nothing to filter on
        """
        if filter is None:
            return None
        if isinstance(filter, ClauseElement):
            return filter
        if isinstance(filter, str):
            return text(filter)

        conditions = [column(key) == self.value(val) for key, val in filter.items()]
        if not conditions:
            return None
        if len(conditions) == 1:
            return conditions[0]
        return and_(*conditions)

    @staticmethod
    def value(val: Any) -> ClauseElement:
        """
        Wrap a Python value so its type is inferred from the value itself

        Lists, tuples and dicts are stored as JSON text.
        """
        if val is None:
            return null()
        if isinstance(val, (dict, list, tuple)):
            return literal(json.dumps(val, default=str))
        return literal(val)

    def render(self, statement) -> str:
        """Compile a statement against the dialect with values inlined"""
        compiled = statement.compile(
            dialect=self.dialect,
            compile_kwargs={"literal_binds": True}
        )
        sql = str(compiled)
        logger.debug(f"Rendered SQL: {sql}")
        return sql

    @staticmethod
    def _table(table_name: str, keys: Iterable[str]) -> TableClause:
        """Lightweight table construct carrying only the referenced columns"""
        return table(table_name, *[column(key) for key in keys])
