"""
Integration tests running the model against in-memory SQLite.
"""

import asyncio

from config import RDBMSConfig
from database import RDBMSConnector
from model import Model

CREATE_TABLE_SQL = """
    CREATE TABLE morm_test (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        column1 TEXT,
        column2 TEXT
    )
"""

SELECT_ALL_SQL = "SELECT id, column1, column2 FROM morm_test ORDER BY id"


def run_against_sqlite(scenario):
    """Run ``scenario(connector)`` on a fresh database and close it afterwards."""
    async def runner():
        connector = RDBMSConnector(RDBMSConfig(connection_string="sqlite+aiosqlite:///:memory:"))
        try:
            await connector.execute(CREATE_TABLE_SQL)
            return await scenario(connector)
        finally:
            await connector.close()

    return asyncio.run(runner())


class TestRDBMSConnector:
    """Tests for the SQLAlchemy-backed executor."""

    def test_connection(self):
        async def scenario(connector):
            return await connector.test_connection()

        assert run_against_sqlite(scenario) is True

    def test_execute_returns_rows_for_select(self):
        async def scenario(connector):
            inserted = await connector.execute("INSERT INTO morm_test (column1) VALUES ('10:30')")
            last_id = await connector.get_last_inserted_id("morm_test")
            rows = await connector.execute(SELECT_ALL_SQL)
            return inserted, last_id, rows

        inserted, last_id, rows = run_against_sqlite(scenario)

        assert inserted is None
        assert last_id == 1
        assert rows == [{"id": 1, "column1": "10:30", "column2": None}]

    def test_insert_then_update(self):
        async def scenario(connector):
            model = Model(table="morm_test", identity="id", executor=connector)
            first = model.create({"column1": "hi", "column2": "hi again"})
            second = model.create({"column1": "another hi", "column2": "to you"})
            await model.save()

            first["column2"] = "changed"
            result = await model.save()
            rows = await connector.execute(SELECT_ALL_SQL)
            return first, second, result, rows

        first, second, result, rows = run_against_sqlite(scenario)

        assert first["id"] == 1
        assert second["id"] == 2
        assert result.updated == 1
        assert rows == [
            {"id": 1, "column1": "hi", "column2": "changed"},
            {"id": 2, "column1": "another hi", "column2": "to you"},
        ]

    def test_bulk_insert_and_select(self):
        async def scenario(connector):
            model = Model(table="morm_test", identity="id", executor=connector)
            model.create({"column1": "a", "column2": "b"})
            model.create({"column1": "c", "column2": "d"})
            await model.save(bulk=True)
            tracked_after_bulk = model.tracked_items()

            loaded = await model.select().filter_by(column1="c").go()
            return tracked_after_bulk, loaded, model.tracked_items()

        tracked_after_bulk, loaded, tracked_after_select = run_against_sqlite(scenario)

        assert tracked_after_bulk == 0
        assert [dict(record) for record in loaded] == [{"id": 2, "column1": "c", "column2": "d"}]
        assert loaded[0].existing is True
        assert tracked_after_select == 1

    def test_delete_leaves_tracking_alone(self):
        async def scenario(connector):
            model = Model(table="morm_test", identity="id", executor=connector)
            model.create({"column1": "a"})
            await model.save()

            await model.delete().go()
            rows = await connector.execute(SELECT_ALL_SQL)
            return rows, model.tracked_items()

        rows, tracked = run_against_sqlite(scenario)

        assert rows == []
        assert tracked == 1
