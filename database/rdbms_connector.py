"""
RDBMS Database Connector Module
Executes rendered SQL text against a relational database
"""

from typing import Any, Dict, List, Optional
from sqlalchemy import text
from sqlalchemy.engine import Dialect, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from config.settings import RDBMSConfig
import logging

logger = logging.getLogger(__name__)


class RDBMSConnector:
    """Manages the async engine and runs SQL text for the sync engine"""

    def __init__(self, config: RDBMSConfig):
        """
        Initialize RDBMS connector

        Args:
            config: RDBMS configuration object
        """
        self.config = config
        self._engine: Optional[AsyncEngine] = None
        self._last_inserted_id: Optional[Any] = None

    @property
    def engine(self) -> AsyncEngine:
        """Get or create SQLAlchemy async engine"""
        if self._engine is None:
            url = make_url(self.config.connection_string)
            if url.get_backend_name() == "sqlite":
                # One shared connection keeps in-memory databases alive between statements
                self._engine = create_async_engine(
                    url,
                    echo=self.config.echo,
                    poolclass=StaticPool
                )
            else:
                self._engine = create_async_engine(
                    url,
                    echo=self.config.echo,
                    pool_size=self.config.pool_size,
                    max_overflow=self.config.max_overflow,
                    pool_pre_ping=True  # Verify connections before using
                )
            logger.info("RDBMS engine created")
        return self._engine

    @property
    def dialect(self) -> Dialect:
        """Dialect of the configured engine, for building matching SQL"""
        return self.engine.dialect

    async def execute(self, sql: str) -> Optional[List[Dict[str, Any]]]:
        """
        Execute one SQL statement in its own transaction

        Args:
            sql: Fully rendered SQL text

        Returns:
            Row mappings for statements that return rows, otherwise None
        """
        logger.debug(f"Executing: {sql}")
        async with self.engine.begin() as conn:
            # exec_driver_sql leaves colons inside rendered literals alone
            result = await conn.exec_driver_sql(sql)
            if result.returns_rows:
                return [dict(row) for row in result.mappings().all()]
            self._last_inserted_id = result.lastrowid
            return None

    async def get_last_inserted_id(self, table: str) -> Optional[Any]:
        """
        Get the identity generated by the most recent statement

        Args:
            table: Table the insert targeted

        Returns:
            Identity value, or None when the driver did not report one
        """
        logger.debug(f"Last inserted id for {table}: {self._last_inserted_id}")
        return self._last_inserted_id

    async def test_connection(self) -> bool:
        """Test database connection"""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("RDBMS connection test successful")
            return True
        except Exception as e:
            logger.error(f"RDBMS connection test failed: {e}")
            return False

    async def close(self):
        """Close database connections"""
        if self._engine:
            await self._engine.dispose()
            logger.info("RDBMS engine disposed")
            self._engine = None
            self._last_inserted_id = None

    async def __aenter__(self):
        """Context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        await self.close()


# Singleton instance shared by scripts
_default_connector: Optional[RDBMSConnector] = None


def get_rdbms_connector(config: Optional[RDBMSConfig] = None) -> RDBMSConnector:
    """
    Get or create default RDBMS connector

    Args:
        config: Optional config, uses default if not provided

    Returns:
        RDBMSConnector instance
    """
    global _default_connector

    if _default_connector is None:
        if config is None:
            config = RDBMSConfig.from_env()
        _default_connector = RDBMSConnector(config)

    return _default_connector
