"""Database access module"""

from .rdbms_connector import RDBMSConnector, get_rdbms_connector
from .sql_builder import SQLBuilder

__all__ = [
    'RDBMSConnector',
    'SQLBuilder',
    'get_rdbms_connector'
]
