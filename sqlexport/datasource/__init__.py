"""Query executors for the supported database drivers."""

from .base import DataSource, QueryResult
from .postgres import PostgresDataSource
from .sqlite import SQLiteDataSource

__all__ = [
    "DataSource",
    "QueryResult",
    "PostgresDataSource",
    "SQLiteDataSource",
]
