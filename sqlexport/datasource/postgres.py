"""PostgreSQL-backed query executor."""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

import psycopg2

from ..errors import QueryError
from .base import DataSource, QueryResult


class PostgresQueryResult(QueryResult):
    """Stream records from a server-side cursor in ``fetchmany`` batches."""

    def __init__(self, cursor, batch_size: int) -> None:
        self._cursor = cursor
        self._batch_size = batch_size
        # Named cursors only expose ``description`` once rows have been fetched.
        try:
            self._pending: List[Sequence[object]] = cursor.fetchmany(batch_size)
        except psycopg2.Error as exc:
            raise QueryError(f"SQL request: {exc}") from exc
        self._columns = [desc[0] for desc in (cursor.description or [])]

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    def records(self) -> Iterator[Sequence[object]]:
        rows = self._pending
        self._pending = []
        while rows:
            yield from rows
            try:
                rows = self._cursor.fetchmany(self._batch_size)
            except psycopg2.Error as exc:
                raise QueryError(f"Fetch rows: {exc}") from exc

    def close(self) -> None:
        self._cursor.close()


class PostgresDataSource(DataSource):
    """Execute queries over a single psycopg2 connection."""

    def __init__(self, dsn: str, batch_size: int = 1000, cursor_name: str = "sqlexport_cursor") -> None:
        self._dsn = dsn
        self._batch_size = batch_size
        self._cursor_name = cursor_name
        self._conn: Optional["psycopg2.extensions.connection"] = None

    def connect(self) -> "PostgresDataSource":
        try:
            self._conn = psycopg2.connect(self._dsn)
        except psycopg2.Error as exc:
            raise QueryError(f"Connect to db: {exc}") from exc
        return self

    def execute(self, sql: str) -> QueryResult:
        if self._conn is None:
            self.connect()
        try:
            cursor = self._conn.cursor(name=self._cursor_name)
            cursor.itersize = self._batch_size
            cursor.execute(sql)
        except psycopg2.Error as exc:
            raise QueryError(f"SQL request: {exc}") from exc
        return PostgresQueryResult(cursor, self._batch_size)

    def close(self) -> None:
        if self._conn is not None:
            conn, self._conn = self._conn, None
            conn.close()
