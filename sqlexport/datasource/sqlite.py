"""SQLite-backed query executor."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from ..errors import QueryError
from ..values import decode_text
from .base import DataSource, QueryResult


class SQLiteQueryResult(QueryResult):
    def __init__(self, cursor: sqlite3.Cursor, batch_size: int) -> None:
        self._cursor = cursor
        self._batch_size = batch_size
        self._columns = [desc[0] for desc in (cursor.description or [])]

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    def records(self) -> Iterator[Sequence[object]]:
        while True:
            try:
                rows = self._cursor.fetchmany(self._batch_size)
            except sqlite3.Error as exc:
                raise QueryError(f"Fetch rows: {exc}") from exc
            if not rows:
                break
            yield from rows

    def close(self) -> None:
        self._cursor.close()


class SQLiteDataSource(DataSource):
    """Execute queries against a SQLite database file (BLOBs arrive as ``bytes``)."""

    def __init__(self, path: str | Path, batch_size: int = 1000) -> None:
        self._path = str(path)
        self._batch_size = batch_size
        self._conn: Optional[sqlite3.Connection] = None

    def connect(self) -> "SQLiteDataSource":
        if self._path == ":memory:":
            target, uri = self._path, False
        else:
            # Read-only so a mistyped path is an error instead of a new empty file.
            target, uri = Path(self._path).resolve().as_uri() + "?mode=ro", True
        try:
            self._conn = sqlite3.connect(target, uri=uri)
        except sqlite3.Error as exc:
            raise QueryError(f"Connect to db: {exc}") from exc
        # TEXT that is not valid UTF-8 keeps its raw bytes instead of failing the fetch
        self._conn.text_factory = decode_text
        return self

    def execute(self, sql: str) -> QueryResult:
        if self._conn is None:
            self.connect()
        try:
            cursor = self._conn.execute(sql)
        except sqlite3.Error as exc:
            raise QueryError(f"SQL request: {exc}") from exc
        return SQLiteQueryResult(cursor, self._batch_size)

    def close(self) -> None:
        if self._conn is not None:
            conn, self._conn = self._conn, None
            conn.close()
