"""pytest configuration for sqlexport."""

import io
import logging
import sqlite3

import pytest
import structlog

from sqlexport.emit.stream import StreamSink
from sqlexport.templates.helpers import HelperLibrary


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any structlog/stdlib logging configuration a test (or the CLI) applied."""
    yield
    structlog.reset_defaults()
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)


@pytest.fixture
def helpers():
    return HelperLibrary.default()


@pytest.fixture
def buffer():
    return io.BytesIO()


@pytest.fixture
def sink(buffer):
    return StreamSink(buffer)


@pytest.fixture
def people_db(tmp_path):
    """SQLite database with a small ``people`` table, including a BLOB column."""
    path = tmp_path / "people.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE people (id INTEGER PRIMARY KEY, name TEXT, avatar BLOB)")
    conn.executemany(
        "INSERT INTO people (id, name, avatar) VALUES (?, ?, ?)",
        [
            (1, 'Ann "The Hammer"', b"\x89PNG"),
            (2, "Bob", None),
            (3, "Cy", b""),
        ],
    )
    conn.commit()
    conn.close()
    return path


@pytest.fixture
def invalid_text_db(tmp_path):
    """SQLite database whose middle row stores a TEXT value that is not valid UTF-8."""
    path = tmp_path / "invalid_text.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")
    conn.execute("INSERT INTO t (id, name) VALUES (1, 'a'), (2, CAST(x'ff' AS TEXT)), (3, 'c')")
    conn.commit()
    conn.close()
    return path
