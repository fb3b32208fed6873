import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Sequence

from flask import current_app, g

from .errors import StoreError

logger = logging.getLogger("streamtv.db")


def _casefold(value):
    if value is None:
        return None
    return str(value).casefold()


def connect(path: str, enable_wal: bool = False) -> sqlite3.Connection:
    """Open a SQLite connection configured for concurrent request handling."""
    # isolation_level=None leaves transaction control to `transaction()`
    conn = sqlite3.connect(path, timeout=30.0, isolation_level=None)
    conn.row_factory = sqlite3.Row
    # SQLite's lower() only folds ASCII
    conn.create_function("casefold", 1, _casefold, deterministic=True)
    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA busy_timeout = 30000")  # 30 second timeout for locks
    if enable_wal:
        conn.execute("PRAGMA journal_mode=WAL")
    return conn


def get_db() -> sqlite3.Connection:
    """Return a SQLite connection stored on Flask's `g` context."""
    if "sqlite_conn" not in g:
        try:
            g.sqlite_conn = connect(
                current_app.config["DATABASE_PATH"],
                enable_wal=current_app.config.get("DATABASE_ENABLE_WAL", False),
            )
        except sqlite3.Error as exc:
            raise StoreError(f"could not open database: {exc}") from exc
    return g.sqlite_conn


def close_db(_: Exception | None = None) -> None:
    """Close the connection at the end of the request/app context."""
    conn = g.pop("sqlite_conn", None)
    if conn is not None:
        conn.close()


def query(conn: sqlite3.Connection, sql: str, params: Sequence | dict = ()) -> list[sqlite3.Row]:
    """Execute a SELECT statement and return all rows."""
    try:
        cur = conn.execute(sql, params)
        rows = cur.fetchall()
        cur.close()
    except sqlite3.Error as exc:
        raise StoreError(str(exc)) from exc
    return rows


def execute(conn: sqlite3.Connection, sql: str, params: Sequence | dict = ()) -> int:
    """Execute an INSERT/UPDATE statement and return affected rows.

    sqlite3.IntegrityError is passed through untouched so callers can map
    constraint violations onto their own outcomes.
    """
    try:
        cur = conn.execute(sql, params)
    except sqlite3.IntegrityError:
        raise
    except sqlite3.Error as exc:
        raise StoreError(str(exc)) from exc
    rowcount = cur.rowcount
    cur.close()
    return rowcount


@contextmanager
def transaction(conn: sqlite3.Connection, immediate: bool = False) -> Iterator[sqlite3.Connection]:
    """Run the enclosed statements in one transaction, rolling back on error.

    `immediate=True` takes the write lock up front, which serialises
    read-then-write sequences across connections.
    """
    try:
        conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
    except sqlite3.Error as exc:
        raise StoreError(f"could not begin transaction: {exc}") from exc
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    try:
        conn.commit()
    except sqlite3.Error as exc:
        conn.rollback()
        raise StoreError(f"commit failed: {exc}") from exc


def dicts(rows) -> list[dict]:
    return [dict(row) for row in rows]
