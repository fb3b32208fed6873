from __future__ import annotations

import sqlite3
from datetime import date, datetime
from typing import Mapping, Sequence
from zoneinfo import ZoneInfo

# Dates are written with a 2-digit year to stay compatible with existing rows.
DATE_FORMAT = "%y-%m-%d"

CUSTOMER_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS customer (
    custID      TEXT PRIMARY KEY,
    fname       TEXT NOT NULL,
    lname       TEXT NOT NULL,
    email       TEXT NOT NULL,
    creditcard  TEXT NOT NULL,
    membersince TEXT NOT NULL,
    password    TEXT NOT NULL,
    username    TEXT NOT NULL UNIQUE
);
"""

SHOWS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS shows (
    showID        TEXT PRIMARY KEY,
    title         TEXT NOT NULL,
    premiere_year INTEGER,
    network       TEXT,
    creator       TEXT,
    category      TEXT
);
"""

EPISODE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS episode (
    showID    TEXT NOT NULL REFERENCES shows(showID),
    episodeID TEXT NOT NULL,
    title     TEXT NOT NULL,
    airdate   TEXT,
    PRIMARY KEY (showID, episodeID)
);
"""

ACTOR_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS actor (
    actID TEXT PRIMARY KEY,
    fname TEXT NOT NULL,
    lname TEXT NOT NULL
);
"""

MAIN_CAST_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS main_cast (
    showID TEXT NOT NULL REFERENCES shows(showID),
    actID  TEXT NOT NULL REFERENCES actor(actID),
    role   TEXT NOT NULL,
    PRIMARY KEY (showID, actID)
);
"""

RECURRING_CAST_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS recurring_cast (
    showID    TEXT NOT NULL,
    episodeID TEXT NOT NULL,
    actID     TEXT NOT NULL REFERENCES actor(actID),
    role      TEXT NOT NULL,
    PRIMARY KEY (showID, episodeID, actID),
    FOREIGN KEY (showID, episodeID) REFERENCES episode(showID, episodeID)
);
"""

CUST_QUEUE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS cust_queue (
    custID     TEXT NOT NULL REFERENCES customer(custID),
    showID     TEXT NOT NULL REFERENCES shows(showID),
    datequeued TEXT NOT NULL,
    PRIMARY KEY (custID, showID)
);
"""

WATCHED_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS watched (
    custID      TEXT NOT NULL REFERENCES customer(custID),
    showID      TEXT NOT NULL,
    episodeID   TEXT NOT NULL,
    datewatched TEXT NOT NULL,
    PRIMARY KEY (custID, showID, episodeID),
    FOREIGN KEY (showID, episodeID) REFERENCES episode(showID, episodeID)
);
"""

TABLES_SQL: Sequence[str] = (
    CUSTOMER_TABLE_SQL,
    SHOWS_TABLE_SQL,
    EPISODE_TABLE_SQL,
    ACTOR_TABLE_SQL,
    MAIN_CAST_TABLE_SQL,
    RECURRING_CAST_TABLE_SQL,
    CUST_QUEUE_TABLE_SQL,
    WATCHED_TABLE_SQL,
)

INDEX_SQL: Sequence[str] = (
    "CREATE INDEX IF NOT EXISTS ix_recurring_cast_actor ON recurring_cast (actID);",
    "CREATE INDEX IF NOT EXISTS ix_main_cast_actor ON main_cast (actID);",
)

# Small demo catalog used by scripts/init_db.py --seed and the test suite.
SAMPLE_CATALOG: dict[str, list[tuple]] = {
    "shows": [
        ("S01", "Band of Brothers", 2001, "HBO", "Tom Hanks", "Drama"),
        ("S02", "Ozark", 2017, "Netflix", "Bill Dubuque", "Crime"),
    ],
    "episode": [
        ("S01", "101", "Currahee", "2001-09-09"),
        ("S01", "102", "Day of Days", "2001-09-09"),
        ("S02", "101", "Sugarwood", "2017-07-21"),
        ("S02", "102", "Blue Cat", "2017-07-21"),
        ("S02", "201", "Reparations", "2018-08-31"),
    ],
    "actor": [
        ("A01", "Anna", "Lee"),
        ("A02", "Dan", "Ford"),
        ("A03", "Ron", "Livingston"),
        ("A04", "Julia", "Garner"),
    ],
    "main_cast": [
        ("S01", "A03", "Capt. Lewis Nixon"),
        ("S02", "A04", "Ruth Langmore"),
    ],
    "recurring_cast": [
        ("S01", "101", "A01", "Nurse Renee"),
        ("S01", "102", "A01", "Nurse Renee"),
        ("S01", "102", "A02", "Pvt. Ford"),
        ("S02", "101", "A01", "Agent Petty"),
    ],
}

_SEED_SQL = {
    "shows": "INSERT OR IGNORE INTO shows (showID, title, premiere_year, network, creator, category) VALUES (?, ?, ?, ?, ?, ?)",
    "episode": "INSERT OR IGNORE INTO episode (showID, episodeID, title, airdate) VALUES (?, ?, ?, ?)",
    "actor": "INSERT OR IGNORE INTO actor (actID, fname, lname) VALUES (?, ?, ?)",
    "main_cast": "INSERT OR IGNORE INTO main_cast (showID, actID, role) VALUES (?, ?, ?)",
    "recurring_cast": "INSERT OR IGNORE INTO recurring_cast (showID, episodeID, actID, role) VALUES (?, ?, ?, ?)",
}


def init_db(conn: sqlite3.Connection) -> None:
    """Create tables and indexes if they do not yet exist."""
    for stmt in TABLES_SQL:
        conn.execute(stmt)
    for stmt in INDEX_SQL:
        conn.execute(stmt)
    conn.commit()


def seed_catalog(conn: sqlite3.Connection, catalog: Mapping[str, list[tuple]] = SAMPLE_CATALOG) -> int:
    """Insert catalog rows (shows, episodes, actors, cast); returns rows inserted."""
    inserted = 0
    # parents before children so foreign keys resolve
    for table in ("shows", "episode", "actor", "main_cast", "recurring_cast"):
        for row in catalog.get(table, []):
            cur = conn.execute(_SEED_SQL[table], row)
            inserted += cur.rowcount
    conn.commit()
    return inserted


def date_stamp(day: date) -> str:
    """Format a date the way the customer/queue/watched tables store it."""
    return day.strftime(DATE_FORMAT)


_default_timezone = "America/New_York"


def set_default_timezone(timezone: str) -> None:
    """Set the zone `local_today()` uses when none is given."""
    global _default_timezone
    ZoneInfo(timezone)  # unknown names fail here, not on the first write
    _default_timezone = timezone


def local_today(timezone: str | None = None) -> date:
    """Today's date in `timezone`, or the configured default zone."""
    return datetime.now(ZoneInfo(timezone or _default_timezone)).date()
