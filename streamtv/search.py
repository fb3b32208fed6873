from __future__ import annotations

import sqlite3
from typing import Any

from .db import dicts, query


def _like_pattern(term: str) -> str:
    # match the term literally, so escape LIKE wildcards
    escaped = term.casefold().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def search(conn: sqlite3.Connection, term: str | None) -> dict[str, list[dict[str, Any]]]:
    """Case-insensitive substring search over show titles and actor names.

    Both sides are compared through the connection's ``casefold`` function
    so accented and other non-ASCII letters fold the same way as ASCII.
    """
    term = (term or "").strip()
    if not term:
        return {"shows": [], "actors": []}

    like = _like_pattern(term)
    show_rows = query(
        conn,
        "SELECT title, showID FROM shows WHERE casefold(title) LIKE ? ESCAPE '\\'",
        (like,),
    )
    actor_rows = query(
        conn,
        """
        SELECT actID, fname, lname
        FROM actor
        WHERE casefold(fname) LIKE ? ESCAPE '\\' OR casefold(lname) LIKE ? ESCAPE '\\'
        """,
        (like, like),
    )
    return {"shows": dicts(show_rows), "actors": dicts(actor_rows)}
